"""
Native binary copying

Copies the prebuilt dcimgui binaries next to the bindings, one folder per
runtime identifier.
"""

import os
import shutil

PLATFORM_DIRS = {
    'dcimgui_x64.dll': 'win-x64',
    'dcimgui_x86.dll': 'win-x86',
    'dcimgui.so': 'linux',
    'dcimgui.dylib': 'osx',
    'libdcimgui_arm.so': 'android-arm',
    'libdcimgui_x86.so': 'android-x86',
}

IGNORED_EXTENSIONS = ('.json', '.h', '.cpp')


def copy_natives(source_dir: str, output_dir: str, library: str = 'dcimgui') -> list[str]:
    """Recreate output_dir and copy every binary to its platform folder"""
    if os.path.exists(output_dir):
        shutil.rmtree(output_dir)
    os.makedirs(output_dir)

    copied = []
    for file_name in sorted(os.listdir(source_dir)):
        source = os.path.join(source_dir, file_name)
        if not os.path.isfile(source) or file_name.endswith(IGNORED_EXTENSIONS):
            continue
        if file_name not in PLATFORM_DIRS:
            raise ValueError(f'Unknown platform for file: {file_name}')
        platform_dir = os.path.join(output_dir, PLATFORM_DIRS[file_name])
        os.makedirs(platform_dir, exist_ok=True)
        target = os.path.join(platform_dir, library + os.path.splitext(file_name)[1])
        shutil.copyfile(source, target)
        print(f'  {file_name} => {os.path.relpath(target, output_dir)}')
        copied.append(target)
    return copied
