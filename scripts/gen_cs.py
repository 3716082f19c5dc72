#!/usr/bin/env python3
"""
gen_cs.py - C# binding generator entry point

Generates SharpImGui C# bindings from dear_bindings metadata.

Usage:
    python scripts/gen_cs.py [--metadata DIR] [--output DIR] [--natives DIR]
"""

import argparse
import os
import sys

# Get paths
script_dir = os.path.dirname(os.path.abspath(__file__))
root_dir = os.path.abspath(os.path.join(script_dir, '..'))

# Add scripts directory to path
if script_dir not in sys.path:
    sys.path.insert(0, script_dir)

from cs_bindgen import Generator, copy_natives
from bindings import imgui


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Generate C# bindings')
    parser.add_argument('--metadata', default=os.path.join(root_dir, 'dcimgui'),
                        help='Directory holding dcimgui.json and dcimgui_internal.json')
    parser.add_argument('--output', default=os.path.join(root_dir, 'SharpImGui/Generated'),
                        help='Output directory for generated sources (recreated)')
    parser.add_argument('--natives', default=None,
                        help='Copy prebuilt binaries from the metadata directory here (optional)')
    return parser.parse_args(argv)


def generate_imgui(metadata: str, output: str):
    """Generate ImGui bindings"""
    gen = Generator(metadata_root=metadata, output_root=output)

    # Apply ImGui-specific configuration
    imgui.configure(gen)

    # Generate all configurations
    gen.generate_all()


def main(argv=None):
    args = parse_args(argv)
    generate_imgui(args.metadata, args.output)

    # Copy native binaries (if path provided)
    if args.natives:
        print('=== Copying native binaries:')
        copy_natives(args.metadata, args.natives)


if __name__ == '__main__':
    main()
