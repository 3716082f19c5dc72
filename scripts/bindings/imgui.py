"""
ImGui binding configuration

Configures the C# binding generator for the dcimgui flavour of Dear ImGui
produced by dear_bindings:
- System.Numerics vectors for ImVec2 / ImVec4
- C default argument spellings mapped to C# literals
- a public pass and an internal pass sharing one type map
"""

from cs_bindgen import Generator


# ==============================================================================
# Type Conversions
# ==============================================================================

CONVERSION_TYPES = {
    'ImVec2': 'Vector2',
    'ImVec4': 'Vector4',
    'size_t': 'ulong',
    'va_list': 'IntPtr',
}

# Hand written on the C# side
CUSTOM_TYPES = {'ImVec2', 'ImVec4'}

# ==============================================================================
# Default Values
# ==============================================================================

DEFAULT_VALUES = {
    'NULL': 'null',
    'nullptr': 'null',
    'FLT_MAX': 'float.MaxValue',
    '-FLT_MIN': '-float.Epsilon',
    'FLT_MIN': 'float.Epsilon',
    'ImVec2(0.0f, 0.0f)': 'new Vector2()',
    'ImVec2(0, 0)': 'new Vector2()',
    'ImVec2(-FLT_MIN, 0)': 'new Vector2(-float.Epsilon, 0.0f)',
    'ImVec2(1, 1)': 'new Vector2(1, 1)',
    'ImVec2(0, 1)': 'new Vector2(0, 1)',
    'ImVec2(1, 0)': 'new Vector2(1, 0)',
    'ImVec4(0, 0, 0, 0)': 'new Vector4()',
    'ImVec4(1, 1, 1, 1)': 'new Vector4(1, 1, 1, 1)',
    'ImDrawFlags_None': '0',
    'ImDrawCornerFlags_All': '0',
    'sizeof(float)': 'sizeof(float)',
    '(((ImU32)(255)<<24)|((ImU32)(255)<<16)|((ImU32)(255)<<8)|((ImU32)(255)<<0))': '0xFFFFFFFF',
}

SKIP_FUNCTION_SUBSTRINGS = ['ImVector_', 'ImChunkStream_']

KNOWN_DEFINES = ['IMGUI_DISABLE_OBSOLETE_FUNCTIONS', 'IMGUI_DISABLE_OBSOLETE_KEYIO']


# ==============================================================================
# Configuration
# ==============================================================================

def configure(gen: Generator):
    """Configure generator with ImGui-specific settings"""
    options = gen.options
    options.library = 'dcimgui'
    options.conversion_types.update(CONVERSION_TYPES)
    options.custom_types.update(CUSTOM_TYPES)
    options.default_values.update(DEFAULT_VALUES)
    options.skip_function_substrings.extend(SKIP_FUNCTION_SUBSTRINGS)
    options.known_defines.extend(KNOWN_DEFINES)

    # === public API ===
    gen.configuration('dcimgui.json', namespace='SharpImGui',
                      main_class='ImGui', native_class='ImGuiNative')

    # === internal API ===
    gen.configuration('dcimgui_internal.json', namespace='SharpImGui.Internal',
                      main_class='ImGuiInternal', native_class='ImGuiInternalNative',
                      output_subdir='Internal', usings=['SharpImGui'])
