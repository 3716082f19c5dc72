import unittest

from cs_bindgen.codegen import CodeGen
from cs_bindgen.overload import MarshalKind, OverloadGenerator, write_overload

from sample_metadata import (
    Toolkit, argument, array, builtin, const_char_ptr, function, function_pointer,
    param, parse, pointer, user,
)

DEFAULT_VALUES = {
    'NULL': 'null',
    'FLT_MAX': 'float.MaxValue',
    'ImVec2(0.0f, 0.0f)': 'new Vector2()',
}


def render(overload) -> list[str]:
    gen = CodeGen()
    write_overload(overload, gen)
    return [line.strip() for line in gen.output().splitlines()]


class OverloadGeneratorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.kit = Toolkit(default_values=dict(DEFAULT_VALUES))
        self.overloads = OverloadGenerator(self.kit.context, self.kit.resolver, 'ImGuiNative', is_static=True)

    def generate(self, item):
        (func,) = parse(functions=[item]).functions
        return self.overloads.generate(func)

    def managed(self, overload) -> list[str]:
        return [str(p) for p in overload.params.managed]

    def test_default_arguments_expand_to_shorter_overloads(self) -> None:
        overloads = self.generate(function('ImGui_SliderFloat', [
            argument('label', const_char_ptr()),
            argument('v', pointer(builtin('float'))),
            argument('v_min', builtin('float'), default='0.0f'),
            argument('v_max', builtin('float'), default='1.0f'),
        ], return_type=builtin('bool')))

        self.assertEqual([len(o.params.managed) for o in overloads], [2, 3, 4])
        signatures = [tuple(p.type_text for p in o.params.managed) for o in overloads]
        self.assertEqual(len(set(signatures)), len(signatures))
        self.assertTrue(all(len(o.params.native) == 4 for o in overloads))
        self.assertEqual(str(overloads[0].params.before[-2].value), '0.0f')

    def test_identical_signatures_are_emitted_once(self) -> None:
        item = function('ImGui_NewLine')
        self.assertEqual(len(self.generate(item)), 1)
        self.assertEqual(self.generate(item), [])
        self.overloads.begin()
        self.assertEqual(len(self.generate(item)), 1)

    def test_bool_pointer_round_trip(self) -> None:
        (overload,) = self.generate(function('ImGui_Checkbox', [
            argument('label', const_char_ptr()),
            argument('v', pointer(builtin('bool'))),
        ], return_type=builtin('bool')))
        lines = render(overload)

        self.assertEqual(lines[0], 'public static bool Checkbox(ReadOnlySpan<char> label, ref bool v)')
        convert = lines.index('var native_v_val = v ? (byte)1 : (byte)0;')
        address = lines.index('var native_v = &native_v_val;')
        call = lines.index('var ret = ImGuiNative.ImGui_Checkbox(native_label, native_v);')
        write_back = lines.index('v = native_v_val != 0;')
        self.assertLess(convert, address)
        self.assertLess(address, call)
        self.assertLess(call, write_back)
        self.assertEqual(lines[-2], 'return ret != 0;')

    def test_const_char_is_utf8_encoded_and_freed(self) -> None:
        (overload,) = self.generate(function('ImGui_TextUnformatted', [argument('text', const_char_ptr())]))
        lines = render(overload)
        self.assertIn('text_byteCount = Encoding.UTF8.GetByteCount(text);', lines)
        self.assertIn('var native_text_stackBytes = stackalloc byte[text_byteCount + 1];', lines)
        self.assertIn('native_text = Util.Allocate(text_byteCount + 1);', lines)
        self.assertIn('Util.Free(native_text);', lines)
        self.assertIn('ImGuiNative.ImGui_TextUnformatted(native_text);', lines)

    def test_mutable_char_buffer_is_pinned(self) -> None:
        (overload,) = self.generate(function('ImGui_InputText', [
            argument('label', const_char_ptr()),
            argument('buf', pointer(builtin('char'))),
            argument('buf_size', user('size_t')),
        ], return_type=builtin('bool')))
        self.assertEqual(self.managed(overload), ['ReadOnlySpan<char> label', 'byte[] buf', 'ulong buf_size'])
        lines = render(overload)
        self.assertIn('fixed (byte* native_buf = buf)', lines)
        self.assertIn('var ret = ImGuiNative.ImGui_InputText(native_label, native_buf, buf_size);', lines)

    def test_void_pointer_is_a_handle(self) -> None:
        (overload,) = self.generate(function('ImGui_PushID', [argument('ptr_id', pointer(builtin('void', const=True)))]))
        self.assertEqual(self.managed(overload), ['IntPtr ptr_id'])
        self.assertEqual(overload.params.before[0].kind, MarshalKind.VOID_PTR)
        self.assertIn('var native_ptr_id = ptr_id.ToPointer();', render(overload))

    def test_primitive_pointer_is_pinned_reference(self) -> None:
        (overload,) = self.generate(function('ImGui_DragInt', [argument('v', pointer(builtin('int')))]))
        self.assertEqual(self.managed(overload), ['ref int v'])
        lines = render(overload)
        self.assertIn('fixed (int* native_v = &v)', lines)
        self.assertIn('ImGuiNative.ImGui_DragInt(native_v);', lines)

    def test_small_float_arrays_become_vectors(self) -> None:
        (overload,) = self.generate(function('ImGui_ColorEdit3', [argument('col', array(builtin('float'), '3'))]))
        self.assertEqual(self.managed(overload), ['ref Vector3 col'])
        lines = render(overload)
        self.assertIn('fixed (Vector3* native_col = &col)', lines)
        self.assertIn('ImGuiNative.ImGui_ColorEdit3((float*)native_col);', lines)

    def test_other_arrays_are_copied(self) -> None:
        (overload,) = self.generate(function('ImGui_DragInt4', [argument('v', array(builtin('int'), '4'))]))
        self.assertEqual(self.managed(overload), ['int[] v'])
        lines = render(overload)
        self.assertIn('var native_v = stackalloc int[v.Length];', lines)
        self.assertIn('native_v[i] = v[i];', lines)

    def test_string_arrays_are_packed(self) -> None:
        (overload,) = self.generate(function('ImGui_ListBox', [
            argument('items', array(const_char_ptr(), '')),
            argument('items_count', builtin('int')),
        ]))
        self.assertEqual(self.managed(overload), ['string[] items', 'int items_count'])
        lines = render(overload)
        self.assertIn('var native_items = stackalloc byte*[items.Length];', lines)
        self.assertIn('ImGuiNative.ImGui_ListBox(native_items, items_count);', lines)

    def test_function_pointer_is_passed_through(self) -> None:
        callback = function_pointer('custom_callback', builtin('void'), param('data', pointer(builtin('void'))))
        (overload,) = self.generate(function('ImGui_SetNextWindowSizeConstraints', [
            argument('custom_callback', callback),
        ]))
        self.assertEqual(self.managed(overload),
                         ['ImGui_SetNextWindowSizeConstraintscustom_callbackDelegate custom_callback'])
        self.assertEqual(overload.params.native, ['custom_callback'])

    def test_struct_pointers_use_wrapped_views(self) -> None:
        self.kit.register_struct('ImGuiStyle')
        (overload,) = self.generate(function('ImGui_ShowStyleEditor', [argument('ref', pointer(user('ImGuiStyle')))]))
        self.assertEqual(self.managed(overload), ['ImGuiStylePtr @ref'])
        self.assertEqual(overload.params.native, ['@ref'])

    def test_wrapped_and_bool_returns(self) -> None:
        self.kit.register_struct('ImDrawList')
        (draw_list,) = self.generate(function('ImGui_GetWindowDrawList', return_type=pointer(user('ImDrawList'))))
        self.assertEqual(str(draw_list.return_type), 'ImDrawListPtr')
        self.assertEqual(render(draw_list)[0], 'public static ImDrawListPtr GetWindowDrawList()')

        (focused,) = self.generate(function('ImGui_IsWindowFocused', return_type=builtin('bool')))
        self.assertEqual((focused.return_type, focused.return_code), ('bool', 'ret != 0'))

    def test_default_values_are_translated(self) -> None:
        self.kit.register_enum('ImGuiWindowFlags')
        overloads = self.generate(function('ImGui_Begin', [
            argument('name', const_char_ptr()),
            argument('p_open', pointer(builtin('bool')), default='NULL'),
            argument('flags', user('ImGuiWindowFlags'), default='0'),
        ], return_type=builtin('bool')))
        shortest = render(overloads[0])
        self.assertIn('byte* p_open = null;', shortest)
        self.assertIn('ImGuiWindowFlags flags = (ImGuiWindowFlags)0;', shortest)
        self.assertIn('var ret = ImGuiNative.ImGui_Begin(native_name, p_open, flags);', shortest)

    def test_bool_and_handle_defaults(self) -> None:
        self.kit.context.add_pointer_struct('ImGuiContext')
        overloads = self.generate(function('ImGui_Foo', [
            argument('repeat', builtin('bool'), default='false'),
            argument('ctx', pointer(user('ImGuiContext')), default='NULL'),
        ]))
        shortest = render(overloads[0])
        self.assertIn('byte repeat = 0;', shortest)
        self.assertIn('IntPtr ctx = IntPtr.Zero;', shortest)

    def test_string_defaults_are_marshaled(self) -> None:
        overloads = self.generate(function('ImGui_SliderInt', [
            argument('label', const_char_ptr()),
            argument('format', const_char_ptr(), default='"%d"'),
        ]))
        shortest = render(overloads[0])
        self.assertIn('byte* format;', shortest)
        self.assertIn('var format_byteCount = Encoding.UTF8.GetByteCount("%d");', shortest)
        self.assertIn('Util.Free(format);', shortest)
        self.assertEqual(self.managed(overloads[1]), ['ReadOnlySpan<char> label', 'ReadOnlySpan<char> format'])

    def test_missing_default_in_tail_warns(self) -> None:
        (func,) = parse(functions=[function('ImGui_Odd', [
            argument('a', builtin('int'), default='1'),
            argument('b', builtin('int')),
        ])]).functions
        self.overloads.generate(func)
        self.assertTrue(any('follows a default' in w for w in self.kit.context.warnings))

    def test_ex_variant_reuses_name_and_comments(self) -> None:
        self.generate(function('ImGui_Combo', [argument('label', const_char_ptr())],
                               comments={'preceding': ['// Widgets: Combo Box']}))
        (ex,) = self.generate(function('ImGui_ComboEx', [argument('label', const_char_ptr()),
                                                         argument('count', builtin('int'))]))
        self.assertEqual(ex.name, 'Combo')
        self.assertEqual(ex.entry_point, 'ImGui_ComboEx')
        self.assertEqual(ex.preceding_comments, ['// Widgets: Combo Box'])

    def test_instance_methods_bind_self(self) -> None:
        self.kit.register_struct('ImDrawList')
        overloads = OverloadGenerator(self.kit.context, self.kit.resolver, 'ImGuiNative')
        (func,) = parse(functions=[function('ImDrawList_AddLine', [
            argument('self', pointer(user('ImDrawList'))),
            argument('p1', user('ImVec2')),
            argument('thickness', builtin('float'), default='1.0f'),
        ])]).functions
        shorter, full = overloads.generate(func)
        self.assertEqual(full.modifiers, ['public'])
        self.assertEqual(full.params.native, ['NativePtr', 'p1', 'thickness'])
        self.assertEqual(self.managed(shorter), ['Vector2 p1'])
        self.assertIn('float thickness = 1.0f;', render(shorter))
        self.assertEqual(render(full)[0], 'public void AddLine(Vector2 p1, float thickness)')


if __name__ == '__main__':
    unittest.main()
