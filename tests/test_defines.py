import unittest

from cs_bindgen.defines import DefineEvaluator
from cs_bindgen.ir import ConditionalItem

from sample_metadata import make_context


def ifdef(name):
    return ConditionalItem('ifdef', name)


def ifndef(name):
    return ConditionalItem('ifndef', name)


class DefineEvaluatorTests(unittest.TestCase):
    def evaluator(self, *known):
        return DefineEvaluator(make_context(known_defines=list(known)))

    def test_no_conditionals_is_included(self) -> None:
        self.assertTrue(self.evaluator().evaluates([]))

    def test_single_guard_polarity(self) -> None:
        known = self.evaluator('A')
        self.assertTrue(known.evaluates([ifdef('A')]))
        self.assertFalse(known.evaluates([ifndef('A')]))

        empty = self.evaluator()
        self.assertFalse(empty.evaluates([ifdef('A')]))
        self.assertTrue(empty.evaluates([ifndef('A')]))

    def test_if_defined_expression(self) -> None:
        evaluator = self.evaluator('IMGUI_DISABLE_OBSOLETE_FUNCTIONS')
        self.assertTrue(evaluator.evaluates([ConditionalItem('if', 'defined(IMGUI_DISABLE_OBSOLETE_FUNCTIONS)')]))
        self.assertTrue(evaluator.evaluates([ConditionalItem('if', ' defined ( IMGUI_DISABLE_OBSOLETE_FUNCTIONS ) ')]))
        self.assertFalse(evaluator.evaluates([ConditionalItem('if', 'defined(IMGUI_ENABLE_FREETYPE)')]))

    def test_compound_if_expression_is_not_evaluated(self) -> None:
        evaluator = self.evaluator('A', 'B')
        self.assertFalse(evaluator.evaluates([ConditionalItem('if', 'defined(A) && defined(B)')]))

    def test_multiple_guards_use_second_entry(self) -> None:
        evaluator = self.evaluator('B')
        self.assertTrue(evaluator.evaluates([ifndef('B'), ifdef('B')]))
        self.assertFalse(evaluator.evaluates([ifdef('B'), ifndef('B')]))
        self.assertFalse(evaluator.evaluates([ifdef('B'), ConditionalItem('if', 'defined(B)')]))

    def test_unknown_condition_is_excluded(self) -> None:
        self.assertFalse(self.evaluator('A').evaluates([ConditionalItem('ifnot', 'A')]))

    def test_discovered_defines_are_seen(self) -> None:
        context = make_context()
        evaluator = DefineEvaluator(context)
        self.assertFalse(evaluator.evaluates([ifdef('IMGUI_HAS_DOCK')]))
        context.known_defines['IMGUI_HAS_DOCK'] = ('bool', '')
        self.assertTrue(evaluator.evaluates([ifdef('IMGUI_HAS_DOCK')]))


if __name__ == '__main__':
    unittest.main()
