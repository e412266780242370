"""
Tests for detection of names still to declare.
"""

from mathparser.definable import Definable, detect_definable, potential_function_names


class TestPotentialFunctionNames:
    """Test function name guessing."""

    def test_finds_calls(self):
        assert potential_function_names("f(x)+sin(x)") == {"f", "sin"}

    def test_hide_built_ins(self):
        assert potential_function_names("f(x)+sin(x)", hide_built_ins=True) == {"f"}

    def test_no_calls(self):
        assert potential_function_names("x+y") == set()


class TestDetectDefinable:
    """Test variable and function guessing."""

    def test_mixed_expression(self):
        assert detect_definable("f(x) + sin(y) + e") == Definable(
            variables=frozenset({"x", "y", "e"}),
            functions=frozenset({"f", "sin"}),
        )

    def test_hide_built_ins_drops_constants(self):
        result = detect_definable("f(x) + sin(y) + e + pi", hide_built_ins=True)
        assert result.variables == {"x", "y"}
        assert result.functions == {"f", "sin"}

    def test_numbers_are_skipped(self):
        assert detect_definable("2x + 3.5").variables == {"x"}

    def test_apostrophe_and_underscore_names(self):
        assert detect_definable("y' + x_1").variables == {"y'", "x_1"}

    def test_built_in_keyword_without_brackets_is_not_a_variable(self):
        assert detect_definable("sqrt x").variables == {"x"}
