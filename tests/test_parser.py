"""
Tests for the expression parser.

These tests verify:
    - Operator precedence and associativity
    - Implicit multiplication
    - Built-in functions, constants and their synonyms
    - Custom functions
    - Error reporting
    - The individual reduction passes
"""

import math

import pytest
from mathparser.config import ParseOptions
from mathparser.errors import (
    BracketsNotClosedError,
    CantProcessExpressionError,
    DuplicateDeclarationError,
    InvalidFunctionArgumentsDeclarationError,
    InvalidVariableNameError,
    MissingOperatorOperandError,
    NestingTooDeepError,
    OutOfRangeFunctionArgumentListError,
    ParseError,
    ParsingFailedError,
    UndefinedFunctionError,
    UndefinedVariableError,
    UnexpectedClosingBracketError,
)
from mathparser.expressions import (
    E,
    PI,
    BinaryExpression,
    BinaryOperator,
    Constant,
    FreeformCall,
    UnaryExpression,
    UnaryOperator,
    Variable,
)
from mathparser.model import CustomFunctions, FunctionDefinition, VariableValues
from mathparser.parser import (
    ArgumentList,
    ExpressionParser,
    Pending,
    apply_functions,
    apply_unary_minus,
    fold_implicit_multiplication,
    fold_power,
    fold_sums,
    parse,
    reduce_parts,
    substitute_variables,
)


def total(args, values, functions):
    return sum(a.calc(values, functions) for a in args)


class TestArithmetic:
    """Test operators and precedence."""

    @pytest.mark.parametrize("expression, expected", [
        ("2+3", 5.0),
        ("2^10", 1024.0),
        ("2+3*4", 14.0),
        ("(2+3)*4", 20.0),
        ("10-2-3", 5.0),
        ("8/4/2", 1.0),
        ("2^3^2", 64.0),
        ("2*-3", -6.0),
        ("-2^2", 4.0),
        ("3.5 * 2", 7.0),
        ("[2+3]*2", 10.0),
        ("((2+(3*(1+1)))+4)", 12.0),
    ])
    def test_evaluates(self, expression, expected):
        assert parse(expression).calc() == pytest.approx(expected)

    def test_tree_structure(self):
        """2x+1 folds multiplication before addition."""
        assert parse("2x+1") == BinaryExpression(
            BinaryOperator.ADD,
            BinaryExpression(BinaryOperator.MULTIPLY, Constant(2), Variable("x")),
            Constant(1),
        )

    def test_calc_returns_float(self):
        assert type(parse("1+1").calc()) is float


class TestImplicitMultiplication:
    """Test omitted multiplication signs."""

    @pytest.mark.parametrize("expression, expected", [
        ("2x", 10.0),
        ("(2)(3)", 6.0),
        ("2(x+1)", 12.0),
        ("x(x+1)", 30.0),
        ("2x^2", 50.0),
        ("2 pi x", 10 * math.pi),
    ])
    def test_evaluates(self, expression, expected):
        assert parse(expression).calc({"x": 5}) == pytest.approx(expected)

    def test_multiplication_binds_before_division(self):
        """8x/2x is (8x)/(2x)."""
        assert parse("8x/2x").calc({"x": 3}) == pytest.approx(4.0)

    def test_disabled(self):
        with pytest.raises(CantProcessExpressionError):
            parse("2x", is_implicit_multiplication=False)

    def test_explicit_still_works_when_disabled(self):
        node = parse("2*x", is_implicit_multiplication=False)
        assert node.calc({"x": 5}) == 10.0


class TestVariablesAndConstants:
    """Test variables, e and pi."""

    def test_several_variables(self):
        node = parse("a*b + ab", variable_names={"a", "b"})
        assert node.calc({"a": 2, "b": 3}) == 12.0

    def test_longest_name_wins(self):
        node = parse("2x_1", variable_names={"x", "x_1"})
        assert node.calc({"x": 100, "x_1": 3}) == 6.0

    def test_single_name_as_string(self):
        assert parse("y+1", variable_names="y").calc({"y": 1}) == 2.0

    def test_constants(self):
        assert parse("pi").calc() == pytest.approx(math.pi)
        assert parse("π").calc() == pytest.approx(math.pi)
        assert parse("e").calc() == pytest.approx(math.e)

    def test_declared_variable_overrides_constant(self):
        assert parse("e", variable_names={"e"}) == Variable("e")

    def test_e_power_becomes_exp(self):
        assert parse("e^x") == UnaryExpression(UnaryOperator.EXP, Variable("x"))
        assert parse("e^2").calc() == pytest.approx(math.exp(2))

    def test_e_power_is_left_associative(self):
        assert parse("e^2^3").calc() == pytest.approx(math.exp(6))

    def test_other_bases_use_power(self):
        assert parse("2^x") == BinaryExpression(BinaryOperator.POWER, Constant(2), Variable("x"))

    def test_missing_value(self):
        with pytest.raises(UndefinedVariableError):
            parse("x+1").calc()
        with pytest.raises(UndefinedVariableError):
            parse("x+1").calc(VariableValues.empty())

    def test_undeclared_name_fails(self):
        with pytest.raises(ParseError):
            parse("y+1")


class TestBuiltInFunctions:
    """Test built-in functions and synonyms."""

    @pytest.mark.parametrize("expression, expected", [
        ("sin(0)", 0.0),
        ("cos(0)", 1.0),
        ("tan(0)", 0.0),
        ("tg(0)", 0.0),
        ("cot(pi/4)", 1.0),
        ("ctg(pi/4)", 1.0),
        ("asin(1)", math.pi / 2),
        ("arcsin(1)", math.pi / 2),
        ("acos(1)", 0.0),
        ("arccos(1)", 0.0),
        ("atan(1)", math.pi / 4),
        ("arctg(1)", math.pi / 4),
        ("acot(1)", math.pi / 4),
        ("arcctg(1)", math.pi / 4),
        ("sqrt(16)", 4.0),
        ("√(9)", 3.0),
        ("ln(e)", 1.0),
        ("lg(8)", 3.0),
        ("log(100)", 2.0),
        ("log(2, 8)", 3.0),
        ("sin(pi/2)^2 + cos(0)", 2.0),
    ])
    def test_evaluates(self, expression, expected):
        assert parse(expression).calc() == pytest.approx(expected, abs=1e-12)

    def test_function_without_brackets(self):
        """A function applies to the node right after it."""
        assert parse("sqrt 4").calc() == pytest.approx(2.0)

    def test_sqrt_is_half_power(self):
        assert parse("sqrt(x)") == BinaryExpression(BinaryOperator.POWER, Variable("x"), Constant(0.5))

    def test_ln_uses_e_base(self):
        assert parse("ln(x)") == BinaryExpression(BinaryOperator.LOG, E, Variable("x"))

    def test_missing_argument(self):
        with pytest.raises(OutOfRangeFunctionArgumentListError):
            parse("sin")

    def test_too_many_arguments(self):
        with pytest.raises(OutOfRangeFunctionArgumentListError):
            parse("sin(1, 2)")
        with pytest.raises(OutOfRangeFunctionArgumentListError):
            parse("log(1, 2, 3)")

    def test_unary_minus_before_function(self):
        assert parse("-sin(pi/2)").calc() == pytest.approx(-1.0)


class TestCustomFunctions:
    """Test user-declared functions."""

    def test_call_with_several_arguments(self):
        f = FunctionDefinition("f", 1, 2, implementation=total)
        node = parse("f(x, 2)", custom_functions=[f])
        assert isinstance(node, FreeformCall)
        assert node.calc({"x": 1}) == 3.0

    def test_nested_calls(self):
        t1 = FunctionDefinition(
            "t1", 1, 1,
            implementation=lambda a, v, fns: 2 * a[0].calc(v, fns),
        )
        assert parse("t1(t1(x))", custom_functions=[t1]).calc({"x": 3}) == 12.0

    def test_nested_call_arguments(self):
        f = FunctionDefinition("f", 1, 3, implementation=total)
        node = parse("f(f(1, 2), 3)", custom_functions=[f])
        assert node.calc() == 6.0

    def test_zero_argument_call(self):
        g = FunctionDefinition("g", 0, 0, implementation=lambda a, v, fns: 42)
        assert parse("g()+1", custom_functions=[g]).calc() == 43.0
        assert parse("g+1", custom_functions=[g]).calc() == 43.0

    def test_custom_function_shadows_built_in(self):
        sin = FunctionDefinition("sin", 1, 1, implementation=lambda a, v, fns: 100)
        assert parse("sin(0)", custom_functions=[sin]).calc() == 100.0

    def test_implementation_given_at_calc_time(self):
        declared = FunctionDefinition("h", 1, 1)
        node = parse("h(x)", custom_functions=[declared])
        implemented = FunctionDefinition(
            "h", 1, 1,
            implementation=lambda a, v, fns: a[0].calc(v, fns) * 10,
        )
        assert node.calc({"x": 2}, CustomFunctions([implemented])) == 20.0

    def test_missing_implementation(self):
        node = parse("h(x)", custom_functions=[FunctionDefinition("h", 1, 1)])
        with pytest.raises(UndefinedFunctionError):
            node.calc({"x": 2})

    def test_argument_count_out_of_range(self):
        f = FunctionDefinition("f", 1, 2, implementation=total)
        with pytest.raises(OutOfRangeFunctionArgumentListError):
            parse("f(1, 2, 3)", custom_functions=[f])

    def test_bad_declarations(self):
        with pytest.raises(InvalidVariableNameError):
            parse("1", variable_names={"sin"})
        with pytest.raises(InvalidFunctionArgumentsDeclarationError):
            parse("1", custom_functions=[FunctionDefinition("f", 2, 1)])
        with pytest.raises(DuplicateDeclarationError):
            parse("1", variable_names={"f"}, custom_functions=[FunctionDefinition("f", 1, 1)])


class TestMinusAsNegative:
    """Test the is_minus_negative_function switch."""

    def test_subtraction_becomes_addition_of_negation(self):
        node = parse("5-3", is_minus_negative_function=True)
        assert node == BinaryExpression(
            BinaryOperator.ADD,
            Constant(5),
            UnaryExpression(UnaryOperator.NEGATE, Constant(3)),
        )
        assert node.calc() == 2.0

    def test_default_uses_subtraction(self):
        assert parse("5-3").operator == BinaryOperator.SUBTRACT


class TestErrors:
    """Test error reporting."""

    def test_brackets_not_closed(self):
        with pytest.raises(BracketsNotClosedError):
            parse("(2+3")

    def test_unexpected_closing_bracket(self):
        with pytest.raises(UnexpectedClosingBracketError):
            parse("2+3)")

    @pytest.mark.parametrize("expression", ["2+", "*2", "2*/3"])
    def test_missing_operand(self, expression):
        with pytest.raises(ParseError):
            parse(expression)

    def test_trailing_operator_reports_missing_operand(self):
        with pytest.raises(MissingOperatorOperandError) as exc_info:
            parse("2+")
        assert exc_info.value.operator == "+"

    def test_empty_expression(self):
        with pytest.raises(CantProcessExpressionError):
            parse("")

    def test_nesting_limit(self):
        assert parse("(1)", max_depth=1).calc() == 1.0
        with pytest.raises(NestingTooDeepError):
            parse("((1))", max_depth=1)

    def test_unexpected_errors_wrapped(self, monkeypatch):
        def boom(parts, options):
            raise RuntimeError("boom")

        monkeypatch.setattr("mathparser.parser.reduce_parts", boom)
        with pytest.raises(ParsingFailedError) as exc_info:
            parse("1")
        assert isinstance(exc_info.value.cause, RuntimeError)


class TestExpressionParser:
    """Test the reusable parser object."""

    def test_reuse(self):
        parser = ExpressionParser(ParseOptions(variable_names={"t"}))
        assert parser.parse("2t").calc({"t": 2}) == 4.0
        assert parser.parse("t^2").calc({"t": 3}) == 9.0

    def test_settings_override_options(self):
        options = ParseOptions(is_implicit_multiplication=False)
        assert parse("2x", options, is_implicit_multiplication=True).calc({"x": 1}) == 2.0


class TestReductionPasses:
    """Test the passes on hand-built part lists."""

    def test_substitute_variables(self):
        assert substitute_variables([Pending("x"), Pending("e"), Pending("pi")], {"x"}) == [
            Variable("x"), E, PI,
        ]

    def test_apply_functions_built_in(self):
        parts = apply_functions([Pending("sqrt"), Constant(4)], CustomFunctions())
        assert parts == [BinaryExpression(BinaryOperator.POWER, Constant(4), Constant(0.5))]

    def test_apply_functions_argument_list(self):
        parts = apply_functions(
            [Pending("log"), ArgumentList((Constant(2), Constant(8)))],
            CustomFunctions(),
        )
        assert parts == [BinaryExpression(BinaryOperator.LOG, Constant(2), Constant(8))]

    def test_unconsumed_empty_argument_list_dropped(self):
        parts = apply_functions([Constant(1), ArgumentList(())], CustomFunctions())
        assert parts == [Constant(1)]

    def test_apply_unary_minus(self):
        assert apply_unary_minus([Pending("-"), Constant(2)]) == [
            UnaryExpression(UnaryOperator.NEGATE, Constant(2)),
        ]
        assert apply_unary_minus([Constant(1), Pending("-"), Constant(2)]) == [
            Constant(1), Pending("-"), Constant(2),
        ]

    def test_fold_power_e_base(self):
        assert fold_power([E, Pending("^"), Variable("x")]) == [
            UnaryExpression(UnaryOperator.EXP, Variable("x")),
        ]

    def test_fold_implicit_multiplication_left_to_right(self):
        parts = fold_implicit_multiplication([Constant(2), Variable("x"), Variable("y")])
        assert parts == [
            BinaryExpression(
                BinaryOperator.MULTIPLY,
                BinaryExpression(BinaryOperator.MULTIPLY, Constant(2), Variable("x")),
                Variable("y"),
            ),
        ]

    def test_fold_implicit_multiplication_stops_at_tokens(self):
        parts = fold_implicit_multiplication([Constant(2), Pending("+"), Constant(3), Constant(4)])
        assert parts == [
            Constant(2),
            Pending("+"),
            BinaryExpression(BinaryOperator.MULTIPLY, Constant(3), Constant(4)),
        ]

    def test_fold_sums(self):
        assert fold_sums([Constant(1), Pending("-"), Constant(2)]) == [
            BinaryExpression(BinaryOperator.SUBTRACT, Constant(1), Constant(2)),
        ]

    def test_reduce_parts_leftovers(self):
        with pytest.raises(CantProcessExpressionError) as exc_info:
            reduce_parts([Constant(1), Constant(2)], ParseOptions(is_implicit_multiplication=False))
        assert exc_info.value.parts == [Constant(1), Constant(2)]
