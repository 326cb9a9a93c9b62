import math
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from stackcalc import MathEngine
from stackcalc import config_manager
from stackcalc import error as E


class TestEvaluateBasics(unittest.TestCase):

    def test_grouping_and_left_to_right(self):
        self.assertEqual(MathEngine.evaluate("(5+3)*2/4"), 4.0)

    def test_whitespace_is_ignored(self):
        self.assertEqual(MathEngine.evaluate(" ( 5 + 3 )\t* 2 "), 16.0)
        self.assertEqual(MathEngine.evaluate("(5+3)*2"), MathEngine.evaluate("( 5 +   3 ) * 2"))

    def test_precedence(self):
        self.assertEqual(MathEngine.evaluate("2+3*4"), 14.0)
        self.assertEqual(MathEngine.evaluate("2*3^2"), 18.0)
        self.assertEqual(MathEngine.evaluate("7%3*2"), 2.0)

    def test_left_associative_operators(self):
        self.assertEqual(MathEngine.evaluate("10-4-3"), 3.0)
        self.assertEqual(MathEngine.evaluate("100/10/5"), 2.0)

    def test_power_is_right_associative(self):
        self.assertEqual(MathEngine.evaluate("2^3^2"), 512.0)

    def test_unary_minus(self):
        self.assertEqual(MathEngine.evaluate("-5+10"), 5.0)
        self.assertEqual(MathEngine.evaluate("-(3+2)"), -5.0)
        self.assertEqual(MathEngine.evaluate("2*-3"), -6.0)
        self.assertEqual(MathEngine.evaluate("2--3"), 5.0)
        self.assertEqual(MathEngine.evaluate("(-2)*4"), -8.0)

    def test_sign_belongs_to_the_literal(self):
        self.assertEqual(MathEngine.evaluate("-2^2"), 4.0)
        self.assertEqual(MathEngine.evaluate("2^-2"), 0.25)

    def test_negated_group_after_power(self):
        # "-(" pushes -1 and '*' without resolving the pending '^'
        self.assertEqual(MathEngine.evaluate("2^-(2)"), 0.25)

    def test_modulo_keeps_sign_of_dividend(self):
        self.assertEqual(MathEngine.evaluate("-7%3"), -1.0)
        self.assertEqual(MathEngine.evaluate("7%3"), 1.0)

    def test_decimal_literals(self):
        self.assertEqual(MathEngine.evaluate(".5+1."), 1.5)

    def test_deeply_nested_parentheses_use_the_stack(self):
        expression = "(" * 3000 + "1+1" + ")" * 3000
        self.assertEqual(MathEngine.evaluate(expression), 2.0)

    def test_repeated_evaluation_gives_same_result(self):
        results = {MathEngine.evaluate("sqrt(2)*ln(3)-4!/7") for _ in range(5)}
        self.assertEqual(len(results), 1)


class TestFactorial(unittest.TestCase):

    def test_factorial_of_literal(self):
        self.assertEqual(MathEngine.evaluate("5!"), 120.0)
        self.assertEqual(MathEngine.evaluate("0!"), 1.0)

    def test_factorial_of_group(self):
        self.assertEqual(MathEngine.evaluate("(2+3)!"), 120.0)

    def test_factorial_binds_tighter_than_operators(self):
        self.assertEqual(MathEngine.evaluate("2*3!"), 12.0)
        self.assertEqual(MathEngine.evaluate("3!^2"), 36.0)

    def test_factorial_after_function_and_repeated(self):
        self.assertEqual(MathEngine.evaluate("sqrt(16)!"), 24.0)
        self.assertEqual(MathEngine.evaluate("3!!"), 720.0)

    def test_factorial_of_negative_literal(self):
        with self.assertRaises(E.InvalidExpressionError) as ctx:
            MathEngine.evaluate("-1!")
        self.assertEqual(ctx.exception.code, "2005")

    def test_factorial_domain(self):
        with self.assertRaises(E.InvalidExpressionError) as ctx:
            MathEngine.evaluate("2.5!")
        self.assertEqual(ctx.exception.code, "2006")
        with self.assertRaises(E.InvalidExpressionError) as ctx:
            MathEngine.evaluate("171!")
        self.assertEqual(ctx.exception.code, "2007")
        self.assertTrue(math.isfinite(MathEngine.evaluate("170!")))

    def test_factorial_without_operand(self):
        with self.assertRaises(E.InvalidExpressionError) as ctx:
            MathEngine.evaluate("!")
        self.assertEqual(ctx.exception.code, "3009")


class TestFunctionsAndConstants(unittest.TestCase):

    def test_sqrt(self):
        self.assertEqual(MathEngine.evaluate("sqrt(4)"), 2.0)
        with self.assertRaises(E.InvalidExpressionError):
            MathEngine.evaluate("sqrt(-4)")

    def test_sin_of_half_pi(self):
        self.assertAlmostEqual(MathEngine.evaluate("sin(pi/2)"), 1.0, places=12)

    def test_logarithms(self):
        self.assertAlmostEqual(MathEngine.evaluate("log(1000)"), 3.0, places=12)
        self.assertAlmostEqual(MathEngine.evaluate("ln(e)"), 1.0, places=12)
        with self.assertRaises(E.InvalidExpressionError):
            MathEngine.evaluate("ln(0)")
        with self.assertRaises(E.InvalidExpressionError):
            MathEngine.evaluate("log(-10)")

    def test_nested_functions(self):
        self.assertEqual(MathEngine.evaluate("sqrt(abs(-16))"), 4.0)
        self.assertEqual(MathEngine.evaluate("abs(cos(0)-3)*2"), 4.0)

    def test_names_are_case_insensitive(self):
        self.assertEqual(MathEngine.evaluate("SQRT(16)"), 4.0)
        self.assertEqual(MathEngine.evaluate("Pi"), math.pi)
        self.assertEqual(MathEngine.evaluate("2*E"), 2 * math.e)

    def test_unknown_function_is_rejected_after_its_argument(self):
        with self.assertRaises(E.InvalidExpressionError) as ctx:
            MathEngine.evaluate("foo(2)")
        self.assertIn("foo", ctx.exception.message)
        with self.assertRaises(E.DivisionByZeroError):
            MathEngine.evaluate("foo(1/0)")

    def test_function_needs_parenthesis(self):
        with self.assertRaises(E.InvalidExpressionError) as ctx:
            MathEngine.evaluate("sin 2")
        self.assertEqual(ctx.exception.code, "3004")

    def test_empty_function_argument(self):
        with self.assertRaises(E.EmptyExpressionError):
            MathEngine.evaluate("sqrt()")

    def test_errors_inside_arguments_propagate_unchanged(self):
        with self.assertRaises(E.DivisionByZeroError) as ctx:
            MathEngine.evaluate("2+abs(sqrt(1/0))")
        self.assertEqual(ctx.exception.code, "2000")

    def test_deep_function_nesting_is_reported(self):
        expression = "abs(" * 1500 + "1" + ")" * 1500
        with self.assertRaises(E.InvalidExpressionError) as ctx:
            MathEngine.evaluate(expression)
        self.assertEqual(ctx.exception.code, "3012")


class TestEvaluateErrors(unittest.TestCase):

    def test_empty_expression(self):
        for problem in ("", "   ", None):
            with self.assertRaises(E.EmptyExpressionError):
                MathEngine.evaluate(problem)

    def test_division_and_modulo_by_zero(self):
        with self.assertRaises(E.DivisionByZeroError):
            MathEngine.evaluate("10/0")
        with self.assertRaises(E.DivisionByZeroError):
            MathEngine.evaluate("10%0")

    def test_missing_close_parenthesis(self):
        with self.assertRaises(E.MismatchedParenthesesError) as ctx:
            MathEngine.evaluate("(5+3")
        self.assertIn("1", ctx.exception.message)
        self.assertEqual(ctx.exception.code, "3002")

    def test_extra_close_parenthesis_names_position(self):
        with self.assertRaises(E.MismatchedParenthesesError) as ctx:
            MathEngine.evaluate("5+3)")
        self.assertIn("Position 4", ctx.exception.message)

    def test_balance_is_checked_before_scanning(self):
        with self.assertRaises(E.MismatchedParenthesesError):
            MathEngine.evaluate("(5$")

    def test_invalid_character(self):
        with self.assertRaises(E.InvalidCharacterError) as ctx:
            MathEngine.evaluate("5 $ 3")
        self.assertEqual(ctx.exception.char, "$")
        self.assertIn("$", ctx.exception.message)
        self.assertIn("+, -, *, /, %, ^", ctx.exception.message)

    def test_error_order_follows_the_scan(self):
        # '/' is applied when '+' arrives, before '$' is reached
        with self.assertRaises(E.DivisionByZeroError):
            MathEngine.evaluate("1/0+$")
        with self.assertRaises(E.InvalidCharacterError):
            MathEngine.evaluate("1/0$")

    def test_malformed_number(self):
        with self.assertRaises(E.InvalidExpressionError) as ctx:
            MathEngine.evaluate("1.2.3+1")
        self.assertIn("'1.2.3'", ctx.exception.message)

    def test_missing_number_after_sign(self):
        for problem in ("-", "5*-", "-pi", "(-)"):
            with self.assertRaises(E.InvalidExpressionError) as ctx:
                MathEngine.evaluate(problem)
            self.assertEqual(ctx.exception.code, "3006")

    def test_not_enough_operands(self):
        with self.assertRaises(E.InvalidExpressionError) as ctx:
            MathEngine.evaluate("5+")
        self.assertEqual(ctx.exception.code, "3007")
        with self.assertRaises(E.InvalidExpressionError):
            MathEngine.evaluate("*5")

    def test_expression_that_does_not_reduce(self):
        for problem in ("()", "(1)(2)", "pi(2)"):
            with self.assertRaises(E.InvalidExpressionError) as ctx:
                MathEngine.evaluate(problem)
            self.assertEqual(ctx.exception.code, "3008")


class TestScanner(unittest.TestCase):

    def kinds(self, problem):
        return [token.kind for token in MathEngine.translator(problem)]

    def test_negated_group_token(self):
        self.assertEqual(
            self.kinds("2*-(3)"),
            [MathEngine.NUMBER, MathEngine.OPERATOR, MathEngine.NEGATE,
             MathEngine.OPEN, MathEngine.NUMBER, MathEngine.CLOSE])

    def test_signed_literal(self):
        tokens = list(MathEngine.translator("(-2.5)"))
        self.assertEqual(tokens[1], MathEngine.Token(MathEngine.NUMBER, -2.5))

    def test_function_token_carries_argument(self):
        tokens = list(MathEngine.translator("sin(2+(3))*2"))
        self.assertEqual(tokens[0], MathEngine.Token(MathEngine.FUNCTION, ("sin", "2+(3)")))
        self.assertEqual(tokens[1], MathEngine.Token(MathEngine.OPERATOR, "*"))

    def test_factorial_tokens(self):
        self.assertEqual(
            self.kinds("(3)!"),
            [MathEngine.OPEN, MathEngine.NUMBER, MathEngine.CLOSE, MathEngine.FACTORIAL])

    def test_should_apply_first(self):
        self.assertTrue(MathEngine.should_apply_first("*", "+"))
        self.assertTrue(MathEngine.should_apply_first("-", "+"))
        self.assertFalse(MathEngine.should_apply_first("+", "*"))
        self.assertFalse(MathEngine.should_apply_first("^", "^"))
        self.assertTrue(MathEngine.should_apply_first("^", "*"))

    def test_isolate_bracket(self):
        self.assertEqual(MathEngine.isolate_bracket("f(a(b)c)+1", 1), ("a(b)c", 8))
        with self.assertRaises(E.MismatchedParenthesesError):
            MathEngine.isolate_bracket("f(a(b", 1)


class TestFormatting(unittest.TestCase):

    def test_format_result(self):
        self.assertEqual(MathEngine.format_result(4.0), "4")
        self.assertEqual(MathEngine.format_result(-0.0), "0")
        self.assertEqual(MathEngine.format_result(2.5), "2.5")
        self.assertEqual(MathEngine.format_result(1e20), "1e+20")
        self.assertEqual(MathEngine.format_result(math.inf), "inf")

    def test_cleanup_rounds_to_decimal_places(self):
        self.assertEqual(MathEngine.cleanup(2 / 3, 4), ("0.6667", True))
        self.assertEqual(MathEngine.cleanup(0.5, 4), ("0.5", False))
        self.assertEqual(MathEngine.cleanup(12.0, 4), ("12", False))
        self.assertEqual(MathEngine.cleanup(math.nan, 4), ("nan", False))

    def test_ans_text_reads_back_to_the_same_value(self):
        for value in (1e16, 1e-7, -3.0, 1 / 3, 2.5e20, -0.0):
            text = MathEngine.ans_text(value)
            self.assertNotIn("e", text, msg=repr(value))
            self.assertEqual(MathEngine.evaluate(text), value, msg=repr(value))

    def test_ans_text_is_plain(self):
        self.assertEqual(MathEngine.ans_text(1e16), "10000000000000000")
        self.assertEqual(MathEngine.ans_text(1e-7), "0.0000001")
        self.assertEqual(MathEngine.ans_text(-3.0), "-3")

    def test_ans_text_rejects_non_finite(self):
        for value in (math.inf, -math.inf, math.nan):
            with self.assertRaises(E.MathError) as ctx:
                MathEngine.ans_text(value)
            self.assertEqual(ctx.exception.code, "4001")


class TestCalculate(unittest.TestCase):

    def setUp(self):
        # Point the config at a missing file so the built-in defaults apply
        self.tmp = tempfile.TemporaryDirectory()
        patcher = patch.object(config_manager, "config_json", Path(self.tmp.name) / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self.tmp.cleanup)

    def test_exact_result(self):
        self.assertEqual(MathEngine.calculate("2+2"), (4.0, "= 4"))

    def test_rounded_result(self):
        value, display = MathEngine.calculate("1/3")
        self.assertEqual(value, 1 / 3)
        self.assertEqual(display, "≈ 0.3333333333")

    def test_error_carries_equation(self):
        with self.assertRaises(E.DivisionByZeroError) as ctx:
            MathEngine.calculate("1/0")
        self.assertEqual(ctx.exception.equation, "1/0")

    def test_power_edge_cases(self):
        self.assertEqual(MathEngine.calculate("0^0"), (1.0, "= 1"))
        self.assertEqual(MathEngine.calculate("0^-1"), (math.inf, "= inf"))


if __name__ == "__main__":
    unittest.main()
