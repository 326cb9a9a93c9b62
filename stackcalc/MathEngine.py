# MathEngine.py
"""""
Core calculation engine for the stack calculator.

Pipeline
--------
1) Pre-checks: empty input, whitespace removal, parenthesis balance.
2) Scanner (translator): walks the cleaned string left to right and yields
   tokens lazily, so scanning errors surface at the same point an
   interleaved scan would hit them.
3) Evaluator: two stacks (operands / operators) with precedence and
   associativity rules. Function arguments are evaluated recursively as
   complete expressions of their own.
4) Formatter: renders results for front ends using the decimal_places setting.

Operator precedence
-------------------
    3: ^          (right-associative)
    2: * / %
    1: + -

Example: "(5 + 3) * 2 / 4" -> 4.0
"""""

import math
import re
from collections import namedtuple
from decimal import Decimal

from . import config_manager as config_manager
from . import ScientificEngine
from . import error as E

# Debug toggle for optional prints in this module (main.py sets it from config)
debug = False

# Supported operators, kept as simple lists / dicts for quick membership checks
Operations = ["+", "-", "*", "/", "%", "^"]
PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "%": 2, "^": 3}
RIGHT_ASSOCIATIVE = ["^"]
DIGITS = "0123456789"

# Whole results beyond this are shown in exponent form instead of every digit
MAX_PLAIN_INTEGER = 1e15


# -----------------------------
# Tokens
# -----------------------------

Token = namedtuple("Token", ["kind", "value"])

NUMBER = "number"
OPERATOR = "operator"
OPEN = "open"
CLOSE = "close"
FUNCTION = "function"      # value: (name, argument text between the brackets)
FACTORIAL = "factorial"
NEGATE = "negate"          # sign in front of '(' : behaves as "-1 *"


# -----------------------------
# Utilities / small helpers
# -----------------------------

def isOp(zahl):
    """Return index of a known basic operator or -1 if unknown."""
    try:
        return Operations.index(zahl)
    except ValueError:
        return -1


def isNumberChar(zahl):
    """Return True for characters that can appear in a numeric literal."""
    return zahl in DIGITS or zahl == "."


def precedence(operator):
    return PRECEDENCE.get(operator, 0)


def should_apply_first(stack_operator, new_operator):
    """Decide whether the stacked operator fires before new_operator is pushed.

    Higher precedence always fires first. Equal precedence fires first unless
    the new operator is right-associative ('^'), so 2^3^2 is 2^(3^2).
    """
    stack_precedence = precedence(stack_operator)
    new_precedence = precedence(new_operator)

    if stack_precedence > new_precedence:
        return True
    if stack_precedence == new_precedence and new_operator not in RIGHT_ASSOCIATIVE:
        return True
    return False


def validate_parentheses(problem):
    """Every '(' needs a ')' and no ')' may come before its '('."""
    depth = 0
    for position, current_char in enumerate(problem, start=1):
        if current_char == "(":
            depth += 1
        elif current_char == ")":
            depth -= 1
            if depth < 0:
                raise E.MismatchedParenthesesError(
                    f"Position {position}: unexpected ')'.", code="3001")

    if depth > 0:
        raise E.MismatchedParenthesesError(
            f"{depth} '(' without a matching ')'.", code="3002")


def isolate_bracket(problem, start_klammer_index):
    """Return the text between the '(' at start_klammer_index and its matching ')'.

    Walks forward counting parenthesis depth.
    Returns:
        (substring_without_brackets, position_after_closing_paren)
    """
    b = start_klammer_index + 1
    bracket_count = 1
    while b < len(problem):
        if problem[b] == "(":
            bracket_count += 1
        elif problem[b] == ")":
            bracket_count -= 1
            if bracket_count == 0:
                return problem[start_klammer_index + 1:b], b + 1
        b += 1
    raise E.MismatchedParenthesesError("Missing ')' after function argument.", code="3013")


def read_number(problem, b):
    """Collect the maximal run of digits and dots starting at b."""
    start = b
    while b < len(problem) and isNumberChar(problem[b]):
        b += 1
    return problem[start:b], b


def parse_number(str_number):
    try:
        return float(str_number)
    except ValueError:
        raise E.InvalidExpressionError(f"'{str_number}' is not a valid number.", code="3003") from None


# -----------------------------
# Scanner
# -----------------------------

def translator(problem):
    """Yield the tokens of a whitespace-free expression one at a time.

    A '-' is a sign when it starts the expression or follows '(' or another
    operator. Identifiers are lower-cased; constants become numbers and
    function names carry their isolated argument text.
    """
    b = 0

    while b < len(problem):
        current_char = problem[b]

        # --- Identifiers: constants and function calls ---
        if current_char.isalpha():
            start = b
            while b < len(problem) and problem[b].isalpha():
                b += 1
            name = problem[start:b].lower()

            if name in ScientificEngine.CONSTANTS:
                yield Token(NUMBER, ScientificEngine.CONSTANTS[name])
                continue

            if b >= len(problem) or problem[b] != "(":
                raise E.InvalidExpressionError(
                    f"Function '{name}' must be followed by '('.", code="3004")

            argument, b = isolate_bracket(problem, b)
            yield Token(FUNCTION, (name, argument))
            continue

        # --- Numbers: digits and decimal separator ---
        if isNumberChar(current_char):
            str_number, b = read_number(problem, b)
            yield Token(NUMBER, parse_number(str_number))
            if b < len(problem) and problem[b] == "!":
                yield Token(FACTORIAL, "!")
                b += 1
            continue

        # --- Sign: '-' at the start, after '(' or after another operator ---
        if current_char == "-" and (b == 0 or problem[b - 1] == "(" or isOp(problem[b - 1]) != -1):
            b += 1
            if b >= len(problem) or not (isNumberChar(problem[b]) or problem[b] == "("):
                raise E.InvalidExpressionError(
                    "Expected a number or '(' after '-'.", code="3006")

            if problem[b] == "(":
                yield Token(NEGATE, "-")
                continue

            str_number, b = read_number(problem, b)
            yield Token(NUMBER, parse_number("-" + str_number))
            continue

        # --- Parentheses ---
        if current_char == "(":
            yield Token(OPEN, "(")
        elif current_char == ")":
            yield Token(CLOSE, ")")
            if b + 1 < len(problem) and problem[b + 1] == "!":
                yield Token(FACTORIAL, "!")
                b += 1

        # --- Postfix factorial ---
        elif current_char == "!":
            yield Token(FACTORIAL, "!")

        # --- Operators ---
        elif isOp(current_char) != -1:
            yield Token(OPERATOR, current_char)

        else:
            raise E.InvalidCharacterError(
                f"'{current_char}' is not recognized. Only numbers and the operators "
                f"{ScientificEngine.VALID_OPERATORS} can be used.",
                char=current_char, code="3010")

        b = b + 1


# -----------------------------
# Evaluator (two stacks)
# -----------------------------

def apply_top_operator(numbers, operators):
    """Pop one operator and two operands, push the result.

    The operand popped first is the right-hand side.
    """
    if len(numbers) < 2:
        raise E.InvalidExpressionError(
            "Not enough operands for the operation. Check the expression.", code="3007")

    operator = operators.pop()
    b = numbers.pop()
    a = numbers.pop()
    numbers.append(ScientificEngine.apply_binary(a, b, operator))


def apply_factorial(numbers):
    if not numbers:
        raise E.InvalidExpressionError("No number found for '!'.", code="3009")
    numbers.append(ScientificEngine.factorial(numbers.pop()))


def _evaluate(problem):
    if problem is None or not problem.strip():
        raise E.EmptyExpressionError("No expression was entered.", code="3000")

    expression = re.sub(r"\s+", "", problem)
    validate_parentheses(expression)

    numbers = []     # operand stack
    operators = []   # operator stack: operator symbols and '(' markers

    for token in translator(expression):
        if debug == True:
            print(f"{token} | numbers={numbers} operators={operators}")

        if token.kind == NUMBER:
            numbers.append(token.value)

        elif token.kind == FUNCTION:
            name, argument = token.value
            argument_value = _evaluate(argument)
            result = ScientificEngine.apply_function(name, argument_value)
            if result is None:
                raise E.InvalidExpressionError(f"Unknown function: '{name}'", code="3005")
            numbers.append(result)

        elif token.kind == NEGATE:
            # "-(...)" is read as "-1 * (...)"
            numbers.append(-1.0)
            operators.append("*")

        elif token.kind == OPEN:
            operators.append("(")

        elif token.kind == CLOSE:
            while operators and operators[-1] != "(":
                apply_top_operator(numbers, operators)
            if not operators:
                raise E.MismatchedParenthesesError("')' without a matching '('.", code="3001")
            operators.pop()

        elif token.kind == FACTORIAL:
            apply_factorial(numbers)

        elif token.kind == OPERATOR:
            while operators and operators[-1] != "(" and should_apply_first(operators[-1], token.value):
                apply_top_operator(numbers, operators)
            operators.append(token.value)

    # --- Apply whatever is left ---
    while operators:
        if operators[-1] == "(":
            raise E.MismatchedParenthesesError("Parentheses do not match.", code="3011")
        apply_top_operator(numbers, operators)

    if len(numbers) != 1:
        raise E.InvalidExpressionError(
            "The expression did not reduce correctly. Please check it.", code="3008")

    if debug == True:
        print(f"Result of '{problem}': {numbers[0]}")

    return numbers[0]


def evaluate(problem):
    """Evaluate an expression string and return the result as a float.

    Raises one of the MathError subclasses from error.py on any failure.
    Each call owns its own stacks; nothing is kept between calls.
    """
    try:
        return _evaluate(problem)
    except RecursionError:
        raise E.InvalidExpressionError("The expression is nested too deeply.", code="3012") from None


# -----------------------------
# Result formatting
# -----------------------------

def format_result(ergebnis):
    """Render a float without a trailing '.0' when it is a whole number."""
    if math.isfinite(ergebnis) and ergebnis.is_integer() and abs(ergebnis) < MAX_PLAIN_INTEGER:
        return str(int(ergebnis))
    return str(ergebnis)


def ans_text(ergebnis):
    """Render a result as plain decimal text the scanner can read back.

    No exponent notation, so 1e16 becomes "10000000000000000" and 1e-7
    becomes "0.0000001". Non-finite results have no literal form and raise
    MathError 4001.
    """
    if not math.isfinite(ergebnis):
        raise E.MathError(E.ERROR_MESSAGES["4001"], code="4001")

    # repr is the shortest text that parses back to the same float
    text = format(Decimal(repr(float(ergebnis))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def cleanup(ergebnis, decimal_places=None):
    """Round a result to the configured number of decimal places.

    Returns:
        (rendered_value, rounding_flag)
    where rounding_flag indicates whether rounding changed the value.
    """
    rounding = False

    if decimal_places is None:
        decimal_places = config_manager.load_setting_value("decimal_places")

    if not math.isfinite(ergebnis) or ergebnis.is_integer():
        return format_result(ergebnis), rounding

    gerundetes_ergebnis = round(ergebnis, decimal_places)
    if gerundetes_ergebnis != ergebnis:
        rounding = True

    return format_result(gerundetes_ergebnis), rounding


# -----------------------------
# Public entry point
# -----------------------------

def calculate(problem):
    """Main API for front ends: evaluate -> format.

    Returns:
        (value, display_string) where display_string is "= 4" or "≈ 0.333333".
    """
    try:
        ergebnis = evaluate(problem)
        ausgabe_string, rounding = cleanup(ergebnis)

        ungefaehr_zeichen = "≈"
        if rounding == True:
            return ergebnis, f"{ungefaehr_zeichen} {ausgabe_string}"
        return ergebnis, f"= {ausgabe_string}"

    # Re-raise our domain errors after attaching the source equation
    except E.MathError as e:
        e.equation = problem
        raise e
    # Convert unexpected Python exceptions to our unified error type
    except Exception as e:
        raise E.MathError(message=str(e).strip(), code="9999", equation=problem) from e
