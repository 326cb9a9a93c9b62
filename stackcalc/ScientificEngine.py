# ScientificEngine.py
"""""
Arithmetic primitives for the stack calculator.

Every operation takes one or two floats and returns a float, or raises one of
the MathError subclasses from error.py when its operand is outside the domain.
MathEngine reaches these through apply_binary() (for the six infix operators)
and FUNCTIONS (for the named single-argument functions).
"""""

import math

from . import error as E


# Largest n whose factorial is still finite as a 64-bit float
FACTORIAL_LIMIT = 170

VALID_OPERATORS = "+, -, *, /, %, ^"


# -----------------------------
# Binary operations
# -----------------------------

def add(a, b):
    return a + b


def subtract(a, b):
    return a - b


def multiply(a, b):
    return a * b


def divide(a, b):
    if b == 0:
        raise E.DivisionByZeroError(f"{a:.2f} / 0 is undefined.", code="2000")
    return a / b


def modulo(a, b):
    """Remainder with the sign of the dividend (fmod), e.g. -7 % 3 == -1."""
    if b == 0:
        raise E.DivisionByZeroError(f"{a:.2f} % 0 is undefined.", code="2001")
    try:
        return math.fmod(a, b)
    except ValueError:
        # fmod(inf, b)
        return math.nan


def power(base, exponent):
    """IEEE pow: never raises. 0^negative is +inf, (-8)^(1/3) is nan."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and exponent % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0:
            return math.inf
        return math.nan


# -----------------------------
# Single-argument functions
# -----------------------------

def sqrt(a):
    if a < 0:
        raise E.InvalidExpressionError(f"Square root of {a:.2f} is undefined (negative).", code="2002")
    return math.sqrt(a)


def sin(angle):
    try:
        return math.sin(angle)
    except ValueError:
        return math.nan


def cos(angle):
    try:
        return math.cos(angle)
    except ValueError:
        return math.nan


def tan(angle):
    try:
        return math.tan(angle)
    except ValueError:
        return math.nan


def ln(a):
    if a <= 0:
        raise E.InvalidExpressionError(f"ln({a:.2f}) is undefined (must be positive).", code="2003")
    return math.log(a)


def log(a):
    """Base 10 logarithm."""
    if a <= 0:
        raise E.InvalidExpressionError(f"log({a:.2f}) is undefined (must be positive).", code="2004")
    return math.log10(a)


def absolute(a):
    return math.fabs(a)


def factorial(n):
    """Return n! for a whole number 0 <= n <= 170.

    The three domain failures are checked in order (negative, non-integer,
    too large) and the limit is enforced before any multiplication happens.
    """
    if n < 0:
        raise E.InvalidExpressionError("Factorial is undefined for negative numbers.", code="2005")
    if math.isnan(n) or (math.isfinite(n) and not float(n).is_integer()):
        raise E.InvalidExpressionError("Factorial is only defined for whole numbers.", code="2006")
    if n > FACTORIAL_LIMIT:
        raise E.InvalidExpressionError(
            f"Factorial of {n:.0f} is too large (limit is {FACTORIAL_LIMIT}).", code="2007")

    result = 1.0
    for i in range(2, int(n) + 1):
        result *= i
    return result


# -----------------------------
# Dispatch tables
# -----------------------------

BINARY_OPERATIONS = {
    "+": add,
    "-": subtract,
    "*": multiply,
    "/": divide,
    "%": modulo,
    "^": power,
}

FUNCTIONS = {
    "sin": sin,
    "cos": cos,
    "tan": tan,
    "sqrt": sqrt,
    "ln": ln,
    "log": log,
    "abs": absolute,
}

CONSTANTS = {
    "pi": math.pi,
    "e": math.e,
}


def apply_binary(a, b, operator):
    """Apply the infix operator symbol to a (left) and b (right)."""
    operation = BINARY_OPERATIONS.get(operator)
    if operation is None:
        raise E.InvalidCharacterError(
            f"'{operator}' is not a valid operator. Available: {VALID_OPERATORS}",
            char=operator, code="2008")
    return operation(a, b)


def apply_function(name, argument):
    """Apply a named function; returns None when the name is unknown."""
    function = FUNCTIONS.get(name)
    if function is None:
        return None
    return function(argument)
