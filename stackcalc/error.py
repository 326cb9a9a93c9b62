from enum import Enum


class ErrorKind(Enum):
    """The five categories every evaluation failure falls into."""
    EMPTY_EXPRESSION = "Empty expression"
    DIVISION_BY_ZERO = "Division by zero"
    INVALID_CHARACTER = "Invalid character"
    MISMATCHED_PARENTHESES = "Mismatched parentheses"
    INVALID_EXPRESSION = "Invalid expression"

    @property
    def description(self):
        return self.value


class MathError(Exception):
    kind = None

    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

    def describe(self):
        """Return '[KIND] Description: detail' for display in front ends."""
        if self.kind is None:
            return f"[UNEXPECTED] {ERROR_MESSAGES['9999']}{self.message}"
        return f"[{self.kind.name}] {self.kind.description}: {self.message}"

class EmptyExpressionError(MathError):
    kind = ErrorKind.EMPTY_EXPRESSION

class DivisionByZeroError(MathError):
    kind = ErrorKind.DIVISION_BY_ZERO

class InvalidCharacterError(MathError):
    kind = ErrorKind.INVALID_CHARACTER

    def __init__(self, message, char, code="3010", equation=None):
        super().__init__(message, code=code, equation=equation)
        self.char = char

class MismatchedParenthesesError(MathError):
    kind = ErrorKind.MISMATCHED_PARENTHESES

class InvalidExpressionError(MathError):
    kind = ErrorKind.INVALID_EXPRESSION




Error_Dictionary= {

    "1" : "Missing Files",
    "2" : "Scientific Calculation Error",
    "3" : "Calculator Error",
    "4" : "UI Error",
    "5" : "Configuration Error",
    "9" : "Runtime Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "2000" : "Division by zero.",
    "2001" : "Modulo by zero.",
    "2002" : "Square root of a negative number.",
    "2003" : "Natural logarithm of a non-positive number.",
    "2004" : "Logarithm of a non-positive number.",
    "2005" : "Factorial of a negative number.",
    "2006" : "Factorial of a non-integer.",
    "2007" : "Factorial too large.",
    "2008" : "Invalid Operator: ", # + operator


    "3000" : "Nothing to calculate.",
    "3001" : "Unexpected ')'.",
    "3002" : "Missing ')'.",
    "3003" : "Invalid number.",
    "3004" : "Missing '(' after function.",
    "3005" : "Unknown function.",
    "3006" : "Missing number after '-'.",
    "3007" : "Not enough operands.",
    "3008" : "Expression did not reduce correctly.",
    "3009" : "Missing number before '!'.",
    "3010" : "Unknown character: ", # + character
    "3011" : "Unclosed '(' left over.",
    "3012" : "Expression nested too deeply.",
    "3013" : "Missing ')' after function argument.",


    "4000" : "Calculation already Running!",
    "4001" : "No Value in Ans.",


    "5000" : "Settings could not be saved.",
    "5001" : "Invalid setting value: ", # + setting


    "9999" : "Unexpected Error: " #+error
}
