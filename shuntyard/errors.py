"""Error types raised while parsing and evaluating expressions.

Every error raised by this package derives from :class:`ExpressionError`. Parse-time failures additionally derive
from :class:`ParseError` and carry the character offset in the input at which the problem was detected.

"""


class ExpressionError(RuntimeError):
    """Base error type of the :mod:`shuntyard` package."""
    pass


class ParseError(ExpressionError):
    """Base error type for failures while converting text into a postfix program."""
    def __init__(self, message: str, offset: int):
        super().__init__(message)
        self.offset: int = offset
        """The offset of the offending character in the input."""

    def __str__(self):
        return f"{super().__str__()} at offset {self.offset}"


class LexicalError(ParseError):
    """Raised for malformed literals, unknown symbols, unexpected characters, and undeclared identifiers."""
    pass


class ExpressionSyntaxError(ParseError):
    """Raised for unmatched parenthesis, misplaced argument separators, and other invalid token orders."""
    pass


class NameConflictError(ExpressionError, ValueError):
    """Raised when a variable would be bound to the name of a registered function."""
    def __init__(self, name: str):
        super().__init__(f"The variable name {name!r} is invalid since there exists a function with the same name")
        self.name: str = name


class EvaluationError(ExpressionError):
    """Raised when a postfix program cannot be executed."""
    pass
