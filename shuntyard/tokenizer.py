"""Scans expression text into a sequence of tokens."""

from typing import AbstractSet, Iterable, Iterator, Optional

from .errors import LexicalError
from .expression import DEFAULT_VARIABLES
from .functions import BUILTIN_FUNCTIONS, FunctionRegistry, is_identifier_part, is_identifier_start
from .operators import BUILTIN_OPERATORS, OperatorRegistry
from .tokens import FunctionToken, GroupMarker, MarkerKind, NumberToken, OperatorToken, Token, TokenKind, \
    VariableToken

DEFAULT_VARIABLE_NAMES: AbstractSet[str] = frozenset(DEFAULT_VARIABLES)
"""Names that are bound in every new expression and are therefore always declared."""

GROUP_MARKERS = {marker.value: marker for marker in MarkerKind}


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


class Tokenizer:
    """The expression tokenizer."""
    def __init__(self,
                 text: str,
                 operators: OperatorRegistry = BUILTIN_OPERATORS,
                 functions: FunctionRegistry = BUILTIN_FUNCTIONS,
                 variable_names: Optional[Iterable[str]] = None,
                 implicit_multiplication: bool = False):
        """Initializes a tokenizer, but does not commence any tokenization.

        Args:
            text: The expression to tokenize.
            operators: The operators that may occur in the expression.
            functions: The functions that may be called in the expression.
            variable_names: If provided, the only identifiers (besides function calls and the default constants) that
                may occur in the expression. If omitted, any identifier that is not a function call is a variable.
            implicit_multiplication: Whether juxtaposed operands (*e.g.*, ``2x`` or ``(a)(b)``) are multiplied.

        """
        self._text: str = text
        self._offset: int = 0
        self._operators: OperatorRegistry = operators
        self._functions: FunctionRegistry = functions
        if variable_names is None:
            self.variable_names: Optional[AbstractSet[str]] = None
        else:
            self.variable_names = frozenset(variable_names) | DEFAULT_VARIABLE_NAMES
        self.implicit_multiplication: bool = implicit_multiplication
        self._next_token: Optional[Token] = None
        self._deferred: Optional[Token] = None
        self._expect_operand: bool = True
        self._next_expect_operand: bool = True
        self.prev_token: Optional[Token] = None
        """The previous token yielded by this tokenizer."""

    def _skip_whitespace(self, offset: int) -> int:
        while offset < len(self._text) and self._text[offset].isspace():
            offset += 1
        return offset

    def _scan_number(self) -> NumberToken:
        text = self._text
        start = i = self._offset
        while i < len(text) and is_digit(text[i]):
            i += 1
        if i < len(text) and text[i] == '.':
            i += 1
            while i < len(text) and is_digit(text[i]):
                i += 1
            if i < len(text) and text[i] == '.':
                raise LexicalError("Malformed number: more than one decimal point", i)
        if i < len(text) and text[i] in 'eE':
            exponent_start = i
            i += 1
            if i < len(text) and text[i] in '+-':
                i += 1
            if i >= len(text) or not is_digit(text[i]):
                raise LexicalError("Malformed exponent", exponent_start)
            while i < len(text) and is_digit(text[i]):
                i += 1
            if i < len(text) and text[i] == '.':
                raise LexicalError("Malformed exponent: unexpected decimal point", i)
        self._offset = i
        return NumberToken(text[start:i], start)

    def _scan_identifier(self) -> Token:
        text = self._text
        start = i = self._offset
        while i < len(text) and is_identifier_part(text[i]):
            i += 1
        name = text[start:i]
        self._offset = i
        lookahead = self._skip_whitespace(i)
        if lookahead < len(text) and text[lookahead] == '(':
            function = self._functions.resolve(name)
            if function is not None:
                return FunctionToken(function, start)
        if self.variable_names is not None and name not in self.variable_names:
            raise LexicalError(f"Unknown function or variable {name!r}", start)
        return VariableToken(name, start)

    def _scan_operator(self, symbol: str) -> OperatorToken:
        start = self._offset
        if self._expect_operand:
            op = self._operators.resolve(symbol, 1)
            if op is None:
                raise LexicalError(f"Operator {symbol!r} cannot be used as a unary operator", start)
            # prefix operator
            self._next_expect_operand = True
        else:
            op = self._operators.resolve(symbol, 2)
            if op is not None:
                self._next_expect_operand = True
            else:
                # postfix operator, like a factorial
                op = self._operators.resolve(symbol, 1)
                self._next_expect_operand = False
        self._offset += len(symbol)
        return OperatorToken(op, start)

    def _scan(self) -> Optional[Token]:
        self._offset = self._skip_whitespace(self._offset)
        if self._offset >= len(self._text):
            return None
        c = self._text[self._offset]
        if is_digit(c) or (c == '.' and self._offset + 1 < len(self._text) and is_digit(self._text[self._offset + 1])):
            self._next_expect_operand = False
            return self._scan_number()
        elif is_identifier_start(c):
            ret = self._scan_identifier()
            self._next_expect_operand = ret.kind is TokenKind.FUNCTION
            return ret
        elif c in GROUP_MARKERS:
            marker = GROUP_MARKERS[c]
            self._next_expect_operand = marker is not MarkerKind.CLOSE_PAREN
            self._offset += 1
            return GroupMarker(marker, self._offset - 1)
        symbol = self._operators.match(self._text, self._offset)
        if symbol is not None:
            return self._scan_operator(symbol)
        raise LexicalError(f"Unexpected character {c!r}", self._offset)

    def _starts_operand(self, token: Token) -> bool:
        return token.kind is TokenKind.NUMBER or token.kind is TokenKind.VARIABLE \
            or token.kind is TokenKind.FUNCTION \
            or (token.kind is TokenKind.GROUP_MARKER and token.marker is MarkerKind.OPEN_PAREN)

    def peek(self) -> Optional[Token]:
        """Returns the next token that would be returned from a call to :meth:`Tokenizer.next`.

        This function actually computes and caches the next token if it has not already been cached.

        Raises:
            LexicalError: If the input at the current offset cannot be tokenized.

        Returns:
            Optional[Token]: The next token that would be returned from a call to :meth:`Tokenizer.next`,
            or :const:`None` if there are no more tokens.

        """
        if self._next_token is not None:
            return self._next_token
        elif self._deferred is not None:
            self._next_token, self._deferred = self._deferred, None
            return self._next_token
        ret = self._scan()
        if ret is not None and self.implicit_multiplication and not self._expect_operand \
                and self._starts_operand(ret):
            multiplication = self._operators.resolve('*', 2)
            if multiplication is None:
                raise LexicalError("Implicit multiplication requires a binary '*' operator", ret.offset)
            # Emit the multiplication first; the scanned token follows on the next call
            self._deferred = ret
            ret = OperatorToken(multiplication, ret.offset)
        self._next_token = ret
        return ret

    def has_next(self) -> bool:
        """Returns whether another token is available.

        This is equivalent to::

            return self.peek() is not None

        """
        return self.peek() is not None

    def next(self) -> Optional[Token]:
        """Returns the next token in the stream.

        Returns:
            Optional[Token]: The next token, or :const:`None` if there are no more tokens.

        """
        ret = self.peek()
        self.prev_token = ret
        self._next_token = None
        if ret is not None:
            if self._deferred is not None:
                # an injected multiplication is always followed by an operand
                self._expect_operand = True
            else:
                self._expect_operand = self._next_expect_operand
        return ret

    def __iter__(self) -> Iterator[Token]:
        """Iterates over all of the tokens in the stream."""
        while self.has_next():
            yield self.next()


def tokenize(text: str, *args, **kwargs) -> Iterator[Token]:
    """Convenience function for tokenizing a string.

    This is equivalent to::

        yield from Tokenizer(text, *args, **kwargs)

    """
    yield from Tokenizer(text, *args, **kwargs)
