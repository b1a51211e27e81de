"""Conversion of infix token sequences to postfix (reverse Polish) order."""

from typing import Iterable, Iterator, List

from .errors import ExpressionSyntaxError
from .tokens import FunctionToken, MarkerKind, Token, TokenKind


class ArgumentCounter:
    """A datastructure used by :func:`infix_to_rpn` to count the arguments between a pair of parenthesis."""
    def __init__(self):
        self.separators: int = 0
        self.empty: bool = True

    @property
    def num_arguments(self) -> int:
        if self.empty:
            return 0
        return self.separators + 1


def is_open_paren(token: Token) -> bool:
    return token.kind is TokenKind.GROUP_MARKER and token.marker is MarkerKind.OPEN_PAREN


def close_function(token: FunctionToken, counter: ArgumentCounter) -> FunctionToken:
    function = token.function
    if not function.variadic:
        return token
    num_arguments = counter.num_arguments
    if not function.accepts(num_arguments):
        raise ExpressionSyntaxError(
            f"Function {function.name!r} expects at least {function.num_arguments} argument(s) but was called with "
            f"{num_arguments}",
            token.offset
        )
    return token.with_arguments(num_arguments)


def infix_to_rpn(tokens: Iterable[Token]) -> Iterator[Token]:
    """Converts an infix expression to reverse Polish notation using the Shunting Yard algorithm.

    Raises:
        ExpressionSyntaxError: If the parenthesis are unbalanced, an argument separator occurs outside of parenthesis,
            a variadic function is called with too few arguments, or the expression is empty.

    """
    holding: List[Token] = []
    counters: List[ArgumentCounter] = []
    emitted = 0

    for token in tokens:
        kind = token.kind
        if counters and not (kind is TokenKind.GROUP_MARKER and token.marker is MarkerKind.CLOSE_PAREN):
            counters[-1].empty = False
        if kind is TokenKind.NUMBER or kind is TokenKind.VARIABLE:
            emitted += 1
            yield token
        elif kind is TokenKind.FUNCTION:
            holding.append(token)
        elif kind is TokenKind.OPERATOR:
            op = token.op
            while holding and holding[-1].kind is TokenKind.OPERATOR and (
                    holding[-1].op.precedence > op.precedence
                    or
                    (holding[-1].op.precedence == op.precedence and op.left_associative)):
                emitted += 1
                yield holding.pop()
            holding.append(token)
        elif kind is TokenKind.GROUP_MARKER:
            if token.marker is MarkerKind.OPEN_PAREN:
                holding.append(token)
                counters.append(ArgumentCounter())
            elif token.marker is MarkerKind.ARGUMENT_SEPARATOR:
                while holding and not is_open_paren(holding[-1]):
                    emitted += 1
                    yield holding.pop()
                if not holding:
                    raise ExpressionSyntaxError("misplaced separator or unmatched parenthesis", token.offset)
                counters[-1].separators += 1
            else:
                while holding and not is_open_paren(holding[-1]):
                    emitted += 1
                    yield holding.pop()
                if not holding:
                    raise ExpressionSyntaxError("unmatched parenthesis", token.offset)
                holding.pop()
                counter = counters.pop()
                if holding and holding[-1].kind is TokenKind.FUNCTION:
                    emitted += 1
                    yield close_function(holding.pop(), counter)
        else:
            raise NotImplementedError(f"Add support for tokens of kind {kind!r}")

    while holding:
        top = holding.pop()
        if top.kind is TokenKind.GROUP_MARKER:
            raise ExpressionSyntaxError("unmatched parenthesis", top.offset)
        emitted += 1
        yield top

    if not emitted:
        raise ExpressionSyntaxError("empty expression", 0)
