"""The token model shared by the tokenizer, the shunting-yard converter, and the evaluator.

A token is one of a closed set of kinds, enumerated by :class:`TokenKind`. Consumers dispatch on
:attr:`Token.kind` rather than on the concrete class. Tokens are immutable once created, so a postfix program (a tuple
of tokens) can be shared by any number of :class:`shuntyard.expression.Expression` objects.

"""

from decimal import Decimal
from enum import Enum
from typing import Union

from .functions import Function
from .operators import Operator


class TokenKind(Enum):
    """An enumeration of token kinds."""
    NUMBER = 'number'
    VARIABLE = 'variable'
    OPERATOR = 'operator'
    FUNCTION = 'function'
    GROUP_MARKER = 'group marker'


class MarkerKind(Enum):
    """The kinds of :class:`GroupMarker`."""
    OPEN_PAREN = '('
    CLOSE_PAREN = ')'
    ARGUMENT_SEPARATOR = ','


class Token:
    """Base class for an expression token."""
    kind: TokenKind = None

    __slots__ = ('_offset',)

    def __init__(self, offset: int):
        """Initializes a token.

        Args:
            offset: The offset of the token within the input.

        """
        object.__setattr__(self, '_offset', offset)

    @property
    def offset(self) -> int:
        """Offset of the token in the input."""
        return self._offset

    def __setattr__(self, key, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __delattr__(self, item):
        raise AttributeError(f"{self.__class__.__name__} is immutable")


class NumberToken(Token):
    """A numeric literal."""
    kind = TokenKind.NUMBER

    __slots__ = ('_raw', '_value', '_float_value')

    def __init__(self, raw_str: str, offset: int = 0):
        """Initializes a number token from the text of the literal.

        Integral literals (no decimal point and no exponent) keep an :class:`int` value; every other literal keeps a
        :class:`decimal.Decimal` value. Both also carry a :class:`float` value for the fast evaluation mode.

        """
        super().__init__(offset)
        value: Union[int, Decimal]
        if raw_str.isdigit():
            value = int(raw_str)
        else:
            value = Decimal(raw_str)
        object.__setattr__(self, '_raw', raw_str)
        object.__setattr__(self, '_value', value)
        object.__setattr__(self, '_float_value', float(value))

    @property
    def raw_token(self) -> str:
        """Returns the original string parsed from input."""
        return self._raw

    @property
    def value(self) -> Union[int, Decimal]:
        """The exact value of the literal."""
        return self._value

    @property
    def float_value(self) -> float:
        return self._float_value

    def __float__(self):
        return self._float_value

    def __eq__(self, other):
        return isinstance(other, NumberToken) and self._value == other._value

    def __hash__(self):
        return hash(self._value)

    def __str__(self):
        return self._raw

    def __repr__(self):
        return f"{self.__class__.__name__}(raw_str={self._raw!r}, value={self._value!r})"


class VariableToken(Token):
    """A reference to a variable binding."""
    kind = TokenKind.VARIABLE

    __slots__ = ('_name',)

    def __init__(self, name: str, offset: int = 0):
        if not name:
            raise ValueError("Variable names must not be empty")
        super().__init__(offset)
        object.__setattr__(self, '_name', name)

    @property
    def name(self) -> str:
        """The name of the variable."""
        return self._name

    def __eq__(self, other):
        return isinstance(other, VariableToken) and self._name == other._name

    def __hash__(self):
        return hash(self._name)

    def __str__(self):
        return self._name

    def __repr__(self):
        return f"{self.__class__.__name__}({self._name!r})"


class OperatorToken(Token):
    """A token associated with an :class:`shuntyard.operators.Operator`."""
    kind = TokenKind.OPERATOR

    __slots__ = ('_op',)

    def __init__(self, op: Operator, offset: int = 0):
        super().__init__(offset)
        object.__setattr__(self, '_op', op)

    @property
    def op(self) -> Operator:
        """The operator associated with this token."""
        return self._op

    def __eq__(self, other):
        return isinstance(other, OperatorToken) and self._op is other._op

    def __hash__(self):
        return hash(self._op)

    def __str__(self):
        return self._op.symbol

    def __repr__(self):
        return f"{self.__class__.__name__}(op={self._op!r})"


class FunctionToken(Token):
    """A call to a :class:`shuntyard.functions.Function`.

    :attr:`num_arguments` is the number of arguments of this particular call. It always equals the function's arity
    unless the function is variadic, in which case the shunting-yard converter counts the arguments at the call site.

    """
    kind = TokenKind.FUNCTION

    __slots__ = ('_function', '_num_arguments')

    def __init__(self, function: Function, offset: int = 0, num_arguments: int = None):
        super().__init__(offset)
        if num_arguments is None:
            num_arguments = function.num_arguments
        object.__setattr__(self, '_function', function)
        object.__setattr__(self, '_num_arguments', num_arguments)

    @property
    def function(self) -> Function:
        return self._function

    @property
    def num_arguments(self) -> int:
        return self._num_arguments

    def with_arguments(self, num_arguments: int) -> 'FunctionToken':
        """Returns a copy of this token bound to a call with :obj:`num_arguments` arguments."""
        return FunctionToken(self._function, self.offset, num_arguments)

    def __eq__(self, other):
        return isinstance(other, FunctionToken) and self._function is other._function \
            and self._num_arguments == other._num_arguments

    def __hash__(self):
        return hash((self._function, self._num_arguments))

    def __str__(self):
        return self._function.name

    def __repr__(self):
        return f"{self.__class__.__name__}({self._function.name!r}, num_arguments={self._num_arguments})"


class GroupMarker(Token):
    """A parenthesis or an argument separator. These never appear in a postfix program."""
    kind = TokenKind.GROUP_MARKER

    __slots__ = ('_marker',)

    def __init__(self, marker: MarkerKind, offset: int = 0):
        super().__init__(offset)
        object.__setattr__(self, '_marker', marker)

    @property
    def marker(self) -> MarkerKind:
        return self._marker

    def __eq__(self, other):
        return isinstance(other, GroupMarker) and self._marker is other._marker

    def __hash__(self):
        return hash(self._marker)

    def __str__(self):
        return self._marker.value

    def __repr__(self):
        return f"{self.__class__.__name__}({self._marker.name})"
