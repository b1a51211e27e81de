"""Operator definitions and the operator registry.

Attributes:
    ALLOWED_OPERATOR_CHARS (FrozenSet[str]): The characters from which operator symbols may be composed.

    BUILTIN_OPERATORS (OperatorRegistry): The registry of built-in operators. It is constructed once, at import time,
        and is never mutated; user-defined operators are added with :meth:`OperatorRegistry.extend`, which returns a
        new registry.

"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterator, Mapping, Optional, Tuple

import numpy as np

from .numeric import check_divisor, exact_divide, exact_power, exact_remainder, promote

log = logging.getLogger(__name__)


ALLOWED_OPERATOR_CHARS: FrozenSet[str] = frozenset('+-*/%^!#§$&;:~<>|=÷¬£¥¢€‰√')

PRECEDENCE_ADDITION = 500
PRECEDENCE_SUBTRACTION = PRECEDENCE_ADDITION
PRECEDENCE_MULTIPLICATION = 1000
PRECEDENCE_DIVISION = PRECEDENCE_MULTIPLICATION
PRECEDENCE_MODULO = PRECEDENCE_DIVISION
PRECEDENCE_POWER = 10000
PRECEDENCE_UNARY_MINUS = 20000
PRECEDENCE_UNARY_PLUS = PRECEDENCE_UNARY_MINUS


class Associativity(Enum):
    LEFT = 'left'
    RIGHT = 'right'


class Operator:
    """A unary or binary operator.

    Operators are immutable values. Two operators may share a symbol as long as they differ in
    :attr:`operand_count` (*e.g.*, unary and binary minus).

    """
    def __init__(self,
                 symbol: str,
                 precedence: int,
                 execute: Callable[..., Any],
                 operand_count: int = 2,
                 associativity: Associativity = Associativity.LEFT,
                 execute_exact: Optional[Callable[..., Any]] = None):
        """Initializes an operator.

        Args:
            symbol: The symbol used to recognize the operator in the input.
            precedence: Operators with a higher precedence bind more tightly.
            execute: Called with :attr:`operand_count` floats when the operator is executed in fast mode.
            operand_count: Either 1 or 2.
            associativity: Tie-breaker between operators of equal precedence.
            execute_exact: An optional type-preserving rule used by exact evaluation when every operand is
                exact. Otherwise, exact evaluation coerces the operands to floats and calls :obj:`execute`.

        Raises:
            ValueError: If the symbol is empty or contains characters outside of :data:`ALLOWED_OPERATOR_CHARS`.
            ValueError: If :obj:`operand_count` is neither 1 nor 2.

        """
        if not symbol or any(c not in ALLOWED_OPERATOR_CHARS for c in symbol):
            raise ValueError(f"Invalid operator symbol {symbol!r}")
        if operand_count not in (1, 2):
            raise ValueError(f"Operator {symbol!r} must take one or two operands, not {operand_count}")
        self._symbol: str = symbol
        self._precedence: int = precedence
        self._execute: Callable[..., Any] = execute
        self._operand_count: int = operand_count
        self._associativity: Associativity = associativity
        self._execute_exact: Optional[Callable[..., Any]] = execute_exact

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def precedence(self) -> int:
        """The operator's precedence."""
        return self._precedence

    @property
    def execute(self) -> Callable[..., Any]:
        """The fast-mode rule."""
        return self._execute

    @property
    def execute_exact(self) -> Optional[Callable[..., Any]]:
        """The exact-mode rule, or :const:`None` if the operator has none."""
        return self._execute_exact

    @property
    def operand_count(self) -> int:
        """The number of operands consumed by the operator."""
        return self._operand_count

    @property
    def associativity(self) -> Associativity:
        return self._associativity

    @property
    def left_associative(self) -> bool:
        """Whether the operator is left-associative."""
        return self._associativity is Associativity.LEFT

    @property
    def is_unary(self) -> bool:
        return self._operand_count == 1

    def __repr__(self):
        return f"{self.__class__.__name__}(symbol={self._symbol!r}, precedence={self._precedence}, " \
               f"operand_count={self._operand_count}, associativity={self._associativity.name})"


class OperatorRegistry(Mapping[Tuple[str, int], Operator]):
    """An immutable mapping from ``(symbol, operand_count)`` to :class:`Operator`."""

    def __init__(self, operators=()):
        self._operators: Dict[Tuple[str, int], Operator] = {}
        for op in operators:
            self._operators[(op.symbol, op.operand_count)] = op
        self._symbols: Tuple[str, ...] = tuple(sorted(
            {symbol for symbol, _ in self._operators},
            key=lambda s: (-len(s), s)
        ))

    @property
    def symbols(self) -> Tuple[str, ...]:
        """All registered symbols, longest first."""
        return self._symbols

    def resolve(self, symbol: str, operand_count: int) -> Optional[Operator]:
        """Returns the operator for :obj:`symbol` taking :obj:`operand_count` operands, or :const:`None`."""
        return self._operators.get((symbol, operand_count), None)

    def match(self, text: str, offset: int) -> Optional[str]:
        """Returns the longest registered symbol that occurs in :obj:`text` at :obj:`offset`, if any."""
        for symbol in self._symbols:
            if text.startswith(symbol, offset):
                return symbol
        return None

    def extend(self, *operators: Operator) -> 'OperatorRegistry':
        """Returns a new registry with :obj:`operators` added, overriding existing operators of the same key."""
        if not operators:
            return self
        for op in operators:
            if (op.symbol, op.operand_count) in self._operators:
                log.debug(f"Overriding operator {op.symbol!r} taking {op.operand_count} operand(s)")
        return OperatorRegistry(list(self._operators.values()) + list(operators))

    def __getitem__(self, key: Tuple[str, int]) -> Operator:
        return self._operators[key]

    def __iter__(self) -> Iterator[Tuple[str, int]]:
        return iter(self._operators)

    def __len__(self) -> int:
        return len(self._operators)

    def __repr__(self):
        return f"{self.__class__.__name__}({list(self._operators.values())!r})"


def _divide(a: float, b: float) -> float:
    check_divisor(b)
    return a / b


def _modulo(a: float, b: float) -> float:
    check_divisor(b)
    return np.fmod(a, b)


def _exact_add(a, b):
    a, b = promote(a, b)
    return a + b


def _exact_subtract(a, b):
    a, b = promote(a, b)
    return a - b


def _exact_multiply(a, b):
    a, b = promote(a, b)
    return a * b


ADDITION = Operator('+', PRECEDENCE_ADDITION, lambda a, b: a + b, execute_exact=_exact_add)
SUBTRACTION = Operator('-', PRECEDENCE_SUBTRACTION, lambda a, b: a - b, execute_exact=_exact_subtract)
MULTIPLICATION = Operator('*', PRECEDENCE_MULTIPLICATION, lambda a, b: a * b, execute_exact=_exact_multiply)
DIVISION = Operator('/', PRECEDENCE_DIVISION, _divide, execute_exact=exact_divide)
MODULO = Operator('%', PRECEDENCE_MODULO, _modulo, execute_exact=exact_remainder)
POWER = Operator('^', PRECEDENCE_POWER, np.power, associativity=Associativity.RIGHT, execute_exact=exact_power)
UNARY_MINUS = Operator('-', PRECEDENCE_UNARY_MINUS, lambda a: -a, operand_count=1,
                       associativity=Associativity.RIGHT, execute_exact=lambda a: -a)
UNARY_PLUS = Operator('+', PRECEDENCE_UNARY_PLUS, lambda a: a, operand_count=1,
                      associativity=Associativity.RIGHT, execute_exact=lambda a: a)

BUILTIN_OPERATORS: OperatorRegistry = OperatorRegistry((
    ADDITION, SUBTRACTION, MULTIPLICATION, DIVISION, MODULO, POWER, UNARY_MINUS, UNARY_PLUS
))
