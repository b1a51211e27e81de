"""Numeric representations used by the postfix evaluator.

The evaluator in :mod:`shuntyard.expression` walks a postfix program exactly once per call, and it is parameterized by
a :class:`NumericOps` implementation that decides how literals, bindings, operators, and functions are represented
and applied:

* :data:`FLOAT_OPS` works purely on 64-bit :class:`float` values. Bindings are coerced with :func:`to_float` once at
  the start of an evaluation, and IEEE special values (``inf`` and ``nan``) are produced instead of Python exceptions.
* :data:`EXACT_OPS` keeps every value in the representation it was stored in (:class:`int`,
  :class:`decimal.Decimal`, :class:`fractions.Fraction`, or :class:`float`) and defers to the "exact" rules of the
  operators and functions when they provide one.

"""

import math
from decimal import Decimal, Overflow
from fractions import Fraction
from numbers import Number, Real
from typing import Any, Callable, ContextManager, Dict, Mapping, Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np
from typing_extensions import Protocol

from .errors import EvaluationError

if TYPE_CHECKING:
    from .functions import Function
    from .operators import Operator
    from .tokens import NumberToken


def to_float(value: Number) -> float:
    """Converts a stored numeric value to a 64-bit floating point value.

    Integers and fractions too large for a float become infinities of the same sign.

    """
    if isinstance(value, float):
        return value
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def is_exact(value: Any) -> bool:
    """Returns whether :obj:`value` is one of the representations kept intact by :data:`EXACT_OPS`."""
    if isinstance(value, Decimal):
        return value.is_finite()
    return isinstance(value, (int, Fraction)) and not isinstance(value, bool)


def promote(*values: Number) -> Tuple[Number, ...]:
    """Converts a group of operands to a common representation.

    Integers combine with every other representation. If any operand is inexact, all operands become floats. A mix
    of :class:`Decimal` and :class:`Fraction` (which Python refuses to combine) is resolved in favor of
    :class:`Decimal`.

    """
    if not all(is_exact(v) for v in values):
        return tuple(to_float(v) for v in values)
    has_decimal = any(isinstance(v, Decimal) for v in values)
    if has_decimal and any(isinstance(v, Fraction) for v in values):
        return tuple(
            Decimal(v.numerator) / Decimal(v.denominator) if isinstance(v, Fraction) else v for v in values
        )
    return values


def normalize(value: Number) -> Number:
    """Collapses a :class:`Fraction` with a denominator of one into an :class:`int`."""
    if isinstance(value, Fraction) and value.denominator == 1:
        return value.numerator
    return value


def check_divisor(divisor: Number):
    if divisor == 0:
        raise EvaluationError("division by zero")


def exact_divide(a: Number, b: Number) -> Number:
    check_divisor(b)
    a, b = promote(a, b)
    if isinstance(a, int) and isinstance(b, int):
        if a % b == 0:
            return a // b
        return Fraction(a, b)
    return normalize(a / b)


def exact_remainder(a: Number, b: Number) -> Number:
    """Remainder whose sign follows the dividend, matching :func:`math.fmod` for floats."""
    check_divisor(b)
    a, b = promote(a, b)
    r = abs(a) % abs(b)
    if a < 0:
        return -r
    return r


MAX_EXACT_POWER_BITS: int = 1 << 20
"""Exact powers whose result would need more bits than this are computed as floats instead."""


def _power_bits(base: Number, exponent: int) -> int:
    if isinstance(base, Fraction):
        size = max(abs(base.numerator).bit_length(), base.denominator.bit_length())
    else:
        size = abs(base).bit_length()
    return (size - 1) * abs(exponent)


def exact_power(base: Number, exponent: Number) -> Number:
    base, exponent = promote(base, exponent)
    if isinstance(exponent, int) and is_exact(base) and (exponent >= 0 or base != 0):
        if isinstance(base, Decimal):
            return base ** exponent
        elif _power_bits(base, exponent) <= MAX_EXACT_POWER_BITS:
            if exponent >= 0:
                return base ** exponent
            return normalize(Fraction(base) ** exponent)
    return float(np.power(to_float(base), to_float(exponent)))


class NumericOps(Protocol):
    """The operations the evaluator needs from a numeric representation."""

    def literal(self, token: 'NumberToken') -> Any:
        ...

    def prepare(self, variables: Mapping[str, Number]) -> Dict[str, Any]:
        ...

    def apply_operator(self, operator: 'Operator', *args) -> Any:
        ...

    def apply_function(self, function: 'Function', args: Sequence[Any]) -> Any:
        ...

    def context(self) -> ContextManager:
        ...


class FloatOps:
    """Fast mode: every value is a :class:`float`."""

    def literal(self, token: 'NumberToken') -> float:
        return token.float_value

    def prepare(self, variables: Mapping[str, Number]) -> Dict[str, float]:
        return {name: to_float(value) for name, value in variables.items()}

    def apply_operator(self, operator: 'Operator', *args) -> float:
        return float(operator.execute(*args))

    def apply_function(self, function: 'Function', args: Sequence[float]) -> float:
        return float(function.execute(*args))

    def context(self) -> ContextManager:
        return np.errstate(all='ignore')

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class ExactOps:
    """Exact mode: values keep their stored representation wherever an exact rule exists.

    An exact rule only sees exact arguments. If any argument is a float (or a non-finite :class:`Decimal`), or if a
    :class:`Decimal` result overflows, the float rule is applied instead.

    """

    def literal(self, token: 'NumberToken') -> Number:
        return token.value

    def prepare(self, variables: Mapping[str, Number]) -> Dict[str, Number]:
        return dict(variables)

    @staticmethod
    def _apply(execute: Callable[..., Any], execute_exact: Optional[Callable[..., Any]], args: Sequence[Number]):
        if execute_exact is not None and all(is_exact(a) for a in args):
            try:
                return execute_exact(*args)
            except Overflow:
                pass
        return float(execute(*(to_float(a) for a in args)))

    def apply_operator(self, operator: 'Operator', *args) -> Number:
        return self._apply(operator.execute, operator.execute_exact, args)

    def apply_function(self, function: 'Function', args: Sequence[Number]) -> Number:
        return self._apply(function.execute, function.execute_exact, args)

    def context(self) -> ContextManager:
        return np.errstate(all='ignore')

    def __repr__(self):
        return f"{self.__class__.__name__}()"


FLOAT_OPS: NumericOps = FloatOps()
EXACT_OPS: NumericOps = ExactOps()


def check_number(value: Any) -> Number:
    """Ensures that :obj:`value` can be bound to a variable."""
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise TypeError(f"Expected a real number but got {value!r}")
    return value


def parse_number(text: str) -> Number:
    """Parses a number from text, keeping integers integral and other literals decimal.

    Raises:
        ValueError: If :obj:`text` is not a number.

    """
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return Decimal(text)
    except ArithmeticError:
        raise ValueError(f"Invalid number: {text!r}") from None
