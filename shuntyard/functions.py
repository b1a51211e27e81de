"""Function definitions and the function registry.

Attributes:
    BUILTIN_FUNCTIONS (FunctionRegistry): The registry of built-in functions. It is constructed once, at import time,
        and is never mutated; user-defined functions are added with :meth:`FunctionRegistry.extend`, which returns a
        new registry.

"""

import logging
import math
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, Optional

import numpy as np

from .numeric import check_divisor, exact_power, promote

log = logging.getLogger(__name__)


def is_identifier_start(c: str) -> bool:
    return c.isalpha() or c == '_'


def is_identifier_part(c: str) -> bool:
    return c.isalnum() or c == '_'


def is_valid_name(name: str) -> bool:
    """Returns whether :obj:`name` can be used as a function or variable name."""
    return bool(name) and is_identifier_start(name[0]) and all(is_identifier_part(c) for c in name[1:])


class Function:
    """A named function.

    A function either takes a fixed number of arguments, or is *variadic*, in which case :attr:`num_arguments` is the
    minimum number of arguments and the actual number is counted at each call site.

    """
    def __init__(self,
                 name: str,
                 execute: Callable[..., Any],
                 num_arguments: int = 1,
                 variadic: bool = False,
                 execute_exact: Optional[Callable[..., Any]] = None):
        """Initializes a function.

        Args:
            name: The name used to call the function.
            execute: Called with the arguments, in order, as floats when the function is evaluated in fast mode.
            num_arguments: The fixed number of arguments, or the minimum number of arguments if :obj:`variadic`.
            variadic: Whether the function accepts any number of arguments of at least :obj:`num_arguments`.
            execute_exact: An optional type-preserving rule used by exact evaluation when every argument is
                exact. Otherwise, exact evaluation coerces the arguments to floats and calls :obj:`execute`.

        Raises:
            ValueError: If :obj:`name` is not a valid identifier.
            ValueError: If :obj:`num_arguments` is less than one.

        """
        if not is_valid_name(name):
            raise ValueError(f"Invalid function name {name!r}")
        if num_arguments < 1:
            raise ValueError(f"Function {name!r} must take at least one argument")
        self._name: str = name
        self._execute: Callable[..., Any] = execute
        self._num_arguments: int = num_arguments
        self._variadic: bool = variadic
        self._execute_exact: Optional[Callable[..., Any]] = execute_exact

    @property
    def name(self) -> str:
        return self._name

    @property
    def execute(self) -> Callable[..., Any]:
        return self._execute

    @property
    def execute_exact(self) -> Optional[Callable[..., Any]]:
        return self._execute_exact

    @property
    def num_arguments(self) -> int:
        return self._num_arguments

    @property
    def variadic(self) -> bool:
        return self._variadic

    def accepts(self, num_arguments: int) -> bool:
        """Returns whether a call with :obj:`num_arguments` arguments is well formed."""
        if self._variadic:
            return num_arguments >= self._num_arguments
        return num_arguments == self._num_arguments

    def __repr__(self):
        if self._variadic:
            arity = f"{self._num_arguments}+"
        else:
            arity = str(self._num_arguments)
        return f"{self.__class__.__name__}({self._name!r}, num_arguments={arity})"


class FunctionRegistry(Mapping[str, Function]):
    """An immutable mapping from names to :class:`Function` objects."""

    def __init__(self, functions: Iterable[Function] = ()):
        self._functions: Dict[str, Function] = {f.name: f for f in functions}

    def resolve(self, name: str) -> Optional[Function]:
        return self._functions.get(name, None)

    def is_reserved(self, name: str) -> bool:
        """Returns whether :obj:`name` is taken by a function and therefore cannot name a variable."""
        return name in self._functions

    def extend(self, *functions: Function) -> 'FunctionRegistry':
        """Returns a new registry with :obj:`functions` added, overriding existing functions of the same name."""
        if not functions:
            return self
        for f in functions:
            if f.name in self._functions:
                log.debug(f"Overriding function {f.name!r}")
        return FunctionRegistry(list(self._functions.values()) + list(functions))

    def __getitem__(self, name: str) -> Function:
        return self._functions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def __repr__(self):
        return f"{self.__class__.__name__}({list(self._functions.values())!r})"


def _reciprocal(func: Callable[[float], float], name: str) -> Callable[[float], float]:
    def wrapped(x: float) -> float:
        d = func(x)
        check_divisor(d)
        return 1.0 / d
    wrapped.__name__ = name
    return wrapped


def _coth(x: float) -> float:
    check_divisor(np.sinh(x))
    return np.cosh(x) / np.sinh(x)


def _logb(base: float, x: float) -> float:
    return np.log(x) / np.log(base)


def _exact_signum(x) -> int:
    return (x > 0) - (x < 0)


def _exact_max(*args):
    return max(promote(*args))


def _exact_min(*args):
    return min(promote(*args))


def _exact_sum(*args):
    return sum(promote(*args))


BUILTIN_FUNCTIONS: FunctionRegistry = FunctionRegistry((
    Function('sin', np.sin),
    Function('cos', np.cos),
    Function('tan', np.tan),
    Function('cot', _reciprocal(np.tan, 'cot')),
    Function('csc', _reciprocal(np.sin, 'csc')),
    Function('sec', _reciprocal(np.cos, 'sec')),
    Function('asin', np.arcsin),
    Function('acos', np.arccos),
    Function('atan', np.arctan),
    Function('sinh', np.sinh),
    Function('cosh', np.cosh),
    Function('tanh', np.tanh),
    Function('csch', _reciprocal(np.sinh, 'csch')),
    Function('sech', _reciprocal(np.cosh, 'sech')),
    Function('coth', _coth),
    Function('log', np.log),
    Function('log2', np.log2),
    Function('log10', np.log10),
    Function('log1p', np.log1p),
    Function('logb', _logb, num_arguments=2),
    Function('exp', np.exp),
    Function('expm1', np.expm1),
    Function('sqrt', np.sqrt),
    Function('cbrt', np.cbrt),
    Function('pow', np.power, num_arguments=2, execute_exact=exact_power),
    Function('abs', np.abs, execute_exact=abs),
    Function('ceil', np.ceil, execute_exact=math.ceil),
    Function('floor', np.floor, execute_exact=math.floor),
    Function('signum', np.sign, execute_exact=_exact_signum),
    Function('toradian', np.radians),
    Function('todegree', np.degrees),
    Function('max', max, variadic=True, execute_exact=_exact_max),
    Function('min', min, variadic=True, execute_exact=_exact_min),
    Function('sum', lambda *args: np.sum(args), variadic=True, execute_exact=_exact_sum),
))
