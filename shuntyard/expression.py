"""Compiled expressions: a postfix program plus a table of variable bindings.

Example:
    Here is an example of its usage::

        >>> expr = parse('3 * x + max(y, 2)')
        >>> str(expr)
        '3 x * y 2 max +'
        >>> expr.set_variable('x', 2).set_variable('y', 7).evaluate()
        13.0
        >>> expr.set_variables({'x': 1, 'y': 0}).evaluate()
        5.0

Attributes:
    DEFAULT_VARIABLES (Dict[str, float]): The bindings every new :class:`Expression` starts with.

"""

import math
from concurrent.futures import Executor, Future
from numbers import Number
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from .errors import EvaluationError, NameConflictError
from .functions import BUILTIN_FUNCTIONS, FunctionRegistry
from .numeric import EXACT_OPS, FLOAT_OPS, NumericOps, check_number, to_float
from .tokens import Token, TokenKind


DEFAULT_VARIABLES: Dict[str, float] = {
    'pi': math.pi,
    'π': math.pi,
    'φ': 1.61803398874,
    'e': math.e
}


class ValidationResult:
    """The immutable outcome of :meth:`Expression.validate`."""

    __slots__ = ('_is_valid', '_errors')

    SUCCESS: 'ValidationResult'

    def __init__(self, is_valid: bool, errors: Iterable[str] = ()):
        object.__setattr__(self, '_is_valid', is_valid)
        object.__setattr__(self, '_errors', tuple(errors))

    @property
    def is_valid(self) -> bool:
        return self._is_valid

    @property
    def errors(self) -> Tuple[str, ...]:
        """The problems found, in the order they were discovered."""
        return self._errors

    def __setattr__(self, key, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __bool__(self):
        return self._is_valid

    def __eq__(self, other):
        return isinstance(other, ValidationResult) and self._is_valid == other._is_valid \
            and self._errors == other._errors

    def __hash__(self):
        return hash((self._is_valid, self._errors))

    def __repr__(self):
        return f"{self.__class__.__name__}(is_valid={self._is_valid!r}, errors={list(self._errors)!r})"


ValidationResult.SUCCESS = ValidationResult(True)


class Expression:
    """An expression is a sequence of tokens in `Reverse Polish Notation`_ that can be evaluated.

    The token sequence is immutable and may be shared between expressions. The variable bindings are owned by each
    expression; an expression must therefore not be mutated and evaluated from multiple threads at the same time.
    Use :meth:`Expression.copy` to obtain an independent set of bindings over the same program.

    .. _Reverse Polish Notation:
        https://en.wikipedia.org/wiki/Reverse_Polish_notation

    """
    def __init__(self, rpn: Iterable[Token], functions: FunctionRegistry = BUILTIN_FUNCTIONS):
        """Initializes an expression from a postfix program.

        Args:
            rpn: The postfix tokens, as produced by :func:`shuntyard.shunting_yard.infix_to_rpn`.
            functions: The function registry the program was parsed with. Variables may not share a name with any of
                its functions.

        Raises:
            ValueError: If :obj:`rpn` contains parenthesis or argument separators.

        """
        self._tokens: Tuple[Token, ...] = tuple(rpn)
        for t in self._tokens:
            if t.kind is TokenKind.GROUP_MARKER:
                raise ValueError(f"A postfix program cannot contain {t!r}")
        self._functions: FunctionRegistry = functions
        self._variables: Dict[str, Number] = dict(DEFAULT_VARIABLES)

    @property
    def tokens(self) -> Tuple[Token, ...]:
        """The postfix program."""
        return self._tokens

    @property
    def variables(self) -> Mapping[str, Number]:
        """A copy of the current bindings."""
        return dict(self._variables)

    @property
    def variable_names(self) -> Tuple[str, ...]:
        """The names of the variables referenced by the program, in order of first occurrence."""
        return tuple(dict.fromkeys(t.name for t in self._tokens if t.kind is TokenKind.VARIABLE))

    def copy(self) -> 'Expression':
        """Returns an expression sharing this expression's program but with its own copy of the bindings."""
        ret = Expression(self._tokens, self._functions)
        ret._variables = dict(self._variables)
        return ret

    __copy__ = copy

    def _check_name(self, name: str):
        if self._functions.is_reserved(name):
            raise NameConflictError(name)

    def set_variable(self, name: str, value: Number) -> 'Expression':
        """Binds :obj:`name` to :obj:`value`, coerced to a float.

        Raises:
            NameConflictError: If :obj:`name` is the name of a function. The bindings are left unchanged.

        Returns:
            Expression: This expression, for chaining.

        """
        self._check_name(name)
        self._variables[name] = to_float(check_number(value))
        return self

    def set_variable_exact(self, name: str, value: Number) -> 'Expression':
        """Binds :obj:`name` to :obj:`value` without changing its numeric representation.

        This is the binding to use with :meth:`Expression.evaluate_exact`.

        """
        self._check_name(name)
        self._variables[name] = check_number(value)
        return self

    def set_variables(self, variables: Mapping[str, Number]) -> 'Expression':
        """Binds every name in :obj:`variables`, preserving each value's numeric representation.

        All names are checked before any is bound, so a conflicting mapping leaves the bindings unchanged.

        Raises:
            NameConflictError: If any of the names is the name of a function.

        """
        for name, value in variables.items():
            self._check_name(name)
            check_number(value)
        self._variables.update(variables)
        return self

    def validate(self, check_variables_set: bool = True) -> ValidationResult:
        """Checks the program for unbound variables and for an operand count that cannot evaluate to a single value.

        Every problem found is reported, except that the scan stops as soon as an operator or function would run out
        of operands ("too many operators").

        Args:
            check_variables_set: Whether every referenced variable must currently be bound.

        """
        errors: List[str] = []
        if check_variables_set:
            for t in self._tokens:
                if t.kind is TokenKind.VARIABLE and t.name not in self._variables:
                    errors.append(f"The variable {t.name!r} has not been set")

        # Operands increment the count and operators decrement it. It has to stay positive throughout and end at
        # exactly one.
        count = 0
        for t in self._tokens:
            if t.kind is TokenKind.NUMBER or t.kind is TokenKind.VARIABLE:
                count += 1
            elif t.kind is TokenKind.FUNCTION:
                num_arguments = t.num_arguments
                if num_arguments > count:
                    errors.append(f"Not enough arguments for {t.function.name!r}")
                if num_arguments > 1:
                    count -= num_arguments - 1
            elif t.kind is TokenKind.OPERATOR:
                if t.op.operand_count == 2:
                    count -= 1
            if count < 1:
                errors.append("Too many operators")
                return ValidationResult(False, errors)
        if count > 1:
            errors.append("Too many operands")
        if errors:
            return ValidationResult(False, errors)
        return ValidationResult.SUCCESS

    def _run(self, ops: NumericOps) -> Any:
        bindings = ops.prepare(self._variables)
        output: List[Any] = []
        with ops.context():
            for t in self._tokens:
                kind = t.kind
                if kind is TokenKind.NUMBER:
                    output.append(ops.literal(t))
                elif kind is TokenKind.VARIABLE:
                    if t.name not in bindings:
                        raise EvaluationError(f"unbound variable {t.name}")
                    output.append(bindings[t.name])
                elif kind is TokenKind.OPERATOR:
                    op = t.op
                    if len(output) < op.operand_count:
                        raise EvaluationError(f"insufficient operands for {op.symbol}")
                    if op.operand_count == 2:
                        right = output.pop()
                        left = output.pop()
                        output.append(ops.apply_operator(op, left, right))
                    else:
                        output.append(ops.apply_operator(op, output.pop()))
                elif kind is TokenKind.FUNCTION:
                    num_arguments = t.num_arguments
                    if len(output) < num_arguments:
                        raise EvaluationError(f"insufficient arguments for {t.function.name}")
                    args = output[len(output) - num_arguments:]
                    del output[len(output) - num_arguments:]
                    output.append(ops.apply_function(t.function, args))
                else:
                    raise EvaluationError(f"unexpected token {t!r}")
        if len(output) > 1:
            raise EvaluationError("malformed program: extra operands remain")
        elif not output:
            raise EvaluationError("malformed program: empty")
        return output[0]

    def evaluate(self) -> float:
        """Evaluates the program using 64-bit floating point arithmetic.

        Raises:
            EvaluationError: If a variable is unbound, an operator or function lacks operands, the program leaves
                extra operands, or a division by zero occurs.

        """
        return self._run(FLOAT_OPS)

    def evaluate_exact(self) -> Number:
        """Evaluates the program preserving the numeric representation of literals and bindings where possible.

        Integer arithmetic stays integral, :class:`decimal.Decimal` literals and bindings stay decimal, and inexact
        integer division produces a :class:`fractions.Fraction`. Operations without an exact rule produce floats.

        """
        return self._run(EXACT_OPS)

    def evaluate_async(self, executor: Executor) -> 'Future[float]':
        """Submits :meth:`Expression.evaluate` to :obj:`executor`.

        Cancelling the returned future does not interrupt an evaluation that has already started.

        """
        return executor.submit(self.evaluate)

    def evaluate_exact_async(self, executor: Executor) -> 'Future[Number]':
        """Submits :meth:`Expression.evaluate_exact` to :obj:`executor`."""
        return executor.submit(self.evaluate_exact)

    def __str__(self):
        return ' '.join(str(t) for t in self._tokens)

    def __repr__(self):
        return f"{self.__class__.__name__}(rpn={self._tokens!r})"
