"""The entry points for turning expression text into an :class:`shuntyard.expression.Expression`."""

import logging
from typing import Iterable, List, Optional, Set

from .errors import NameConflictError
from .expression import Expression
from .functions import BUILTIN_FUNCTIONS, Function
from .operators import BUILTIN_OPERATORS, Operator
from .shunting_yard import infix_to_rpn
from .tokenizer import Tokenizer

log = logging.getLogger(__name__)


def parse(text: str,
          variable_names: Optional[Iterable[str]] = None,
          functions: Iterable[Function] = (),
          operators: Iterable[Operator] = (),
          implicit_multiplication: bool = False) -> Expression:
    """Parses an infix expression into a postfix program.

    Args:
        text: The infix expression.
        variable_names: If provided, the only variable names allowed in :obj:`text` (the default constants are always
            allowed). Otherwise, any identifier that is not a function call is a variable.
        functions: User-defined functions, overriding built-in functions of the same name.
        operators: User-defined operators, overriding built-in operators of the same symbol and operand count.
        implicit_multiplication: Whether juxtaposed operands are multiplied.

    Raises:
        LexicalError: If :obj:`text` contains a malformed literal, an unknown symbol, or an undeclared variable.
        ExpressionSyntaxError: If the parenthesis or argument separators in :obj:`text` are misplaced.

    This is equivalent to::

        Expression(infix_to_rpn(Tokenizer(text, ...)), functions)

    """
    function_registry = BUILTIN_FUNCTIONS.extend(*functions)
    operator_registry = BUILTIN_OPERATORS.extend(*operators)
    tokenizer = Tokenizer(
        text,
        operators=operator_registry,
        functions=function_registry,
        variable_names=variable_names,
        implicit_multiplication=implicit_multiplication
    )
    expression = Expression(infix_to_rpn(tokenizer), function_registry)
    log.debug(f"Parsed {text!r} into {len(expression.tokens)} postfix token(s): {expression!s}")
    return expression


class ExpressionBuilder:
    """A fluent interface for configuring and calling :func:`parse`.

    Example::

        >>> expr = ExpressionBuilder('2x + f(y)') \\
        ...     .function(Function('f', lambda a: a * 10)) \\
        ...     .variables('x', 'y') \\
        ...     .implicit_multiplication() \\
        ...     .build()
        >>> expr.set_variables({'x': 1, 'y': 2}).evaluate()
        22.0

    """
    def __init__(self, text: str):
        if text is None or not text.strip():
            raise ValueError("Expression can not be empty")
        self.text: str = text
        self._functions: List[Function] = []
        self._operators: List[Operator] = []
        self._variable_names: Optional[Set[str]] = None
        self._implicit_multiplication: bool = False

    def function(self, function: Function) -> 'ExpressionBuilder':
        self._functions.append(function)
        return self

    def functions(self, *functions: Function) -> 'ExpressionBuilder':
        self._functions.extend(functions)
        return self

    def operator(self, operator: Operator) -> 'ExpressionBuilder':
        self._operators.append(operator)
        return self

    def operators(self, *operators: Operator) -> 'ExpressionBuilder':
        self._operators.extend(operators)
        return self

    def variable(self, name: str) -> 'ExpressionBuilder':
        """Declares a variable name. Once any name is declared, undeclared identifiers are lexical errors."""
        return self.variables(name)

    def variables(self, *names: str) -> 'ExpressionBuilder':
        if self._variable_names is None:
            self._variable_names = set()
        self._variable_names.update(names)
        return self

    def implicit_multiplication(self, enabled: bool = True) -> 'ExpressionBuilder':
        self._implicit_multiplication = enabled
        return self

    def build(self) -> Expression:
        """Parses the expression.

        Raises:
            NameConflictError: If a declared variable has the name of a built-in or user-defined function.

        """
        if self._variable_names is not None:
            function_names = {f.name for f in self._functions}
            for name in sorted(self._variable_names):
                if name in function_names or BUILTIN_FUNCTIONS.is_reserved(name):
                    raise NameConflictError(name)
        return parse(
            self.text,
            variable_names=self._variable_names,
            functions=self._functions,
            operators=self._operators,
            implicit_multiplication=self._implicit_multiplication
        )
