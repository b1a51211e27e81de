from .version import __version__, VERSION_STRING

from .errors import EvaluationError, ExpressionError, ExpressionSyntaxError, LexicalError, NameConflictError, \
    ParseError
from .expression import DEFAULT_VARIABLES, Expression, ValidationResult
from .functions import BUILTIN_FUNCTIONS, Function, FunctionRegistry
from .numeric import to_float
from .operators import Associativity, BUILTIN_OPERATORS, Operator, OperatorRegistry
from .builder import ExpressionBuilder, parse
from . import builder, errors, expression, functions, numeric, operators, shunting_yard, tokenizer, tokens
