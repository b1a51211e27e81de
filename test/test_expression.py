import math
from unittest import TestCase

from shuntyard import parse
from shuntyard.errors import NameConflictError
from shuntyard.expression import Expression, ValidationResult
from shuntyard.functions import BUILTIN_FUNCTIONS, Function
from shuntyard.tokens import FunctionToken, GroupMarker, MarkerKind, NumberToken


class TestValidation(TestCase):
    def test_success(self):
        result = parse('2 + 3 * sin(x)').set_variable('x', 1).validate()
        self.assertIs(ValidationResult.SUCCESS, result)
        self.assertTrue(result)
        self.assertEqual((), result.errors)

    def test_trailing_operator(self):
        result = parse('1 + ').validate(False)
        self.assertFalse(result.is_valid)
        self.assertEqual(('Too many operators',), result.errors)

    def test_missing_variable(self):
        result = parse('x + 1').validate(True)
        self.assertFalse(result.is_valid)
        self.assertEqual(("The variable 'x' has not been set",), result.errors)
        self.assertTrue(parse('x + 1').validate(False))

    def test_errors_accumulate(self):
        result = parse('x + y +').validate()
        self.assertEqual((
            "The variable 'x' has not been set",
            "The variable 'y' has not been set",
            'Too many operators'
        ), result.errors)

    def test_too_many_operands_accumulates(self):
        result = parse('sin(x, 2)').validate()
        self.assertEqual(("The variable 'x' has not been set", 'Too many operands'), result.errors)

    def test_too_many_operands(self):
        result = parse('sin(1, 2)').validate()
        self.assertEqual(('Too many operands',), result.errors)
        result = Expression([NumberToken('2'), NumberToken('3')]).validate()
        self.assertEqual(('Too many operands',), result.errors)

    def test_not_enough_arguments(self):
        expr = Expression([NumberToken('1'), FunctionToken(BUILTIN_FUNCTIONS['pow'])])
        self.assertEqual(("Not enough arguments for 'pow'", 'Too many operators'), expr.validate().errors)

    def test_default_variables(self):
        self.assertTrue(parse('pi + π + φ + e').validate())


class TestBindings(TestCase):
    def test_defaults(self):
        self.assertEqual(math.pi, parse('pi').evaluate())
        self.assertEqual(math.pi, parse('π').evaluate())
        self.assertEqual(1.61803398874, parse('φ').evaluate())
        self.assertEqual(math.e, parse('e').evaluate())

    def test_chaining(self):
        expr = parse('x * y')
        self.assertIs(expr, expr.set_variable('x', 2).set_variable('y', 3))
        self.assertIs(expr, expr.set_variables({'x': 4}))
        self.assertEqual(12.0, expr.evaluate())

    def test_set_variable_coerces_to_float(self):
        expr = parse('x').set_variable('x', 3)
        self.assertIsInstance(expr.variables['x'], float)

    def test_name_conflict(self):
        expr = parse('x + 1').set_variable('x', 1)
        before = expr.variables
        with self.assertRaises(NameConflictError):
            expr.set_variable('sin', 1)
        with self.assertRaises(NameConflictError):
            expr.set_variable_exact('cos', 1)
        self.assertEqual(before, expr.variables)

    def test_set_variables_is_atomic(self):
        expr = parse('x + y')
        with self.assertRaises(NameConflictError):
            expr.set_variables({'x': 1, 'cos': 2})
        self.assertNotIn('x', expr.variables)

    def test_user_function_conflict(self):
        expr = parse('f(x)', functions=[Function('f', lambda a: a)])
        with self.assertRaises(NameConflictError):
            expr.set_variable('f', 1)
        # a function registered for a different expression is not reserved here
        parse('f + 1').set_variable('f', 1)

    def test_non_numeric_value(self):
        with self.assertRaises(TypeError):
            parse('x').set_variable('x', 'one')

    def test_copy(self):
        original = parse('x + 1').set_variable('x', 1)
        duplicate = original.copy()
        duplicate.set_variable('x', 10)
        self.assertIs(original.tokens, duplicate.tokens)
        self.assertEqual(2.0, original.evaluate())
        self.assertEqual(11.0, duplicate.evaluate())

    def test_variable_names(self):
        self.assertEqual(('x', 'y'), parse('x + y * x').variable_names)

    def test_group_markers_rejected(self):
        with self.assertRaises(ValueError):
            Expression([NumberToken('1'), GroupMarker(MarkerKind.OPEN_PAREN)])

    def test_str(self):
        self.assertEqual('3 x * y 2 max +', str(parse('3 * x + max(y, 2)')))
