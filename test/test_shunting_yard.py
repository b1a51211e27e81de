from unittest import TestCase

from shuntyard.errors import ExpressionSyntaxError
from shuntyard.shunting_yard import infix_to_rpn
from shuntyard.tokenizer import tokenize
from shuntyard.tokens import TokenKind


def rpn(text, **kwargs):
    return [str(t) for t in infix_to_rpn(tokenize(text, **kwargs))]


class TestShuntingYard(TestCase):
    def test_precedence(self):
        self.assertEqual(['2', '3', '4', '*', '+'], rpn('2 + 3 * 4'))
        self.assertEqual(['2', '3', '*', '4', '+'], rpn('2 * 3 + 4'))

    def test_grouping(self):
        self.assertEqual(['2', '3', '+', '4', '*'], rpn('(2 + 3) * 4'))
        self.assertEqual(['1', '2', '3', '-', '-'], rpn('1 - (2 - 3)'))

    def test_associativity(self):
        self.assertEqual(['1', '2', '-', '3', '-'], rpn('1 - 2 - 3'))
        self.assertEqual(['2', '3', '2', '^', '^'], rpn('2 ^ 3 ^ 2'))

    def test_unary(self):
        self.assertEqual(['3', '-', '4', '+'], rpn('-3 + 4'))
        self.assertEqual(['3', '-', '-'], rpn('--3'))
        self.assertEqual(['2', '1', '-', '^'], rpn('2 ^ -1'))

    def test_functions(self):
        self.assertEqual(['1', '2', '+', 'sin'], rpn('sin(1 + 2)'))
        self.assertEqual(['2', '3', 'pow', '1', '+'], rpn('pow(2, 3) + 1'))
        self.assertEqual(['1', '0', 'sin', 'max'], rpn('max(1, sin(0))'))

    def test_variadic_argument_count(self):
        tokens = list(infix_to_rpn(tokenize('max(3, 5, 1)')))
        self.assertEqual(['3', '5', '1', 'max'], [str(t) for t in tokens])
        self.assertEqual(3, tokens[-1].num_arguments)
        tokens = list(infix_to_rpn(tokenize('min(max(1, 2), 3)')))
        self.assertEqual([2, 2], [t.num_arguments for t in tokens if t.kind is TokenKind.FUNCTION])

    def test_no_group_markers_in_output(self):
        for t in infix_to_rpn(tokenize('max((1), (2 + (3)), sin((4)))')):
            self.assertIsNot(TokenKind.GROUP_MARKER, t.kind)

    def test_unmatched_parenthesis(self):
        with self.assertRaises(ExpressionSyntaxError) as ctx:
            list(infix_to_rpn(tokenize('(1 + 2')))
        self.assertEqual(0, ctx.exception.offset)
        self.assertIn('unmatched parenthesis', str(ctx.exception))
        with self.assertRaises(ExpressionSyntaxError) as ctx:
            list(infix_to_rpn(tokenize('1 + 2)')))
        self.assertEqual(5, ctx.exception.offset)

    def test_misplaced_separator(self):
        with self.assertRaises(ExpressionSyntaxError) as ctx:
            list(infix_to_rpn(tokenize('1, 2')))
        self.assertEqual(1, ctx.exception.offset)
        self.assertIn('misplaced separator', str(ctx.exception))

    def test_empty(self):
        with self.assertRaises(ExpressionSyntaxError):
            list(infix_to_rpn(tokenize('')))
        with self.assertRaises(ExpressionSyntaxError):
            list(infix_to_rpn(tokenize('()')))

    def test_variadic_minimum(self):
        with self.assertRaises(ExpressionSyntaxError):
            list(infix_to_rpn(tokenize('max()')))
        # fixed arity mismatches are left to validation
        self.assertEqual(['sin'], rpn('sin()'))
