from decimal import Decimal
from unittest import TestCase

from shuntyard.errors import LexicalError
from shuntyard.operators import ADDITION, BUILTIN_OPERATORS, Operator, SUBTRACTION, UNARY_MINUS, UNARY_PLUS
from shuntyard.tokenizer import Tokenizer, tokenize
from shuntyard.tokens import MarkerKind, TokenKind


FACTORIAL = Operator('!', 10001, lambda a: a, operand_count=1)


class TestTokenizer(TestCase):
    def test_token_kinds(self):
        tokens = list(tokenize('3 + sin(x)'))
        self.assertEqual([
            TokenKind.NUMBER, TokenKind.OPERATOR, TokenKind.FUNCTION, TokenKind.GROUP_MARKER, TokenKind.VARIABLE,
            TokenKind.GROUP_MARKER
        ], [t.kind for t in tokens])
        self.assertIs(MarkerKind.OPEN_PAREN, tokens[3].marker)
        self.assertIs(MarkerKind.CLOSE_PAREN, tokens[5].marker)
        self.assertEqual([0, 2, 4, 7, 8, 9], [t.offset for t in tokens])

    def test_unary_detection(self):
        self.assertIs(UNARY_MINUS, list(tokenize('-3'))[0].op)
        self.assertIs(UNARY_PLUS, list(tokenize('+3'))[0].op)
        self.assertIs(UNARY_MINUS, list(tokenize('2 * -3'))[2].op)
        self.assertIs(UNARY_MINUS, list(tokenize('2 * (-3)'))[3].op)
        self.assertIs(UNARY_MINUS, list(tokenize('max(1, -2)'))[4].op)
        self.assertIs(SUBTRACTION, list(tokenize('2 - 3'))[1].op)
        self.assertIs(SUBTRACTION, list(tokenize('(2) - 3'))[3].op)
        self.assertIs(ADDITION, list(tokenize('x + 3'))[1].op)

    def test_postfix_operator(self):
        tokens = list(tokenize('3! + 1', operators=BUILTIN_OPERATORS.extend(FACTORIAL)))
        self.assertIs(FACTORIAL, tokens[1].op)
        self.assertIs(ADDITION, tokens[2].op)

    def test_operator_without_unary_form(self):
        with self.assertRaises(LexicalError) as ctx:
            list(tokenize('*3'))
        self.assertEqual(0, ctx.exception.offset)

    def test_longest_match(self):
        operators = BUILTIN_OPERATORS.extend(
            Operator('<', 100, lambda a, b: float(a < b)),
            Operator('<=', 100, lambda a, b: float(a <= b))
        )
        tokens = list(tokenize('1 <= 2', operators=operators))
        self.assertEqual(3, len(tokens))
        self.assertEqual('<=', tokens[1].op.symbol)

    def test_numbers(self):
        token = list(tokenize('1.5e-3'))[0]
        self.assertEqual(Decimal('0.0015'), token.value)
        self.assertEqual(0.0015, token.float_value)
        self.assertEqual(0.5, list(tokenize('.5'))[0].float_value)
        self.assertEqual(42, list(tokenize('42'))[0].value)
        self.assertIsInstance(list(tokenize('42'))[0].value, int)
        self.assertEqual(200.0, list(tokenize('2E2'))[0].float_value)

    def test_malformed_numbers(self):
        with self.assertRaises(LexicalError) as ctx:
            list(tokenize('1.2.3'))
        self.assertEqual(3, ctx.exception.offset)
        with self.assertRaises(LexicalError) as ctx:
            list(tokenize('2e+'))
        self.assertEqual(1, ctx.exception.offset)
        with self.assertRaises(LexicalError):
            list(tokenize('1e5.2'))

    def test_unexpected_character(self):
        with self.assertRaises(LexicalError) as ctx:
            list(tokenize('2 @ 3'))
        self.assertEqual(2, ctx.exception.offset)
        self.assertIn('at offset 2', str(ctx.exception))

    def test_identifiers(self):
        tokens = list(tokenize('π * größe_2'))
        self.assertEqual('π', tokens[0].name)
        self.assertEqual('größe_2', tokens[2].name)
        self.assertIs(TokenKind.VARIABLE, list(tokenize('sin'))[0].kind)
        self.assertIs(TokenKind.FUNCTION, list(tokenize('sin (0)'))[0].kind)
        self.assertIs(TokenKind.VARIABLE, list(tokenize('foo(0)'))[0].kind)

    def test_declared_variables(self):
        self.assertEqual(3, len(list(tokenize('x + pi', variable_names=['x']))))
        with self.assertRaises(LexicalError) as ctx:
            list(tokenize('x + y', variable_names=['x']))
        self.assertEqual(4, ctx.exception.offset)

    def test_implicit_multiplication(self):
        self.assertEqual(['2', 'x'], [str(t) for t in tokenize('2x')])
        self.assertEqual(
            ['2', '*', 'x', '*', '(', '1', '+', 'y', ')'],
            [str(t) for t in tokenize('2x(1 + y)', implicit_multiplication=True)]
        )
        self.assertEqual(
            ['(', 'a', ')', '*', 'sin', '(', 'b', ')'],
            [str(t) for t in tokenize('(a) sin(b)', implicit_multiplication=True)]
        )

    def test_has_next(self):
        tokenizer = Tokenizer('1 + x')
        self.assertTrue(tokenizer.has_next())
        self.assertEqual('1', str(tokenizer.next()))
        self.assertTrue(tokenizer.has_next())
        self.assertEqual(['+', 'x'], [str(t) for t in tokenizer])
        self.assertFalse(tokenizer.has_next())
        self.assertIsNone(tokenizer.next())
        self.assertFalse(Tokenizer('   ').has_next())
