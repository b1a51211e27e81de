import os
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO
from tempfile import TemporaryDirectory
from unittest import TestCase

from shuntyard.__main__ import main


def run(*args):
    stdout = StringIO()
    stderr = StringIO()
    with redirect_stdout(stdout), redirect_stderr(stderr):
        ret = main(['shuntyard', '--no-color', '--no-status'] + list(args))
    return ret, stdout.getvalue(), stderr.getvalue()


class TestMain(TestCase):
    def test_evaluate(self):
        ret, out, _ = run('2 + 3 * 4')
        self.assertEqual(0, ret)
        self.assertEqual('14.0\n', out)

    def test_variables(self):
        ret, out, _ = run('3 * x + y', '-D', 'x=2', '--var', 'y=0.5')
        self.assertEqual(0, ret)
        self.assertEqual('6.5\n', out)

    def test_exact(self):
        self.assertEqual('1/3\n', run('--exact', '1 / 3')[1])
        self.assertEqual('-inf\n', run('--exact', 'ceil(log(0))')[1])

    def test_evaluation_error(self):
        ret, out, err = run('1 / 0')
        self.assertEqual(1, ret)
        self.assertEqual('', out)
        self.assertIn('division by zero', err)
        self.assertNotIn('Error loading bindings', err)

    def test_postfix(self):
        self.assertEqual('2 3 4 * +\n14.0\n', run('--postfix', '2 + 3 * 4')[1])

    def test_parse_error(self):
        ret, out, err = run('(1 + 2')
        self.assertEqual(1, ret)
        self.assertEqual('', out)
        self.assertIn('unmatched parenthesis at offset 0', err)

    def test_validate(self):
        ret, _, err = run('--validate', 'x + 1')
        self.assertEqual(1, ret)
        self.assertIn("The variable 'x' has not been set", err)

    def test_bindings_file(self):
        with TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'rows.yml')
            with open(path, 'w') as f:
                f.write('- x: 1\n- x: 2\n- x: 3\n')
            ret, out, _ = run('x ^ 2 + k', '-D', 'k=1', '--bindings', path)
        self.assertEqual(0, ret)
        self.assertEqual('2.0\n5.0\n10.0\n', out)

    def test_missing_bindings_file(self):
        ret, _, err = run('x', '--bindings', os.path.join('does', 'not', 'exist.yml'))
        self.assertEqual(1, ret)
        self.assertIn('Error loading bindings', err)
