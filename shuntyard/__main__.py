import argparse
import logging
import sys
from typing import Dict, List, Tuple

from yaml import YAMLError

from . import version
from .bindings import Bindings, FORMATS_BY_EXTENSION, LOADERS, load_bindings
from .builder import ExpressionBuilder
from .errors import ExpressionError
from .numeric import parse_number
from .printer import Printer


log = logging.getLogger('shuntyard')


def parse_assignment(assignment: str) -> Tuple[str, object]:
    """Parses a ``NAME=VALUE`` command line binding."""
    name, sep, value = assignment.partition('=')
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE but got {assignment!r}")
    try:
        return name.strip(), parse_number(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Parse an infix mathematical expression once and evaluate it for one or more sets of variable '
                    'bindings.'
    )
    parser.add_argument('EXPRESSION', type=str, nargs='?', default=None, help='the infix expression to evaluate')
    parser.add_argument('--var', '-D', type=parse_assignment, action='append', default=[], metavar='NAME=VALUE',
                        help='bind a variable; may be given multiple times')
    parser.add_argument('--bindings', '-b', type=str, default=None, metavar='PATH',
                        help='a YAML, JSON, JSON5, or CSV file holding one mapping of variable names to values, or a '
                             'list of them; the expression is evaluated once for each mapping, on top of any `--var` '
                             'bindings')
    parser.add_argument('--bindings-format', choices=sorted(LOADERS.keys()), default=None,
                        help='the format of the bindings file (default is to infer it from its extension: '
                             f'{", ".join(sorted(FORMATS_BY_EXTENSION))})')
    parser.add_argument('--declare', '-d', type=str, action='append', default=None, metavar='NAME',
                        help='declare a variable name; once any name is declared, undeclared identifiers are errors')
    parser.add_argument('--implicit-multiplication', '-i', action='store_true',
                        help='treat juxtaposed operands like `2x` or `(a)(b)` as multiplication')
    parser.add_argument('--exact', '-x', action='store_true',
                        help='preserve integer, decimal, and fractional values instead of using floating point')
    parser.add_argument('--validate', action='store_true',
                        help='validate the expression against each set of bindings before evaluating it')
    parser.add_argument('--postfix', '-p', action='store_true', help='print the compiled postfix program')
    formatting = parser.add_argument_group(title='output formatting')
    color_group = formatting.add_mutually_exclusive_group()
    color_group.add_argument(
        '--color', '-c',
        action='store_true',
        default=None,
        help='force ANSI color output; this is turned on by default only if run from a TTY'
    )
    color_group.add_argument(
        '--no-color',
        action='store_true',
        default=None,
        help='do not use ANSI color in the output'
    )
    parser.add_argument(
        '--no-status',
        action='store_true',
        help='do not display progress bars'
    )
    log_section = parser.add_argument_group(title='logging')
    log_group = log_section.add_mutually_exclusive_group()
    log_group.add_argument('--log-level', type=str, default='INFO', choices=list(
        logging.getLevelName(x)
        for x in range(1, 101)
        if not logging.getLevelName(x).startswith('Level')
    ), help='sets the log level for shuntyard (default=INFO)')
    log_group.add_argument('--debug', action='store_true', help='equivalent to `--log-level=DEBUG`')
    log_group.add_argument('--quiet', action='store_true', help='equivalent to `--log-level=CRITICAL --no-status`')
    parser.add_argument('--version', '-v', action='store_true', help='print shuntyard\'s version information to STDERR')

    if argv is None:
        argv = sys.argv

    args = parser.parse_args(argv[1:])

    if args.debug:
        numeric_log_level = logging.DEBUG
    elif args.quiet:
        numeric_log_level = logging.CRITICAL
    else:
        numeric_log_level = getattr(logging, args.log_level.upper(), None)

    if args.version:
        sys.stderr.write(f"shuntyard version {version.VERSION_STRING}\n")
        if args.EXPRESSION is None:
            return 0

    if args.EXPRESSION is None:
        parser.error('the following arguments are required: EXPRESSION')

    if args.no_color:
        ansi_color = False
    elif args.color:
        ansi_color = True
    else:
        ansi_color = None

    quiet = args.no_status or args.quiet
    printer = Printer(sys.stdout, ansi_color=ansi_color, quiet=quiet)
    error_printer = Printer(sys.stderr, ansi_color=ansi_color, quiet=quiet)

    logging.basicConfig(level=numeric_log_level, stream=error_printer)

    variables: Dict[str, object] = dict(args.var)

    try:
        builder = ExpressionBuilder(args.EXPRESSION).implicit_multiplication(args.implicit_multiplication)
        if args.declare:
            builder.variables(*args.declare)
        expression = builder.build()
        expression.set_variables(variables)
        if args.postfix:
            printer.write(f"{expression!s}\n")

        if args.bindings is not None:
            try:
                rows: List[Bindings] = load_bindings(args.bindings, args.bindings_format)
            except (OSError, ValueError, YAMLError) as e:
                error_printer.error(f"Error loading bindings: {e!s}")
                return 1
            log.debug(f"Loaded {len(rows)} set(s) of bindings from {args.bindings}")
        else:
            rows = [{}]

        failed = False
        with printer:
            for row in printer.tqdm(rows, desc='Evaluating', unit=' bindings', leave=False,
                                    disable=quiet or len(rows) < 2):
                row_expression = expression.copy().set_variables(row)
                if args.validate:
                    result = row_expression.validate()
                    if not result:
                        for message in result.errors:
                            error_printer.error(message)
                        failed = True
                        continue
                if args.exact:
                    value = row_expression.evaluate_exact()
                else:
                    value = row_expression.evaluate()
                with printer.bright():
                    printer.write(str(value))
                printer.write('\n')
    except ExpressionError as e:
        error_printer.error(str(e))
        return 1
    except KeyboardInterrupt:
        return 1
    finally:
        error_printer.flush(final=True)

    if failed:
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
