"""Command that prints the parse tree of an expression as a dot graph."""

from __future__ import annotations

import sys

from .expr import dump_expr_as_dot, parse_expr
from .location import BasmError, FileLocation


def main(argv: list[str] | None = None) -> int:
    """Parse the first argument as an expression and print its dot graph."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("USAGE: expr2dot <expression>", file=sys.stderr)
        print("ERROR: expression is not provided", file=sys.stderr)
        return 1

    try:
        expr = parse_expr(args[0], FileLocation())
    except BasmError as error:
        print(error, file=sys.stderr)
        return 1

    sys.stdout.write(dump_expr_as_dot(expr))
    return 0


if __name__ == "__main__":
    sys.exit(main())