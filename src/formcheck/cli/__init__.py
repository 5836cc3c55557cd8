"""formcheck CLI: validate forms in HTML files, translate server rules.

Entry point registered as ``formcheck`` in ``pyproject.toml``::

    [project.scripts]
    formcheck = "formcheck.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``formcheck`` command."""
    parser = argparse.ArgumentParser(
        prog="formcheck",
        description="formcheck: form validation for server-rendered HTML.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log validator warnings and details")
    subparsers = parser.add_subparsers(dest="command")

    # -- formcheck check --------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate a form in an HTML file")
    check_parser.add_argument("path", help="HTML file containing the form")
    check_parser.add_argument("--form", default=None, help="CSS selector of the form (default: first form)")
    check_parser.add_argument(
        "--set",
        dest="values",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set a field value before validating (repeatable)",
    )
    check_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    check_parser.add_argument("--write", default=None, metavar="OUT", help="Write the annotated page to OUT")
    check_parser.add_argument(
        "--no-native",
        action="store_true",
        help="Skip the native constraint pass",
    )

    # -- formcheck attrs --------------------------------------------------
    attrs_parser = subparsers.add_parser("attrs", help="Print client attributes for a server rule string")
    attrs_parser.add_argument("rules", help='Rule string (e.g. "required|email|max:255")')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "check":
        from formcheck.cli._check import run_check

        run_check(args)
    elif args.command == "attrs":
        from formcheck.cli._attrs import run_attrs

        run_attrs(args)
