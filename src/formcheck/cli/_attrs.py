"""``formcheck attrs``: server rule string to client attributes."""

import argparse
import sys

from formcheck.errors import RuleError
from formcheck.validation.server import validation_attributes


def run_attrs(args: argparse.Namespace) -> None:
    try:
        print(validation_attributes(args.rules))
    except RuleError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
