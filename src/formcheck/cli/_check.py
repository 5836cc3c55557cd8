"""``formcheck check``: validate a form in an HTML file.

Parses the file, applies ``--set`` values, submits the form through a
``FieldValidator`` and prints the error map. Exits with code 1 when the
form is invalid or cannot be read.
"""

import argparse
import json
import sys
from pathlib import Path

from formcheck.config import ValidatorOptions
from formcheck.errors import MarkupError
from formcheck.markup import Form
from formcheck.validator import FieldValidator


def _parse_values(pairs: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            print(f"Error: expected NAME=VALUE, got {pair!r}", file=sys.stderr)
            raise SystemExit(1)
        values[name] = value
    return values


def run_check(args: argparse.Namespace) -> None:
    """Validate the form in ``args.path`` and report the result."""
    values = _parse_values(args.values)
    try:
        html = Path(args.path).read_text(encoding="utf-8")
        form = Form.parse(html, args.form)
        validator = FieldValidator(form, ValidatorOptions(native_validation=not args.no_native))
        valid = validator.submit(values)
    except (OSError, MarkupError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.write:
        Path(args.write).write_text(form.render(), encoding="utf-8")

    if args.json:
        print(json.dumps({"valid": valid, "errors": validator.errors, "focus": validator.focused}, indent=2))
    elif valid:
        checked = sum(1 for _ in form.validatable_fields())
        print(f"OK: {checked} field{'s' if checked != 1 else ''} valid")
    else:
        for name, message in validator.errors.items():
            print(f"{name}: {message}")

    if not valid:
        raise SystemExit(1)
