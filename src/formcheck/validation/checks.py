"""Built-in field checks.

Each check is a pure callable with the signature::

    def check(value: str, context: CheckContext) -> str | None:
        '''Return error message, or None if valid.'''

``context.attributes`` is a snapshot of the field's declared attributes;
``context.values`` holds the other form values (for confirmation checks).

Every check except ``required`` passes a blank value. ``required`` runs
first, so the blank case is reported once, by it.

Custom checks follow the same protocol and are handed to a validator
instance (``FieldValidator(form, checks={"slug": slug})``) and referenced
from markup with ``data-validators="slug"``.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from formcheck.markup import Field

_log = logging.getLogger("formcheck.validation")

REQUIRED_MESSAGE = "This field is required."
UNVALIDATABLE_MESSAGE = "Unable to validate this field."


@dataclass(frozen=True, slots=True)
class FieldAttributes:
    """Validation-relevant attributes of one field, parsed once."""

    name: str
    type: str = "text"
    required: bool = False
    pattern: str | None = None
    title: str | None = None
    minlength: int | None = None
    maxlength: int | None = None
    min: float | None = None
    max: float | None = None
    step: float | None = None
    validators: tuple[str, ...] = ()

    @classmethod
    def of(cls, control: Field) -> FieldAttributes:
        """Snapshot *control*'s attributes. Unparseable numbers are dropped."""
        name = control.name
        step_raw = control.get("step")
        return cls(
            name=name,
            type=control.type,
            required=control.has("required"),
            pattern=control.get("pattern"),
            title=control.get("title"),
            minlength=_int_attr(name, "minlength", control.get("minlength")),
            maxlength=_int_attr(name, "maxlength", control.get("maxlength")),
            min=_float_attr(name, "min", control.get("min")),
            max=_float_attr(name, "max", control.get("max")),
            step=_step_attr(name, step_raw),
            validators=tuple(v.strip() for v in (control.get("data-validators") or "").split(",") if v.strip()),
        )


@dataclass(frozen=True, slots=True)
class CheckContext:
    """What a check may look at besides the value itself."""

    attributes: FieldAttributes
    values: Mapping[str, str] = field(default_factory=dict)


type Check = Callable[[str, CheckContext], str | None]


def _int_attr(name: str, attribute: str, raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        _log.debug("Ignoring %s=%r on field %r: not an integer", attribute, raw, name)
        return None


def _float_attr(name: str, attribute: str, raw: str | None) -> float | None:
    if raw is None:
        return None
    number = parse_number(raw)
    if number is None:
        _log.debug("Ignoring %s=%r on field %r: not a number", attribute, raw, name)
    return number


def _step_attr(name: str, raw: str | None) -> float | None:
    if raw is None or raw.strip().lower() == "any":
        return None
    step = _float_attr(name, "step", raw)
    if step is not None and step <= 0:
        _log.debug("Ignoring step=%r on field %r: not positive", raw, name)
        return None
    return step


_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def parse_number(value: str) -> float | None:
    """Parse a finite decimal number, or None.

    Stricter than ``float()``: no ``inf``/``nan`` spellings, no underscores.
    """
    candidate = value.strip()
    if not _NUMBER_RE.match(candidate):
        return None
    number = float(candidate)
    if not math.isfinite(number):
        return None
    return number


def format_number(number: float) -> str:
    """Render 5.0 as ``5`` and 2.5 as ``2.5``."""
    if number.is_integer():
        return str(int(number))
    return repr(number)


@lru_cache(maxsize=128)
def compile_pattern(pattern: str) -> re.Pattern[str] | None:
    """Compile an HTML ``pattern`` attribute; None when it is not a valid regex."""
    try:
        return re.compile(pattern)
    except re.error:
        _log.debug("Ignoring invalid pattern %r", pattern)
        return None


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(value: str, context: CheckContext) -> str | None:
    """Field must be non-blank."""
    if not value.strip():
        return REQUIRED_MESSAGE
    return None


# ---------------------------------------------------------------------------
# Type
# ---------------------------------------------------------------------------

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def email(value: str, context: CheckContext) -> str | None:
    """Value must look like an email address (structure only)."""
    if not value:
        return None
    if not _EMAIL_RE.match(value):
        return "Please enter a valid email address."
    return None


_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")


def url(value: str, context: CheckContext) -> str | None:
    """Value must be an absolute URL; http(s) URLs need a host."""
    if not value:
        return None
    message = "Please enter a valid URL."
    candidate = value.strip()
    if any(ch.isspace() for ch in candidate):
        return message
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return message
    if not _SCHEME_RE.match(parts.scheme):
        return message
    if parts.scheme.lower() in ("http", "https") and not parts.hostname:
        return message
    return None


def number(value: str, context: CheckContext) -> str | None:
    """Value must parse as a number."""
    if not value:
        return None
    if parse_number(value) is None:
        return "Please enter a valid number."
    return None


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def minlength(value: str, context: CheckContext) -> str | None:
    limit = context.attributes.minlength
    if not value or limit is None:
        return None
    if len(value) < limit:
        return f"Must be at least {limit} characters long."
    return None


def maxlength(value: str, context: CheckContext) -> str | None:
    limit = context.attributes.maxlength
    if not value or limit is None:
        return None
    if len(value) > limit:
        return f"Cannot be longer than {limit} characters."
    return None


# ---------------------------------------------------------------------------
# Range
# ---------------------------------------------------------------------------


def min_value(value: str, context: CheckContext) -> str | None:
    """Numeric value must not be below ``min``. Non-numbers pass here."""
    limit = context.attributes.min
    if not value or limit is None:
        return None
    parsed = parse_number(value)
    if parsed is not None and parsed < limit:
        return f"Must be at least {format_number(limit)}."
    return None


def max_value(value: str, context: CheckContext) -> str | None:
    limit = context.attributes.max
    if not value or limit is None:
        return None
    parsed = parse_number(value)
    if parsed is not None and parsed > limit:
        return f"Cannot be greater than {format_number(limit)}."
    return None


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------


def pattern(value: str, context: CheckContext) -> str | None:
    """Value must match the whole ``pattern``. The field title is the message."""
    source = context.attributes.pattern
    if not value or source is None:
        return None
    compiled = compile_pattern(source)
    if compiled is not None and compiled.fullmatch(value) is None:
        return context.attributes.title or "Invalid format."
    return None


# ---------------------------------------------------------------------------
# Name-based
# ---------------------------------------------------------------------------

_PASSWORD_REQUIREMENTS: tuple[tuple[str, Callable[[str], bool]], ...] = (
    ("at least 8 characters", lambda v: len(v) >= 8),
    ("one lowercase letter", lambda v: re.search(r"[a-z]", v) is not None),
    ("one uppercase letter", lambda v: re.search(r"[A-Z]", v) is not None),
    ("one number", lambda v: re.search(r"\d", v) is not None),
)


def password(value: str, context: CheckContext) -> str | None:
    """Password must satisfy every requirement; the message lists the missing ones."""
    if not value:
        return None
    missing = [label for label, ok in _PASSWORD_REQUIREMENTS if not ok(value)]
    if missing:
        return f"Password must contain {', '.join(missing)}."
    return None


def confirmation_target(name: str) -> str | None:
    """Name of the field that *name* confirms, if any.

    ``password_confirmation`` confirms ``password``; so does the legacy
    ``confirm_password``.
    """
    if name.endswith("_confirmation") and len(name) > len("_confirmation"):
        return name.removesuffix("_confirmation")
    if name == "confirm_password":
        return "password"
    return None


def confirmed(value: str, context: CheckContext) -> str | None:
    """Value must equal the field it confirms."""
    target = confirmation_target(context.attributes.name)
    if not value or target is None or target not in context.values:
        return None
    if value != context.values[target]:
        return "The confirmation does not match."
    return None


_CASE_NAME_RE = re.compile(r"^[a-zA-Z0-9\s\-().\/]+$")


def casename(value: str, context: CheckContext) -> str | None:
    if not value:
        return None
    if len(value) < 3:
        return "Case name must be at least 3 characters long."
    if not _CASE_NAME_RE.match(value):
        return "Case name contains invalid characters."
    return None


BUILTIN_CHECKS: Mapping[str, Check] = MappingProxyType(
    {
        "required": required,
        "email": email,
        "url": url,
        "number": number,
        "minlength": minlength,
        "maxlength": maxlength,
        "min": min_value,
        "max": max_value,
        "pattern": pattern,
        "password": password,
        "confirmed": confirmed,
        "casename": casename,
    }
)
