"""Native constraint pass, modelled on the HTML constraint validation API.

Computes the ``ValidityState`` flags a browser would for a control's
declared attributes, before the ordered rule list runs. Blank values
raise no flag except ``value_missing``.
"""

from __future__ import annotations

from dataclasses import dataclass

from formcheck.validation import checks
from formcheck.validation.checks import CheckContext, FieldAttributes, format_number, parse_number

# Browser priority order for the reported message
FLAGS = (
    "value_missing",
    "type_mismatch",
    "bad_input",
    "too_long",
    "too_short",
    "range_underflow",
    "range_overflow",
    "step_mismatch",
    "pattern_mismatch",
)

_STEP_TYPES = frozenset({"number", "range"})


@dataclass(frozen=True, slots=True)
class ValidityState:
    """Raised flags and the message for the highest-priority one."""

    flags: frozenset[str] = frozenset()
    message: str = ""

    @property
    def valid(self) -> bool:
        return not self.flags

    def __bool__(self) -> bool:
        return self.valid


def _step_mismatch(value: str, attributes: FieldAttributes) -> str | None:
    step = attributes.step
    if not value or step is None or attributes.type not in _STEP_TYPES:
        return None
    parsed = parse_number(value)
    if parsed is None:
        return None
    base = attributes.min if attributes.min is not None else 0.0
    steps = (parsed - base) / step
    if abs(steps - round(steps)) < 1e-9:
        return None
    low = base + int(steps // 1) * step
    high = low + step
    return (
        "Please enter a valid value. The nearest valid values are "
        f"{format_number(round(low, 10))} and {format_number(round(high, 10))}."
    )


def check_validity(value: str, context: CheckContext) -> ValidityState:
    """Constraint-validate *value* against the field's declared attributes."""
    attributes = context.attributes
    found: dict[str, str] = {}

    if attributes.required and (message := checks.required(value, context)):
        found["value_missing"] = message
    if attributes.type == "email" and (message := checks.email(value, context)):
        found["type_mismatch"] = message
    elif attributes.type == "url" and (message := checks.url(value, context)):
        found["type_mismatch"] = message
    if attributes.type in _STEP_TYPES and (message := checks.number(value, context)):
        found["bad_input"] = message
    if message := checks.maxlength(value, context):
        found["too_long"] = message
    if message := checks.minlength(value, context):
        found["too_short"] = message
    if message := checks.min_value(value, context):
        found["range_underflow"] = message
    if message := checks.max_value(value, context):
        found["range_overflow"] = message
    if message := _step_mismatch(value, attributes):
        found["step_mismatch"] = message
    if message := checks.pattern(value, context):
        found["pattern_mismatch"] = message

    if not found:
        return ValidityState()
    first = next(flag for flag in FLAGS if flag in found)
    return ValidityState(flags=frozenset(found), message=found[first])
