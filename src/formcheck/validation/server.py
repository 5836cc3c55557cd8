"""Server-side rule validation for submitted form data.

Rules are pipe-separated strings (or lists) per field::

    validator = FormValidator(request_form, {
        "name": "required|name",
        "email": "required|email",
        "case_name": "required|case_name|max:200",
        "password": "required|password",
        "password_confirmation": "required|confirmed",
    })
    if validator.fails():
        errors = validator.errors   # {"email": ["Please enter a valid email address"]}

Unlike the live field validator, every failing rule is collected, not
just the first. Every rule except ``required`` and ``confirmed`` skips a
blank value. Unknown rule names are ignored so markup-only hints
(``nullable``, ``file``) can share a rule string.

The helpers at the bottom bridge these rules to the browser:
``validation_attributes`` turns them into HTML attributes and
``client_rules_json`` into the ``#validation-rules`` payload the live
validator applies.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from urllib.parse import urlsplit

from formcheck.errors import RuleError
from formcheck.validation import sanitize
from formcheck.validation.checks import REQUIRED_MESSAGE, confirmation_target, parse_number
from formcheck.validation.result import ValidationResult

type Value = str | int | float | None
type RuleSpec = str | Sequence[str]

# (value, rule params, all submitted data, field name) -> error message or None
type _RuleFunc = Callable[[Value, tuple[str, ...], Mapping[str, Value], str], str | None]


@dataclass(frozen=True, slots=True)
class ParsedRule:
    name: str
    params: tuple[str, ...] = ()

    @classmethod
    def parse(cls, rule: str) -> ParsedRule:
        name, sep, param_str = rule.strip().partition(":")
        if not name:
            raise RuleError(rule, "empty rule name")
        params = tuple(p.strip() for p in param_str.split(",")) if sep else ()
        parsed = cls(name=name, params=params)
        if parsed.key in _INT_PARAM_RULES:
            for index in range(len(params)):
                _int_param(rule, params, index)
        return parsed

    @property
    def key(self) -> str:
        """Dispatch key: ``case_name``, ``caseName`` and ``casename`` agree."""
        return self.name.replace("_", "").lower()


def parse_rules(rules: RuleSpec) -> tuple[ParsedRule, ...]:
    if isinstance(rules, str):
        rules = [r for r in rules.split("|") if r.strip()]
    return tuple(ParsedRule.parse(r) for r in rules)


_INTEGER_RE = re.compile(r"^[+-]?\d+$")

# Rules whose parameters must be integers
_INT_PARAM_RULES = frozenset({"min", "max", "between"})


def _int_param(rule: str, params: tuple[str, ...], index: int = 0) -> int:
    raw = params[index] if len(params) > index else "0"
    if not _INTEGER_RE.match(raw):
        raise RuleError(rule, f"parameter {raw!r} is not an integer")
    return int(raw)


def _is_blank(value: Value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_text(value: Value) -> str:
    return "" if value is None else str(value)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def _required(value: Value, params: tuple[str, ...], data: Mapping[str, Value], field: str) -> str | None:
    if _is_blank(value):
        return REQUIRED_MESSAGE
    return None


def _sanitized(check: Callable[[str], sanitize.Sanitized]) -> _RuleFunc:
    def rule(value: Value, params: tuple[str, ...], data: Mapping[str, Value], field: str) -> str | None:
        outcome = check(str(value))
        return None if outcome else outcome.error

    return rule


def _min(value: Value, params: tuple[str, ...], data: Mapping[str, Value], field: str) -> str | None:
    limit = _int_param("min", params)
    if isinstance(value, str):
        if len(value) < limit:
            return f"Must be at least {limit} characters long."
    elif value is not None and value < limit:
        return f"Must be at least {limit}."
    return None


def _max(value: Value, params: tuple[str, ...], data: Mapping[str, Value], field: str) -> str | None:
    limit = _int_param("max", params)
    if isinstance(value, str):
        if len(value) > limit:
            return f"Cannot be longer than {limit} characters."
    elif value is not None and value > limit:
        return f"Cannot be greater than {limit}."
    return None


def _between(value: Value, params: tuple[str, ...], data: Mapping[str, Value], field: str) -> str | None:
    low = _int_param("between", params, 0)
    high = _int_param("between", params, 1)
    size = len(value) if isinstance(value, str) else value
    if size is not None and not low <= size <= high:
        unit = " characters" if isinstance(value, str) else ""
        return f"Must be between {low} and {high}{unit}."
    return None


def _numeric(value: Value, params: tuple[str, ...], data: Mapping[str, Value], field: str) -> str | None:
    if isinstance(value, str) and parse_number(value) is None:
        return "Must be a number."
    return None


def _integer(value: Value, params: tuple[str, ...], data: Mapping[str, Value], field: str) -> str | None:
    if isinstance(value, float) and not value.is_integer():
        return "Must be a whole number."
    if isinstance(value, str) and not _INTEGER_RE.match(value.strip()):
        return "Must be a whole number."
    return None


def _url(value: Value, params: tuple[str, ...], data: Mapping[str, Value], field: str) -> str | None:
    try:
        parts = urlsplit(str(value).strip())
    except ValueError:
        return "Must be a valid URL."
    if not parts.scheme or not parts.netloc or " " in str(value).strip():
        return "Must be a valid URL."
    return None


def _in(value: Value, params: tuple[str, ...], data: Mapping[str, Value], field: str) -> str | None:
    if str(value) not in params:
        return f"Must be one of: {', '.join(params)}."
    return None


def _confirmed(value: Value, params: tuple[str, ...], data: Mapping[str, Value], field: str) -> str | None:
    """``X_confirmation`` must equal ``X``; on ``X`` itself, ``X_confirmation`` must equal it.

    A parameter names the other field explicitly.
    """
    if params:
        other = params[0]
    else:
        other = confirmation_target(field) or f"{field}_confirmation"
    if _as_text(value) != _as_text(data.get(other)):
        return "The confirmation does not match."
    return None


_RULES: dict[str, _RuleFunc] = {
    "required": _required,
    "email": _sanitized(sanitize.validate_email),
    "min": _min,
    "max": _max,
    "between": _between,
    "numeric": _numeric,
    "integer": _integer,
    "url": _url,
    "in": _in,
    "confirmed": _confirmed,
    "password": _sanitized(sanitize.validate_password),
    "casename": _sanitized(sanitize.validate_case_name),
    "name": _sanitized(sanitize.validate_name),
}

# Rules that look at blank values
_BLANK_AWARE = frozenset({"required", "confirmed"})

# Rules whose sanitizer supplies the cleaned value
_CLEANERS: dict[str, Callable[[str], sanitize.Sanitized]] = {
    "email": sanitize.validate_email,
    "casename": sanitize.validate_case_name,
    "name": sanitize.validate_name,
}


class FormValidator:
    """Validate a mapping of submitted values against per-field rules.

    Custom messages are keyed ``"field.rule"`` or ``"rule"`` and may use
    ``:field``, ``:value`` and ``:0``, ``:1``... for rule parameters::

        FormValidator(data, {"age": "between:18,99"},
                      {"age.between": "Age must be :0 to :1."})

    Rule strings are parsed on construction; a malformed one raises
    ``RuleError``.
    """

    def __init__(
        self,
        data: Mapping[str, Value],
        rules: Mapping[str, RuleSpec],
        messages: Mapping[str, str] | None = None,
    ) -> None:
        self.data = data
        self.rules = {field: parse_rules(spec) for field, spec in rules.items()}
        self.messages = dict(messages or {})
        self.errors: dict[str, list[str]] = {}
        self._cleaned: dict[str, str] = {}

    def validate(self) -> ValidationResult:
        """Run every rule; returns a falsy result when anything failed."""
        self.errors = {}
        self._cleaned = {}
        for field, rules in self.rules.items():
            value = self.data.get(field)
            cleaned = "" if value is None else str(value)
            for rule in rules:
                func = _RULES.get(rule.key)
                if func is None:
                    continue
                if rule.key not in _BLANK_AWARE and _is_blank(value):
                    continue
                message = func(value, rule.params, self.data, field)
                if message is not None:
                    self._add_error(field, rule, message)
                elif rule.key in _CLEANERS:
                    cleaned = _CLEANERS[rule.key](str(value)).value
            if field not in self.errors:
                self._cleaned[field] = cleaned
        return ValidationResult(data=dict(self._cleaned), errors=dict(self.errors))

    def passes(self) -> bool:
        return not self.errors

    def fails(self) -> bool:
        return bool(self.errors)

    @property
    def validated_data(self) -> dict[str, str]:
        """Cleaned values of the fields that passed the last ``validate()``."""
        return dict(self._cleaned)

    def _add_error(self, field: str, rule: ParsedRule, message: str) -> None:
        custom = self.messages.get(f"{field}.{rule.name}") or self.messages.get(rule.name) or message
        value = self.data.get(field)
        custom = custom.replace(":field", field).replace(":value", "" if value is None else str(value))
        for index, param in enumerate(rule.params):
            custom = custom.replace(f":{index}", param)
        self.errors.setdefault(field, []).append(custom)


def validate(
    data: Mapping[str, Value],
    rules: Mapping[str, RuleSpec],
    messages: Mapping[str, str] | None = None,
) -> ValidationResult:
    """Validate *data* against *rules* in one call.

    Example::

        result = validate(form, {
            "title": "required|max:200",
            "body": ["required", "min:10"],
        })
        if not result:
            # result.errors == {"body": ["Must be at least 10 characters long."]}
            ...
    """
    return FormValidator(data, rules, messages).validate()


# ---------------------------------------------------------------------------
# Client bridge
# ---------------------------------------------------------------------------


def validation_attributes(rules: RuleSpec) -> str:
    """HTML attributes the browser-side validator understands, for *rules*.

    ``validation_attributes("required|email|max:255")``
    returns ``'required type="email" maxlength="255"'``.
    """
    attributes: list[str] = []
    for rule in parse_rules(rules):
        key = rule.key
        if key == "required":
            attributes.append("required")
        elif key == "email":
            attributes.append('type="email"')
        elif key in ("numeric", "integer"):
            attributes.append('type="number"')
        elif key == "url":
            attributes.append('type="url"')
        elif key == "min" and rule.params and rule.params[0]:
            attributes.append(f'minlength="{_int_param("min", rule.params)}"')
        elif key == "max" and rule.params and rule.params[0]:
            attributes.append(f'maxlength="{_int_param("max", rule.params)}"')
        elif key == "between" and len(rule.params) >= 2:
            attributes.append(f'minlength="{_int_param("between", rule.params, 0)}"')
            attributes.append(f'maxlength="{_int_param("between", rule.params, 1)}"')
    return " ".join(attributes)


def _html_safe_json(payload: object) -> str:
    """JSON that can sit inside ``<script>`` or an attribute without escaping."""
    encoded = json.dumps(payload, ensure_ascii=False)
    return (
        encoded.replace("&", "\\u0026")
        .replace("<", "\\u003C")
        .replace(">", "\\u003E")
        .replace("'", "\\u0027")
    )


def client_rules_json(rules: Mapping[str, RuleSpec]) -> str:
    """The ``#validation-rules`` payload: ``{field: [rule, ...]}``."""
    payload = {
        field: [f"{r.name}:{','.join(r.params)}" if r.params else r.name for r in parse_rules(spec)]
        for field, spec in rules.items()
    }
    return _html_safe_json(payload)


def validation_errors_json(errors: Mapping[str, Sequence[str]]) -> str:
    return _html_safe_json({field: list(messages) for field, messages in errors.items()})


def has_error(errors: Mapping[str, Sequence[str]] | None, field: str) -> bool:
    return bool(errors) and field in errors  # type: ignore[operator]


def get_error(errors: Mapping[str, Sequence[str]] | None, field: str) -> str:
    """First error for *field*, or ``""``."""
    if not errors:
        return ""
    messages = errors.get(field) or ()
    return messages[0] if messages else ""


def error_class(
    errors: Mapping[str, Sequence[str]] | None,
    field: str,
    error_class: str = "is-invalid",
    success_class: str = "",
    submitted: bool = False,
) -> str:
    """CSS class for a re-rendered field: error, success after a submit, or none."""
    if has_error(errors, field):
        return error_class
    if submitted and success_class:
        return success_class
    return ""
