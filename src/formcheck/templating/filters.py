"""Template filters for rendering validated forms.

Registered on every formcheck kida Environment. They let a server-rendered
form show the errors from ``FormValidator`` without ``{% if %}`` noise::

    <input name="email"{{ "required|email" | validation_attrs }}
           class="form-control {{ errors | error_class("email") }}">
    {% for msg in errors | field_errors("email") %}
      <div class="invalid-feedback">{{ msg }}</div>
    {% end %}
"""

import html
from typing import Any

from kida.template import Markup

from formcheck.validation import server


def attr(value: Any, name: str) -> str | Markup:
    """Output an HTML attribute when value is truthy, else empty string.

    Example:
        <div{{ summary_id | attr("id") }}>
        → <div id="summary">   (when summary_id is "summary")
        → <div>                (when summary_id is None or "")

    """
    if not value:
        return ""
    return Markup(f' {name}="{html.escape(str(value))}"')


def field_errors(errors: Any, field_name: str) -> list[str]:
    """Extract validation errors for a single form field.

    Safely navigates a ``{field: [messages]}`` dict, returning an
    empty list when *errors* is None, missing, or the field has no
    errors.
    """
    if errors is None:
        return []
    if isinstance(errors, dict):
        val = errors.get(field_name, [])
        return list(val) if val else []
    return []


def error_class(
    errors: Any,
    field_name: str,
    error: str = "is-invalid",
    success: str = "",
    submitted: bool = False,
) -> str:
    """``is-invalid`` when *field_name* has errors, *success* after a clean submit."""
    if not isinstance(errors, dict):
        errors = None
    return server.error_class(errors, field_name, error, success, submitted)


def validation_attrs(rules: Any) -> str | Markup:
    """Server rules as client attributes, with a leading space.

    Example:
        <input name="title"{{ "required|max:200" | validation_attrs }}>
        → <input name="title" required maxlength="200">

    """
    if not rules:
        return ""
    rendered = server.validation_attributes(rules)
    return Markup(f" {rendered}") if rendered else ""


BUILTIN_FILTERS: dict[str, Any] = {
    "attr": attr,
    "error_class": error_class,
    "field_errors": field_errors,
    "validation_attrs": validation_attrs,
}
