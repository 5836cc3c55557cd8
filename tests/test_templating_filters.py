"""Tests for formcheck template filters and validator fragments."""

from __future__ import annotations

from formcheck.templating import create_environment, render_error_summary, render_strength_meter
from formcheck.templating.filters import (
    BUILTIN_FILTERS,
    attr,
    error_class,
    field_errors,
    validation_attrs,
)
from formcheck.validation.strength import password_strength

# ── attr ──────────────────────────────────────────────────────────────────


class TestAttr:
    def test_truthy_returns_attribute(self) -> None:
        assert 'id="name-error"' in str(attr("name-error", "id"))

    def test_falsy_returns_empty(self) -> None:
        assert attr("", "class") == ""
        assert attr(None, "class") == ""

    def test_escapes_value(self) -> None:
        result = str(attr('foo"bar', "data-value"))
        assert "&quot;" in result
        assert 'data-value="foo' in result


# ── field_errors ─────────────────────────────────────────────────────────


class TestFieldErrors:
    def test_extracts_errors_for_field(self) -> None:
        errors = {"email": ["Please enter a valid email address", "too long"], "name": ["x"]}
        assert field_errors(errors, "email") == ["Please enter a valid email address", "too long"]

    def test_missing_field_returns_empty(self) -> None:
        assert field_errors({"name": ["x"]}, "email") == []

    def test_none_and_non_dict(self) -> None:
        assert field_errors(None, "email") == []
        assert field_errors("not a dict", "email") == []

    def test_field_with_empty_list(self) -> None:
        assert field_errors({"name": []}, "name") == []


# ── error_class / validation_attrs ───────────────────────────────────────


class TestErrorClass:
    def test_error(self) -> None:
        assert error_class({"email": ["bad"]}, "email") == "is-invalid"

    def test_clean_submit_success(self) -> None:
        assert error_class({"email": ["bad"]}, "name", success="is-valid", submitted=True) == "is-valid"

    def test_non_dict_errors(self) -> None:
        assert error_class("oops", "email") == ""


class TestValidationAttrs:
    def test_leading_space(self) -> None:
        assert str(validation_attrs("required|max:200")) == ' required maxlength="200"'

    def test_empty(self) -> None:
        assert validation_attrs("") == ""
        assert validation_attrs("confirmed") == ""


class TestBuiltinFiltersRegistry:
    def test_registry_functions_match(self) -> None:
        assert BUILTIN_FILTERS["attr"] is attr
        assert BUILTIN_FILTERS["field_errors"] is field_errors
        assert BUILTIN_FILTERS["error_class"] is error_class
        assert BUILTIN_FILTERS["validation_attrs"] is validation_attrs


# ── Fragments ────────────────────────────────────────────────────────────


class TestErrorSummary:
    def test_lists_messages_escaped(self) -> None:
        html = render_error_summary(create_environment(), {"name": "Required", "email": "<b>bad</b>"})
        assert 'role="alert"' in html
        assert "<li>Required</li>" in html
        assert "&lt;b&gt;bad&lt;/b&gt;" in html
        assert "<b>" not in html

    def test_empty_renders_nothing(self) -> None:
        assert render_error_summary(create_environment(), {}).strip() == ""


class TestStrengthMeter:
    def test_fill_and_text(self) -> None:
        html = render_strength_meter(create_environment(), password_strength("Passw0rd"))
        assert "width: 80%" in html
        assert ">Strong<" in html
