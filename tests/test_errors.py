"""Tests for formcheck.errors and the lazy top-level API."""

import pytest

import formcheck
from formcheck.errors import FormcheckError, MarkupError, RuleError


class TestHierarchy:
    def test_markup_error_is_formcheck_error(self) -> None:
        assert issubclass(MarkupError, FormcheckError)

    def test_rule_error_is_formcheck_error(self) -> None:
        assert issubclass(RuleError, FormcheckError)


class TestRuleError:
    def test_str_with_detail(self) -> None:
        assert str(RuleError("max:x", "parameter 'x' is not an integer")) == (
            "Invalid rule 'max:x': parameter 'x' is not an integer"
        )

    def test_str_without_detail(self) -> None:
        assert str(RuleError(":")) == "Invalid rule ':'"

    def test_catchable_as_base(self) -> None:
        with pytest.raises(FormcheckError):
            raise RuleError("x")


class TestLazyImports:
    def test_public_names_resolve(self) -> None:
        for name in formcheck.__all__:
            assert getattr(formcheck, name) is not None

    def test_unknown_name(self) -> None:
        with pytest.raises(AttributeError, match="no attribute 'nope'"):
            formcheck.nope  # noqa: B018

    def test_same_objects(self) -> None:
        from formcheck.validator import FieldValidator

        assert formcheck.FieldValidator is FieldValidator
