"""Tests for formcheck.config: option dataclasses."""

import pytest

from formcheck.config import AnnouncerOptions, ValidatorOptions
from formcheck.markup import Form


class TestValidatorOptions:
    def test_defaults(self) -> None:
        options = ValidatorOptions()

        assert options.validate_on_blur is True
        assert options.validate_on_input is True
        assert options.real_time_validation is True
        assert options.submit_validation is True
        assert options.native_validation is True
        assert options.show_success_state is True
        assert options.error_class == "is-invalid"
        assert options.success_class == "is-valid"
        assert options.error_display_class == "invalid-feedback"
        assert options.success_display_class == "valid-feedback"
        assert options.message_containers == ("form-group", "mb-3", "col", "form-floating")
        assert options.debounce_delay == 0.3

    def test_frozen(self) -> None:
        options = ValidatorOptions()

        with pytest.raises(AttributeError):
            options.error_class = "bad"  # type: ignore[misc]

    def test_with_changes(self) -> None:
        options = ValidatorOptions()
        changed = options.with_changes(debounce_delay=0.5)
        assert changed.debounce_delay == 0.5
        assert options.debounce_delay == 0.3

    def test_with_changes_unknown_option(self) -> None:
        with pytest.raises(TypeError):
            ValidatorOptions().with_changes(colour="red")


class TestFromForm:
    def test_absent_attributes_keep_defaults(self) -> None:
        assert ValidatorOptions.from_form(Form.parse("<form></form>")) == ValidatorOptions()

    def test_false_disables(self) -> None:
        form = Form.parse('<form data-validate-on-blur="false" data-validate-on-input="false"></form>')
        options = ValidatorOptions.from_form(form)
        assert options.validate_on_blur is False
        assert options.validate_on_input is False

    def test_any_other_value_enables(self) -> None:
        form = Form.parse('<form data-show-success-state="no"></form>')
        assert ValidatorOptions.from_form(form, validate_on_blur=False).show_success_state is True

    def test_overrides_win(self) -> None:
        form = Form.parse('<form data-validate-on-blur="true"></form>')
        assert ValidatorOptions.from_form(form, validate_on_blur=False).validate_on_blur is False


class TestAnnouncerOptions:
    def test_defaults(self) -> None:
        options = AnnouncerOptions()
        assert options.polite_region_id == "sr-status"
        assert options.assertive_region_id == "sr-alert"
        assert options.announce_delay == 0.1
        assert options.clear_after == 5.0
