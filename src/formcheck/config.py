"""Validator and announcer configuration.

Both option sets are frozen dataclasses: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from formcheck.markup import Form

# data-* attribute on <form> -> option name
_DATASET_FLAGS = {
    "data-validate-on-blur": "validate_on_blur",
    "data-validate-on-input": "validate_on_input",
    "data-show-success-state": "show_success_state",
}


@dataclass(frozen=True, slots=True)
class ValidatorOptions:
    """Options for a ``FieldValidator``. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        options = ValidatorOptions(show_success_state=False, debounce_delay=0.5)
    """

    # Events
    validate_on_blur: bool = True
    validate_on_input: bool = True
    real_time_validation: bool = True
    submit_validation: bool = True

    # Run the HTML constraint pass before the ordered rules
    native_validation: bool = True

    # State classes
    show_success_state: bool = True
    error_class: str = "is-invalid"
    success_class: str = "is-valid"
    error_display_class: str = "invalid-feedback"
    success_display_class: str = "valid-feedback"

    # Inline messages go after the nearest ancestor with one of these classes
    message_containers: tuple[str, ...] = ("form-group", "mb-3", "col", "form-floating")

    # Seconds of quiet before a debounced (email) check runs
    debounce_delay: float = 0.3

    def with_changes(self, **changes: object) -> ValidatorOptions:
        """Return a copy with *changes* applied."""
        return replace(self, **changes)

    @classmethod
    def from_form(cls, form: Form, **overrides: object) -> ValidatorOptions:
        """Read ``data-validate-on-blur`` and friends from a form element.

        A present attribute means true unless its value is ``"false"``;
        an absent attribute keeps the default.
        """
        values: dict[str, object] = {}
        for attribute, option in _DATASET_FLAGS.items():
            raw = form.element.get(attribute)
            if raw is not None:
                values[option] = raw != "false"
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class AnnouncerOptions:
    """Timing and targets for screen-reader announcements."""

    polite_region_id: str = "sr-status"
    assertive_region_id: str = "sr-alert"

    # The region is emptied first; the message lands after this delay so
    # assistive technology notices the change.
    announce_delay: float = 0.1
    clear_after: float = 5.0
