"""Validation results: immutable containers for outcomes."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FieldResult:
    """The outcome of validating one field.

    Falsy when invalid, like ``ValidationResult``. ``message`` is empty
    for a valid field.
    """

    valid: bool
    message: str = ""

    @classmethod
    def success(cls) -> FieldResult:
        return _SUCCESS

    @classmethod
    def failure(cls, message: str) -> FieldResult:
        return cls(valid=False, message=message)

    def __bool__(self) -> bool:
        return self.valid


_SUCCESS = FieldResult(valid=True)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating submitted data against server rules.

    ``is_valid`` is True when there are no errors.
    The result is falsy when invalid, so you can write::

        result = validate(form, rules)
        if not result:
            return render("form.html", form=form, errors=result.errors)

    ``data`` contains the submitted string values for every field that
    passed its rules.

    ``errors`` maps field names to lists of error messages::

        {"title": ["This field is required."],
         "email": ["Please enter a valid email address"]}
    """

    data: dict[str, str]
    errors: dict[str, list[str]]

    @property
    def is_valid(self) -> bool:
        """True if validation passed with no errors."""
        return not self.errors

    def __bool__(self) -> bool:
        """Falsy when invalid, enabling the ``if not result:`` pattern."""
        return self.is_valid
