"""formcheck exception hierarchy.

Validation failures are never exceptions: they are messages on a
``FieldResult`` or in an error map. These types are for misuse of the
library itself (a document without the expected form, a malformed rule
string).
"""

from dataclasses import dataclass


class FormcheckError(Exception):
    """Base for all formcheck-specific errors."""


class MarkupError(FormcheckError):
    """Raised when the markup does not contain what the caller asked for.

    Typically a missing ``<form>`` or a field name that is not in the form.
    """


@dataclass(frozen=True, slots=True)
class RuleError(FormcheckError):
    """A server-side rule string could not be parsed."""

    rule: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"Invalid rule {self.rule!r}: {self.detail}"
        return f"Invalid rule {self.rule!r}"
