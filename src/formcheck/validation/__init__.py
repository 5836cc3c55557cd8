"""Form validation: field checks, rule lists, server rules.

Server-side, validate submitted data against rule strings::

    from formcheck.validation import validate

    result = validate(form, {
        "case_name": "required|case_name|max:200",
        "email": "required|email",
    })
    if not result:
        return render("upload.html", form=form, errors=result.errors)

Field-level, the checks and rule lists here back ``FieldValidator``
(``formcheck.validator``), which also keeps the form markup in sync.
"""

from formcheck.validation.checks import BUILTIN_CHECKS, Check, CheckContext, FieldAttributes
from formcheck.validation.constraints import ValidityState, check_validity
from formcheck.validation.result import FieldResult, ValidationResult
from formcheck.validation.rules import Rule, RuleKind, build_rules, evaluate
from formcheck.validation.server import (
    FormValidator,
    client_rules_json,
    error_class,
    get_error,
    has_error,
    validate,
    validation_attributes,
    validation_errors_json,
)
from formcheck.validation.strength import Strength, password_strength

__all__ = [
    "BUILTIN_CHECKS",
    "Check",
    "CheckContext",
    "FieldAttributes",
    "FieldResult",
    "FormValidator",
    "Rule",
    "RuleKind",
    "Strength",
    "ValidationResult",
    "ValidityState",
    "build_rules",
    "check_validity",
    "client_rules_json",
    "error_class",
    "evaluate",
    "get_error",
    "has_error",
    "password_strength",
    "validate",
    "validation_attributes",
    "validation_errors_json",
]
