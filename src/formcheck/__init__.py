"""formcheck: form validation for server-rendered HTML.

Binds to a ``<form>`` in parsed markup, validates its fields as the user
would interact with them, and writes error state (classes, ARIA
attributes, inline messages) back into the page.

Basic usage::

    from formcheck import FieldValidator, Form

    form = Form.parse(page_html, "#register")
    validator = FieldValidator(form)
    if not validator.submit(request_values):
        return form.render()

Server-side rules::

    from formcheck.validation import validate
    result = validate(data, {"email": "required|email"})
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "Announcer",
    "AnnouncerOptions",
    "Field",
    "FieldResult",
    "FieldValidator",
    "Form",
    "FormValidator",
    "FormcheckError",
    "MarkupError",
    "RuleError",
    "ValidationResult",
    "ValidatorOptions",
    "attach_all",
    "create_validator",
    "validate",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import formcheck`` fast while providing a clean top-level API.
    """
    if name in ("FieldValidator", "attach_all", "create_validator"):
        from formcheck import validator as _validator

        return getattr(_validator, name)

    if name in ("Form", "Field"):
        from formcheck import markup as _markup

        return getattr(_markup, name)

    if name in ("ValidatorOptions", "AnnouncerOptions"):
        from formcheck import config as _config

        return getattr(_config, name)

    if name == "Announcer":
        from formcheck.a11y.announcer import Announcer

        return Announcer

    if name in ("FormValidator", "validate"):
        from formcheck.validation import server as _server

        return getattr(_server, name)

    if name in ("FieldResult", "ValidationResult"):
        from formcheck.validation import result as _result

        return getattr(_result, name)

    if name in ("FormcheckError", "MarkupError", "RuleError"):
        from formcheck import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
