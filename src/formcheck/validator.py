"""Live field validation for one form.

``FieldValidator`` is what the page wires its events to. It resolves each
field's rule list once from the markup, runs the native constraint pass
and then the rules in order, and writes the outcome back into the form:

- failure: error class, ``aria-invalid="true"``, an inline
  ``<div id="{name}-error">`` linked through ``aria-describedby``
- success: error state removed, success class when configured

Usage::

    form = Form.parse(html)
    validator = FieldValidator(form)

    validator.blur("email")                # validate on leaving a field
    validator.input("password", "Passw0rd")
    if not validator.submit():             # focus target + error summary set
        return form.render()

Debounced checks need a running session::

    async with validator.session():
        validator.input("email", "someone@")   # checked 0.3 s after the last keystroke
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager

import anyio
from anyio.abc import TaskGroup
from bs4 import BeautifulSoup, Tag

from formcheck._internal.debounce import Debouncer
from formcheck.a11y.announcer import Announcer
from formcheck.config import ValidatorOptions
from formcheck.markup import Field, Form
from formcheck.templating import create_environment, render_error_summary, render_strength_meter
from formcheck.validation.checks import BUILTIN_CHECKS, Check, CheckContext, FieldAttributes
from formcheck.validation.constraints import check_validity
from formcheck.validation.result import FieldResult
from formcheck.validation.rules import Rule, build_rules, evaluate
from formcheck.validation.strength import password_strength

_log = logging.getLogger("formcheck.validation")

RULES_SCRIPT_ID = "validation-rules"
STRENGTH_ID = "password-strength"
SUMMARY_SELECTOR = ".validation-summary"

_CONFIRMATION_NAMES = ("confirm_password", "password_confirmation")


class FieldValidator:
    """Validate the fields of one form and keep its markup in sync.

    ``errors`` is the error map: field name to current message, with the
    entry removed as soon as the field validates again.
    """

    def __init__(
        self,
        form: Form | Tag | str,
        options: ValidatorOptions | None = None,
        *,
        checks: Mapping[str, Check] | None = None,
        announcer: Announcer | None = None,
    ) -> None:
        self.form = Form.of(form)
        self.options = options or ValidatorOptions()
        self.checks: dict[str, Check] = {**BUILTIN_CHECKS, **(checks or {})}
        self.announcer = announcer
        self.errors: dict[str, str] = {}
        self.validated: set[str] = set()
        self.focused: str | None = None
        self._resolved: dict[str, tuple[FieldAttributes, tuple[Rule, ...]]] = {}
        self._env = create_environment()
        self._task_group: TaskGroup | None = None
        self._debouncers: dict[str, Debouncer] = {}
        self.apply_server_rules()

    def __repr__(self) -> str:
        return f"<FieldValidator {self.form!r} errors={len(self.errors)}>"

    # -- setup ------------------------------------------------------------

    def apply_server_rules(self) -> None:
        """Copy ``#validation-rules`` JSON onto field attributes.

        ``required`` sets ``required``; ``min:N`` and ``max:N`` set
        ``minlength`` and ``maxlength``. Malformed JSON is logged and
        ignored.
        """
        script = self.form.by_id(RULES_SCRIPT_ID)
        if script is None:
            return
        try:
            declared = json.loads(script.get_text())
        except ValueError as exc:
            _log.warning("Failed to parse server validation rules: %s", exc)
            return
        if not isinstance(declared, dict):
            _log.warning("Failed to parse server validation rules: expected an object, got %s", type(declared).__name__)
            return

        for name, rules in declared.items():
            field = self.form.find(name)
            if field is None or not isinstance(rules, list):
                continue
            for rule in rules:
                if not isinstance(rule, str):
                    continue
                if rule == "required":
                    field.set("required")
                elif rule.startswith("min:"):
                    field.set("minlength", rule.split(":", 1)[1])
                elif rule.startswith("max:"):
                    field.set("maxlength", rule.split(":", 1)[1])
        self._resolved.clear()

    def refresh(self) -> None:
        """Re-read the form after markup was injected or changed.

        Cached rule lists are dropped and server rules re-applied; the
        error map keeps entries only for fields still present, and pending
        debounced checks of removed fields are cancelled.
        """
        self._resolved.clear()
        self.apply_server_rules()
        present = {f.name for f in self.form.validatable_fields()}
        for name in list(self.errors):
            if name not in present:
                del self.errors[name]
        self.validated &= present
        for name in list(self._debouncers):
            if name not in present:
                self._debouncers.pop(name).cancel()

    def resolve(self, field: Field | str) -> tuple[FieldAttributes, tuple[Rule, ...]]:
        """Attributes and rule list of *field*, built on first use."""
        field = self._field(field)
        if field.name not in self._resolved:
            attributes = FieldAttributes.of(field)
            self._resolved[field.name] = (attributes, build_rules(attributes))
        return self._resolved[field.name]

    def rules_for(self, field: Field | str) -> tuple[Rule, ...]:
        return self.resolve(field)[1]

    def _field(self, field: Field | str) -> Field:
        return self.form.field(field) if isinstance(field, str) else field

    # -- validation -------------------------------------------------------

    def check_field(self, field: Field | str) -> FieldResult:
        """Evaluate *field* without touching the markup."""
        field = self._field(field)
        attributes, rules = self.resolve(field)
        value = field.value
        context = CheckContext(attributes=attributes, values=self.form.values())
        if self.options.native_validation:
            state = check_validity(value, context)
            if not state:
                return FieldResult.failure(state.message)
        return evaluate(rules, value, context, self.checks)

    def validate_field(self, field: Field | str) -> bool:
        """Validate *field*, update its markup and the error map."""
        field = self._field(field)
        self.clear_field(field)
        result = self.check_field(field)
        if result:
            self._set_success(field)
            self.errors.pop(field.name, None)
        else:
            self._set_error(field, result.message)
            self.errors[field.name] = result.message
        self.validated.add(field.name)
        return result.valid

    def validate_form(self) -> bool:
        """Validate every field in document order; True only if all pass."""
        valid = True
        for field in self.form.validatable_fields():
            if not self.validate_field(field):
                valid = False
        return valid

    # -- events -----------------------------------------------------------

    def blur(self, field: Field | str) -> bool | None:
        """Field lost focus. Returns validity, or None when not validated."""
        if not self.options.validate_on_blur:
            return None
        return self.validate_field(field)

    def input(self, field: Field | str, value: str | None = None) -> None:
        """Field value changed (one keystroke)."""
        field = self._field(field)
        if value is not None:
            field.value = value

        if self.options.validate_on_input and field.name in self.validated:
            self.validate_field(field)

        if not self.options.real_time_validation:
            return
        if field.type == "email":
            self._debounced(field)
        elif field.type == "password":
            self.update_strength(field)
            self._revalidate_confirmation(field)

    def submit(self, values: Mapping[str, str] | None = None) -> bool:
        """Form submission. Returns whether it may proceed."""
        if values:
            self.form.set_values(values)
        if not self.options.submit_validation:
            return True
        if self.validate_form():
            self._update_summary()
            return True
        self.show_form_errors()
        return False

    def show_form_errors(self) -> Field | None:
        """Move focus to the first invalid field and refresh the summary."""
        first = next(
            (f for f in self.form.validatable_fields() if f.has_class(self.options.error_class)),
            None,
        )
        for field in self.form.fields():
            field.remove("autofocus")
        if first is not None:
            first.set("autofocus")
            self.focused = first.name
        self._update_summary()
        return first

    # -- session ----------------------------------------------------------

    @asynccontextmanager
    async def session(self) -> AsyncIterator[FieldValidator]:
        """Run debounce timers; pending checks are cancelled on exit."""
        async with anyio.create_task_group() as tg:
            self._task_group = tg
            try:
                yield self
            finally:
                self._task_group = None
                self._debouncers.clear()
                tg.cancel_scope.cancel()

    def _debounced(self, field: Field) -> None:
        if self._task_group is None:
            self.validate_field(field)
            return
        debouncer = self._debouncers.get(field.name)
        if debouncer is None:
            debouncer = Debouncer(self._task_group, self.options.debounce_delay)
            self._debouncers[field.name] = debouncer
        debouncer(self._validate_if_present, field.name)

    def _validate_if_present(self, name: str) -> None:
        field = self.form.find(name)
        if field is None:
            _log.debug("Skipping debounced check: field %r is gone", name)
            return
        self.validate_field(field)

    def pending(self, field: Field | str) -> bool:
        """Whether a debounced check for *field* is waiting to run."""
        name = field if isinstance(field, str) else field.name
        debouncer = self._debouncers.get(name)
        return debouncer is not None and debouncer.pending

    # -- password helpers -------------------------------------------------

    def update_strength(self, field: Field | str) -> None:
        """Render the strength meter into ``#password-strength``, if present."""
        field = self._field(field)
        if field.name != "password":
            return
        meter = self.form.by_id(STRENGTH_ID)
        if meter is None:
            return
        strength = password_strength(field.value)
        meter["class"] = ["password-strength", strength.css_class]
        self._replace_contents(meter, render_strength_meter(self._env, strength))

    def _revalidate_confirmation(self, field: Field) -> None:
        confirmation = next(
            (c for name in _CONFIRMATION_NAMES if (c := self.form.find(name)) is not None),
            None,
        )
        if confirmation is None:
            return
        if field.name == "password" and confirmation.value:
            self.validate_field(confirmation)
        elif field == confirmation:
            self.validate_field(confirmation)

    # -- markup state -----------------------------------------------------

    def clear_field(self, field: Field | str) -> None:
        field = self._field(field)
        field.remove_class(self.options.error_class, self.options.success_class)
        self._hide_message(field, "error")
        self._hide_message(field, "success")

    def _set_error(self, field: Field, message: str) -> None:
        field.remove_class(self.options.success_class)
        field.add_class(self.options.error_class)
        self._show_message(field, message, "error")
        field.set("aria-invalid", "true")
        field.set("aria-describedby", f"{field.name}-error")
        if self.announcer is not None:
            self.announcer.announce(message, "assertive")

    def _set_success(self, field: Field) -> None:
        field.remove_class(self.options.error_class)
        if self.options.show_success_state:
            field.add_class(self.options.success_class)
        self._hide_message(field, "error")
        field.remove("aria-invalid")
        field.remove("aria-describedby")

    def _show_message(self, field: Field, message: str, kind: str) -> None:
        message_id = f"{field.name}-{kind}"
        element = self.form.by_id(message_id)
        if element is None:
            display_class = (
                self.options.error_display_class if kind == "error" else self.options.success_display_class
            )
            element = self.form.new_tag("div", id=message_id)
            element["class"] = [display_class]
            anchor = self.form.closest(field, self.options.message_containers) or field.tag
            anchor.insert_after(element)
        element.string = message
        element["style"] = "display: block"

    def _hide_message(self, field: Field, kind: str) -> None:
        element = self.form.by_id(f"{field.name}-{kind}")
        if element is not None:
            element["style"] = "display: none"

    def _update_summary(self) -> None:
        summary = self.form.select_one(SUMMARY_SELECTOR)
        if summary is None:
            return
        self._replace_contents(summary, render_error_summary(self._env, self.errors))
        summary["style"] = "display: block" if self.errors else "display: none"

    @staticmethod
    def _replace_contents(element: Tag, html: str) -> None:
        element.clear()
        fragment = BeautifulSoup(html, "html.parser")
        for node in list(fragment.contents):
            element.append(node.extract())


def create_validator(
    form: Form | Tag | str,
    options: ValidatorOptions | None = None,
    **kwargs: object,
) -> FieldValidator:
    """Attach a validator to an arbitrary form.

    Keyword arguments override individual options::

        create_validator(form, show_success_state=False)
    """
    if kwargs:
        options = (options or ValidatorOptions()).with_changes(**kwargs)
    return FieldValidator(form, options)


def attach_all(document: Tag | str, **kwargs: object) -> list[FieldValidator]:
    """One validator per ``<form data-validate>`` in *document*.

    Options come from each form's ``data-validate-on-blur``,
    ``data-validate-on-input`` and ``data-show-success-state``.
    """
    if isinstance(document, str):
        document = BeautifulSoup(document, "html.parser")
    validators = []
    for element in document.find_all("form", attrs={"data-validate": True}):
        form = Form(element)
        validators.append(FieldValidator(form, ValidatorOptions.from_form(form), **kwargs))  # type: ignore[arg-type]
    return validators
