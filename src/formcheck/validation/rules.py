"""Per-field rule lists.

A field's rules are built once from its declared attributes and name,
then evaluated in a fixed order until the first failure:

1. ``required``
2. type-specific: ``email``, ``url``, ``number``
3. length: ``minlength``, ``maxlength``
4. range: ``min``, ``max``
5. ``pattern``
6. name-based: ``password``, ``confirmed``, ``casename``
7. each ``data-validators`` entry, in declared order
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

from formcheck.validation.checks import (
    UNVALIDATABLE_MESSAGE,
    Check,
    CheckContext,
    FieldAttributes,
    confirmation_target,
)
from formcheck.validation.result import FieldResult

_log = logging.getLogger("formcheck.validation")


class RuleKind(StrEnum):
    REQUIRED = "required"
    EMAIL = "email"
    URL = "url"
    NUMBER = "number"
    MINLENGTH = "minlength"
    MAXLENGTH = "maxlength"
    MIN = "min"
    MAX = "max"
    PATTERN = "pattern"
    PASSWORD = "password"
    CONFIRMED = "confirmed"
    CASENAME = "casename"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class Rule:
    """One entry of a field's rule list.

    ``check`` names the check to run. It equals ``kind`` for built-in
    rules; for ``CUSTOM`` it is the ``data-validators`` entry.
    """

    kind: RuleKind
    check: str

    @classmethod
    def of(cls, kind: RuleKind) -> Rule:
        return cls(kind=kind, check=kind.value)

    @classmethod
    def custom(cls, name: str) -> Rule:
        return cls(kind=RuleKind.CUSTOM, check=name)


_TYPE_RULES = {
    "email": RuleKind.EMAIL,
    "url": RuleKind.URL,
    "number": RuleKind.NUMBER,
}


def build_rules(attributes: FieldAttributes) -> tuple[Rule, ...]:
    """Build the ordered rule list for a field."""
    kinds: list[RuleKind] = []
    if attributes.required:
        kinds.append(RuleKind.REQUIRED)
    if attributes.type in _TYPE_RULES:
        kinds.append(_TYPE_RULES[attributes.type])
    if attributes.minlength is not None:
        kinds.append(RuleKind.MINLENGTH)
    if attributes.maxlength is not None:
        kinds.append(RuleKind.MAXLENGTH)
    if attributes.min is not None:
        kinds.append(RuleKind.MIN)
    if attributes.max is not None:
        kinds.append(RuleKind.MAX)
    if attributes.pattern is not None:
        kinds.append(RuleKind.PATTERN)
    if attributes.name == "password":
        kinds.append(RuleKind.PASSWORD)
    if confirmation_target(attributes.name) is not None:
        kinds.append(RuleKind.CONFIRMED)
    if attributes.name == "case_name":
        kinds.append(RuleKind.CASENAME)

    rules = [Rule.of(kind) for kind in kinds]
    rules.extend(Rule.custom(name) for name in attributes.validators)
    return tuple(rules)


def evaluate(
    rules: Sequence[Rule],
    value: str,
    context: CheckContext,
    checks: Mapping[str, Check],
) -> FieldResult:
    """Run *rules* in order; the first failing check wins.

    A check that raises, or a rule naming an unknown check, fails closed.
    """
    field_name = context.attributes.name
    for rule in rules:
        check = checks.get(rule.check)
        if check is None:
            _log.warning("Unknown check %r on field %r", rule.check, field_name)
            return FieldResult.failure(UNVALIDATABLE_MESSAGE)
        try:
            message = check(value, context)
        except Exception:
            _log.warning("Check %r raised on field %r", rule.check, field_name, exc_info=True)
            return FieldResult.failure(UNVALIDATABLE_MESSAGE)
        if message is not None:
            return FieldResult.failure(message)
    return FieldResult.success()
