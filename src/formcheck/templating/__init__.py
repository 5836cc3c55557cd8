"""Kida environment and the fragments the validator writes into forms.

The environment is created once per validator and autoescapes, so error
messages echoing user input are safe in the summary.
"""

from collections.abc import Mapping

from kida import Environment

from formcheck.templating.filters import BUILTIN_FILTERS
from formcheck.validation.strength import Strength

ERROR_SUMMARY = """\
{% if errors %}<div class="alert alert-subtle-danger" role="alert">
<h6 class="alert-heading"><i class="fas fa-exclamation-circle me-2"></i>Please correct the following errors:</h6>
<ul class="mb-0">{% for message in errors %}<li>{{ message }}</li>{% end %}</ul>
</div>{% end %}"""

STRENGTH_METER = """\
<div class="strength-bar"><div class="strength-fill" style="width: {{ strength.percentage }}%"></div></div>
<div class="strength-text">{{ strength.text }}</div>"""


def create_environment() -> Environment:
    """Create the kida Environment used for validator fragments."""
    env = Environment(autoescape=True)
    env.update_filters(BUILTIN_FILTERS)
    return env


def render_error_summary(env: Environment, errors: Mapping[str, str]) -> str:
    """Alert listing every message in *errors*; empty when there are none."""
    return env.from_string(ERROR_SUMMARY).render({"errors": list(errors.values())})


def render_strength_meter(env: Environment, strength: Strength) -> str:
    return env.from_string(STRENGTH_METER).render({"strength": strength})


__all__ = [
    "BUILTIN_FILTERS",
    "create_environment",
    "render_error_summary",
    "render_strength_meter",
]
