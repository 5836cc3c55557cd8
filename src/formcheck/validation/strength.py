"""Password strength scoring for the live strength meter."""

import re
from dataclasses import dataclass

_SPECIAL_RE = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


@dataclass(frozen=True, slots=True)
class Strength:
    score: int
    css_class: str
    text: str
    percentage: int


LEVELS = (
    Strength(0, "very-weak", "Very Weak", 0),
    Strength(1, "weak", "Weak", 20),
    Strength(2, "fair", "Fair", 40),
    Strength(3, "good", "Good", 60),
    Strength(4, "strong", "Strong", 80),
    Strength(5, "very-strong", "Very Strong", 100),
)


def password_strength(password: str) -> Strength:
    """Score one point each for length >= 8, lowercase, uppercase, digit, special."""
    passed = (
        len(password) >= 8,
        re.search(r"[a-z]", password) is not None,
        re.search(r"[A-Z]", password) is not None,
        re.search(r"\d", password) is not None,
        _SPECIAL_RE.search(password) is not None,
    )
    return LEVELS[sum(passed)]
