"""Canonical validators for the application's core fields.

Each returns a ``Sanitized`` triple: whether the input is acceptable, the
first error, and the cleaned value to store. Blank input is an error here;
these back the server rules, which skip blank values before calling them.
"""

import re
from dataclasses import dataclass

_EMAIL_RE = re.compile(
    r"^[A-Za-z0-9.!#$%&*+/=?^_`{|}~\-]+"
    r"@[A-Za-z0-9](?:[A-Za-z0-9\-]*[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9\-]*[A-Za-z0-9])?)+$"
)
_UNSAFE_CHARS_RE = re.compile(r"[<>\"']")
_SCRIPT_RE = re.compile(r"<script|javascript:|data:|vbscript:", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")


@dataclass(frozen=True, slots=True)
class Sanitized:
    valid: bool
    error: str = ""
    value: str = ""

    def __bool__(self) -> bool:
        return self.valid


def _reject(error: str) -> Sanitized:
    return Sanitized(valid=False, error=error)


def validate_email(email: str) -> Sanitized:
    email = email.strip()
    if not email:
        return _reject("Email address is required")
    if len(email) > 255:
        return _reject("Email address is too long")
    if _UNSAFE_CHARS_RE.search(email):
        return _reject("Email contains invalid characters")
    if not _EMAIL_RE.match(email) or ".." in email:
        return _reject("Please enter a valid email address")
    return Sanitized(valid=True, value=email.lower())


def validate_password(password: str, require_strength: bool = True) -> Sanitized:
    """Length 8..128; with *require_strength*, lower, upper and digit too."""
    if not password:
        return _reject("Password is required")
    if len(password) < 8:
        return _reject("Password must be at least 8 characters long")
    if len(password) > 128:
        return _reject("Password is too long (max 128 characters)")
    if require_strength:
        if not re.search(r"[a-z]", password):
            return _reject("Password must contain at least one lowercase letter")
        if not re.search(r"[A-Z]", password):
            return _reject("Password must contain at least one uppercase letter")
        if not re.search(r"\d", password):
            return _reject("Password must contain at least one number")
    return Sanitized(valid=True, value=password)


def validate_name(name: str) -> Sanitized:
    name = name.strip()
    if not name:
        return _reject("Name is required")
    if len(name) < 2:
        return _reject("Name must be at least 2 characters long")
    if len(name) > 100:
        return _reject("Name is too long (max 100 characters)")
    if _SCRIPT_RE.search(name):
        return _reject("Name contains invalid content")
    name = _UNSAFE_CHARS_RE.sub("", name)
    return Sanitized(valid=True, value=name)


def validate_case_name(case_name: str) -> Sanitized:
    case_name = case_name.strip()
    if not case_name:
        return _reject("Case name is required")
    if len(case_name) < 3:
        return _reject("Case name must be at least 3 characters long")
    if len(case_name) > 200:
        return _reject("Case name is too long (max 200 characters)")
    case_name = _UNSAFE_CHARS_RE.sub("", _TAG_RE.sub("", case_name))
    return Sanitized(valid=True, value=case_name)
