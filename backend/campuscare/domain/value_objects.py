"""
CampusCare Backend — Value Objects
====================================

What:  Immutable, self-validating wrappers for email addresses and plain-text
       passwords.
How:   Construction normalizes and validates; an invalid value raises
       ValidationError naming the wire field, so a value object that exists
       is always valid.
"""

import re
from dataclasses import dataclass

from campuscare.exceptions import ValidationError

# One "@", a dot in the domain, no whitespace
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MAX_EMAIL_LENGTH = 255

# bcrypt only hashes the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class Email:
    value: str

    def __post_init__(self):
        normalized = (self.value or "").strip().lower()
        if not normalized or len(normalized) > MAX_EMAIL_LENGTH:
            raise ValidationError(message="Email is required", field="email")
        if not _EMAIL_PATTERN.match(normalized):
            raise ValidationError(
                message=f"'{self.value}' is not a valid email address",
                field="email",
            )
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Password:
    """
    A plain-text password that satisfies the account password rule.

    Rule: at least `min_length` characters (6 by default), no complexity
    requirements. The upper bound is bcrypt's 72-byte input limit.
    """

    value: str
    min_length: int = 6

    def __post_init__(self):
        if self.value is None or len(self.value) < self.min_length:
            raise ValidationError(
                message=f"Password must be at least {self.min_length} characters long",
                field="password",
            )
        if len(self.value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                message=f"Password must be at most {MAX_PASSWORD_BYTES} bytes long",
                field="password",
            )

    def __repr__(self) -> str:
        return "Password(***)"

    __str__ = __repr__
