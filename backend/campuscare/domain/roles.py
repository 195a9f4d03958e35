"""
CampusCare Backend — Role Enumeration
=======================================

What:  The fixed set of roles a user can hold, plus the per-role dashboard
       a client should open.
How:   `RoleName` is a str-valued Enum, so it compares equal to the stored
       role names and serializes as a plain string in JSON.
"""

from enum import Enum
from typing import Iterable, Optional

from campuscare.exceptions import ValidationError


class RoleName(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    MAINTENANCE = "maintenance"
    WELLNESS = "wellness"
    CAFETERIA = "cafeteria"
    ADMIN = "admin"

    @property
    def dashboard(self) -> str:
        """Client dashboard identifier for this role."""
        return _DASHBOARDS[self]

    @property
    def precedence(self) -> int:
        """Lower value wins when a user holds several roles."""
        return _PRECEDENCE.index(self)

    @classmethod
    def parse(cls, value: str) -> "RoleName":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValidationError(
                message=f"Unknown role '{value}'. Valid roles: {', '.join(r.value for r in cls)}",
                field="roles",
            )

    @classmethod
    def primary(cls, roles: Iterable["RoleName"]) -> Optional["RoleName"]:
        """Highest-precedence role held, or None for a user with no roles."""
        held = sorted(roles, key=lambda r: r.precedence)
        return held[0] if held else None


_PRECEDENCE = [
    RoleName.ADMIN,
    RoleName.MAINTENANCE,
    RoleName.WELLNESS,
    RoleName.CAFETERIA,
    RoleName.TEACHER,
    RoleName.STUDENT,
]

_DASHBOARDS = {
    RoleName.STUDENT: "student-home",
    RoleName.TEACHER: "teacher-home",
    RoleName.MAINTENANCE: "maintenance-dashboard",
    RoleName.WELLNESS: "wellness-dashboard",
    RoleName.CAFETERIA: "cafeteria-dashboard",
    RoleName.ADMIN: "admin-dashboard",
}
