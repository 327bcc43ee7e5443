from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from ..core.enums import AccessLevel


@dataclass(frozen=True)
class Manager:
    """Domain entity: a venue manager.

    ``password`` is the base64 PBKDF2 hash, except while ``is_password_reset``
    is set: then it is the one-time plaintext password handed out at
    provisioning and ``salt`` may be empty.
    """

    manager_id: str
    first_name: str
    last_name: str
    email: str
    username: str
    password: str
    salt: str
    is_password_reset: bool = False
    venue_ids: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Session:
    id: str
    session_id: str
    manager_id: str
    ip_address: str
    created_at: int
    access_level: AccessLevel
    is_active: bool = True


@dataclass(frozen=True)
class Principal:
    """Who is calling: produced by the authentication gate for each request."""

    manager_id: str
    access_level: AccessLevel


@dataclass(frozen=True)
class LoginResult:
    session_id: str
    access_level: AccessLevel

    def to_dict(self) -> dict:
        return {"sessionId": self.session_id, "accessLevel": self.access_level.value}


@dataclass(frozen=True)
class ManagerProfile:
    """Public subset of a manager; never carries password or salt."""

    first_name: str
    last_name: str
    email: str
    is_password_reset: bool

    def to_dict(self) -> dict:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "isPasswordReset": self.is_password_reset,
        }
