from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import secrets
from dataclasses import dataclass

from ..core.constants import PBKDF2_HASH_BYTES, PBKDF2_ITERATIONS, SALT_BYTES
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class HashedPassword:
    hashed_password: str
    salt: str


class PasswordHasher:
    """Salted PBKDF2-HMAC-SHA256 hashing for manager passwords.

    Hash and salt are both stored base64 encoded. Given the same password and
    salt the derivation is deterministic, which is what ``verify`` relies on.
    """

    def __init__(self, *, iterations: int = PBKDF2_ITERATIONS, hash_bytes: int = PBKDF2_HASH_BYTES):
        self._iterations = int(iterations)
        self._hash_bytes = int(hash_bytes)

    def _derive(self, password: str, salt: bytes) -> str:
        derived = hashlib.pbkdf2_hmac(
            "sha256",
            password.encode("utf-8"),
            salt,
            self._iterations,
            dklen=self._hash_bytes,
        )
        return base64.b64encode(derived).decode("ascii")

    def hash(self, password: str) -> HashedPassword:
        if not password:
            raise ValidationError("password is required")

        salt = secrets.token_bytes(SALT_BYTES)
        return HashedPassword(
            hashed_password=self._derive(password, salt),
            salt=base64.b64encode(salt).decode("ascii"),
        )

    def rehash(self, password: str, salt: str) -> str:
        """Regenerate the hash of ``password`` under an existing base64 ``salt``."""
        if not password or not salt:
            raise ValidationError("password and salt are required")

        try:
            salt_bytes = base64.b64decode(salt, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("salt is not valid base64")

        return self._derive(password, salt_bytes)

    def verify(self, password: str, salt: str, expected_hash: str) -> bool:
        if not password or not salt or not expected_hash:
            raise ValidationError("password, salt and hash are required")

        candidate = self.rehash(password, salt)
        return hmac.compare_digest(candidate.encode("ascii"), expected_hash.encode("utf-8"))
