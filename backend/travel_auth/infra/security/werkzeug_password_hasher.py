# travel_auth/infra/security/werkzeug_password_hasher.py
from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher:
    """
    Salted one-way password hashing backed by :mod:`werkzeug.security`.

    :param method: Werkzeug method string (``"scrypt"`` by default; tests may
        pass a cheap ``"pbkdf2:sha256:1000"``).
    :param salt_length: Length of the random salt.
    """

    method: str = "scrypt"
    salt_length: int = 16

    def hash(self, password: str) -> str:
        if not isinstance(password, str) or not password:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(password, method=self.method, salt_length=self.salt_length)

    def verify(self, password: str, password_hash: str) -> bool:
        if not password_hash:
            return False
        # ``check_password_hash`` is untyped; coerce to bool for mypy.
        return bool(check_password_hash(password_hash, password))
