from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """
    Port for one-way salted password hashing.

    ``verify`` returns ``False`` on a mismatch and raises only when the hash
    itself cannot be processed.
    """

    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str) -> bool: ...
