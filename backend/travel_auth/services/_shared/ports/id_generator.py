from __future__ import annotations

import itertools
import threading
from typing import Protocol
from uuid import uuid4


class IdGenerator(Protocol):
    """Port producing unique identifiers for entities."""

    def new_id(self) -> str: ...


class UUIDGenerator(IdGenerator):
    """Random UUID4 identifiers (canonical hyphenated form)."""

    def new_id(self) -> str:
        return str(uuid4())


class SequentialIdGenerator(IdGenerator):
    """Predictable identifiers for unit tests (``id-1``, ``id-2``, ...)."""

    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._seq = itertools.count(1)
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            return f"{self._prefix}-{next(self._seq)}"
