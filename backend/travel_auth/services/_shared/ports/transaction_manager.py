from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar

T = TypeVar("T")


class TransactionManager(Protocol):
    """
    Port running a unit of work atomically across stores.

    ``work`` is committed when it returns and rolled back when it raises; the
    exception is re-raised unchanged. Store calls made inside ``work`` join
    the same transaction, and nested ``run_in_tx`` calls join the outer one.
    """

    def run_in_tx(self, work: Callable[[], T]) -> T: ...
