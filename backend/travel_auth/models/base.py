"""Column mixins shared by the auth tables (SQLAlchemy 2.0 typed mappings)."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column


class StringPKMixin:
    """Opaque text primary key ``id``, generated by the application (UUID4)."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True)


class TimestampMixin:
    """
    ``created_at`` / ``updated_at`` columns for mutable rows.

    The service stamps both from its clock; the server defaults only cover
    rows inserted by hand or by migrations.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class ReprMixin:
    """
    ``<ClassName id=... attr=...>`` representation.

    Only attributes listed in ``__repr_attrs__`` are shown, so token values
    and password hashes stay out of debug output.
    """

    __repr_attrs__: ClassVar[tuple[str, ...]] = ("id",)

    def __repr__(self) -> str:
        parts = " ".join(f"{name}={getattr(self, name, None)!r}" for name in self.__repr_attrs__)
        return f"<{type(self).__name__} {parts}>"
