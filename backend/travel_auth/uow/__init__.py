"""Transaction boundary for the SQLAlchemy-backed stores."""

from .sqlalchemy_uow import SQLAlchemyTransactionManager

__all__ = ["SQLAlchemyTransactionManager"]
