"""Liveness and database readiness probe."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from travel_auth.api.deps import json_response, timing
from travel_auth.core.extensions import db

bp = Blueprint("health", __name__)


def _database_status() -> str:
    try:
        db.session.execute(select(1))
    except SQLAlchemyError:
        current_app.logger.exception("health.db_unreachable")
        db.session.rollback()
        return "fail"
    return "ok"


@bp.get("/health")
@timing
def healthcheck():
    """Report process and database health; 503 when the database is down."""

    db_status = _database_status()
    payload = {
        "status": "ok" if db_status == "ok" else "degraded",
        "db": db_status,
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    status = HTTPStatus.OK if db_status == "ok" else HTTPStatus.SERVICE_UNAVAILABLE
    return json_response(payload, status=status)
