"""Liveness and dependency status."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from socialnet.api.deps import json_response, timing
from socialnet.core.extensions import db

bp = Blueprint("health", __name__)


def _database_status() -> str:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        return "fail"
    return "ok"


def _redis_status() -> str | None:
    client = current_app.extensions.get("redis_client")
    if client is None:
        return None
    try:
        client.ping()
    except RedisError:
        current_app.logger.exception("healthcheck.redis_error")
        return "fail"
    return "ok"


@bp.get("/health")
@timing
def healthcheck():
    """Report the process as up, plus the state of the stores it talks to.

    ``redis`` is only present when a Redis client is configured.
    """

    payload = {
        "status": "ok",
        "db": _database_status(),
        "ledger": current_app.config.get("REFRESH_LEDGER_BACKEND", "sql"),
        "version": current_app.config.get("APP_VERSION", "dev"),
        "commit": current_app.config.get("APP_COMMIT", "unknown"),
    }
    redis_status = _redis_status()
    if redis_status is not None:
        payload["redis"] = redis_status
    return json_response(payload)
