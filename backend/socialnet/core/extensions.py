"""Flask extension instances and the store lifecycle hooks."""

from __future__ import annotations

import logging

import redis
from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError
from sqlalchemy import MetaData

log = logging.getLogger(__name__)

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Extension objects are unbound until init_app(); services never import them.
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
limiter = Limiter(get_remote_address)


def init_app(app: Flask) -> None:
    """Bind SQLAlchemy, migrations, rate limiting and the optional Redis client.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`socialnet.models` package so SQLAlchemy metadata is ready for
        migrations.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from socialnet import models as _models  # noqa: F401

    migrate.init_app(app, db)
    limiter.init_app(app)

    app.extensions.pop("redis_client", None)
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        return

    client = redis.Redis.from_url(redis_url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = client


def get_redis(app: Flask) -> redis.Redis:
    """Return the Redis client bound to ``app``."""
    client = app.extensions.get("redis_client")
    if client is None:
        raise RuntimeError("Redis client is not initialized. Set REDIS_URL first.")
    return client


def shutdown(app: Flask) -> None:
    """Release the store handles opened by :func:`init_app`.

    Disposes the SQLAlchemy engines and closes the Redis connection pool.
    Called once per process at shutdown (see ``gunicorn.conf.py``).
    """
    with app.app_context():
        db.session.remove()
        for engine in db.engines.values():
            engine.dispose()

    client = app.extensions.pop("redis_client", None)
    if client is not None:
        try:
            client.close()
        except RedisError:
            log.warning("redis.close_failed", exc_info=True)
