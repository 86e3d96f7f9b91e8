"""Build the authentication stack once per app and expose it to the views."""

from __future__ import annotations

import logging

from flask import Flask

from socialnet.core.extensions import get_redis
from socialnet.infra.jwt.pyjwt_token_signer import JWTTokenSigner
from socialnet.infra.redis.redis_refresh_ledger import RedisRefreshTokenLedger
from socialnet.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from socialnet.infra.sqlalchemy.sql_refresh_ledger import SQLRefreshTokenLedger
from socialnet.services._shared.durations import parse_duration
from socialnet.services._shared.ports import InMemoryRefreshTokenLedger, RefreshTokenLedger
from socialnet.services.auth.service import SessionManager
from socialnet.services.users.service import UserService

log = logging.getLogger(__name__)

LEDGER_BACKENDS = ("sql", "redis", "memory")


def build_ledger(app: Flask) -> RefreshTokenLedger:
    """Instantiate the refresh-token ledger selected by ``REFRESH_LEDGER_BACKEND``.

    :raises RuntimeError: On an unknown backend name.
    """
    backend = str(app.config.get("REFRESH_LEDGER_BACKEND", "sql")).strip().lower()
    lifetime = parse_duration(app.config["JWT_REFRESH_EXPIRATION"])
    if backend == "sql":
        return SQLRefreshTokenLedger(lifetime)
    if backend == "redis":
        return RedisRefreshTokenLedger(get_redis(app), lifetime)
    if backend == "memory":
        return InMemoryRefreshTokenLedger(lifetime)
    raise RuntimeError(
        f"Unknown REFRESH_LEDGER_BACKEND {backend!r}; expected one of {LEDGER_BACKENDS}."
    )


def init_app(app: Flask) -> None:
    """Wire hasher, signer and ledger into the services stored on ``app.extensions``.

    Refuses to start (``ValueError``) when the access and refresh secrets are
    equal or a lifetime is malformed.
    """
    hasher = WerkzeugPasswordHasher(method=app.config.get("PASSWORD_HASH_METHOD", "scrypt"))
    signer = JWTTokenSigner(
        access_secret=app.config["JWT_ACCESS_SECRET"],
        refresh_secret=app.config["JWT_REFRESH_SECRET"],
        access_lifetime=parse_duration(app.config["JWT_ACCESS_EXPIRATION"]),
        refresh_lifetime=parse_duration(app.config["JWT_REFRESH_EXPIRATION"]),
        algorithm=app.config.get("JWT_ALGORITHM", "HS256"),
    )
    ledger = build_ledger(app)

    app.extensions["session_manager"] = SessionManager(
        hasher=hasher, signer=signer, ledger=ledger
    )
    app.extensions["user_service"] = UserService()
    log.debug("services.ready ledger=%s", type(ledger).__name__)
