"""Schema-level checks on the ``users`` table."""

from __future__ import annotations

from sqlalchemy import UniqueConstraint, inspect

from socialnet.core.extensions import db
from socialnet.models.user import User


def test_email_and_username_are_backed_only_by_unique_constraints():
    table = User.__table__
    uniques = {c.name for c in table.constraints if isinstance(c, UniqueConstraint)}

    assert {"uq_users_email", "uq_users_username"} <= uniques
    assert {ix.name for ix in table.indexes}.isdisjoint({"ix_users_email", "ix_users_username"})


def test_created_schema_has_no_duplicate_user_indexes(app, session):
    inspector = inspect(db.engine)
    names = {ix["name"] for ix in inspector.get_indexes("users")}

    assert "ix_users_email" not in names
    assert "ix_users_username" not in names
