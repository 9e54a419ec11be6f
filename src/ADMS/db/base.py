# src/ADMS/db/base.py
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# -----------------------------------------------------------------------------
# Declarative Base with naming conventions (Alembic autogenerate relies on them)
# -----------------------------------------------------------------------------
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Shared declarative base for all models."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def new_id() -> str:
    return str(uuid.uuid4())


# -----------------------------------------------------------------------------
# Opaque string primary key
# -----------------------------------------------------------------------------
class IDMixin:
    id: Mapped[str] = mapped_column(sa.String(255), primary_key=True, default=new_id)


# -----------------------------------------------------------------------------
# Audit timestamps; updated_at refreshes on every ORM/Core UPDATE
# -----------------------------------------------------------------------------
class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        onupdate=sa.func.now(),
        nullable=False,
    )


def fk(target: str, **kw) -> sa.ForeignKey:
    """ForeignKey that cascades deletes from the referenced row."""
    return sa.ForeignKey(target, ondelete="CASCADE", **kw)


__all__ = ["Base", "IDMixin", "TimestampMixin", "fk", "new_id", "NAMING_CONVENTION"]
