"""Declarative base shared by the ORM schema (alembic + health probe)."""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base mold."""
    pass


__all__ = ["Base"]
