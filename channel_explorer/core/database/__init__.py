"""Declarative base shared by SQL-backed models."""

from channel_explorer.core.database.base import NAMING_CONVENTION, Base, TimestampMixin

__all__ = ["NAMING_CONVENTION", "Base", "TimestampMixin"]
