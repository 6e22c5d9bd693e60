from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, String

from .base import Base


class OptionRecord(Base):
    """One named aggregate of menu state (settings, items, history, ...)."""

    __tablename__ = "options"

    name = Column(String(191), primary_key=True)
    value = Column(JSON, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


__all__ = ["OptionRecord"]
