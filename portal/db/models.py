"""SQLAlchemy models."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, String, func

from .session import Base


class SessionRecord(Base):
    __tablename__ = "sessions"

    token = Column(String(128), primary_key=True)
    identifier = Column(String(255), nullable=False, index=True)
    role = Column(String(64), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
