from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from fupisha.models.base import Base


class URL(Base):
    """
    Short alias to long URL mapping.

    Owned by exactly one user; the foreign key is enforced by the backend.
    """
    __tablename__ = "urls"
    __table_args__ = (Index("ix_urls_owner_id", "owner_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    # unique=True renders an inline UNIQUE constraint in CREATE TABLE
    alias = Column(String(32), unique=True, nullable=False)
    long_url = Column(String(2048), nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    total_hits = Column(Integer, nullable=False, default=0, server_default="0")
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
