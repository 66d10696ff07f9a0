"""SQLAlchemy declarative schema for the friendship graph."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String, func
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from friendship_graph.models.friendship import MAX_PARTY_ID_LENGTH


class Base(DeclarativeBase):
    """Base class for SQLAlchemy declarative mappings."""


class DbFriendship(Base):
    """ORM mapping for a single friendship between two parties.

    ``party_low_id``/``party_high_id`` hold the pair sorted so the unique index
    covers the unordered pair regardless of who sent the invite.
    """

    __tablename__ = "friendships"
    __table_args__ = (
        Index("ix_friendships_requester", "requester_id", "pending"),
        Index("ix_friendships_recipient", "recipient_id", "pending"),
        Index("ix_friendships_blocker", "blocker_id"),
        Index("ix_friendships_pair_unique", "party_low_id", "party_high_id", unique=True),
        CheckConstraint("requester_id <> recipient_id", name="ck_friendships_not_self"),
        CheckConstraint(
            "blocker_id IS NULL OR blocker_id = requester_id OR blocker_id = recipient_id",
            name="ck_friendships_blocker_is_party",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    requester_id: Mapped[str] = mapped_column(String(MAX_PARTY_ID_LENGTH), nullable=False)
    recipient_id: Mapped[str] = mapped_column(String(MAX_PARTY_ID_LENGTH), nullable=False)
    party_low_id: Mapped[str] = mapped_column(String(MAX_PARTY_ID_LENGTH), nullable=False)
    party_high_id: Mapped[str] = mapped_column(String(MAX_PARTY_ID_LENGTH), nullable=False)
    pending: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    blocker_id: Mapped[str | None] = mapped_column(String(MAX_PARTY_ID_LENGTH), nullable=True)
    version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    last_edited_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


def create_all(engine: Engine) -> None:
    """Create database tables for the schema."""
    Base.metadata.create_all(engine, checkfirst=True)


def drop_all(engine: Engine) -> None:
    """Drop every table owned by the schema."""
    Base.metadata.drop_all(engine, checkfirst=True)


__all__ = ["Base", "DbFriendship", "create_all", "drop_all"]
