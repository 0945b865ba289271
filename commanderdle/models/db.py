"""
SQLAlchemy ORM models for persistent storage.

Models mirror the dataclass models but add database persistence.
"""

import datetime as dt
from typing import Any

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class DailyGameDB(Base):
    """
    A generated daily puzzle.

    At most one row exists per (date, mode).
    """

    __tablename__ = "daily_games"
    __table_args__ = (UniqueConstraint("date", "mode", name="uq_daily_game_date_mode"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    mode: Mapped[str] = mapped_column(String(20), default="normal")

    tournament_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tournament_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    player_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    player_standing: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_participants: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Section name -> [{quantity, name}, ...] in canonical order
    decklist: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    decklist_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<DailyGameDB(date={self.date}, mode={self.mode})>"
