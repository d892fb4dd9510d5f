"""
Larder Backend — Calorie Entry SQLAlchemy Model
================================================

What:  ORM model for the append-only `calories` log.

Timestamps:
    created_at is assigned at insertion (Python-side UTC default, with a
    CURRENT_TIMESTAMP server default for rows written by other tools).
    Listing orders by created_at DESC, then id DESC so entries written in
    the same instant still come back newest first.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from larder.database import Base


class CalorieEntry(Base):
    """One logged food with its calorie count."""

    __tablename__ = "calories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    food: Mapped[str] = mapped_column(String, nullable=False)
    calories: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_calories_user_created", "user_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"<CalorieEntry(id={self.id}, food='{self.food}', "
            f"calories={self.calories}, created_at='{self.created_at}')>"
        )
