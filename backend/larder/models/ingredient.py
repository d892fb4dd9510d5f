"""
Larder Backend — Ingredient SQLAlchemy Model
=============================================

What:  ORM model for the `ingredients` table (the household inventory).

    - quantity and expiry are free text ("2 cans", "2024-05-01", "next week");
      expiry is usually whatever the expiry scan extracted.
    - user_id: owner; every query on this table filters on it.
"""

from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from larder.database import Base


class Ingredient(Base):
    """An item in a user's inventory."""

    __tablename__ = "ingredients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    quantity: Mapped[str] = mapped_column(String, nullable=False)
    expiry: Mapped[Optional[str]] = mapped_column(String, nullable=True, default=None)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_ingredients_user_id", "user_id"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Ingredient(id={self.id}, name='{self.name}', user_id={self.user_id})>"
