"""
Larder Backend — Shopping Item SQLAlchemy Model
================================================

What:  ORM model for the `shopping_list` table. The only table with a
       delete endpoint; deletes match on both id and owner.
"""

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from larder.database import Base


class ShoppingItem(Base):
    """An entry on a user's shopping list."""

    __tablename__ = "shopping_list"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    quantity: Mapped[str] = mapped_column(String, nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_shopping_list_user_id", "user_id"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<ShoppingItem(id={self.id}, name='{self.name}', user_id={self.user_id})>"
