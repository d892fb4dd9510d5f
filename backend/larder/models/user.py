"""
Larder Backend — User SQLAlchemy Model
=======================================

What:  ORM model for the `users` table.
Who:   Written by registration, read by login and the leaderboard.

Table Design:
    - id: integer autoincrement, returned to the client as `userId`
    - email: unique; the unique index is the final arbiter for races
      between two registrations with the same address
    - password_hash: bcrypt hash string, never leaves the server
    - score: leaderboard points; no endpoint here writes it
"""

from sqlalchemy import Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from larder.database import Base


class User(Base):
    """A registered household member."""

    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String, nullable=False)

    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)

    password_hash: Mapped[str] = mapped_column(String, nullable=False)

    score: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', score={self.score})>"
