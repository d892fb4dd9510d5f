"""
Larder Backend — Persistence Repository
========================================

What:  The only code that talks to the database.
How:   `Repository` is the abstract contract; `SqlRepository` implements
       it with async SQLAlchemy. Every method opens its own session via
       `session_scope()` and runs one statement, so each write is atomic
       on its own and nothing spans multiple statements.
Who:   Constructed once in `main.create_app()` and handed to the services.

Scoping:
    Every method that touches owned rows takes the caller's `user_id` and
    puts it in the WHERE clause. Deleting a shopping item matches
    `id AND user_id`; a foreign or missing id simply affects zero rows.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from sqlalchemy import delete, select, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from larder.database import Base, build_engine, build_session_factory, session_scope
from larder.models import CalorieEntry, Ingredient, ShoppingItem, User

logger = logging.getLogger(__name__)


class Repository(ABC):
    """
    Abstract persistence interface.

    Contract:
        - Methods are coroutines; each maps to one SQL statement.
        - Driver errors propagate unchanged; services translate them
          into InternalError with the operation's message.
    """

    @abstractmethod
    async def create_schema(self) -> None:
        """Create all tables that do not exist yet."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the database answers a trivial query."""

    @abstractmethod
    async def close(self) -> None:
        """Release pooled connections."""

    # ── Users ─────────────────────────────────────────────────────────────
    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def create_user(self, username: str, email: str, password_hash: str) -> User:
        ...

    @abstractmethod
    async def top_users_by_score(self, limit: int) -> List[User]:
        ...

    # ── Ingredients ───────────────────────────────────────────────────────
    @abstractmethod
    async def add_ingredient(
        self, user_id: int, name: str, quantity: str, expiry: Optional[str]
    ) -> Ingredient:
        ...

    @abstractmethod
    async def list_ingredients(self, user_id: int) -> List[Ingredient]:
        ...

    @abstractmethod
    async def list_ingredient_names(self, user_id: int) -> List[str]:
        ...

    # ── Calories ──────────────────────────────────────────────────────────
    @abstractmethod
    async def add_calorie_entry(self, user_id: int, food: str, calories: int) -> CalorieEntry:
        ...

    @abstractmethod
    async def list_calorie_entries(self, user_id: int) -> List[CalorieEntry]:
        """Entries newest first."""

    # ── Shopping list ─────────────────────────────────────────────────────
    @abstractmethod
    async def add_shopping_item(self, user_id: int, name: str, quantity: str) -> ShoppingItem:
        ...

    @abstractmethod
    async def list_shopping_items(self, user_id: int) -> List[ShoppingItem]:
        ...

    @abstractmethod
    async def delete_shopping_item(self, user_id: int, item_id: int) -> int:
        """Delete one owned item; returns the number of rows removed (0 or 1)."""


class SqlRepository(Repository):
    """Async SQLAlchemy implementation of `Repository`."""

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        self.engine = engine
        self.session_factory = session_factory or build_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str, **engine_options) -> "SqlRepository":
        """Build the engine and session factory for `database_url`."""
        engine = build_engine(database_url, **engine_options)
        logger.info("Repository bound to %s", engine.url.render_as_string(hide_password=True))
        return cls(engine)

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready (%d tables)", len(Base.metadata.tables))

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def close(self) -> None:
        await self.engine.dispose()

    async def _add(self, row):
        async with session_scope(self.session_factory) as session:
            session.add(row)
            # flush assigns the autoincrement id before commit
            await session.flush()
        return row

    async def _scalars(self, statement) -> Sequence:
        async with session_scope(self.session_factory) as session:
            result = await session.execute(statement)
            return result.scalars().all()

    # ── Users ─────────────────────────────────────────────────────────────
    async def get_user_by_email(self, email: str) -> Optional[User]:
        async with session_scope(self.session_factory) as session:
            result = await session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def create_user(self, username: str, email: str, password_hash: str) -> User:
        return await self._add(
            User(username=username, email=email, password_hash=password_hash)
        )

    async def top_users_by_score(self, limit: int) -> List[User]:
        rows = await self._scalars(
            select(User).order_by(User.score.desc()).limit(limit)
        )
        return list(rows)

    # ── Ingredients ───────────────────────────────────────────────────────
    async def add_ingredient(
        self, user_id: int, name: str, quantity: str, expiry: Optional[str]
    ) -> Ingredient:
        return await self._add(
            Ingredient(name=name, quantity=quantity, expiry=expiry, user_id=user_id)
        )

    async def list_ingredients(self, user_id: int) -> List[Ingredient]:
        rows = await self._scalars(
            select(Ingredient).where(Ingredient.user_id == user_id).order_by(Ingredient.id)
        )
        return list(rows)

    async def list_ingredient_names(self, user_id: int) -> List[str]:
        rows = await self._scalars(
            select(Ingredient.name).where(Ingredient.user_id == user_id).order_by(Ingredient.id)
        )
        return list(rows)

    # ── Calories ──────────────────────────────────────────────────────────
    async def add_calorie_entry(self, user_id: int, food: str, calories: int) -> CalorieEntry:
        return await self._add(CalorieEntry(food=food, calories=calories, user_id=user_id))

    async def list_calorie_entries(self, user_id: int) -> List[CalorieEntry]:
        rows = await self._scalars(
            select(CalorieEntry)
            .where(CalorieEntry.user_id == user_id)
            .order_by(CalorieEntry.created_at.desc(), CalorieEntry.id.desc())
        )
        return list(rows)

    # ── Shopping list ─────────────────────────────────────────────────────
    async def add_shopping_item(self, user_id: int, name: str, quantity: str) -> ShoppingItem:
        return await self._add(ShoppingItem(name=name, quantity=quantity, user_id=user_id))

    async def list_shopping_items(self, user_id: int) -> List[ShoppingItem]:
        rows = await self._scalars(
            select(ShoppingItem).where(ShoppingItem.user_id == user_id).order_by(ShoppingItem.id)
        )
        return list(rows)

    async def delete_shopping_item(self, user_id: int, item_id: int) -> int:
        async with session_scope(self.session_factory) as session:
            result = await session.execute(
                delete(ShoppingItem).where(
                    ShoppingItem.id == item_id,
                    ShoppingItem.user_id == user_id,
                )
            )
            return result.rowcount or 0
