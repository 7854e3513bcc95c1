from __future__ import annotations

from collections.abc import Callable
from typing import Any, AsyncContextManager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wastebot.core.submission import INVENTORY_TABLE, SubmissionError
from wastebot.db.repositories import InventoryItemRepository
from wastebot.db.session import get_session


SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]


class SqlRecordStore:
    """Record store backed by the bot's SQL database."""

    tables = (INVENTORY_TABLE,)

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self.session_factory = session_factory

    async def insert(self, table: str, records: list[dict[str, Any]]) -> None:
        if table not in self.tables:
            raise SubmissionError(f"Unknown table: {table}")
        try:
            async with self.session_factory() as session:
                await InventoryItemRepository(session).insert_many(records)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise SubmissionError(str(e)) from e
