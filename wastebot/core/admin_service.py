from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aiogram import Bot

from aiogram.exceptions import TelegramAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from wastebot.db import models
from wastebot.db.repositories import InventoryItemRepository, UserRepository


@dataclass
class AdminService:
    session: AsyncSession

    @property
    def users(self) -> UserRepository:
        return UserRepository(self.session)

    @property
    def items(self) -> InventoryItemRepository:
        return InventoryItemRepository(self.session)

    async def list_recent_submissions(self, limit: int = 10) -> list[models.InventoryItem]:
        items = await self.items.list_recent(limit)
        return list(items)

    async def notify_admins(self, bot: Bot, text: str) -> None:
        """Send a message to all administrators."""
        admins = await self.users.list_admins()
        for admin in admins:
            try:
                await bot.send_message(chat_id=admin.telegram_id, text=text)
            except TelegramAPIError as e:
                logging.error(f"Failed to notify admin {admin.telegram_id}: {e}")
