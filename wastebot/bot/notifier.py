from __future__ import annotations

import logging
from html import escape

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from wastebot.core.submission import NotificationKind


ICONS = {
    NotificationKind.SUCCESS: "✅",
    NotificationKind.DESTRUCTIVE: "❌",
}


class MessageNotifier:
    """Delivers form notifications as chat messages."""

    def __init__(self, bot: Bot, chat_id: int) -> None:
        self.bot = bot
        self.chat_id = chat_id

    async def notify(self, kind: NotificationKind, title: str, description: str) -> None:
        text = f"{ICONS[kind]} <b>{escape(title)}</b>\n{escape(description)}"
        try:
            await self.bot.send_message(chat_id=self.chat_id, text=text)
        except TelegramAPIError as e:
            logging.error(f"Failed to deliver notification to {self.chat_id}: {e}")
