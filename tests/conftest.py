from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from wastebot.core.auth import AuthenticatedUser, UserRole
from wastebot.db.session import create_tables


VALID_VALUES = {
    "waste_type": "yarn_waste",
    "quantity": "50",
    "unit_price": "12.5",
    "location": "Mumbai",
    "description": "",
}


class FakeStore:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[tuple[str, list[dict]]] = []
        self.error = error
        self.gate: asyncio.Event | None = None

    async def insert(self, table, records):
        self.calls.append((table, records))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error


class RecordingNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple] = []

    async def notify(self, kind, title, description):
        self.sent.append((kind, title, description))


@pytest.fixture()
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def seller() -> AuthenticatedUser:
    return AuthenticatedUser(
        id="1",
        email="asha@example.com",
        role=UserRole.SELLER,
        name="Asha",
        company="Asha Mills",
    )


@pytest.fixture()
async def session_factory(tmp_path: Path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    yield async_sessionmaker(bind=engine, expire_on_commit=False)
    await engine.dispose()


def make_bot() -> MagicMock:
    bot = MagicMock()
    bot.send_message = AsyncMock()
    return bot


def make_message(text: str | None, user_id: int = 100) -> MagicMock:
    message = MagicMock()
    message.text = text
    message.from_user.id = user_id
    message.from_user.full_name = "Asha"
    message.chat.id = user_id
    message.answer = AsyncMock()
    message.edit_text = AsyncMock()
    message.bot = make_bot()
    return message


def make_callback(data: str, user_id: int = 100) -> MagicMock:
    callback = MagicMock()
    callback.data = data
    callback.from_user.id = user_id
    callback.from_user.full_name = "Asha"
    callback.answer = AsyncMock()
    callback.message = make_message(None, user_id)
    callback.bot = callback.message.bot
    return callback
