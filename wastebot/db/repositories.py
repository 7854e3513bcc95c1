from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from wastebot.core.auth import UserRole
from wastebot.db import models


class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_telegram_id(self, telegram_id: int) -> models.User | None:
        stmt: Select[tuple[models.User]] = select(models.User).where(
            models.User.telegram_id == telegram_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert_profile(
        self,
        telegram_id: int,
        email: str,
        name: str,
        role: UserRole,
        company: str | None = None,
    ) -> models.User:
        user = await self.get_by_telegram_id(telegram_id)
        if user:
            user.email = email
            user.name = name
            user.role = role
            user.company = company
            return user

        user = models.User(
            telegram_id=telegram_id,
            email=email,
            name=name,
            role=role,
            company=company,
        )
        self.session.add(user)
        return user

    async def list_admins(self) -> Sequence[models.User]:
        """Return list of all admin users."""
        stmt: Select[tuple[models.User]] = select(models.User).where(
            models.User.role == UserRole.ADMIN
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()


class InventoryItemRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def insert_many(self, records: list[dict[str, Any]]) -> list[models.InventoryItem]:
        items = [models.InventoryItem(**record) for record in records]
        self.session.add_all(items)
        return items

    async def list_recent(self, limit: int = 10) -> Sequence[models.InventoryItem]:
        stmt: Select[tuple[models.InventoryItem]] = (
            select(models.InventoryItem)
            .order_by(models.InventoryItem.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
