from __future__ import annotations

import re
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from wastebot.core.auth import AuthenticatedUser, UserRole
from wastebot.db import models
from wastebot.db.repositories import UserRepository


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

SELF_SERVICE_ROLES = (UserRole.SELLER, UserRole.BUYER, UserRole.TRANSPORTER)


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def to_authenticated_user(user: models.User) -> AuthenticatedUser:
    return AuthenticatedUser(
        id=str(user.id),
        email=user.email,
        role=user.role,
        name=user.name,
        company=user.company,
    )


@dataclass
class AccountService:
    session: AsyncSession

    @property
    def users(self) -> UserRepository:
        return UserRepository(self.session)

    async def register(
        self,
        telegram_id: int,
        email: str,
        name: str,
        role: UserRole,
        company: str | None,
        initial_admin_ids: list[int],
    ) -> AuthenticatedUser:
        if not is_valid_email(email):
            raise ValueError("Invalid email address")
        if telegram_id in initial_admin_ids:
            role = UserRole.ADMIN
        elif role not in SELF_SERVICE_ROLES:
            raise ValueError("Role is not available for self-registration")

        user = await self.users.upsert_profile(
            telegram_id=telegram_id,
            email=email,
            name=name,
            role=role,
            company=company or None,
        )
        await self.session.flush()
        return to_authenticated_user(user)

    async def load(self, telegram_id: int) -> AuthenticatedUser | None:
        user = await self.users.get_by_telegram_id(telegram_id)
        if user is None:
            return None
        return to_authenticated_user(user)
