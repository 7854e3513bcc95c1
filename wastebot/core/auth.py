from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    SELLER = "seller"
    BUYER = "buyer"
    TRANSPORTER = "transporter"


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    email: str
    role: UserRole
    name: str
    company: str | None = None


@dataclass(frozen=True)
class AuthState:
    user: AuthenticatedUser | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


Listener = Callable[[AuthState], None]


class AuthSession:
    """Observable authentication state for one chat user."""

    def __init__(self) -> None:
        self._state = AuthState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AuthState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def sign_in(self, user: AuthenticatedUser) -> None:
        self._publish(AuthState(user=user))

    def sign_out(self) -> None:
        self._publish(AuthState())

    def _publish(self, state: AuthState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)


class SessionRegistry:
    def __init__(self) -> None:
        self._sessions: dict[int, AuthSession] = {}

    def get(self, telegram_id: int) -> AuthSession:
        session = self._sessions.get(telegram_id)
        if session is None:
            session = AuthSession()
            self._sessions[telegram_id] = session
        return session
