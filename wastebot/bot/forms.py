from __future__ import annotations

from collections.abc import Callable

from aiogram import Bot

from wastebot.bot.notifier import MessageNotifier
from wastebot.core.auth import AuthState, SessionRegistry
from wastebot.core.submission import InventorySubmissionForm, RecordStore


class FormRegistry:
    """One open submission form per Telegram user.

    A form is dropped when its user signs out.
    """

    def __init__(self, store: RecordStore, sessions: SessionRegistry) -> None:
        self.store = store
        self.sessions = sessions
        self._forms: dict[int, InventorySubmissionForm] = {}
        self._unsubscribers: dict[int, Callable[[], None]] = {}

    def get(self, telegram_id: int) -> InventorySubmissionForm | None:
        return self._forms.get(telegram_id)

    def open(self, bot: Bot, telegram_id: int, chat_id: int) -> InventorySubmissionForm:
        form = self._forms.get(telegram_id)
        if form is not None:
            return form

        form = InventorySubmissionForm(self.store, MessageNotifier(bot, chat_id))
        self._forms[telegram_id] = form

        def on_auth_change(state: AuthState) -> None:
            if not state.is_authenticated:
                self.discard(telegram_id)

        session = self.sessions.get(telegram_id)
        self._unsubscribers[telegram_id] = session.subscribe(on_auth_change)
        return form

    def discard(self, telegram_id: int) -> None:
        self._forms.pop(telegram_id, None)
        unsubscribe = self._unsubscribers.pop(telegram_id, None)
        if unsubscribe is not None:
            unsubscribe()
