from unittest.mock import MagicMock

from aiogram.exceptions import TelegramAPIError

from wastebot.bot.forms import FormRegistry
from wastebot.bot.notifier import MessageNotifier
from wastebot.core.auth import SessionRegistry
from wastebot.core.submission import NotificationKind

from conftest import make_bot


async def test_notifier_sends_title_and_description():
    bot = make_bot()
    notifier = MessageNotifier(bot, chat_id=55)

    await notifier.notify(NotificationKind.SUCCESS, "Success!", "Saved <now>")

    bot.send_message.assert_awaited_once_with(
        chat_id=55,
        text="✅ <b>Success!</b>\nSaved &lt;now&gt;",
    )


async def test_notifier_drops_delivery_errors(caplog):
    bot = make_bot()
    bot.send_message.side_effect = TelegramAPIError(method=MagicMock(), message="chat not found")
    notifier = MessageNotifier(bot, chat_id=55)

    await notifier.notify(NotificationKind.DESTRUCTIVE, "Error", "Failed")

    assert "chat not found" in caplog.text


def test_registry_opens_one_form_per_user(store):
    registry = FormRegistry(store, SessionRegistry())
    bot = make_bot()

    form = registry.open(bot, telegram_id=1, chat_id=1)

    assert registry.open(bot, telegram_id=1, chat_id=1) is form
    assert registry.get(1) is form
    assert registry.get(2) is None


def test_sign_out_discards_open_form(store, seller):
    sessions = SessionRegistry()
    sessions.get(1).sign_in(seller)
    registry = FormRegistry(store, sessions)
    registry.open(make_bot(), telegram_id=1, chat_id=1)

    sessions.get(1).sign_out()

    assert registry.get(1) is None


def test_discard_unsubscribes_from_session(store, seller):
    sessions = SessionRegistry()
    registry = FormRegistry(store, sessions)
    registry.open(make_bot(), telegram_id=1, chat_id=1)
    registry.discard(1)

    reopened = registry.open(make_bot(), telegram_id=1, chat_id=1)
    sessions.get(1).sign_in(seller)

    assert registry.get(1) is reopened
    assert len(sessions.get(1)._listeners) == 1
