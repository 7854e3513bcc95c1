import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage

from wastebot.bot.forms import FormRegistry
from wastebot.bot.handlers_admin import admin_router
from wastebot.bot.handlers_form import form_router
from wastebot.bot.handlers_user import user_router
from wastebot.config import get_settings
from wastebot.core.auth import SessionRegistry
from wastebot.db.session import init_db
from wastebot.db.store import SqlRecordStore


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


async def main() -> None:
    settings = get_settings()
    await init_db()

    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dp = Dispatcher(storage=MemoryStorage())

    sessions = SessionRegistry()
    dp["sessions"] = sessions
    dp["forms"] = FormRegistry(store=SqlRecordStore(), sessions=sessions)

    # /start, /logout and other commands must win over form step handlers
    dp.include_router(user_router)
    dp.include_router(admin_router)
    dp.include_router(form_router)

    logging.info("Bot started polling...")
    await dp.start_polling(bot)


if __name__ == "__main__":
    asyncio.run(main())
