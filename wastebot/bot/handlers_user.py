from __future__ import annotations

from html import escape

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message, ReplyKeyboardRemove

from wastebot.bot.forms import FormRegistry
from wastebot.bot.keyboards import (
    LOGOUT_BUTTON,
    main_menu_keyboard,
    role_keyboard,
    skip_keyboard,
)
from wastebot.bot.states import RegisterStates
from wastebot.config import get_settings
from wastebot.core.account_service import AccountService, is_valid_email
from wastebot.core.auth import AuthState, SessionRegistry, UserRole
from wastebot.core.page import render_index
from wastebot.db.session import get_session


user_router = Router()


def _index_text(auth: AuthState) -> str:
    view = render_index(auth)
    text = f"<b>{escape(view.title)}</b>\n\n{escape(view.body)}"
    if not view.shows_form:
        text += "\n\nUse /login if you already have an account, or /register to create one."
    return text


def _menu_for(auth: AuthState):
    is_admin = auth.user is not None and auth.user.role == UserRole.ADMIN
    return main_menu_keyboard(is_authenticated=auth.is_authenticated, is_admin=is_admin)


# ────────────────────────── /start ──────────────────────────────────────────

@user_router.message(F.text == "/start")
async def cmd_start(
    message: Message,
    state: FSMContext,
    sessions: SessionRegistry,
    forms: FormRegistry,
) -> None:
    await state.clear()
    forms.discard(message.from_user.id)
    auth = sessions.get(message.from_user.id).state
    await message.answer(_index_text(auth), reply_markup=_menu_for(auth))


# ─────────────────────── Login / logout ─────────────────────────────────────

@user_router.message(F.text == "/login")
async def cmd_login(message: Message, state: FSMContext, sessions: SessionRegistry) -> None:
    await state.clear()
    async with get_session() as session:
        user = await AccountService(session).load(message.from_user.id)

    if user is None:
        await message.answer("🔒 No account found. Use /register to create one.")
        return

    auth_session = sessions.get(message.from_user.id)
    auth_session.sign_in(user)
    await message.answer(_index_text(auth_session.state), reply_markup=_menu_for(auth_session.state))


@user_router.message(F.text == "/logout")
@user_router.message(F.text == LOGOUT_BUTTON)
async def cmd_logout(message: Message, state: FSMContext, sessions: SessionRegistry) -> None:
    await state.clear()
    sessions.get(message.from_user.id).sign_out()
    await message.answer("👋 You have been logged out.", reply_markup=ReplyKeyboardRemove())


# ─────────────────────── Registration ────────────────────────────────────────

@user_router.message(F.text == "/register")
async def cmd_register(message: Message, state: FSMContext) -> None:
    await state.clear()
    await state.set_state(RegisterStates.waiting_for_name)
    await message.answer("📝 Enter your <b>name</b>:")


@user_router.message(RegisterStates.waiting_for_name)
async def register_name(message: Message, state: FSMContext) -> None:
    name = message.text.strip() if message.text else ""
    if not name:
        await message.answer("❌ Name cannot be empty:")
        return
    if name.startswith("/"):
        await message.answer("❌ Name cannot start with \"/\". Enter your <b>name</b>:")
        return
    await state.update_data(name=name)
    await state.set_state(RegisterStates.waiting_for_email)
    await message.answer("📧 Enter your <b>email</b>:")


@user_router.message(RegisterStates.waiting_for_email)
async def register_email(message: Message, state: FSMContext) -> None:
    email = message.text.strip() if message.text else ""
    if not is_valid_email(email):
        await message.answer("❌ That doesn't look like an email address. Try again:")
        return
    await state.update_data(email=email)
    await state.set_state(RegisterStates.waiting_for_role)
    await message.answer("👤 Choose your <b>role</b>:", reply_markup=role_keyboard())


@user_router.callback_query(RegisterStates.waiting_for_role, F.data.startswith("role:"))
async def register_role(callback: CallbackQuery, state: FSMContext) -> None:
    role = callback.data.split(":", maxsplit=1)[1]
    await state.update_data(role=role)
    await state.set_state(RegisterStates.waiting_for_company)
    await callback.message.edit_text(
        "🏢 Enter your <b>company</b> (optional):",
        reply_markup=skip_keyboard(),
    )
    await callback.answer()


@user_router.message(RegisterStates.waiting_for_role)
async def expect_role(message: Message) -> None:
    await message.answer("👤 Please choose a role using the buttons.")


@user_router.message(RegisterStates.waiting_for_company)
async def register_company(message: Message, state: FSMContext, sessions: SessionRegistry) -> None:
    company = message.text.strip() if message.text else ""
    await _finish_registration(message, message.from_user.id, company, state, sessions)


@user_router.callback_query(RegisterStates.waiting_for_company, F.data == "form_skip")
async def register_skip_company(
    callback: CallbackQuery,
    state: FSMContext,
    sessions: SessionRegistry,
) -> None:
    await callback.answer()
    await _finish_registration(callback.message, callback.from_user.id, "", state, sessions)


async def _finish_registration(
    message: Message,
    telegram_id: int,
    company: str,
    state: FSMContext,
    sessions: SessionRegistry,
) -> None:
    data = await state.get_data()
    settings = get_settings()
    async with get_session() as session:
        service = AccountService(session)
        try:
            user = await service.register(
                telegram_id=telegram_id,
                email=data["email"],
                name=data["name"],
                role=UserRole(data["role"]),
                company=company,
                initial_admin_ids=settings.initial_admin_ids,
            )
        except ValueError as e:
            await message.answer(f"❌ {e}")
            await state.clear()
            return
        await session.commit()

    await state.clear()
    auth_session = sessions.get(telegram_id)
    auth_session.sign_in(user)
    await message.answer(
        f"✅ Registered as <b>{escape(user.name)}</b> ({user.role.value}).",
        reply_markup=_menu_for(auth_session.state),
    )
