from __future__ import annotations

from html import escape

from aiogram import Bot, F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from wastebot.bot.forms import FormRegistry
from wastebot.bot.keyboards import (
    SUBMIT_INVENTORY_BUTTON,
    cancel_keyboard,
    confirm_keyboard,
    skip_keyboard,
    waste_type_keyboard,
)
from wastebot.bot.states import InventoryFormStates
from wastebot.bot.text import preview
from wastebot.core.admin_service import AdminService
from wastebot.core.auth import SessionRegistry
from wastebot.core.page import LOGIN_PROMPT
from wastebot.core.schema import WASTE_TYPE_LABELS, WasteType
from wastebot.core.submission import SubmitOutcome
from wastebot.db.session import get_session


form_router = Router()


FORM_TITLE = "Submit New Inventory"

# field -> (next state, prompt for the next step)
TEXT_STEPS = {
    "quantity": (
        InventoryFormStates.waiting_for_unit_price,
        "💰 Enter <b>unit price</b> (₹/kg):",
    ),
    "unit_price": (
        InventoryFormStates.waiting_for_location,
        "📍 Enter <b>location</b>:",
    ),
    "location": (
        InventoryFormStates.waiting_for_description,
        "📝 Enter a <b>description</b> (optional):",
    ),
}


# ────────────────────────── Helpers ─────────────────────────────────────────

def _waste_label(value: str) -> str:
    try:
        return WASTE_TYPE_LABELS[WasteType(value)]
    except ValueError:
        return value


def _summary(values: dict[str, str]) -> str:
    description = values["description"] or "—"
    return (
        f"<b>{FORM_TITLE}</b>\n\n"
        f"Waste Type: {preview(_waste_label(values['waste_type']))}\n"
        f"Quantity (kg): {preview(values['quantity'])}\n"
        f"Unit Price (₹/kg): {preview(values['unit_price'])}\n"
        f"Location: {preview(values['location'])}\n"
        f"Description: {preview(description)}"
    )


async def _notify_admins(bot: Bot, values: dict[str, str], submitted_by: str) -> None:
    async with get_session() as session:
        await AdminService(session).notify_admins(
            bot=bot,
            text=(
                "🆕 <b>New inventory awaiting review</b>\n\n"
                f"{_summary(values)}\n\n"
                f"👤 Submitted by: {escape(submitted_by)}"
            ),
        )


async def _expired(message: Message, state: FSMContext) -> None:
    await state.clear()
    await message.answer("⌛ This form is no longer open. Start again from the menu.")


# ─────────────────────── Open the form ──────────────────────────────────────

@form_router.message(F.text == "/submit")
@form_router.message(F.text == SUBMIT_INVENTORY_BUTTON)
async def open_form(
    message: Message,
    state: FSMContext,
    sessions: SessionRegistry,
    forms: FormRegistry,
) -> None:
    auth = sessions.get(message.from_user.id).state
    if not auth.is_authenticated:
        await message.answer(f"🔒 {LOGIN_PROMPT}")
        return

    form = forms.open(message.bot, message.from_user.id, message.chat.id)
    if form.is_submitting:
        await message.answer("⏳ Your previous submission is still in progress.")
        return

    await state.set_state(InventoryFormStates.waiting_for_waste_type)
    await message.answer(
        f"<b>{FORM_TITLE}</b>\n\n♻️ Select <b>waste type</b>:",
        reply_markup=waste_type_keyboard(),
    )


# ─────────────────────── Waste type ─────────────────────────────────────────

@form_router.callback_query(InventoryFormStates.waiting_for_waste_type, F.data.startswith("waste:"))
async def on_waste_type_selected(
    callback: CallbackQuery,
    state: FSMContext,
    forms: FormRegistry,
) -> None:
    form = forms.get(callback.from_user.id)
    if form is None:
        await callback.answer()
        await _expired(callback.message, state)
        return

    value = callback.data.split(":", maxsplit=1)[1]
    error = form.controller.set_field("waste_type", value)
    if error is not None:
        await callback.answer(f"❌ {error.message}", show_alert=True)
        return

    await state.set_state(InventoryFormStates.waiting_for_quantity)
    await callback.message.edit_text(
        f"♻️ Waste type: <b>{escape(_waste_label(value))}</b>\n\n"
        "⚖️ Enter <b>quantity</b> (kg):",
        reply_markup=cancel_keyboard(),
    )
    await callback.answer()


@form_router.message(InventoryFormStates.waiting_for_waste_type)
async def on_waste_type_typed(message: Message, state: FSMContext, forms: FormRegistry) -> None:
    form = forms.get(message.from_user.id)
    if form is None:
        await _expired(message, state)
        return

    value = message.text.strip() if message.text else ""
    error = form.controller.set_field("waste_type", value)
    if error is not None:
        await message.answer(f"❌ {error.message}", reply_markup=waste_type_keyboard())
        return

    await state.set_state(InventoryFormStates.waiting_for_quantity)
    await message.answer("⚖️ Enter <b>quantity</b> (kg):", reply_markup=cancel_keyboard())


# ─────────────────────── Quantity / price / location ────────────────────────

async def _text_step(message: Message, state: FSMContext, forms: FormRegistry, field: str) -> None:
    form = forms.get(message.from_user.id)
    if form is None:
        await _expired(message, state)
        return

    value = message.text.strip() if message.text else ""
    error = form.controller.set_field(field, value)
    if error is not None:
        await message.answer(f"❌ {error.message}", reply_markup=cancel_keyboard())
        return

    next_state, prompt = TEXT_STEPS[field]
    await state.set_state(next_state)
    keyboard = skip_keyboard() if next_state == InventoryFormStates.waiting_for_description else cancel_keyboard()
    await message.answer(prompt, reply_markup=keyboard)


@form_router.message(InventoryFormStates.waiting_for_quantity)
async def on_quantity(message: Message, state: FSMContext, forms: FormRegistry) -> None:
    await _text_step(message, state, forms, "quantity")


@form_router.message(InventoryFormStates.waiting_for_unit_price)
async def on_unit_price(message: Message, state: FSMContext, forms: FormRegistry) -> None:
    await _text_step(message, state, forms, "unit_price")


@form_router.message(InventoryFormStates.waiting_for_location)
async def on_location(message: Message, state: FSMContext, forms: FormRegistry) -> None:
    await _text_step(message, state, forms, "location")


# ─────────────────────── Description ────────────────────────────────────────

async def _to_confirmation(
    message: Message,
    state: FSMContext,
    forms: FormRegistry,
    telegram_id: int,
    description: str,
) -> None:
    form = forms.get(telegram_id)
    if form is None:
        await _expired(message, state)
        return

    form.controller.set_field("description", description)
    await message.answer(_summary(form.controller.values), reply_markup=confirm_keyboard())
    await state.set_state(InventoryFormStates.confirming)


@form_router.message(InventoryFormStates.waiting_for_description)
async def on_description(message: Message, state: FSMContext, forms: FormRegistry) -> None:
    description = message.text.strip() if message.text else ""
    await _to_confirmation(message, state, forms, message.from_user.id, description)


@form_router.callback_query(InventoryFormStates.waiting_for_description, F.data == "form_skip")
async def on_description_skipped(callback: CallbackQuery, state: FSMContext, forms: FormRegistry) -> None:
    await callback.answer()
    await _to_confirmation(callback.message, state, forms, callback.from_user.id, "")


# ─────────────────────── Submit ─────────────────────────────────────────────

@form_router.callback_query(InventoryFormStates.confirming, F.data == "form_submit")
async def on_submit(callback: CallbackQuery, state: FSMContext, forms: FormRegistry) -> None:
    form = forms.get(callback.from_user.id)
    if form is None:
        await callback.answer()
        await _expired(callback.message, state)
        return
    if form.is_submitting or await state.get_state() != InventoryFormStates.confirming.state:
        await callback.answer("⏳ Already submitting...")
        return

    values = form.controller.values

    async def show_progress() -> None:
        await callback.message.edit_text(f"{_summary(values)}\n\n⏳ Submitting...")

    outcome = await form.submit(on_start=show_progress)

    if outcome is SubmitOutcome.BUSY:
        await callback.answer("⏳ Already submitting...")
        return

    if outcome is SubmitOutcome.SUBMITTED:
        # leave the confirm step before the next await
        await state.clear()

    await callback.answer()
    if outcome is SubmitOutcome.SUBMITTED:
        await callback.message.edit_text(f"{_summary(values)}\n\n📨 Submitted for review.")
        await _notify_admins(callback.bot, values, callback.from_user.full_name)
    elif outcome is SubmitOutcome.FAILED:
        # values are kept; offer the same record again
        await callback.message.edit_text(_summary(values), reply_markup=confirm_keyboard())
    else:
        lines = [f"❌ {escape(err.message)}" for err in form.controller.errors.values()]
        await callback.message.edit_text(
            _summary(values) + "\n\n" + "\n".join(lines),
            reply_markup=confirm_keyboard(),
        )


@form_router.callback_query(InventoryFormStates.confirming, F.data == "form_restart")
async def on_restart(callback: CallbackQuery, state: FSMContext) -> None:
    await state.set_state(InventoryFormStates.waiting_for_waste_type)
    await callback.message.edit_text(
        f"<b>{FORM_TITLE}</b>\n\n♻️ Select <b>waste type</b>:",
        reply_markup=waste_type_keyboard(),
    )
    await callback.answer()


@form_router.message(InventoryFormStates.confirming)
async def expect_confirmation(message: Message) -> None:
    await message.answer("👆 Use the buttons above to submit, start over or cancel.")


# ─────────────────────── Cancel ──────────────────────────────────────────────

@form_router.callback_query(F.data == "form_cancel")
async def on_cancel(callback: CallbackQuery, state: FSMContext, forms: FormRegistry) -> None:
    form = forms.get(callback.from_user.id)
    if form is not None and form.is_submitting:
        await callback.answer("⏳ Submission in progress, it cannot be cancelled.", show_alert=True)
        return
    await state.clear()
    forms.discard(callback.from_user.id)
    await callback.message.edit_text("❌ Cancelled.")
    await callback.answer()
