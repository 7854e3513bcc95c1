from __future__ import annotations

from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
)

from wastebot.core.account_service import SELF_SERVICE_ROLES
from wastebot.core.schema import WASTE_TYPE_LABELS


SUBMIT_INVENTORY_BUTTON = "📝 Submit Inventory"
SUBMISSIONS_BUTTON = "📋 Submissions"
LOGOUT_BUTTON = "🚪 Log out"


# ─────────────────────────── Reply keyboards ────────────────────────────────

def main_menu_keyboard(is_authenticated: bool, is_admin: bool = False) -> ReplyKeyboardMarkup | ReplyKeyboardRemove:
    if not is_authenticated:
        return ReplyKeyboardRemove()
    buttons = [[KeyboardButton(text=SUBMIT_INVENTORY_BUTTON)]]
    if is_admin:
        buttons.append([KeyboardButton(text=SUBMISSIONS_BUTTON)])
    buttons.append([KeyboardButton(text=LOGOUT_BUTTON)])
    return ReplyKeyboardMarkup(keyboard=buttons, resize_keyboard=True, one_time_keyboard=False)


# ─────────────────────────── Inline keyboards ───────────────────────────────

def waste_type_keyboard() -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(text=label, callback_data=f"waste:{waste_type.value}")]
        for waste_type, label in WASTE_TYPE_LABELS.items()
    ]
    rows.append([InlineKeyboardButton(text="❌ Cancel", callback_data="form_cancel")])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def skip_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="⏭ Skip", callback_data="form_skip")],
            [InlineKeyboardButton(text="❌ Cancel", callback_data="form_cancel")],
        ]
    )


def confirm_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="✅ Submit Inventory", callback_data="form_submit")],
            [InlineKeyboardButton(text="✏️ Start over", callback_data="form_restart")],
            [InlineKeyboardButton(text="❌ Cancel", callback_data="form_cancel")],
        ]
    )


def cancel_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="❌ Cancel", callback_data="form_cancel")]
        ]
    )


def role_keyboard() -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(text=role.value.capitalize(), callback_data=f"role:{role.value}")]
        for role in SELF_SERVICE_ROLES
    ]
    return InlineKeyboardMarkup(inline_keyboard=rows)
