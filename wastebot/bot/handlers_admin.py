from __future__ import annotations

from html import escape

from aiogram import F, Router
from aiogram.types import Message

from wastebot.bot.keyboards import SUBMISSIONS_BUTTON
from wastebot.bot.text import preview
from wastebot.core.admin_service import AdminService
from wastebot.core.auth import SessionRegistry, UserRole
from wastebot.core.schema import WASTE_TYPE_LABELS
from wastebot.db.session import get_session


admin_router = Router()


STATUS_LABELS = {
    "pending": "🕓 Pending",
}


def _fmt_dt(dt) -> str:
    if dt is None:
        return "—"
    return dt.strftime("%d.%m.%Y %H:%M")


def _format_submission(item) -> str:
    label = WASTE_TYPE_LABELS.get(item.waste_type, str(item.waste_type))
    lines = [
        f"<b>#{item.id} {escape(label)}</b>  {STATUS_LABELS.get(item.status.value, item.status.value)}",
        f"      ⚖️ {item.quantity:g} kg × ₹{item.unit_price:g}/kg  📍 {preview(item.location)}",
        f"      📅 {_fmt_dt(item.created_at)}",
    ]
    if item.description:
        lines.append(f"      📝 {preview(item.description)}")
    return "\n".join(lines)


@admin_router.message(F.text == SUBMISSIONS_BUTTON)
async def recent_submissions(message: Message, sessions: SessionRegistry) -> None:
    user = sessions.get(message.from_user.id).state.user
    if user is None or user.role != UserRole.ADMIN:
        await message.answer("⛔ Only administrators can review submissions.")
        return

    async with get_session() as session:
        items = await AdminService(session).list_recent_submissions(limit=10)

    if not items:
        await message.answer("📋 No submissions yet.")
        return

    text_lines = [f"<b>📋 Latest submissions</b> ({len(items)})", ""]
    text_lines.extend(_format_submission(item) for item in items)
    await message.answer("\n".join(text_lines))
