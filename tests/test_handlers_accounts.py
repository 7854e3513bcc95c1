import pytest
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

from wastebot.bot import handlers_admin, handlers_user
from wastebot.bot.keyboards import SUBMISSIONS_BUTTON
from wastebot.bot.states import RegisterStates
from wastebot.core.account_service import AccountService
from wastebot.core.auth import AuthenticatedUser, SessionRegistry, UserRole
from wastebot.core.submission import INVENTORY_TABLE
from wastebot.db.store import SqlRecordStore

from conftest import make_callback, make_message


USER_ID = 100


@pytest.fixture()
def state() -> FSMContext:
    return FSMContext(
        storage=MemoryStorage(),
        key=StorageKey(bot_id=1, chat_id=USER_ID, user_id=USER_ID),
    )


@pytest.fixture(autouse=True)
def database(monkeypatch, session_factory):
    monkeypatch.setattr(handlers_user, "get_session", session_factory)
    monkeypatch.setattr(handlers_admin, "get_session", session_factory)
    monkeypatch.setenv("BOT_TOKEN", "123:test")
    monkeypatch.setenv("INITIAL_ADMIN_IDS", "")
    return session_factory


async def _register_up_to_role(state):
    await handlers_user.cmd_register(make_message("/register"), state)
    await handlers_user.register_name(make_message("Ravi"), state)
    await handlers_user.register_email(make_message("ravi@example.com"), state)


# ─────────────────────── Login ──────────────────────────────────────────────

async def test_login_without_account_points_to_register(state):
    sessions = SessionRegistry()
    message = make_message("/login")

    await handlers_user.cmd_login(message, state, sessions)

    assert "/register" in message.answer.await_args.args[0]
    assert sessions.get(USER_ID).state.user is None


async def test_login_with_account_signs_in(state, session_factory):
    async with session_factory() as session:
        await AccountService(session).register(
            telegram_id=USER_ID,
            email="asha@example.com",
            name="Asha",
            role=UserRole.SELLER,
            company="Asha Mills",
            initial_admin_ids=[],
        )
        await session.commit()
    sessions = SessionRegistry()
    message = make_message("/login")

    await handlers_user.cmd_login(message, state, sessions)

    user = sessions.get(USER_ID).state.user
    assert user is not None
    assert user.email == "asha@example.com"
    assert "Welcome, Asha!" in message.answer.await_args.args[0]


# ─────────────────────── Registration ────────────────────────────────────────

async def test_register_name_rejects_commands(state):
    await handlers_user.cmd_register(make_message("/register"), state)

    reply = make_message("/start")
    await handlers_user.register_name(reply, state)

    assert "cannot start with" in reply.answer.await_args.args[0]
    assert await state.get_state() == RegisterStates.waiting_for_name.state
    assert "name" not in await state.get_data()


async def test_register_flow_signs_the_user_in(state):
    sessions = SessionRegistry()
    await handlers_user.cmd_register(make_message("/register"), state)
    await handlers_user.register_name(make_message("  Ravi  "), state)

    bad_email = make_message("ravi at example")
    await handlers_user.register_email(bad_email, state)
    assert "email" in bad_email.answer.await_args.args[0]
    assert await state.get_state() == RegisterStates.waiting_for_email.state

    await handlers_user.register_email(make_message("ravi@example.com"), state)
    await handlers_user.register_role(make_callback("role:transporter"), state)
    assert await state.get_state() == RegisterStates.waiting_for_company.state

    done = make_message("Ravi Logistics")
    await handlers_user.register_company(done, state, sessions)

    user = sessions.get(USER_ID).state.user
    assert user.name == "Ravi"
    assert user.role == UserRole.TRANSPORTER
    assert user.company == "Ravi Logistics"
    assert await state.get_state() is None
    assert "Registered as <b>Ravi</b> (transporter)" in done.answer.await_args.args[0]


async def test_initial_admin_registers_as_admin(state, monkeypatch):
    monkeypatch.setenv("INITIAL_ADMIN_IDS", str(USER_ID))
    sessions = SessionRegistry()
    await _register_up_to_role(state)
    await handlers_user.register_role(make_callback("role:buyer"), state)

    skip = make_callback("form_skip")
    await handlers_user.register_skip_company(skip, state, sessions)

    user = sessions.get(USER_ID).state.user
    assert user.role == UserRole.ADMIN
    assert user.company is None


async def test_forged_admin_role_is_refused(state):
    sessions = SessionRegistry()
    await _register_up_to_role(state)
    await handlers_user.register_role(make_callback("role:admin"), state)

    done = make_message("Ravi Logistics")
    await handlers_user.register_company(done, state, sessions)

    assert done.answer.await_args.args[0] == "❌ Role is not available for self-registration"
    assert sessions.get(USER_ID).state.user is None
    assert await state.get_state() is None


# ─────────────────────── Submissions list ───────────────────────────────────

async def test_submissions_list_is_admin_only(seller):
    sessions = SessionRegistry()
    sessions.get(USER_ID).sign_in(seller)
    message = make_message(SUBMISSIONS_BUTTON)

    await handlers_admin.recent_submissions(message, sessions)

    assert message.answer.await_args.args[0] == "⛔ Only administrators can review submissions."


async def test_submissions_list_shows_latest_records(session_factory):
    await SqlRecordStore(session_factory).insert(INVENTORY_TABLE, [
        {"waste_type": "yarn_waste", "quantity": 50.0, "unit_price": 12.5,
         "location": "Mumbai", "description": None},
        {"waste_type": "comber_noil", "quantity": 20.0, "unit_price": 30.0,
         "location": "Surat <mill>", "description": "x" * 500},
    ])
    sessions = SessionRegistry()
    sessions.get(USER_ID).sign_in(
        AuthenticatedUser(id="9", email="root@example.com", role=UserRole.ADMIN, name="Root")
    )
    message = make_message(SUBMISSIONS_BUTTON)

    await handlers_admin.recent_submissions(message, sessions)

    text = message.answer.await_args.args[0]
    assert text.startswith("<b>📋 Latest submissions</b> (2)")
    assert text.index("Surat &lt;mill&gt;") < text.index("Mumbai")
    assert "x" * 500 not in text
    assert "…" in text


async def test_submissions_list_when_empty():
    sessions = SessionRegistry()
    sessions.get(USER_ID).sign_in(
        AuthenticatedUser(id="9", email="root@example.com", role=UserRole.ADMIN, name="Root")
    )
    message = make_message(SUBMISSIONS_BUTTON)

    await handlers_admin.recent_submissions(message, sessions)

    assert message.answer.await_args.args[0] == "📋 No submissions yet."
