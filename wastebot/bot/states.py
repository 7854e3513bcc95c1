from aiogram.fsm.state import State, StatesGroup


# ── Accounts ────────────────────────────────────────────────────────────────

class RegisterStates(StatesGroup):
    waiting_for_name = State()
    waiting_for_email = State()
    waiting_for_role = State()
    waiting_for_company = State()


# ── Inventory submission form ───────────────────────────────────────────────

class InventoryFormStates(StatesGroup):
    waiting_for_waste_type = State()
    waiting_for_quantity = State()
    waiting_for_unit_price = State()
    waiting_for_location = State()
    waiting_for_description = State()
    confirming = State()
