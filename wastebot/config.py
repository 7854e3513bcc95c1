import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv


load_dotenv()


@dataclass
class Settings:
    bot_token: str
    db_url: str
    initial_admin_ids: List[int]


def _parse_admin_ids(raw: str | None) -> List[int]:
    if not raw:
        return []
    ids: List[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            continue
    return ids


def get_settings() -> Settings:
    bot_token = os.getenv("BOT_TOKEN", "")
    if not bot_token:
        raise RuntimeError("BOT_TOKEN is not set in environment")

    db_url = os.getenv("DB_URL", "sqlite+aiosqlite:///./inventory.db")
    initial_admin_ids = _parse_admin_ids(os.getenv("INITIAL_ADMIN_IDS"))

    return Settings(
        bot_token=bot_token,
        db_url=db_url,
        initial_admin_ids=initial_admin_ids,
    )
