from html import escape


PREVIEW_LIMIT = 200


def preview(value: str, limit: int = PREVIEW_LIMIT) -> str:
    """HTML-escaped echo of user text, cut to ``limit`` characters."""
    if len(value) > limit:
        value = value[: limit - 1] + "…"
    return escape(value)
