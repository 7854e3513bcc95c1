from __future__ import annotations

import enum
from dataclasses import dataclass

from wastebot.core.auth import AuthState


PAGE_TITLE = "Cotton Waste Management"
LOGIN_PROMPT = "Please log in to submit inventory."


class PageState(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class IndexView:
    state: PageState
    title: str
    body: str

    @property
    def shows_form(self) -> bool:
        return self.state is PageState.AUTHENTICATED


def render_index(auth: AuthState) -> IndexView:
    """Gate the submission form on the presence of a signed-in user."""
    if auth.user is None:
        return IndexView(PageState.UNAUTHENTICATED, PAGE_TITLE, LOGIN_PROMPT)
    return IndexView(
        PageState.AUTHENTICATED,
        PAGE_TITLE,
        f"Welcome, {auth.user.name}! Submit new inventory below.",
    )
