from __future__ import annotations

from dataclasses import dataclass
from typing import MutableMapping

IS_USER_KEY = "is_user"
USER_KEY = "user"


@dataclass(frozen=True)
class Viewer:
    """Who is making the request, as read from the browser session."""

    is_user: bool = False
    user: str | None = None

    @property
    def authenticated(self) -> bool:
        return bool(self.is_user and self.user)

    @classmethod
    def from_session(cls, session: MutableMapping) -> "Viewer":
        return cls(
            is_user=bool(session.get(IS_USER_KEY)),
            user=session.get(USER_KEY),
        )


ANONYMOUS = Viewer()


def login(session: MutableMapping, username: str) -> Viewer:
    session[IS_USER_KEY] = True
    session[USER_KEY] = username
    return Viewer(True, username)


def logout(session: MutableMapping) -> None:
    session.clear()
