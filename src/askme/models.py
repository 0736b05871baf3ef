"""Data models for the question/answer store."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# parent_id of a top-level question
NO_PARENT = -1


class Role(Enum):
    """Account privilege level, persisted as its integer code."""

    ADMIN = 0
    MEMBER = 1

    @classmethod
    def from_code(cls, code: str) -> Role:
        """Decode the persisted code. Raises ValueError for unknown codes."""
        for role in cls:
            if code == str(role.value):
                return role
        msg = f"unknown role code: {code!r}"
        raise ValueError(msg)

    @property
    def label(self) -> str:
        return "Admin" if self is Role.ADMIN else "Member"


@dataclass(frozen=True)
class Account:
    """A registered user."""

    id: int
    name: str                  # display name
    secret: str                # plaintext, compared verbatim
    username: str              # login name
    email: str
    allow_anonymous: bool = False
    role: Role = Role.MEMBER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(frozen=True)
class Thread:
    """A question, optionally answered, optionally a reply to another thread."""

    id: int
    parent_id: int             # NO_PARENT for top-level questions
    from_id: int               # author account
    to_id: int                 # recipient account
    anonymous: bool
    text: str
    answer: str = ""

    @property
    def is_answered(self) -> bool:
        return bool(self.answer)

    @property
    def is_reply(self) -> bool:
        return self.parent_id != NO_PARENT
