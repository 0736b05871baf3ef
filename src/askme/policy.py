"""Access decisions for thread and account mutations.

All functions are pure: they look only at their arguments.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from askme.models import Account, Thread


def can_delete(thread: Thread, actor: Account) -> bool:
    """Admins may delete anything; members only what they asked."""
    return actor.is_admin or thread.from_id == actor.id


def can_answer(thread: Thread, actor: Account) -> bool:
    """Only the recipient answers a question."""
    return thread.to_id == actor.id


def can_view_feed(actor: Account) -> bool:
    return actor.is_admin


def can_manage_accounts(actor: Account) -> bool:
    return actor.is_admin
