from __future__ import annotations

from askme.models import NO_PARENT, Account, Role, Thread
from askme.policy import can_answer, can_delete, can_manage_accounts, can_view_feed

ADMIN = Account(1, "A", "pa", "a", "a@x", role=Role.ADMIN)
ASKER = Account(2, "B", "pb", "b", "b@x")
OTHER = Account(3, "C", "pc", "c", "c@x")

QUESTION = Thread(10, NO_PARENT, from_id=2, to_id=3, anonymous=False, text="q")


def test_author_or_admin_may_delete():
    assert can_delete(QUESTION, ASKER)
    assert can_delete(QUESTION, ADMIN)
    assert not can_delete(QUESTION, OTHER)


def test_only_recipient_may_answer():
    assert can_answer(QUESTION, OTHER)
    assert not can_answer(QUESTION, ASKER)
    assert not can_answer(QUESTION, ADMIN)


def test_admin_only_operations():
    assert can_view_feed(ADMIN)
    assert can_manage_accounts(ADMIN)
    assert not can_view_feed(ASKER)
    assert not can_manage_accounts(ASKER)
