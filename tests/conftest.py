from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the src/ package importable without an install
SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from askme.accounts import AccountRepository  # noqa: E402
from askme.models import Account, Role  # noqa: E402
from askme.threads import ThreadRepository  # noqa: E402


@pytest.fixture()
def accounts(tmp_path):
    return AccountRepository(tmp_path / "users.txt")


@pytest.fixture()
def threads(tmp_path, accounts):
    return ThreadRepository(tmp_path / "questions.txt", accounts)


@pytest.fixture()
def board(accounts, threads):
    """Accounts {1: admin A, 2: member B, 3: member C}; only A and B accept anonymous questions."""
    accounts.add(Account(1, "A", "pa", "a", "a@example.com", allow_anonymous=True, role=Role.ADMIN))
    accounts.add(Account(2, "B", "pb", "b", "b@example.com", allow_anonymous=True))
    accounts.add(Account(3, "C", "pc", "c", "c@example.com", allow_anonymous=False))
    return accounts, threads
