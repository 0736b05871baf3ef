"""Wire the two repositories together from a config."""

from __future__ import annotations

from typing import TYPE_CHECKING

from askme.accounts import AccountRepository
from askme.threads import ThreadRepository

if TYPE_CHECKING:
    from askme.config import AskMeConfig


def open_repositories(cfg: AskMeConfig) -> tuple[AccountRepository, ThreadRepository]:
    """Load accounts first; the thread repository validates recipients against them."""
    cfg.ensure_dirs()
    accounts = AccountRepository(cfg.accounts_path)
    threads = ThreadRepository(cfg.questions_path, accounts)
    return accounts, threads
