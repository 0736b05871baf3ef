"""AccountRepository: the in-memory account collection and its line file.

    accounts = AccountRepository("data/users.txt")
    alice = accounts.register("Alice", "s3cret", "alice", "alice@example.com")
    accounts.authenticate(alice.id, "s3cret")   # True

Every successful mutation rewrites the whole file before returning.  If the
write fails the in-memory change stays and StorageError is raised; memory and
disk agree again after the next successful save.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

from askme.codec import decode_account, encode_account
from askme.errors import DuplicateIdError, InvalidCredentialsError, InvalidRecordError, NotFoundError
from askme.models import Account, Role
from askme.store import load_records, write_lines

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger("askme.accounts")


class AccountRepository:
    """Sole owner of the account collection."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._accounts: dict[int, Account] = {}
        self._lock = threading.Lock()
        self.reload()

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def reload(self) -> int:
        """Re-read the file, dropping malformed lines. Returns the account count."""
        accounts: dict[int, Account] = {}
        for account in load_records(self.path, decode_account):
            if account.id in accounts:
                logger.warning("duplicate account id %d in %s, keeping the first", account.id, self.path)
                continue
            accounts[account.id] = account
        with self._lock:
            self._accounts = accounts
        logger.info("loaded %d accounts from %s", len(accounts), self.path)
        return len(accounts)

    def _save(self) -> None:
        write_lines(self.path, [encode_account(a) for a in self._accounts.values()])

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._accounts

    def __iter__(self) -> Iterator[Account]:
        return iter(list(self._accounts.values()))

    def all(self) -> list[Account]:
        return list(self._accounts.values())

    def get(self, account_id: int) -> Account:
        """Return the account with this id. Raises NotFoundError."""
        account = self._accounts.get(account_id)
        if account is None:
            msg = f"Account not found: {account_id}"
            raise NotFoundError(msg)
        return account

    def next_id(self) -> int:
        """1 for an empty repository, else one past the highest current id.

        Ids are not gap-filled, but removing the highest account frees its id
        for the next registration.
        """
        if not self._accounts:
            return 1
        return max(self._accounts) + 1

    def authenticate(self, account_id: int, secret: str) -> bool:
        """Exact, case-sensitive comparison against the stored plaintext secret."""
        account = self._accounts.get(account_id)
        return account is not None and account.secret == secret

    def login(self, account_id: int, secret: str) -> Account:
        if not self.authenticate(account_id, secret):
            msg = "Invalid account id or secret"
            raise InvalidCredentialsError(msg)
        return self._accounts[account_id]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def add(self, account: Account) -> Account:
        """Store a new account. Raises DuplicateIdError if the id is taken."""
        with self._lock:
            return self._insert(account)

    def _insert(self, account: Account) -> Account:
        if account.id < 1:
            msg = f"Account ids must be positive: {account.id}"
            raise InvalidRecordError(msg)
        if account.id in self._accounts:
            msg = f"Account id already exists: {account.id}"
            raise DuplicateIdError(msg)
        encode_account(account)  # rejects unstorable fields before anything changes
        self._accounts[account.id] = account
        self._save()
        logger.info("account added: %d (%s)", account.id, account.username)
        return account

    def register(
        self,
        name: str,
        secret: str,
        username: str,
        email: str,
        *,
        allow_anonymous: bool = False,
        role: Role = Role.MEMBER,
    ) -> Account:
        """Create an account under the next free id."""
        with self._lock:
            return self._insert(Account(
                id=self.next_id(),
                name=name,
                secret=secret,
                username=username,
                email=email,
                allow_anonymous=allow_anonymous,
                role=role,
            ))

    def update(self, account: Account) -> Account:
        """Replace the stored account with the same id. Raises NotFoundError."""
        with self._lock:
            if account.id not in self._accounts:
                msg = f"Account not found: {account.id}"
                raise NotFoundError(msg)
            encode_account(account)
            self._accounts[account.id] = account
            self._save()
        logger.info("account updated: %d", account.id)
        return account

    def set_allow_anonymous(self, account_id: int, allow: bool) -> Account:
        return self.update(replace(self.get(account_id), allow_anonymous=allow))

    def remove(self, account_id: int) -> Account:
        """Delete an account. Its questions and answers are left in place."""
        with self._lock:
            account = self._accounts.pop(account_id, None)
            if account is None:
                msg = f"Account not found: {account_id}"
                raise NotFoundError(msg)
            self._save()
        logger.info("account removed: %d", account_id)
        return account
