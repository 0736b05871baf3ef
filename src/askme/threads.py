"""ThreadRepository: questions, answers and reply threads.

Threads form a forest: a top-level question has parent_id NO_PARENT, a reply
points at another thread's id.  The parent must exist when the reply is
created; nothing re-checks it later, so a reply whose parent was deleted
keeps its (now dangling) parent_id and still shows up in list_replies().

Recipients are validated against the AccountRepository at creation time,
including the anonymous-question permission.  The permission is not
re-checked afterwards.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING

from askme.codec import decode_thread, encode_thread
from askme.errors import (
    AnonymousNotAllowedError,
    DuplicateIdError,
    InvalidRecordError,
    NotFoundError,
    ParentNotFoundError,
    PermissionDeniedError,
    RecipientNotFoundError,
)
from askme.models import NO_PARENT, Thread
from askme.policy import can_answer, can_delete, can_view_feed
from askme.store import load_records, write_lines

if TYPE_CHECKING:
    from collections.abc import Iterator

    from askme.accounts import AccountRepository
    from askme.models import Account

logger = logging.getLogger("askme.threads")


@dataclass
class DeleteResult:
    """Outcome of a cascading delete."""

    deleted: list[int] = field(default_factory=list)   # replies first, root last
    skipped: list[int] = field(default_factory=list)   # replies the actor may not delete

    def __bool__(self) -> bool:
        return bool(self.deleted)


class ThreadRepository:
    """Sole owner of the thread collection."""

    def __init__(self, path: Path | str, accounts: AccountRepository) -> None:
        self.path = Path(path)
        self.accounts = accounts
        self._threads: dict[int, Thread] = {}
        self._lock = threading.Lock()
        self.reload()

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def reload(self) -> int:
        """Re-read the file, dropping malformed lines. Returns the thread count."""
        threads: dict[int, Thread] = {}
        for thread in load_records(self.path, decode_thread):
            if thread.id in threads:
                logger.warning("duplicate thread id %d in %s, keeping the first", thread.id, self.path)
                continue
            threads[thread.id] = thread
        with self._lock:
            self._threads = threads
        logger.info("loaded %d threads from %s", len(threads), self.path)
        return len(threads)

    def _save(self) -> None:
        write_lines(self.path, [encode_thread(t) for t in self._threads.values()])

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._threads)

    def __contains__(self, thread_id: object) -> bool:
        return thread_id in self._threads

    def __iter__(self) -> Iterator[Thread]:
        return iter(list(self._threads.values()))

    def get(self, thread_id: int) -> Thread:
        thread = self._threads.get(thread_id)
        if thread is None:
            msg = f"Question not found: {thread_id}"
            raise NotFoundError(msg)
        return thread

    def next_id(self) -> int:
        """Same scheme as AccountRepository.next_id, over thread ids."""
        if not self._threads:
            return 1
        return max(self._threads) + 1

    def list_to(self, account_id: int) -> list[Thread]:
        """Threads addressed to account_id."""
        return [t for t in self._threads.values() if t.to_id == account_id]

    def list_from(self, account_id: int) -> list[Thread]:
        """Threads asked by account_id."""
        return [t for t in self._threads.values() if t.from_id == account_id]

    def list_replies(self, parent_id: int) -> list[Thread]:
        """Direct replies to parent_id. The parent itself need not exist."""
        return [t for t in self._threads.values() if t.parent_id == parent_id]

    def feed(self, actor: Account) -> list[Thread]:
        """Every thread in the system. Admins only."""
        if not can_view_feed(actor):
            msg = "The feed is only available to administrators"
            raise PermissionDeniedError(msg)
        return list(self._threads.values())

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create(self, thread: Thread) -> Thread:
        """Store a new thread after validating id, recipient, anonymity and parent."""
        with self._lock:
            return self._insert(thread)

    def _insert(self, thread: Thread) -> Thread:
        if thread.id < 1:
            msg = f"Question ids must be positive: {thread.id}"
            raise InvalidRecordError(msg)
        if thread.parent_id != NO_PARENT and thread.parent_id < 1:
            msg = f"Parent id must be {NO_PARENT} or positive: {thread.parent_id}"
            raise InvalidRecordError(msg)
        if thread.id in self._threads:
            msg = f"Question id already exists: {thread.id}"
            raise DuplicateIdError(msg)
        try:
            recipient = self.accounts.get(thread.to_id)
        except NotFoundError as exc:
            msg = f"Recipient not found: {thread.to_id}"
            raise RecipientNotFoundError(msg) from exc
        if thread.anonymous and not recipient.allow_anonymous:
            msg = f"{recipient.name} does not accept anonymous questions"
            raise AnonymousNotAllowedError(msg)
        if thread.parent_id != NO_PARENT and thread.parent_id not in self._threads:
            msg = f"Parent question not found: {thread.parent_id}"
            raise ParentNotFoundError(msg)
        encode_thread(thread)  # rejects unstorable fields before anything changes

        self._threads[thread.id] = thread
        self._save()
        logger.info(
            "question %d created: from=%d to=%d parent=%d anonymous=%s",
            thread.id, thread.from_id, thread.to_id, thread.parent_id, thread.anonymous,
        )
        return thread

    def ask(
        self,
        from_id: int,
        to_id: int,
        text: str,
        *,
        parent_id: int = NO_PARENT,
        anonymous: bool = False,
    ) -> Thread:
        """Create a question under the next free id."""
        with self._lock:
            return self._insert(Thread(
                id=self.next_id(),
                parent_id=parent_id,
                from_id=from_id,
                to_id=to_id,
                anonymous=anonymous,
                text=text,
            ))

    def set_answer(self, thread_id: int, text: str, *, actor: Account | None = None) -> Thread:
        """Set (or overwrite) the answer to a question.

        When actor is given, only the recipient may answer.
        """
        with self._lock:
            thread = self.get(thread_id)
            if actor is not None and not can_answer(thread, actor):
                msg = f"Only the recipient can answer question {thread_id}"
                raise PermissionDeniedError(msg)
            answered = replace(thread, answer=text)
            encode_thread(answered)
            self._threads[thread_id] = answered
            self._save()
        logger.info("question %d answered", thread_id)
        return answered

    def delete(self, thread_id: int, actor: Account) -> DeleteResult:
        """Delete a thread together with the direct replies actor may delete.

        The cascade is one level deep: replies to those replies stay, keeping
        their now dangling parent_id, as do replies the actor may not delete.
        The file is written once, after the whole cascade.
        """
        with self._lock:
            thread = self.get(thread_id)
            if not can_delete(thread, actor):
                msg = f"You can only delete questions you asked: {thread_id}"
                raise PermissionDeniedError(msg)
            result = DeleteResult()
            for reply in self.list_replies(thread_id):
                if reply.id == thread_id:
                    continue
                if not can_delete(reply, actor):
                    logger.info("skipping reply %d: not owned by %d", reply.id, actor.id)
                    result.skipped.append(reply.id)
                    continue
                del self._threads[reply.id]
                result.deleted.append(reply.id)
            del self._threads[thread_id]
            result.deleted.append(thread_id)
            self._save()
        logger.info("question %d deleted by %d (removed=%s skipped=%s)",
                    thread_id, actor.id, result.deleted, result.skipped)
        return result
