"""Typed failures raised by the repositories.

Every error a caller can act on derives from AskMeError, so the CLI (or any
other front end) can catch one base class and report the message.
"""

from __future__ import annotations


class AskMeError(Exception):
    """Base class for askme errors."""


class NotFoundError(AskMeError):
    """An account or thread id is absent."""


class RecipientNotFoundError(NotFoundError):
    """A question names a recipient account that does not exist."""


class ParentNotFoundError(NotFoundError):
    """A reply names a parent thread that does not exist."""


class DuplicateIdError(AskMeError):
    """Creation collided with an existing id."""


class AnonymousNotAllowedError(AskMeError):
    """The recipient does not accept anonymous questions."""


class PermissionDeniedError(AskMeError):
    """The acting account may not perform this operation."""


class InvalidCredentialsError(AskMeError):
    pass


class StorageError(AskMeError):
    """A data file could not be read or written."""


class InvalidRecordError(AskMeError, ValueError):
    """A record cannot be stored as given (bad id, line break in a field)."""
