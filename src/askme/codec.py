"""Encode and decode one record per line of comma-separated text.

Line layouts (no header row):

    account:  id,name,secret,username,email,anon(0|1),role(0=Admin,1=Member)
    thread:   id,parent_id(-1=none),from_id,to_id,anon(0|1),text,answer

A field is written bare unless it contains the delimiter or starts with a
double quote; such fields are wrapped in quotes with every embedded quote
doubled.  Quotes anywhere else in a bare field are literal characters.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING

from askme.errors import AskMeError, InvalidRecordError
from askme.models import Account, Role, Thread

if TYPE_CHECKING:
    from collections.abc import Sequence

DELIMITER = ","
QUOTE = '"'

ACCOUNT_FIELDS = 7
# The answer column is optional on read; older files omit it for unanswered questions.
THREAD_FIELDS = 6

_INT_RE = re.compile(r"[+-]?\d+")


class ParseErrorKind(Enum):
    TOO_FEW_FIELDS = "too few fields"
    BAD_NUMBER = "bad number"
    BAD_ROLE = "bad role"


class ParseError(AskMeError):
    """A persisted line could not be decoded."""

    def __init__(self, kind: ParseErrorKind, line: str, detail: str = "") -> None:
        self.kind = kind
        self.line = line
        self.detail = detail
        message = f"{kind.value}: {line!r}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


# ---------------------------------------------------------------------------
# Field level
# ---------------------------------------------------------------------------


def quote_field(value: str) -> str:
    """Return value as it appears on disk, quoted only when needed."""
    if "\n" in value or "\r" in value:
        msg = f"line breaks cannot be stored: {value!r}"
        raise InvalidRecordError(msg)
    if DELIMITER in value or value.startswith(QUOTE):
        return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
    return value


def join_fields(fields: Sequence[str]) -> str:
    return DELIMITER.join(quote_field(f) for f in fields)


def split_fields(line: str) -> list[str]:
    """Tokenize one line, honouring quoted fields.

    A field that opens with a quote runs to the next unpaired quote; ``""``
    inside it is one literal quote.  Any stray text between the closing quote
    and the next delimiter is kept as-is.
    """
    fields: list[str] = []
    n = len(line)
    i = 0
    while True:
        if i < n and line[i] == QUOTE:
            buf: list[str] = []
            i += 1
            while i < n:
                c = line[i]
                if c == QUOTE:
                    if i + 1 < n and line[i + 1] == QUOTE:
                        buf.append(QUOTE)
                        i += 2
                        continue
                    i += 1
                    break
                buf.append(c)
                i += 1
            end = line.find(DELIMITER, i)
            if end == -1:
                end = n
            buf.append(line[i:end])
            fields.append("".join(buf))
        else:
            end = line.find(DELIMITER, i)
            if end == -1:
                end = n
            fields.append(line[i:end])
        i = end
        if i >= n:
            return fields
        i += 1  # skip delimiter


# ---------------------------------------------------------------------------
# Record level
# ---------------------------------------------------------------------------


def _flag(value: bool) -> str:
    return "1" if value else "0"


def _parse_flag(text: str) -> bool:
    return text in ("1", "true")


def _parse_int(text: str, name: str, line: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ParseError(ParseErrorKind.BAD_NUMBER, line, f"{name}={text!r}")
    return int(text)


def _require(fields: list[str], count: int, line: str) -> None:
    if len(fields) < count:
        raise ParseError(
            ParseErrorKind.TOO_FEW_FIELDS, line, f"expected {count}, got {len(fields)}"
        )


def encode_account(account: Account) -> str:
    return join_fields([
        str(account.id),
        account.name,
        account.secret,
        account.username,
        account.email,
        _flag(account.allow_anonymous),
        str(account.role.value),
    ])


def decode_account(line: str) -> Account:
    fields = split_fields(line)
    _require(fields, ACCOUNT_FIELDS, line)
    try:
        role = Role.from_code(fields[6])
    except ValueError as exc:
        raise ParseError(ParseErrorKind.BAD_ROLE, line, str(exc)) from exc
    return Account(
        id=_parse_int(fields[0], "id", line),
        name=fields[1],
        secret=fields[2],
        username=fields[3],
        email=fields[4],
        allow_anonymous=_parse_flag(fields[5]),
        role=role,
    )


def encode_thread(thread: Thread) -> str:
    return join_fields([
        str(thread.id),
        str(thread.parent_id),
        str(thread.from_id),
        str(thread.to_id),
        _flag(thread.anonymous),
        thread.text,
        thread.answer,
    ])


def decode_thread(line: str) -> Thread:
    fields = split_fields(line)
    _require(fields, THREAD_FIELDS, line)
    return Thread(
        id=_parse_int(fields[0], "id", line),
        parent_id=_parse_int(fields[1], "parent_id", line),
        from_id=_parse_int(fields[2], "from_id", line),
        to_id=_parse_int(fields[3], "to_id", line),
        anonymous=_parse_flag(fields[4]),
        text=fields[5],
        answer=fields[6] if len(fields) > THREAD_FIELDS else "",
    )


def encode(record: Account | Thread) -> str:
    """Encode an account or thread to its line form (no trailing newline)."""
    if isinstance(record, Account):
        return encode_account(record)
    if isinstance(record, Thread):
        return encode_thread(record)
    msg = f"cannot encode {type(record).__name__}"
    raise TypeError(msg)
