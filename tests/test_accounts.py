from __future__ import annotations

import dataclasses

import pytest

from askme.accounts import AccountRepository
from askme.errors import DuplicateIdError, InvalidCredentialsError, InvalidRecordError, NotFoundError
from askme.models import Account, Role


def _account(account_id: int, **kw) -> Account:
    fields = {
        "name": f"User {account_id}",
        "secret": "pw",
        "username": f"u{account_id}",
        "email": f"u{account_id}@example.com",
    }
    fields.update(kw)
    return Account(account_id, **fields)


def test_next_id_allocation(accounts):
    assert accounts.next_id() == 1
    accounts.add(_account(3))
    accounts.add(_account(7))
    assert accounts.next_id() == 8
    accounts.remove(7)
    assert accounts.next_id() == 4


def test_add_rejects_duplicate_without_writing(accounts):
    accounts.add(_account(1))
    before = accounts.path.read_text()
    with pytest.raises(DuplicateIdError):
        accounts.add(_account(1, name="Impostor"))
    assert accounts.get(1).name == "User 1"
    assert accounts.path.read_text() == before


def test_add_rejects_non_positive_id(accounts):
    with pytest.raises(InvalidRecordError):
        accounts.add(_account(0))
    assert len(accounts) == 0


def test_mutations_are_persisted(accounts, tmp_path):
    accounts.add(_account(1, name="Ann, Lee"))
    accounts.add(_account(2))
    accounts.update(_account(2, email="new@example.com"))
    accounts.remove(1)

    reloaded = AccountRepository(tmp_path / "users.txt")
    assert [a.id for a in reloaded] == [2]
    assert reloaded.get(2).email == "new@example.com"


def test_update_and_remove_missing(accounts):
    with pytest.raises(NotFoundError):
        accounts.update(_account(5))
    with pytest.raises(NotFoundError):
        accounts.remove(5)
    with pytest.raises(NotFoundError):
        accounts.get(5)


def test_authenticate_is_exact(accounts):
    accounts.add(_account(1, secret="S3cret"))
    assert accounts.authenticate(1, "S3cret")
    assert not accounts.authenticate(1, "s3cret")
    assert not accounts.authenticate(1, "S3cret ")
    assert not accounts.authenticate(2, "S3cret")


def test_login(accounts):
    accounts.add(_account(1, secret="pw"))
    assert accounts.login(1, "pw").id == 1
    with pytest.raises(InvalidCredentialsError):
        accounts.login(1, "nope")


def test_register_allocates_next_id(accounts):
    first = accounts.register("Ann", "pw", "ann", "ann@example.com", role=Role.ADMIN)
    second = accounts.register("Bob", "pw", "bob", "bob@example.com", allow_anonymous=True)
    assert (first.id, second.id) == (1, 2)
    assert first.is_admin
    assert second.allow_anonymous
    assert second.role is Role.MEMBER


def test_set_allow_anonymous(accounts):
    accounts.add(_account(1))
    accounts.set_allow_anonymous(1, True)
    assert accounts.get(1).allow_anonymous


def test_malformed_lines_are_dropped_on_load(tmp_path):
    path = tmp_path / "users.txt"
    path.write_text(
        "1,Ann,pw,ann,ann@x.io,0,1\n"
        "2,Bob,pw,bob,bob@x.io\n"
        "3,Cy,pw,cy,cy@x.io,1,0\n"
        "4,Dee,pw,dee,dee@x.io,0,9\n"
    )
    repo = AccountRepository(path)
    assert len(repo) == 2
    assert 1 in repo and 3 in repo
    assert repo.get(3).is_admin


def test_rejected_line_break_leaves_repository_writable(accounts, tmp_path):
    with pytest.raises(InvalidRecordError):
        accounts.add(_account(1, name="two\nlines"))
    assert len(accounts) == 0
    accounts.add(_account(1))
    with pytest.raises(InvalidRecordError):
        accounts.update(_account(1, email="a@x\r"))
    assert accounts.get(1).email == "u1@example.com"
    accounts.add(_account(2))
    assert [a.id for a in AccountRepository(tmp_path / "users.txt")] == [1, 2]


def test_accounts_cannot_be_changed_behind_the_repository(accounts, tmp_path):
    accounts.add(_account(2, secret="pb"))
    with pytest.raises(dataclasses.FrozenInstanceError):
        accounts.get(2).secret = "hijacked"  # type: ignore[misc]
    assert not accounts.authenticate(2, "hijacked")
    assert AccountRepository(tmp_path / "users.txt").authenticate(2, "pb")
