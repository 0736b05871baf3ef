"""askme CLI — question/answer board backed by two line files.

Commands:
    askme init [NAME]              create askme.toml + data dir
    askme register                 create an account, print its id
    askme users                    list accounts
    askme remove-user ID           delete an account (admin)
    askme allow-anonymous on|off   accept anonymous questions or not
    askme ask TO TEXT              ask a question (--parent for a reply)
    askme answer ID TEXT           answer a question addressed to you
    askme delete ID                delete a question and its replies
    askme inbox / outbox           questions to / from you
    askme thread ID                replies to a question
    askme feed                     every question (admin)

Commands that act on behalf of an account take --as ID and --secret
(prompted when missing; also read from ASKME_ACCOUNT / ASKME_SECRET).
"""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from askme.config import AskMeConfig, init_config, load_config
from askme.errors import AskMeError, PermissionDeniedError
from askme.models import NO_PARENT, Role
from askme.policy import can_manage_accounts
from askme.system import open_repositories

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from askme.accounts import AccountRepository
    from askme.models import Account, Thread
    from askme.threads import ThreadRepository

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_cfg() -> AskMeConfig:
    try:
        return load_config()
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc


def _open() -> tuple[AccountRepository, ThreadRepository]:
    cfg = _load_cfg()
    with _errors():
        return open_repositories(cfg)


@contextlib.contextmanager
def _errors() -> Iterator[None]:
    """Report askme failures as CLI errors (exit status 1)."""
    try:
        yield
    except AskMeError as exc:
        raise click.ClickException(str(exc)) from exc


def actor_options(f: Callable[..., None]) -> Callable[..., None]:
    f = click.option(
        "--secret", prompt=True, hide_input=True, envvar="ASKME_SECRET", help="Account secret"
    )(f)
    return click.option(
        "--as", "account_id", type=int, required=True, envvar="ASKME_ACCOUNT", help="Acting account id"
    )(f)


def _login(accounts: AccountRepository, account_id: int, secret: str) -> Account:
    with _errors():
        return accounts.login(account_id, secret)


def _author_label(thread: Thread) -> str:
    return "Anonymous" if thread.anonymous else str(thread.from_id)


def _print_threads(title: str, threads: list[Thread], empty: str) -> None:
    console = Console()
    if not threads:
        console.print(empty)
        return
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("ID", justify="right", no_wrap=True)
    table.add_column("Parent", justify="right", style="dim")
    table.add_column("From")
    table.add_column("To", justify="right")
    table.add_column("Question")
    table.add_column("Answer")
    for t in threads:
        table.add_row(
            str(t.id),
            "" if t.parent_id == NO_PARENT else str(t.parent_id),
            _author_label(t),
            str(t.to_id),
            escape(t.text),
            escape(t.answer) if t.is_answered else "[dim]not answered yet[/dim]",
        )
    console.print(table)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="askme")
@click.option("--verbose", "-v", is_flag=True, help="Log repository activity to stderr")
def cli(verbose: bool) -> None:
    """askme — ask and answer questions."""
    level = "INFO" if verbose else _load_cfg().log_level
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s")


# ---------------------------------------------------------------------------
# askme init
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("name", required=False)
@click.option("--dir", "root", default=".", show_default=True, help="Project root")
def init(name: str | None, root: str) -> None:
    """Create askme.toml and the data directory."""
    root_path = Path(root).resolve()
    try:
        config_path = init_config(root_path, name=name)
        click.echo(f"Created {config_path}")
    except FileExistsError:
        click.echo("askme.toml already exists — skipping init")

    cfg = load_config(root_path)
    cfg.ensure_dirs()
    click.echo(f"Data dir  : {cfg.data_dir}")


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--name", prompt="Full name", help="Display name")
@click.option("--username", prompt=True, help="Login name")
@click.option("--email", prompt=True)
@click.option("--secret", prompt=True, hide_input=True, confirmation_prompt=True, envvar="ASKME_SECRET")
@click.option("--allow-anonymous", is_flag=True, help="Accept anonymous questions")
@click.option("--admin", is_flag=True, help="Create an administrator (only for the first account)")
def register(name: str, username: str, email: str, secret: str, allow_anonymous: bool, admin: bool) -> None:
    """Create an account and print its id."""
    accounts, _ = _open()
    if admin and len(accounts):
        raise click.ClickException("--admin is only allowed for the first account")
    with _errors():
        account = accounts.register(
            name, secret, username, email,
            allow_anonymous=allow_anonymous,
            role=Role.ADMIN if admin else Role.MEMBER,
        )
    click.echo(f"Registered {account.name} with id {account.id} (please remember it)")


@cli.command()
def users() -> None:
    """List all accounts."""
    accounts, _ = _open()
    console = Console()
    if not len(accounts):
        console.print("No users found")
        return
    table = Table(title="Accounts", show_header=True, header_style="bold")
    table.add_column("ID", justify="right", no_wrap=True)
    table.add_column("Name")
    table.add_column("Username", style="dim")
    table.add_column("Role")
    table.add_column("Anonymous", justify="center")
    for a in accounts:
        table.add_row(
            str(a.id), escape(a.name), escape(a.username), a.role.label, "yes" if a.allow_anonymous else "no"
        )
    console.print(table)


@cli.command("remove-user")
@click.argument("user_id", type=int)
@actor_options
def remove_user(user_id: int, account_id: int, secret: str) -> None:
    """Delete an account (admin only). Its questions stay."""
    accounts, _ = _open()
    actor = _login(accounts, account_id, secret)
    with _errors():
        if not can_manage_accounts(actor):
            msg = "Only administrators can remove accounts"
            raise PermissionDeniedError(msg)
        accounts.remove(user_id)
    click.echo(f"Deleted user {user_id}")


@cli.command("allow-anonymous")
@click.argument("state", type=click.Choice(["on", "off"]))
@actor_options
def allow_anonymous(state: str, account_id: int, secret: str) -> None:
    """Turn anonymous questions to you on or off."""
    accounts, _ = _open()
    actor = _login(accounts, account_id, secret)
    with _errors():
        accounts.set_allow_anonymous(actor.id, state == "on")
    click.echo(f"Anonymous questions {state}")


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("to_id", type=int)
@click.argument("text")
@click.option("--parent", "parent_id", type=int, default=NO_PARENT, help="Reply to this question id")
@click.option("--anonymous", is_flag=True, help="Hide your identity from the recipient")
@actor_options
def ask(to_id: int, text: str, parent_id: int, anonymous: bool, account_id: int, secret: str) -> None:
    """Ask account TO_ID a question."""
    accounts, threads = _open()
    actor = _login(accounts, account_id, secret)
    with _errors():
        thread = threads.ask(actor.id, to_id, text, parent_id=parent_id, anonymous=anonymous)
    click.echo(f"Question submitted: id {thread.id}")
    if thread.is_reply:
        click.echo(f"  thread to question {thread.parent_id}")


@cli.command()
@click.argument("thread_id", type=int)
@click.argument("text")
@actor_options
def answer(thread_id: int, text: str, account_id: int, secret: str) -> None:
    """Answer (or re-answer) a question addressed to you."""
    accounts, threads = _open()
    actor = _login(accounts, account_id, secret)
    with _errors():
        previous = threads.get(thread_id).answer
        threads.set_answer(thread_id, text, actor=actor)
    click.echo(f"Answer {'updated' if previous else 'submitted'} for question {thread_id}")


@cli.command()
@click.argument("thread_id", type=int)
@actor_options
def delete(thread_id: int, account_id: int, secret: str) -> None:
    """Delete a question together with the replies you may delete."""
    accounts, threads = _open()
    actor = _login(accounts, account_id, secret)
    with _errors():
        result = threads.delete(thread_id, actor)
    click.echo(f"Deleted: {', '.join(str(i) for i in result.deleted)}")
    for skipped in result.skipped:
        click.echo(f"  skipped {skipped} (not your question)", err=True)


@cli.command()
@actor_options
def inbox(account_id: int, secret: str) -> None:
    """Questions addressed to you."""
    accounts, threads = _open()
    actor = _login(accounts, account_id, secret)
    _print_threads("Questions to you", threads.list_to(actor.id), "No questions found addressed to you.")


@cli.command()
@actor_options
def outbox(account_id: int, secret: str) -> None:
    """Questions you asked."""
    accounts, threads = _open()
    actor = _login(accounts, account_id, secret)
    _print_threads("Questions from you", threads.list_from(actor.id), "You haven't asked any questions yet.")


@cli.command()
@click.argument("parent_id", type=int)
def thread(parent_id: int) -> None:
    """Show the replies to a question."""
    _, threads = _open()
    _print_threads(
        f"Thread of question {parent_id}",
        threads.list_replies(parent_id),
        "No thread questions found for this question.",
    )


@cli.command()
@actor_options
def feed(account_id: int, secret: str) -> None:
    """Every question in the system (admin only)."""
    accounts, threads = _open()
    actor = _login(accounts, account_id, secret)
    with _errors():
        everything = threads.feed(actor)
    _print_threads(f"Feed ({len(everything)} questions)", everything, "No questions in the system yet.")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
