"""AskMeConfig: project-local config for the question/answer store.

Default layout (all relative to the project root):

    askme.toml            # project config
    .askme/
        users.txt         # one account per line
        questions.txt     # one question per line

askme.toml example:

    [askme]
    name = "my-board"
    # data_dir = ".askme"             # default
    # accounts_file = "users.txt"     # default
    # questions_file = "questions.txt"

    [logging]
    level = "WARNING"

ASKME_DATA_DIR in the environment overrides data_dir.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_CONFIG_FILENAME = "askme.toml"
_DEFAULT_DATA_DIR = ".askme"
_DEFAULT_ACCOUNTS_FILE = "users.txt"
_DEFAULT_QUESTIONS_FILE = "questions.txt"
_DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class AskMeConfig:
    """Resolved configuration for an askme project."""

    root: Path                      # directory that contains askme.toml
    name: str = ""
    data_dir: Path = Path(_DEFAULT_DATA_DIR)
    accounts_file: str = _DEFAULT_ACCOUNTS_FILE
    questions_file: str = _DEFAULT_QUESTIONS_FILE
    log_level: str = _DEFAULT_LOG_LEVEL

    @property
    def accounts_path(self) -> Path:
        return self.data_dir / self.accounts_file

    @property
    def questions_path(self) -> Path:
        return self.data_dir / self.questions_file

    def ensure_dirs(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)


def load_config(root: Path | str | None = None) -> AskMeConfig:
    """Load askme.toml from root (or search upward from cwd if root is None)."""
    root_path = _find_root(Path(root) if root else Path.cwd())
    config_path = root_path / _CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            raw = tomllib.load(f)

    section = raw.get("askme", {})
    log_section = raw.get("logging", {})

    data_rel = os.environ.get("ASKME_DATA_DIR") or section.get("data_dir", _DEFAULT_DATA_DIR)

    return AskMeConfig(
        root=root_path,
        name=section.get("name", root_path.name),
        data_dir=root_path / data_rel,
        accounts_file=str(section.get("accounts_file", _DEFAULT_ACCOUNTS_FILE)),
        questions_file=str(section.get("questions_file", _DEFAULT_QUESTIONS_FILE)),
        log_level=str(log_section.get("level", _DEFAULT_LOG_LEVEL)).upper(),
    )


def _find_root(start: Path) -> Path:
    """Walk upward from start looking for askme.toml."""
    for directory in (start, *start.parents):
        if (directory / _CONFIG_FILENAME).exists():
            return directory
    return start


def init_config(root: Path, name: str | None = None) -> Path:
    """Write a default askme.toml at root. Raises if already exists."""
    config_path = root / _CONFIG_FILENAME
    if config_path.exists():
        msg = f"askme.toml already exists at {config_path}"
        raise FileExistsError(msg)

    project_name = name or root.name
    content = f"""\
[askme]
name = "{project_name}"
# data_dir = ".askme"               # default; ASKME_DATA_DIR overrides
# accounts_file = "users.txt"       # default
# questions_file = "questions.txt"  # default

# [logging]
# level = "WARNING"
"""
    root.mkdir(parents=True, exist_ok=True)
    config_path.write_text(content)
    return config_path
