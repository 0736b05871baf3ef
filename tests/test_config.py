from __future__ import annotations

import pytest

from askme.config import init_config, load_config
from askme.system import open_repositories


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch):
    monkeypatch.delenv("ASKME_DATA_DIR", raising=False)


def test_defaults_without_config_file(tmp_path):
    cfg = load_config(tmp_path)
    assert cfg.root == tmp_path
    assert cfg.name == tmp_path.name
    assert cfg.accounts_path == tmp_path / ".askme" / "users.txt"
    assert cfg.questions_path == tmp_path / ".askme" / "questions.txt"
    assert cfg.log_level == "WARNING"


def test_init_then_load(tmp_path):
    path = init_config(tmp_path, name="board")
    assert path.exists()
    cfg = load_config(tmp_path)
    assert cfg.name == "board"
    with pytest.raises(FileExistsError):
        init_config(tmp_path)


def test_config_values_and_upward_search(tmp_path, monkeypatch):
    (tmp_path / "askme.toml").write_text(
        '[askme]\nname = "qa"\ndata_dir = "store"\naccounts_file = "people.txt"\n'
        '[logging]\nlevel = "info"\n'
    )
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)
    cfg = load_config()
    assert cfg.root == tmp_path
    assert cfg.accounts_path == tmp_path / "store" / "people.txt"
    assert cfg.questions_path == tmp_path / "store" / "questions.txt"
    assert cfg.log_level == "INFO"


def test_env_overrides_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("ASKME_DATA_DIR", "elsewhere")
    cfg = load_config(tmp_path)
    assert cfg.data_dir == tmp_path / "elsewhere"


def test_open_repositories(tmp_path):
    cfg = load_config(tmp_path)
    accounts, threads = open_repositories(cfg)
    assert cfg.data_dir.is_dir()
    assert threads.accounts is accounts
    assert len(accounts) == len(threads) == 0
