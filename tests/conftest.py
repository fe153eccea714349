"""Shared test fixtures: a dotfiles repository, a fake $HOME, tree helpers."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Dict

import pytest


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    """Create *files* (relative path -> text) under *root*."""
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own DOOT_* settings out of the tests."""
    monkeypatch.delenv("DOOT_MODE", raising=False)
    monkeypatch.delenv("DOOT_RESOLVER", raising=False)


@pytest.fixture
def sample_yaml() -> str:
    return textwrap.dedent("""\
        version: v1
        mode: file
        plans:
          all:
          minimal: [bash]
        groups:
          bash:
            nux: "~"
            mac: "$HOME"
          vim:
            nux: "${HOME}/.vim"
    """)


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty fake home directory, exported as $HOME."""
    path = tmp_path / "home"
    path.mkdir()
    monkeypatch.setenv("HOME", str(path))
    return path


@pytest.fixture
def dotfiles(tmp_path: Path, home: Path, sample_yaml: str, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A dotfiles repository with two groups; the working directory is its root."""
    repo = tmp_path / "dotfiles"
    write_tree(repo, {
        "doot.yaml": sample_yaml,
        "bash/.bashrc": "export EDITOR=vim\nalias ll='ls -l'\n",
        "bash/.profile": "source ~/.bashrc\n",
        "bash/.dootignore": "*.swp\n",
        "vim/vimrc": "set number\n",
    })
    monkeypatch.chdir(repo)
    return repo
