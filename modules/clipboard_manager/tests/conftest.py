from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest


def pytest_configure():
    repo_root = Path(__file__).resolve().parents[3]
    modules_dir = repo_root / "modules"
    for p in (repo_root, modules_dir):
        sp = str(p)
        if sp not in sys.path:
            sys.path.insert(0, sp)


ENV_VARS = (
    "CLIPBOARD_TMPDIR",
    "CLIPBOARD_PERSISTDIR",
    "CLIPBOARD_ALWAYS_PERSIST",
    "CLIPBOARD_SILENT",
    "CLIPBOARD_SAFE_COPY",
    "CLIPBOARD_CONFLICT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    from clipboard_manager import ui

    ui.set_silent(False)
    yield
    ui.set_silent(False)


@pytest.fixture
def settings(tmp_path: Path):
    from clipboard_manager.config import Settings

    return Settings(temporary_dir=tmp_path / "state", persistent_dir=tmp_path / "persist")


@pytest.fixture
def clipboard(settings):
    from clipboard_manager.store import Clipboard

    return Clipboard("0", settings).ensure()


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


def _never_asked(filename):
    raise AssertionError(f"unexpected conflict prompt for {filename}")


@pytest.fixture
def ctx(clipboard, settings, workdir):
    from clipboard_manager import ui
    from clipboard_manager.actions import ActionContext
    from clipboard_manager.conflicts import ConflictResolver

    return ActionContext(
        clipboard=clipboard,
        settings=settings,
        resolver=ConflictResolver(_never_asked),
        console=ui.make_console(file=io.StringIO(), width=120),
        err_console=ui.make_console(file=io.StringIO(), width=120),
        stdin=io.BytesIO(),
        stdout=io.BytesIO(),
        cwd=workdir,
    )

