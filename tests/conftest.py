"""Pytest configuration and fixtures."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from authoring_installer.application import Application
from authoring_installer.errors import DependencyError
from authoring_installer.lib.docstore import DocumentStore
from authoring_installer.lib.prompt import Prompter
from authoring_installer.modes import InstallMode
from authoring_installer.pipeline import InstallCtx


class ScriptedPrompter(Prompter):
    """Answers prompts from a fixed list; running out behaves like EOF on stdin."""

    def __init__(self, answers: Optional[List[str]] = None) -> None:
        super().__init__()
        self.answers = list(answers or [])
        self.asked: List[Tuple[str, bool]] = []
        self.said: List[str] = []

    def ask(self, label: str, *, default: Optional[str] = None, hidden: bool = False) -> str:
        self.asked.append((label, hidden))
        if not self.answers:
            raise EOFError(f"prompt script exhausted at {label!r}")
        return self.answers.pop(0)

    def say(self, text: str) -> None:
        self.said.append(text)

    @property
    def output(self) -> str:
        return "\n".join(self.said)


def enter(n: int) -> List[str]:
    """n presses of ENTER."""
    return [""] * n


class FakeFramework:
    def __init__(self, *, tag: str = "v5.1.0", fail_latest: bool = False, fail_install: bool = False) -> None:
        self.tag = tag
        self.fail_latest = fail_latest
        self.fail_install = fail_install
        self.installs: List[Tuple[str, str, bool]] = []

    def latest_tag(self, repository: str) -> str:
        if self.fail_latest:
            raise DependencyError("ls-remote failed", message="Failed to get latest framework version")
        return self.tag

    def install(self, repository: str, revision: str, *, force: bool = True) -> None:
        if self.fail_install:
            raise DependencyError(
                "clone failed",
                message="Framework install failed. See console output for possible reasons.",
            )
        self.installs.append((repository, revision, force))


class RecordingStore(DocumentStore):
    """DocumentStore that remembers the order of mutations."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.ops: List[Tuple[str, str]] = []
        self.fail_on: Dict[Tuple[str, str], Exception] = {}

    def _check(self, op: str, model: str) -> None:
        err = self.fail_on.get((op, model))
        if err is not None:
            raise err

    def create(self, model, doc):
        self._check("create", model)
        self.ops.append(("create", model))
        return super().create(model, doc)

    def update(self, model, query, changes):
        self._check("update", model)
        self.ops.append(("update", model))
        return super().update(model, query, changes)

    def destroy(self, model, query=None):
        self._check("destroy", model)
        self.ops.append(("destroy", model))
        return super().destroy(model, query)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() so each test starts from a bare root logger."""
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    for attr in ("_authoring_installer_configured", "_authoring_installer_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


@pytest.fixture
def store(tmp_path: Path) -> RecordingStore:
    s = RecordingStore(tmp_path / "data" / "adapt-tenant-master.json")
    s.open()
    return s


@pytest.fixture
def app(store: RecordingStore) -> Application:
    return Application(store)


@pytest.fixture
def framework() -> FakeFramework:
    return FakeFramework()


@pytest.fixture
def make_ctx(tmp_path: Path, framework: FakeFramework, store: RecordingStore) -> Callable[..., InstallCtx]:
    def _make(
        mode: InstallMode = InstallMode.UNATTENDED,
        *,
        answers: Optional[List[str]] = None,
        overrides: Optional[Dict[str, Any]] = None,
        prompter: Optional[Prompter] = None,
    ) -> InstallCtx:
        return InstallCtx(
            mode=mode,
            root_dir=tmp_path,
            prompter=prompter or ScriptedPrompter(answers),
            framework=framework,
            app_factory=lambda cfg: Application(store),
            overrides=dict(overrides or {}),
            build_command=None,
        )

    return _make


@pytest.fixture
def admin_overrides() -> Dict[str, Any]:
    return {
        "email": "admin@example.com",
        "password": "s3cret-pass",
        "retypePassword": "s3cret-pass",
    }
