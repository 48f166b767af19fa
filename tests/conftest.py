"""Shared fixtures for the secure-npm test suite."""

from __future__ import annotations

import io
import json
import subprocess
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rich.console import Console  # noqa: E402

from theme import dark_theme  # noqa: E402


class FakeRunner:
    """Stands in for subprocess.run: records argv, answers `npm view` from a table."""

    def __init__(
        self,
        versions: Optional[Dict[str, Any]] = None,
        returncodes: Optional[Dict[str, int]] = None,
        on_call: Optional[Callable[[List[str]], None]] = None,
    ):
        self.versions = versions or {}
        self.returncodes = returncodes or {}
        self.on_call = on_call
        self.calls: List[List[str]] = []

    def __call__(self, cmd, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        if self.on_call:
            self.on_call(cmd)

        if cmd[:2] == ["npm", "view"]:
            package = cmd[2]
            if package not in self.versions:
                return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="npm ERR! code E404")
            return subprocess.CompletedProcess(cmd, 0, stdout=json.dumps(self.versions[package]), stderr="")

        return subprocess.CompletedProcess(cmd, self.returncodes.get(" ".join(cmd[:2]), 0), stdout="", stderr="")

    def commands(self) -> List[str]:
        return [" ".join(c) for c in self.calls]


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Empty project directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def make_runner():
    return FakeRunner


@pytest.fixture
def json_writer():
    return write_json


@pytest.fixture
def quiet_console() -> Console:
    """Console that renders into memory instead of the terminal."""
    return Console(file=io.StringIO(), theme=dark_theme, width=200)
