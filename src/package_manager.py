"""
Package Manager Detection and Invocation
Knows which of npm / yarn / pnpm owns a project and how to spell its
remove, add and frozen-install verbs
"""

import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional


class PackageManagerKind(Enum):
    """Supported package managers"""
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


# Lockfile that marks each manager, in detection priority order
LOCKFILE_MARKERS = [
    ("pnpm-lock.yaml", PackageManagerKind.PNPM),
    ("yarn.lock", PackageManagerKind.YARN),
    ("package-lock.json", PackageManagerKind.NPM),
]


def detect_package_manager(project_dir: Path, user_agent: str = "") -> PackageManagerKind:
    """
    Work out which package manager produced the current install

    A lockfile in the project wins (pnpm, then yarn, then npm). Without one the
    npm_config_user_agent hint is consulted, falling back to npm.
    """
    for lockfile, kind in LOCKFILE_MARKERS:
        if (Path(project_dir) / lockfile).is_file():
            return kind

    if "pnpm" in user_agent:
        return PackageManagerKind.PNPM
    if "yarn" in user_agent:
        return PackageManagerKind.YARN
    return PackageManagerKind.NPM


@dataclass
class CommandResult:
    """Outcome of one package manager invocation"""
    command: List[str]
    returncode: Optional[int]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and self.error is None


class PackageManager:
    """
    Runs package manager verbs inside a project directory

    Output is not captured: the operator sees npm/yarn/pnpm directly. Failures
    come back as a CommandResult and are never retried.
    """

    def __init__(
        self,
        kind: PackageManagerKind,
        project_dir: Path,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.kind = kind
        self.project_dir = Path(project_dir)
        self.runner = runner

    @property
    def executable(self) -> str:
        return self.kind.value

    def remove_command(self, package: str) -> List[str]:
        verb = "uninstall" if self.kind == PackageManagerKind.NPM else "remove"
        return [self.executable, verb, package]

    def add_command(self, package: str, version: str, save_dev: bool = False) -> List[str]:
        verb = "install" if self.kind == PackageManagerKind.NPM else "add"
        cmd = [self.executable, verb]
        if save_dev:
            cmd.append("-D")
        cmd.append(f"{package}@{version}")
        return cmd

    def frozen_install_command(self) -> List[str]:
        if self.kind == PackageManagerKind.NPM:
            return ["npm", "ci"]
        return [self.executable, "install", "--frozen-lockfile"]

    def run(self, cmd: List[str]) -> CommandResult:
        """Run a command with the terminal's stdin/stdout/stderr"""
        try:
            completed = self.runner(cmd, cwd=str(self.project_dir))
        except OSError as e:
            return CommandResult(cmd, None, error=str(e))
        return CommandResult(cmd, completed.returncode)

    def clean_cache(self) -> CommandResult:
        """npm cache clean --force, output captured and failures tolerated"""
        cmd = ["npm", "cache", "clean", "--force"]
        try:
            completed = self.runner(
                cmd,
                cwd=str(self.project_dir),
                capture_output=True,
                text=True,
            )
        except OSError as e:
            return CommandResult(cmd, None, error=str(e))
        return CommandResult(cmd, completed.returncode)

    def remove(self, package: str) -> CommandResult:
        return self.run(self.remove_command(package))

    def add(self, package: str, version: str, save_dev: bool = False) -> CommandResult:
        return self.run(self.add_command(package, version, save_dev))

    def frozen_install(self) -> CommandResult:
        return self.run(self.frozen_install_command())
