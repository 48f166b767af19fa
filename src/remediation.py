"""
Remediation Actions for compromised packages
Remove or re-pin a direct dependency, pin a transitive one through
overrides/resolutions, and converge node_modules with a frozen reinstall
"""

import shutil
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

import manifest
from manifest import ManifestError
from package_manager import CommandResult, PackageManager
from session_log import NullSessionLogger, SessionLogger
from theme import console as default_console


class Remediator:
    """
    Applies fixes to one project

    Package manager failures are reported and returned, never raised or
    retried: the caller moves on to the next finding either way.
    """

    def __init__(
        self,
        project_dir: Path,
        package_manager: PackageManager,
        console: Optional[Console] = None,
        session_logger: Optional[SessionLogger] = None,
    ):
        self.project_dir = Path(project_dir)
        self.pm = package_manager
        self.console = console or default_console
        self.session_logger = session_logger or NullSessionLogger()

    def _report(self, action: str, package: str, result: CommandResult) -> bool:
        self.session_logger.log_command(result.command, result.returncode)
        if result.ok:
            self.session_logger.log_action(action, package)
            return True

        reason = result.error or f"exit code {result.returncode}"
        self.console.print(f"   [warning]! {escape(' '.join(result.command))} failed ({escape(reason)})[/warning]")
        self.session_logger.log_action(action, package, f"failed: {reason}")
        return False

    def remove_direct_dependency(self, package: str) -> bool:
        """Uninstall through the package manager; it edits package.json itself"""
        return self._report("remove", package, self.pm.remove(package))

    def install_direct_dependency(self, package: str, version: str, save_dev: bool = False) -> bool:
        """
        Install an exact version of a direct dependency

        Args:
            package: Package name
            version: Exact version to install
            save_dev: Re-add under devDependencies (-D)
        """
        result = self.pm.add(package, version, save_dev)
        return self._report("install", f"{package}@{version}", result)

    def add_overrides(self, package: str, version: str) -> bool:
        """Pin package@version in overrides, resolutions and pnpm.overrides"""
        try:
            manifest.add_overrides(self.project_dir, package, version)
        except ManifestError as e:
            self.console.print(f"   [warning]! package.json left untouched: {escape(str(e))}[/warning]")
            self.session_logger.log_action("override", f"{package}@{version}", f"failed: {e}")
            return False
        self.console.print(f"   [success]→ overrides/resolutions added: {escape(package)}@{escape(version)}[/success]")
        self.session_logger.log_action("override", f"{package}@{version}")
        return True

    def reinstall_frozen(self) -> bool:
        """
        Wipe node_modules and the npm cache, then install strictly from the lockfile
        """
        self.console.print("\n[info]\\[reinstall] Cleaning and reinstalling deterministically…[/info]")

        node_modules = self.project_dir / "node_modules"
        try:
            shutil.rmtree(node_modules)
        except FileNotFoundError:
            pass
        except OSError as e:
            self.console.print(f"   [warning]! could not remove {escape(str(node_modules))}: {escape(str(e))}[/warning]")
            self.session_logger.log(f"node_modules removal failed: {e}", "WARN")

        cache = self.pm.clean_cache()
        self.session_logger.log_command(cache.command, cache.returncode)

        return self._report("reinstall", self.pm.kind.value, self.pm.frozen_install())
