"""
Base Lockfile Scanner for secure-npm
Each lockfile format gets a scanner that answers one question: does this
lockfile show a given (package, version) pair as installed?
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from advisories import iter_advisories
from package_manager import PackageManagerKind


@dataclass(frozen=True)
class LockfileHit:
    """A compromised (name, version) pair seen in one lockfile"""
    name: str
    version: str
    lockfile: str
    pm: PackageManagerKind


class BaseLockfileScanner(ABC):
    """
    Abstract base class for lockfile scanners

    Scanning never raises: a missing, unreadable or unparseable lockfile
    simply produces no hits.
    """

    # Scanner metadata - override in subclasses
    NAME: str = "base"
    LOCKFILE: str = ""
    PM: PackageManagerKind = PackageManagerKind.NPM

    def __init__(self, lock_match: str = "structural"):
        self.lock_match = lock_match

    @abstractmethod
    def contains(self, document: Any, name: str, version: str) -> bool:
        """True if the prepared lockfile shows name@version installed"""

    def prepare(self, text: str) -> Any:
        """
        Turn raw lockfile text into whatever contains() works on

        Raise ValueError when the text cannot be used; the file is skipped.
        """
        return text

    def lockfile_path(self, project_dir: Path) -> Path:
        return Path(project_dir) / self.LOCKFILE

    def read_lockfile(self, project_dir: Path) -> Optional[str]:
        path = self.lockfile_path(project_dir)
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError):
            return None

    def scan(
        self,
        project_dir: Path,
        advisories: Optional[Iterable[Tuple[str, str]]] = None,
    ) -> List[LockfileHit]:
        """
        Find every advisory pair present in this scanner's lockfile

        Args:
            project_dir: Project root holding the lockfile
            advisories: (name, version) pairs to look for, defaults to the
                built-in compromised list

        Returns:
            One LockfileHit per matching pair, in advisory order
        """
        text = self.read_lockfile(project_dir)
        if not text:
            return []

        try:
            document = self.prepare(text)
        except ValueError:
            return []

        pairs = iter_advisories() if advisories is None else advisories
        return [
            LockfileHit(name=name, version=version, lockfile=self.LOCKFILE, pm=self.PM)
            for name, version in pairs
            if self.contains(document, name, version)
        ]

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    @staticmethod
    def version_pattern(version: str) -> str:
        """Escaped version that will not match a longer version (5.6.1 vs 5.6.10)"""
        return re.escape(version) + r'(?![0-9A-Za-z.+-])'
