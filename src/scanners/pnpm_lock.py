"""
pnpm-lock.yaml Scanner
YAML lockfile written by pnpm
"""

import re
from typing import Any

from .resolution_graph import ResolutionGraphScanner
from package_manager import PackageManagerKind


class PnpmLockScanner(ResolutionGraphScanner):
    """
    Scanner for pnpm-lock.yaml

    From lockfile v6 on, pnpm has no "version:" line per package; the version
    lives in the key ("/chalk@5.6.1:" or "chalk@5.6.1(peer@1.0.0):"). Such a
    key counts as both the header and the version match.
    """

    NAME = "pnpm"
    LOCKFILE = "pnpm-lock.yaml"
    PM = PackageManagerKind.PNPM

    def keyed_version_pattern(self, name: str, version: str) -> "re.Pattern[str]":
        return re.compile(
            rf'^[ \t]*["\']?/?{re.escape(name)}@{re.escape(version)}(?:["\':(]|$)',
            re.MULTILINE,
        )

    def contains(self, document: Any, name: str, version: str) -> bool:
        if self.keyed_version_pattern(name, version).search(document):
            return True
        return super().contains(document, name, version)
