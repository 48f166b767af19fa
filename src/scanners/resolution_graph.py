"""
Resolution Graph Scanner
Shared matching for yarn.lock and pnpm-lock.yaml, the line-oriented
lockfiles where each resolved package gets its own header line
"""

import re
from typing import Any

from .base import BaseLockfileScanner


class ResolutionGraphScanner(BaseLockfileScanner):
    """
    Two independent line matches must both be present:

    * a header line starting with "<pkg>@" (indentation, a quote and a
      leading "/" are allowed in front)
    * a "version" line carrying the compromised version

    The two lines are not tied to the same entry, so a file where one package
    is at the bad version and the advisory package at another will still hit.
    """

    def header_pattern(self, name: str) -> "re.Pattern[str]":
        return re.compile(
            rf'^[ \t]*["\']?/?{re.escape(name)}@[^\s:"\',]*(?:["\':,]|$)',
            re.MULTILINE,
        )

    def version_line_pattern(self, version: str) -> "re.Pattern[str]":
        return re.compile(
            rf'\bversion\s*[:"]\s*["\']?{self.version_pattern(version)}',
            re.MULTILINE,
        )

    def contains(self, document: Any, name: str, version: str) -> bool:
        return bool(
            self.header_pattern(name).search(document)
            and self.version_line_pattern(version).search(document)
        )
