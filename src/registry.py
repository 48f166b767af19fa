"""
Safe Version Resolver
Asks the npm registry (through `npm view`) which versions of a package exist
and picks a replacement for a compromised one
"""

import json
import subprocess
from typing import Callable, List, Optional

from versioning import sort_versions, unsupported_versions


def parse_view_output(output: str) -> List[str]:
    """
    Parse `npm view <pkg> versions --json` output

    npm prints a JSON array, or a bare JSON string when only one version
    was ever published. Anything else yields [].
    """
    try:
        parsed = json.loads(output)
    except (json.JSONDecodeError, TypeError):
        return []
    if isinstance(parsed, str):
        return [parsed]
    if isinstance(parsed, list):
        return [v for v in parsed if isinstance(v, str)]
    return []


def pick_safe_version(versions: List[str], bad_version: str) -> Optional[str]:
    """
    Choose the replacement for bad_version

    Policy is "latest other release": drop the bad version, sort the rest and
    take the highest. Not the nearest safe version, not the latest below it.

    Args:
        versions: Every published version, in registry order
        bad_version: The compromised version

    Returns:
        The version to move to, or None when there is nothing to pick
    """
    if not versions:
        return None

    candidates = sort_versions(v for v in versions if v != bad_version)
    if candidates:
        return candidates[-1]

    # Only reachable when the registry list is degenerate
    return next((v for v in versions if v != bad_version), None)


class RegistryClient:
    """Looks up published versions with the npm CLI"""

    def __init__(
        self,
        timeout: int = 60,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        on_warning: Optional[Callable[[str], None]] = None,
    ):
        self.timeout = timeout
        self.runner = runner
        self.on_warning = on_warning

    def fetch_versions(self, package: str) -> List[str]:
        """All published versions of a package, [] on any failure"""
        try:
            result = self.runner(
                ["npm", "view", package, "versions", "--json"],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired):
            return []

        # Private scopes and unknown packages exit non-zero (E404)
        if result.returncode != 0:
            return []

        return parse_view_output(result.stdout)

    def resolve_safe_version(self, package: str, bad_version: str) -> Optional[str]:
        """Fetch versions and pick a replacement; None means skip this package"""
        versions = self.fetch_versions(package)
        if not versions:
            return None

        unordered = unsupported_versions(versions)
        if unordered and self.on_warning:
            self.on_warning(
                f"{package}: {len(unordered)} version(s) with pre-release tags or extra "
                f"components are only ordered by major.minor.patch (e.g. {unordered[0]})"
            )

        return pick_safe_version(versions, bad_version)
