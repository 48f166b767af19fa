"""
secure-npm Lockfile Scanners
One scanner per lockfile format, run in a fixed order: npm, yarn, pnpm
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from .base import BaseLockfileScanner, LockfileHit
from .npm_lock import NpmLockScanner
from .yarn_lock import YarnLockScanner
from .pnpm_lock import PnpmLockScanner

__all__ = [
    'BaseLockfileScanner',
    'LockfileHit',
    'NpmLockScanner',
    'YarnLockScanner',
    'PnpmLockScanner',
    'SCANNER_REGISTRY',
    'get_all_scanners',
    'scan_lockfiles',
    'dedupe_hits',
]

# Detection order matters: the first lockfile to match a pair is the one reported
SCANNER_REGISTRY = {
    'npm': NpmLockScanner,
    'yarn': YarnLockScanner,
    'pnpm': PnpmLockScanner,
}


def get_all_scanners(lock_match: str = "structural") -> List[BaseLockfileScanner]:
    """Get instances of all lockfile scanners in detection order"""
    return [scanner_class(lock_match) for scanner_class in SCANNER_REGISTRY.values()]


def scan_lockfiles(
    project_dir: Path,
    lock_match: str = "structural",
    scanners: Optional[List[BaseLockfileScanner]] = None,
    on_scanned: Optional[Callable[[BaseLockfileScanner, List[LockfileHit]], None]] = None,
) -> List[LockfileHit]:
    """
    Raw hits from every lockfile, not deduplicated

    Args:
        project_dir: Project root
        lock_match: package-lock.json match mode
        scanners: Scanners to run, defaults to all of them in detection order
        on_scanned: Called with each scanner and its hits once it has run

    Returns:
        Hits in scanner order
    """
    hits: List[LockfileHit] = []
    for scanner in scanners or get_all_scanners(lock_match):
        scanner_hits = scanner.scan(project_dir)
        if on_scanned:
            on_scanned(scanner, scanner_hits)
        hits.extend(scanner_hits)
    return hits


def dedupe_hits(hits: List[LockfileHit]) -> List[LockfileHit]:
    """Collapse hits by (name, version), keeping the first lockfile seen"""
    seen: Dict[Tuple[str, str], LockfileHit] = {}
    for hit in hits:
        seen.setdefault((hit.name, hit.version), hit)
    return list(seen.values())
