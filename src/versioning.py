"""
Simple Version Ordering
Three-component major.minor.patch comparison used to pick a replacement
release. Pre-release tags and build metadata are NOT understood: each
component only contributes its leading run of digits.
"""

import re
from functools import cmp_to_key
from typing import Iterable, List, Tuple

_LEADING_DIGITS = re.compile(r'^(\d+)')
_SIMPLE_VERSION = re.compile(r'^\d+\.\d+\.\d+$')


def parse_version(version: str) -> Tuple[int, int, int]:
    """
    Parse a version string into (major, minor, patch)

    Missing components, or components without leading digits, count as 0.
    "1.2.3-beta.1" parses as (1, 2, 3).
    """
    parts = str(version).split(".")
    numbers = []
    for i in range(3):
        match = _LEADING_DIGITS.match(parts[i]) if i < len(parts) else None
        numbers.append(int(match.group(1)) if match else 0)
    return numbers[0], numbers[1], numbers[2]


def compare_versions(a: str, b: str) -> int:
    """Three-way compare of two versions: -1, 0 or 1"""
    pa, pb = parse_version(a), parse_version(b)
    if pa > pb:
        return 1
    if pa < pb:
        return -1
    return 0


def sort_versions(versions: Iterable[str]) -> List[str]:
    """Ascending, stable sort by compare_versions"""
    return sorted(versions, key=cmp_to_key(compare_versions))


def is_simple_version(version: str) -> bool:
    """True for plain x.y.z releases, the only shape ordered reliably"""
    return bool(_SIMPLE_VERSION.match(str(version)))


def unsupported_versions(versions: Iterable[str]) -> List[str]:
    """Versions whose relative order compare_versions cannot guarantee"""
    return [v for v in versions if not is_simple_version(v)]
