"""
Compromised Package Advisories
Known-bad package versions from the September 2025 npm maintainer
phishing incident (chalk, debug, duckdb, prebid and friends)
"""

from dataclasses import dataclass
from typing import Iterator, Tuple


@dataclass(frozen=True)
class AdvisoryEntry:
    """A package and the versions of it that were published by the attacker"""
    name: str
    versions: Tuple[str, ...]


COMPROMISED: Tuple[AdvisoryEntry, ...] = (
    AdvisoryEntry("chalk", ("5.6.1",)),
    AdvisoryEntry("chalk-template", ("1.1.1",)),
    AdvisoryEntry("debug", ("4.4.2",)),
    AdvisoryEntry("ansi-regex", ("6.2.1",)),
    AdvisoryEntry("ansi-styles", ("6.2.2",)),
    AdvisoryEntry("has-ansi", ("6.0.1",)),
    AdvisoryEntry("color", ("5.0.1",)),
    AdvisoryEntry("color-convert", ("3.1.1",)),
    AdvisoryEntry("color-name", ("2.0.1",)),
    AdvisoryEntry("color-string", ("2.1.1",)),
    AdvisoryEntry("duckdb", ("1.3.3",)),
    AdvisoryEntry("@duckdb/duckdb-wasm", ("1.29.2",)),
    AdvisoryEntry("@duckdb/node-api", ("1.3.3",)),
    AdvisoryEntry("@duckdb/node-bindings", ("1.3.3",)),
    AdvisoryEntry("error-ex", ("1.3.3",)),
    AdvisoryEntry("is-arrayish", ("0.3.3",)),
    AdvisoryEntry("backslash", ("0.2.1",)),
    AdvisoryEntry("prebid", ("10.9.2",)),
    AdvisoryEntry("prebid.js", ("10.9.2",)),
    AdvisoryEntry("prebid-universal-creative", ("1.17.3",)),
)


def iter_advisories() -> Iterator[Tuple[str, str]]:
    """Yield every compromised (name, version) pair in table order"""
    for entry in COMPROMISED:
        for version in entry.versions:
            yield entry.name, version

