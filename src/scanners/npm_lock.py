"""
package-lock.json Scanner
Single-file JSON tree lockfile written by npm
"""

import json
import re
from typing import Any, Set, Tuple

from .base import BaseLockfileScanner
from package_manager import PackageManagerKind

Pair = Tuple[str, str]


class NpmLockScanner(BaseLockfileScanner):
    """
    Scanner for package-lock.json

    "structural" mode parses the JSON and indexes every installed
    (name, version) pair. "heuristic" mode keeps the old text match: a
    "name": "<pkg>" field followed, somewhere later, by "version": "<ver>".
    The heuristic can pair fields from two neighbouring objects.
    """

    NAME = "npm"
    LOCKFILE = "package-lock.json"
    PM = PackageManagerKind.NPM

    def prepare(self, text: str) -> Any:
        if self.lock_match == "heuristic":
            return text
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"invalid {self.LOCKFILE}: {e}") from e
        return index_installed(data)

    def contains(self, document: Any, name: str, version: str) -> bool:
        if isinstance(document, set):
            return (name, version) in document

        pattern = re.compile(
            rf'"name"\s*:\s*"{re.escape(name)}"[\s\S]*?"version"\s*:\s*"{re.escape(version)}"',
            re.MULTILINE,
        )
        return bool(pattern.search(document))


def index_installed(data: Any) -> Set[Pair]:
    """
    Collect (name, version) pairs from a parsed package-lock.json

    Covers objects carrying both "name" and "version" at any depth, the
    lockfile v2/v3 "packages" map keyed by node_modules path, and the
    lockfile v1 nested "dependencies" map.
    """
    pairs: Set[Pair] = set()
    _index_named_objects(data, pairs)

    if isinstance(data, dict):
        packages = data.get("packages")
        if isinstance(packages, dict):
            for pkg_path, info in packages.items():
                if "node_modules/" not in pkg_path or not isinstance(info, dict):
                    continue
                name = pkg_path.rsplit("node_modules/", 1)[-1]
                version = info.get("version")
                if name and isinstance(version, str):
                    pairs.add((name, version))

        _index_legacy_dependencies(data.get("dependencies"), pairs)

    return pairs


def _index_named_objects(node: Any, pairs: Set[Pair]):
    if isinstance(node, dict):
        name, version = node.get("name"), node.get("version")
        if isinstance(name, str) and isinstance(version, str):
            pairs.add((name, version))
        for value in node.values():
            _index_named_objects(value, pairs)
    elif isinstance(node, list):
        for value in node:
            _index_named_objects(value, pairs)


def _index_legacy_dependencies(deps: Any, pairs: Set[Pair]):
    if not isinstance(deps, dict):
        return
    for name, info in deps.items():
        if not isinstance(info, dict):
            continue
        version = info.get("version")
        if isinstance(version, str):
            pairs.add((name, version))
        _index_legacy_dependencies(info.get("dependencies"), pairs)
