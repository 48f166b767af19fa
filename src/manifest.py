"""
package.json access
Reads the project manifest for direct-dependency classification and writes
override/resolution pins back to it
"""

import json
from pathlib import Path
from typing import Any, Dict

DEPENDENCY_SECTIONS = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "optionalDependencies",
)

# Section path per package manager convention: npm, yarn, pnpm
OVERRIDE_SECTIONS = (
    ("overrides",),
    ("resolutions",),
    ("pnpm", "overrides"),
)


class ManifestError(ValueError):
    """Raised when package.json exists but cannot be safely rewritten"""


def manifest_path(project_dir: Path) -> Path:
    return Path(project_dir) / "package.json"


def read_manifest(project_dir: Path) -> Dict[str, Any]:
    """Parsed package.json, or {} when it is missing or unusable"""
    try:
        with open(manifest_path(project_dir), 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_manifest(project_dir: Path) -> Dict[str, Any]:
    """
    Parsed package.json for a read-modify-write

    A missing file reads as {}. A file that exists but is unreadable, invalid
    JSON or not a JSON object raises ManifestError, so nothing overwrites it.
    """
    path = manifest_path(project_dir)
    if not path.exists():
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestError(f"cannot parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"{path} does not hold a JSON object")
    return data


def write_manifest(project_dir: Path, data: Dict[str, Any]):
    """Write package.json pretty-printed with a trailing newline"""
    with open(manifest_path(project_dir), 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")


def direct_dependencies(manifest: Dict[str, Any]) -> Dict[str, str]:
    """Merge all four dependency sections into one name -> range map"""
    deps = {}
    for key in DEPENDENCY_SECTIONS:
        section = manifest.get(key)
        if isinstance(section, dict):
            deps.update(section)
    return deps


def is_direct_dependency(project_dir: Path, name: str) -> bool:
    # Re-read every time: earlier remediation steps may have changed the file
    return name in direct_dependencies(read_manifest(project_dir))


def is_dev_dependency(project_dir: Path, name: str) -> bool:
    dev = read_manifest(project_dir).get("devDependencies")
    return isinstance(dev, dict) and name in dev


def apply_overrides(manifest: Dict[str, Any], name: str, version: str) -> Dict[str, Any]:
    """
    Pin name to version in every override convention

    Existing override maps are merged into, never replaced. A section holding
    something other than an object is replaced by a fresh one.
    """
    for path in OVERRIDE_SECTIONS:
        node = manifest
        for key in path:
            if not isinstance(node.get(key), dict):
                node[key] = {}
            node = node[key]
        node[name] = version
    return manifest


def add_overrides(project_dir: Path, name: str, version: str) -> Dict[str, Any]:
    """
    Read-modify-write package.json with the new pin; returns the written data

    Raises:
        ManifestError: package.json exists but cannot be parsed; it is left as is
    """
    manifest = apply_overrides(load_manifest(project_dir), name, version)
    write_manifest(project_dir, manifest)
    return manifest
