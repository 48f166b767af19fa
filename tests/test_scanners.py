"""Tests for the package-lock.json, yarn.lock and pnpm-lock.yaml scanners."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from package_manager import PackageManagerKind
from scanners import (
    LockfileHit,
    NpmLockScanner,
    PnpmLockScanner,
    YarnLockScanner,
    dedupe_hits,
    scan_lockfiles,
)


def _pairs(hits):
    return {(h.name, h.version) for h in hits}


# ---------------------------------------------------------------------------
# package-lock.json
# ---------------------------------------------------------------------------

def _npm_lock_v3(packages: dict) -> str:
    return json.dumps({
        "name": "app",
        "version": "1.0.0",
        "lockfileVersion": 3,
        "requires": True,
        "packages": {"": {"name": "app", "version": "1.0.0"}, **packages},
    }, indent=2)


def test_npm_block_with_name_and_version_is_found(project: Path):
    (project / "package-lock.json").write_text(_npm_lock_v3({
        "node_modules/chalk": {"name": "chalk", "version": "5.6.1"},
    }))
    hits = NpmLockScanner().scan(project)
    assert hits == [LockfileHit("chalk", "5.6.1", "package-lock.json", PackageManagerKind.NPM)]


def test_npm_packages_map_keyed_by_path(project: Path):
    (project / "package-lock.json").write_text(_npm_lock_v3({
        "node_modules/chalk": {"version": "5.6.1"},
        "node_modules/eslint/node_modules/debug": {"version": "4.4.2"},
        "node_modules/@duckdb/node-api": {"version": "1.3.3"},
    }))
    assert _pairs(NpmLockScanner().scan(project)) == {
        ("chalk", "5.6.1"),
        ("debug", "4.4.2"),
        ("@duckdb/node-api", "1.3.3"),
    }


def test_npm_lockfile_v1_nested_dependencies(project: Path):
    (project / "package-lock.json").write_text(json.dumps({
        "name": "app",
        "lockfileVersion": 1,
        "dependencies": {
            "express": {
                "version": "4.19.0",
                "dependencies": {"debug": {"version": "4.4.2"}},
            },
        },
    }))
    assert _pairs(NpmLockScanner().scan(project)) == {("debug", "4.4.2")}


def test_npm_other_version_is_not_reported(project: Path):
    (project / "package-lock.json").write_text(_npm_lock_v3({
        "node_modules/chalk": {"name": "chalk", "version": "5.6.0"},
    }))
    assert NpmLockScanner().scan(project) == []


def test_npm_structural_mode_does_not_pair_neighbouring_objects(project: Path):
    text = json.dumps([
        {"name": "chalk", "version": "5.6.0"},
        {"name": "unrelated", "version": "5.6.1"},
    ], indent=2)
    (project / "package-lock.json").write_text(text)

    assert NpmLockScanner("structural").scan(project) == []
    # The text heuristic spans into the next object
    assert _pairs(NpmLockScanner("heuristic").scan(project)) == {("chalk", "5.6.1")}


def test_npm_invalid_json_is_skipped_in_structural_mode(project: Path):
    (project / "package-lock.json").write_text('{"name": "chalk", "version": "5.6.1", ')
    assert NpmLockScanner("structural").scan(project) == []
    assert _pairs(NpmLockScanner("heuristic").scan(project)) == {("chalk", "5.6.1")}


def test_npm_prepare_chains_the_json_error():
    with pytest.raises(ValueError) as excinfo:
        NpmLockScanner().prepare('{"packages": ')
    assert isinstance(excinfo.value.__cause__, json.JSONDecodeError)


def test_npm_heuristic_escapes_package_names(project: Path):
    (project / "package-lock.json").write_text('{"name": "prebidXjs", "version": "10.9.2"}')
    assert NpmLockScanner("heuristic").scan(project) == []


def test_missing_lockfile_is_not_an_error(project: Path):
    assert NpmLockScanner().scan(project) == []
    assert YarnLockScanner().scan(project) == []
    assert PnpmLockScanner().scan(project) == []


def test_undecodable_lockfile_is_skipped(project: Path):
    (project / "yarn.lock").write_bytes(b"\xff\xfe\xfa chalk@^5.0.0:\n")
    assert YarnLockScanner().scan(project) == []


# ---------------------------------------------------------------------------
# yarn.lock
# ---------------------------------------------------------------------------

YARN_LOCK = """\
# THIS IS AN AUTOGENERATED FILE. DO NOT EDIT THIS FILE DIRECTLY.
# yarn lockfile v1


"chalk@^5.0.0", "chalk@^5.6.0":
  version "5.6.1"
  resolved "https://registry.yarnpkg.com/chalk/-/chalk-5.6.1.tgz"
  integrity sha512-abc

ms@2.1.3:
  version "2.1.3"
"""


def test_yarn_header_and_version_line_are_found(project: Path):
    (project / "yarn.lock").write_text(YARN_LOCK)
    hits = YarnLockScanner().scan(project)
    assert hits == [LockfileHit("chalk", "5.6.1", "yarn.lock", PackageManagerKind.YARN)]


def test_yarn_other_version_is_not_reported(project: Path):
    (project / "yarn.lock").write_text(YARN_LOCK.replace('version "5.6.1"', 'version "5.6.0"'))
    assert YarnLockScanner().scan(project) == []


def test_yarn_longer_version_does_not_match(project: Path):
    (project / "yarn.lock").write_text(YARN_LOCK.replace('version "5.6.1"', 'version "5.6.10"'))
    assert YarnLockScanner().scan(project) == []


def test_yarn_berry_lockfile(project: Path):
    (project / "yarn.lock").write_text(
        "__metadata:\n  version: 8\n\n"
        '"debug@npm:^4.4.0":\n  version: 4.4.2\n  resolution: "debug@npm:4.4.2"\n'
    )
    assert _pairs(YarnLockScanner().scan(project)) == {("debug", "4.4.2")}


def test_yarn_lock_matches_are_not_tied_to_one_entry(project: Path):
    # The header and the version line may come from different packages
    (project / "yarn.lock").write_text(
        'chalk@^5.0.0:\n  version "5.6.0"\n\nsomething-else@^1.0.0:\n  version "5.6.1"\n'
    )
    assert _pairs(YarnLockScanner().scan(project)) == {("chalk", "5.6.1")}


# ---------------------------------------------------------------------------
# pnpm-lock.yaml
# ---------------------------------------------------------------------------

PNPM_LOCK_V9 = """\
lockfileVersion: '9.0'

packages:

  '@duckdb/node-api@1.3.3':
    resolution: {integrity: sha512-abc}

  chalk@5.6.1:
    resolution: {integrity: sha512-def}

  debug@4.4.2(supports-color@8.1.1):
    resolution: {integrity: sha512-ghi}
"""


def test_pnpm_version_in_key_is_found(project: Path):
    (project / "pnpm-lock.yaml").write_text(PNPM_LOCK_V9)
    hits = PnpmLockScanner().scan(project)
    assert _pairs(hits) == {("chalk", "5.6.1"), ("debug", "4.4.2"), ("@duckdb/node-api", "1.3.3")}
    assert all(h.pm == PackageManagerKind.PNPM for h in hits)


def test_pnpm_v6_slash_keys(project: Path):
    (project / "pnpm-lock.yaml").write_text(
        "lockfileVersion: '6.0'\n\npackages:\n\n  /chalk@5.6.1:\n    resolution: {integrity: x}\n"
    )
    assert _pairs(PnpmLockScanner().scan(project)) == {("chalk", "5.6.1")}


def test_pnpm_version_line(project: Path):
    (project / "pnpm-lock.yaml").write_text(
        "packages:\n  /color-name@^2.0.0:\n    version: 2.0.1\n"
    )
    assert _pairs(PnpmLockScanner().scan(project)) == {("color-name", "2.0.1")}


def test_pnpm_other_version_is_not_reported(project: Path):
    (project / "pnpm-lock.yaml").write_text(
        "packages:\n\n  chalk@5.6.10:\n    resolution: {integrity: x}\n"
    )
    assert PnpmLockScanner().scan(project) == []


# ---------------------------------------------------------------------------
# Registry and deduplication
# ---------------------------------------------------------------------------

def test_scan_order_and_deduplication(project: Path):
    (project / "package-lock.json").write_text(_npm_lock_v3({
        "node_modules/chalk": {"version": "5.6.1"},
    }))
    (project / "yarn.lock").write_text(YARN_LOCK)

    hits = scan_lockfiles(project)
    assert [h.lockfile for h in hits] == ["package-lock.json", "yarn.lock"]

    unique = dedupe_hits(hits)
    assert len(unique) == 1
    assert unique[0].lockfile == "package-lock.json"


def test_dedupe_keeps_first_seen_order():
    hits = [
        LockfileHit("debug", "4.4.2", "yarn.lock", PackageManagerKind.YARN),
        LockfileHit("chalk", "5.6.1", "yarn.lock", PackageManagerKind.YARN),
        LockfileHit("debug", "4.4.2", "pnpm-lock.yaml", PackageManagerKind.PNPM),
    ]
    assert [(h.name, h.lockfile) for h in dedupe_hits(hits)] == [
        ("debug", "yarn.lock"),
        ("chalk", "yarn.lock"),
    ]


def test_scan_lockfiles_reports_each_scanner(project: Path):
    (project / "yarn.lock").write_text(YARN_LOCK)
    seen = []

    scan_lockfiles(project, on_scanned=lambda scanner, hits: seen.append((scanner.NAME, len(hits))))

    assert seen == [("npm", 0), ("yarn", 1), ("pnpm", 0)]
