"""
yarn.lock Scanner
Classic (v1) and Berry lockfiles written by yarn
"""

from .resolution_graph import ResolutionGraphScanner
from package_manager import PackageManagerKind


class YarnLockScanner(ResolutionGraphScanner):
    """Scanner for yarn.lock"""

    NAME = "yarn"
    LOCKFILE = "yarn.lock"
    PM = PackageManagerKind.YARN
