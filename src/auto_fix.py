#!/usr/bin/env python3
"""
secure-npm Remediation Workflow
Interactive: Scan → Report → ask per finding → Fix → Reinstall

Direct dependencies can be removed or moved to a safe release; transitive
ones can be pinned through overrides/resolutions.
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from rich.console import Console
from rich.markup import escape

from config import Settings
from manifest import is_dev_dependency, is_direct_dependency
from package_manager import PackageManagerKind
from registry import RegistryClient
from remediation import Remediator
from scanners import BaseLockfileScanner, LockfileHit, dedupe_hits, scan_lockfiles
from session_log import NullSessionLogger, SessionLogger
from theme import console as default_console

DIRECT_PROMPT = "Action [R=Remove | V=Revert to safe version | S=Skip]: "
TRANSITIVE_PROMPT = "Action [O=Add override/resolution -> {spec} | S=Skip]: "

# First letter or the full word is accepted
DIRECT_CHOICES = {"R": "REMOVE", "V": "REVERT"}
TRANSITIVE_CHOICES = {"O": "OVERRIDE"}


@dataclass
class Finding:
    """A compromised package version present in the project"""
    name: str
    version: str
    lockfile: str
    pm: PackageManagerKind
    direct: bool

    @property
    def spec(self) -> str:
        return f"{self.name}@{self.version}"

    @property
    def kind(self) -> str:
        return "direct" if self.direct else "transitive"

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["pm"] = self.pm.value
        return data


@dataclass
class FixSummary:
    """Counts for the closing summary"""
    findings: int = 0
    removed: int = 0
    reverted: int = 0
    overridden: int = 0
    skipped: int = 0
    unresolved: int = 0
    failed: int = 0


def normalize_choice(answer: str, choices: Dict[str, str]) -> Optional[str]:
    """Map an operator answer onto a choice letter, None means skip"""
    answer = (answer or "").strip().upper()
    for letter, word in choices.items():
        if answer in (letter, word):
            return letter
    return None


class AutoFixer:
    """Scan lockfiles, report, and walk the operator through each finding"""

    def __init__(
        self,
        settings: Settings,
        remediator: Remediator,
        registry: RegistryClient,
        ask: Optional[Callable[[str], str]] = None,
        console: Optional[Console] = None,
        session_logger: Optional[SessionLogger] = None,
    ):
        self.settings = settings
        self.remediator = remediator
        self.registry = registry
        self.console = console or default_console
        self.ask = ask or (lambda prompt: self.console.input(escape(prompt)))
        self.session_logger = session_logger or NullSessionLogger()
        self.summary = FixSummary()

    @property
    def project_dir(self) -> Path:
        return self.settings.project_dir

    def _log_scan(self, scanner: BaseLockfileScanner, hits: List[LockfileHit]):
        self.session_logger.log_scan_start(scanner.NAME, str(scanner.lockfile_path(self.project_dir)))
        self.session_logger.log_scan_result(scanner.NAME, len(hits))

    def step1_scan(self) -> List[Finding]:
        """Step 1: scan every lockfile and classify the deduplicated hits"""
        self.console.print("[title]\\[secure-npm] Checking lockfiles…[/title]")

        hits = scan_lockfiles(self.project_dir, self.settings.lock_match, on_scanned=self._log_scan)

        pm = self.remediator.pm.kind
        findings = [
            Finding(
                name=hit.name,
                version=hit.version,
                lockfile=hit.lockfile,
                pm=pm,
                direct=is_direct_dependency(self.project_dir, hit.name),
            )
            for hit in dedupe_hits(hits)
        ]

        for finding in findings:
            self.session_logger.log_finding(finding.to_dict())
        return findings

    def step2_report(self, findings: List[Finding]):
        """Step 2: bulleted report of what was found"""
        self.console.print("\n[danger]🚨 Compromised dependencies detected:[/danger]")
        for f in findings:
            style = "direct" if f.direct else "transitive"
            self.console.print(
                f"  - [highlight]{escape(f.spec)}[/highlight]  (in: [path]{escape(f.lockfile)}[/path])  "
                f"[{style}]{escape('[' + f.kind + ']')}[/{style}]"
            )

    def step3_remediate(self, findings: List[Finding]):
        """Step 3: one decision per finding, strictly in order"""
        self.console.print("\n[info]\\[secure-npm] Choose an action for each item.[/info]")
        for f in findings:
            label = "direct dependency" if f.direct else "transitive dependency"
            self.console.print(f"\n[title]>>> {escape(f.spec)}[/title]  ({label})")
            if f.direct:
                self.handle_direct(f)
            else:
                self.handle_transitive(f)

    def _prompt(self, prompt: str) -> str:
        try:
            return self.ask(prompt)
        except EOFError:
            return ""

    def _skip(self, finding: Finding):
        self.console.print("   [subtitle](Skipping)[/subtitle]")
        self.session_logger.log_action("skip", finding.spec)
        self.summary.skipped += 1

    def _unresolved(self, finding: Finding, message: str):
        self.console.print(f"   [warning]! {message} Skipped.[/warning]")
        self.session_logger.log_action("resolve", finding.spec, "unresolvable")
        self.summary.unresolved += 1

    def handle_direct(self, finding: Finding):
        """Remove, revert to a safe release, or skip a direct dependency"""
        choice = normalize_choice(self._prompt(DIRECT_PROMPT), DIRECT_CHOICES)

        if choice == "R":
            ok = self.remediator.remove_direct_dependency(finding.name)
            self.remediator.reinstall_frozen()
            if ok:
                self.summary.removed += 1
            else:
                self.summary.failed += 1

        elif choice == "V":
            safe = self.registry.resolve_safe_version(finding.name, finding.version)
            if not safe:
                self._unresolved(finding, "Could not determine a safe version from the registry.")
                return
            save_dev = is_dev_dependency(self.project_dir, finding.name)
            ok = self.remediator.install_direct_dependency(finding.name, safe, save_dev)
            self.remediator.reinstall_frozen()
            if ok:
                self.summary.reverted += 1
            else:
                self.summary.failed += 1

        else:
            self._skip(finding)

    def handle_transitive(self, finding: Finding):
        """Offer an override/resolution pin for a transitive dependency"""
        # Resolve first so the prompt can show the candidate
        safe = self.registry.resolve_safe_version(finding.name, finding.version)
        if not safe:
            self._unresolved(finding, "Could not determine a safe version for an override.")
            return

        prompt = TRANSITIVE_PROMPT.format(spec=f"{finding.name}@{safe}")
        choice = normalize_choice(self._prompt(prompt), TRANSITIVE_CHOICES)

        if choice == "O":
            if not self.remediator.add_overrides(finding.name, safe):
                self.summary.failed += 1
                return
            self.remediator.reinstall_frozen()
            self.summary.overridden += 1
        else:
            self._skip(finding)

    def run(self) -> FixSummary:
        """Run the complete workflow"""
        findings = self.step1_scan()
        self.summary.findings = len(findings)

        if not findings:
            self.console.print("[success]\\[secure-npm] ✅ No compromised versions detected.[/success]")
            self.session_logger.log_summary(asdict(self.summary))
            return self.summary

        self.step2_report(findings)
        self.step3_remediate(findings)

        self.console.print("\n[success]\\[secure-npm] ✅ Done.[/success]")
        self.session_logger.log_summary(asdict(self.summary))
        return self.summary
