"""
Session Logging for secure-npm
Every run writes a plain-text session log plus a JSON file of findings
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


class SessionLogger:
    """Logs scans, findings and remediation actions to session files"""

    def __init__(self, log_dir: Path, target: str = ""):
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.log_dir / f"session_{self.session_id}.log"
        self.findings_file = self.log_dir / f"findings_{self.session_id}.json"
        self.all_findings: List[Dict[str, Any]] = []
        self._init_session(target)

    def _init_session(self, target: str):
        """Initialize session log file"""
        header = f"""
================================================================================
SECURE-NPM SESSION LOG
================================================================================
Session ID:  {self.session_id}
Started:     {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}
Project:     {target}
Log File:    {self.log_file}
Findings:    {self.findings_file}
================================================================================

"""
        self.log_file.write_text(header, encoding="utf-8")

    def log(self, message: str, level: str = "INFO"):
        """Log a message with timestamp"""
        timestamp = datetime.now().strftime("%H:%M:%S")
        entry = f"[{timestamp}] [{level}] {message}\n"
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(entry)

    def log_scan_start(self, scanner: str, target: str):
        self.log(f"SCAN START: {scanner} -> {target}", "SCAN")

    def log_scan_result(self, scanner: str, hits: int):
        self.log(f"SCAN COMPLETE: {scanner} | Hits: {hits}", "SCAN")

    def log_finding(self, finding: Dict[str, Any]):
        """Log a compromised package finding"""
        self.all_findings.append(finding)
        kind = "direct" if finding.get("direct") else "transitive"
        self.log(f"FINDING: {finding.get('name')}@{finding.get('version')} | {kind}", "VULN")
        self.log(f"  Lockfile: {finding.get('lockfile', 'N/A')}", "VULN")
        self._save_findings()

    def log_action(self, action: str, package: str, outcome: str = "ok"):
        self.log(f"ACTION: {action} {package} -> {outcome}", "FIX")

    def log_command(self, command: List[str], returncode: Optional[int]):
        self.log(f"COMMAND: {' '.join(command)} (exit {returncode})", "CMD")

    def log_summary(self, summary: Dict[str, int]):
        """Log run summary"""
        lines = "\n".join(f"{key.replace('_', ' ').title():<16}{value}" for key, value in summary.items())
        block = f"""
================================================================================
SESSION SUMMARY
================================================================================
{lines}
================================================================================
"""
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(block)

    def _save_findings(self):
        """Save findings to JSON file"""
        output = {
            "session_id": self.session_id,
            "timestamp": datetime.now().isoformat(),
            "total_findings": len(self.all_findings),
            "findings": self.all_findings,
        }
        with open(self.findings_file, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2)

    def get_log_path(self) -> str:
        return str(self.log_file)


class NullSessionLogger(SessionLogger):
    """Same interface as SessionLogger, writes nothing (--no-log)"""

    def __init__(self):
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.all_findings = []

    def log(self, message: str, level: str = "INFO"):
        pass

    def log_summary(self, summary: Dict[str, int]):
        pass

    def _save_findings(self):
        pass

    def get_log_path(self) -> str:
        return ""
