#!/usr/bin/env python3
"""
secure-npm - interactive supply chain check for npm / yarn / pnpm projects

Usage:
    secure-npm                      # Audit the current directory
    secure-npm -C path/to/project   # Audit another project
    secure-npm --no-log             # Do not write a session log

Scans lockfiles for the compromised versions of the September 2025 npm
incident, reports them, then asks per finding whether to remove, revert
or pin via overrides.
"""

import sys
from pathlib import Path
from typing import Optional

try:
    import typer
except ImportError:
    print("Error: typer not installed. Run: pip install typer")
    sys.exit(1)

from rich.markup import escape

from auto_fix import AutoFixer
from config import ConfigError, Settings
from package_manager import PackageManager, detect_package_manager
from registry import RegistryClient
from remediation import Remediator
from session_log import NullSessionLogger, SessionLogger
from theme import console, err_console

app = typer.Typer(
    name="secure-npm",
    help="Find compromised npm package versions in lockfiles and fix them interactively",
    add_completion=False,
    rich_markup_mode="rich",
)


def build_session_logger(settings: Settings) -> SessionLogger:
    if not settings.session_log:
        return NullSessionLogger()
    try:
        return SessionLogger(settings.log_dir, target=str(settings.project_dir))
    except OSError as e:
        console.print(f"[warning]Session log disabled: {escape(str(e))}[/warning]")
        return NullSessionLogger()


def build_fixer(settings: Settings, session_logger: SessionLogger) -> AutoFixer:
    """Wire the workflow together for one project"""
    kind = detect_package_manager(settings.project_dir, settings.user_agent)
    remediator = Remediator(
        settings.project_dir,
        PackageManager(kind, settings.project_dir),
        console=console,
        session_logger=session_logger,
    )

    def warn(message: str):
        console.print(f"   [warning]! {escape(message)}[/warning]")
        session_logger.log(message, "WARN")

    registry = RegistryClient(timeout=settings.registry_timeout, on_warning=warn)
    return AutoFixer(
        settings,
        remediator,
        registry,
        console=console,
        session_logger=session_logger,
    )


@app.command()
def audit(
    project_dir: Optional[Path] = typer.Option(
        None, "--project-dir", "-C",
        help="Project to audit (default: current directory)",
    ),
    no_log: bool = typer.Option(False, "--no-log", help="Do not write a session log file"),
):
    """
    Audit lockfiles for compromised package versions and remediate interactively
    """
    session_logger: SessionLogger = NullSessionLogger()
    try:
        settings = Settings.from_env(project_dir=project_dir, session_log=not no_log)
        session_logger = build_session_logger(settings)
        build_fixer(settings, session_logger).run()
    except KeyboardInterrupt:
        err_console.print("\n[warning]\\[secure-npm] Interrupted.[/warning]")
        session_logger.log("Interrupted by operator", "WARN")
        raise typer.Exit(130)
    except ConfigError as e:
        err_console.print(f"[danger]\\[secure-npm] Configuration error: {escape(str(e))}[/danger]")
        raise typer.Exit(1)
    except Exception as e:
        err_console.print(f"\n[danger]\\[secure-npm] ERROR: {escape(str(e))}[/danger]")
        session_logger.log(f"Fatal: {e!r}", "ERROR")
        raise typer.Exit(1)

    if session_logger.get_log_path():
        console.print(f"[info]📝 Session log saved: {escape(session_logger.get_log_path())}[/info]")


def main():
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
