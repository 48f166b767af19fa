"""
Runtime settings for secure-npm
Everything the scanners and remediation steps would otherwise pull from the
process (working directory, environment) is collected here once and passed in.
"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

LOCK_MATCH_MODES = ("structural", "heuristic")

DEFAULT_REGISTRY_TIMEOUT = 60


class ConfigError(ValueError):
    """Raised when an environment setting has an unusable value"""


def default_log_dir() -> Path:
    return Path(tempfile.gettempdir()) / "secure-npm" / "sessions"


@dataclass
class Settings:
    """Settings for one secure-npm run"""
    project_dir: Path = field(default_factory=Path.cwd)
    user_agent: str = ""
    lock_match: str = "structural"
    registry_timeout: int = DEFAULT_REGISTRY_TIMEOUT
    log_dir: Path = field(default_factory=default_log_dir)
    session_log: bool = True

    @classmethod
    def from_env(
        cls,
        project_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        session_log: bool = True,
    ) -> "Settings":
        """
        Build settings from environment variables

        Args:
            project_dir: Project root (defaults to the current directory)
            environ: Environment mapping (defaults to os.environ)
            session_log: Whether to write a session log file

        Returns:
            Settings instance

        Raises:
            ConfigError: on an unknown match mode or a bad timeout
        """
        env = os.environ if environ is None else environ

        lock_match = env.get("SECURE_NPM_LOCK_MATCH", "structural").strip().lower() or "structural"
        if lock_match not in LOCK_MATCH_MODES:
            raise ConfigError(
                f"SECURE_NPM_LOCK_MATCH must be one of {', '.join(LOCK_MATCH_MODES)}, got '{lock_match}'"
            )

        raw_timeout = env.get("SECURE_NPM_REGISTRY_TIMEOUT", str(DEFAULT_REGISTRY_TIMEOUT))
        try:
            registry_timeout = int(raw_timeout)
        except ValueError as e:
            raise ConfigError(f"SECURE_NPM_REGISTRY_TIMEOUT must be an integer, got '{raw_timeout}'") from e
        if registry_timeout <= 0:
            raise ConfigError("SECURE_NPM_REGISTRY_TIMEOUT must be positive")

        log_dir = env.get("SECURE_NPM_LOG_DIR")

        return cls(
            project_dir=Path(project_dir).resolve() if project_dir else Path.cwd(),
            user_agent=env.get("npm_config_user_agent", ""),
            lock_match=lock_match,
            registry_timeout=registry_timeout,
            log_dir=Path(log_dir) if log_dir else default_log_dir(),
            session_log=session_log,
        )
