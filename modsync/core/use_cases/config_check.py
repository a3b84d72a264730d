"""
Config check use case — validate modsync.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from modsync.core.config.loader import ConfigError, find_config_file, load_config
from modsync.core.models.config import ToolConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: ToolConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "targets": [t.name for t in self.config.targets] if self.config else [],
            "pwsh": self.config.pwsh if self.config else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate tool configuration and report issues.

    A missing config file is not an error: defaults apply, with a warning.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            result.warnings.append("No modsync.yml found. Using built-in defaults.")

    result.config_path = config_path

    try:
        config = load_config(config_path, search=False)
        result.config = config
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    dupes = config.duplicate_target_names()
    if dupes:
        result.errors.append(f"Duplicate target modules: {', '.join(dupes)}")

    if not config.profile_lines:
        result.warnings.append("No profile lines declared. 'profile ensure' will do nothing.")

    if not config.connection_hints:
        result.warnings.append("No connection hints declared.")

    result.valid = len(result.errors) == 0
    return result
