#!/usr/bin/env python3
"""
config.py
---------
Runtime configuration for the vault curator.

Configuration is a small YAML file (``config/curator.yaml`` by default)
read with PyYAML. Every key is optional; a missing file yields the
defaults below.

Example:
    vault_path: ~/Notes
    taxonomy_path: tag-taxonomy.json
    ignore_patterns:
      - .obsidian/**
      - templates/**
    similarity_threshold: 0.7
    suggestion_threshold: 0.85
    auto_tagging: true
    suggest_from_taxonomy: true
    modified_field: modified

Usage:
    from curator.core.config import load_config

    config = load_config()
    vault = MarkdownVault(config.vault_path, config.ignore_patterns)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

# --- Third party imports ---
import yaml

# --- Local imports ---
from curator.core.exceptions import ConfigError
from curator.core.logging_manager import CuratorLogger, safe_logger
from curator.core.paths import CONFIG_PATH, DEFAULT_IGNORE_PATTERNS, LOG_DIR


@dataclass
class CuratorConfig:
    """
    Resolved curator settings.

    Attributes:
        vault_path: Root directory of the markdown vault
        taxonomy_path: Taxonomy schema file, or None for the built-in one
        ignore_patterns: Glob patterns (relative to vault) to skip
        similarity_threshold: Minimum score for find_similar results
        suggestion_threshold: Score above which a known tag replaces a new one
        auto_tagging: Whether auto-tag rules are applied during review
        suggest_from_taxonomy: Whether hierarchy-fit suggestions are made
        modified_field: Frontmatter key stamped after a rename write
        log_dir: Directory for log files
    """

    vault_path: Path = field(default_factory=Path.cwd)
    taxonomy_path: Optional[Path] = None
    ignore_patterns: List[str] = field(
        default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS)
    )
    similarity_threshold: float = 0.7
    suggestion_threshold: float = 0.85
    auto_tagging: bool = True
    suggest_from_taxonomy: bool = True
    modified_field: str = "modified"
    log_dir: Path = LOG_DIR

    def __post_init__(self) -> None:
        for name in ("similarity_threshold", "suggestion_threshold"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {value!r}")
            if not 0.0 <= float(value) <= 1.0:
                raise ConfigError(f"{name} must be between 0 and 1, got {value}")
            setattr(self, name, float(value))

        for name in ("auto_tagging", "suggest_from_taxonomy"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be true or false")

        if not isinstance(self.ignore_patterns, list) or not all(
            isinstance(p, str) for p in self.ignore_patterns
        ):
            raise ConfigError("ignore_patterns must be a list of strings")

        if not isinstance(self.modified_field, str) or not self.modified_field:
            raise ConfigError("modified_field must be a non-empty string")

        self.vault_path = Path(self.vault_path).expanduser()
        self.log_dir = Path(self.log_dir).expanduser()
        if self.taxonomy_path is not None:
            self.taxonomy_path = Path(self.taxonomy_path).expanduser()


def load_config(
    path: Optional[Path] = None,
    logger: Optional[CuratorLogger] = None,
) -> CuratorConfig:
    """
    Load configuration from a YAML file.

    Relative ``taxonomy_path`` values are resolved against the config
    file's directory.

    Args:
        path: Config file; defaults to ``config/curator.yaml``
        logger: Optional logger for unknown-key warnings

    Returns:
        CuratorConfig with defaults for anything not set

    Raises:
        ConfigError: If the file is not valid YAML, is not a mapping,
            or holds values of the wrong type
    """
    log = safe_logger(logger)
    config_path = Path(path) if path is not None else CONFIG_PATH

    if not config_path.exists():
        log.log_debug("No config file, using defaults", {"path": config_path})
        return CuratorConfig()

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if raw is None:
        return CuratorConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path} must contain a mapping")

    known = {f.name for f in fields(CuratorConfig)}
    values: Dict[str, Any] = {}
    for key, value in raw.items():
        if key not in known:
            log.log_warning("Ignoring unknown config key", {"key": key})
            continue
        values[key] = value

    taxonomy = values.get("taxonomy_path")
    if taxonomy:
        taxonomy = Path(taxonomy).expanduser()
        if not taxonomy.is_absolute():
            taxonomy = config_path.resolve().parent / taxonomy
        values["taxonomy_path"] = taxonomy

    config = CuratorConfig(**values)
    log.log_info("Loaded configuration", {"path": config_path})
    return config
