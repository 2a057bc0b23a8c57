#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for the vault curator.

The project structure:
    ROOT/
    ├── curator/       # Package code
    ├── config/        # curator.yaml and tag-taxonomy.json
    └── logs/          # Application logs

All paths are resolved at import time relative to the project root.
The vault itself lives wherever ``vault_path`` in the config points.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path


def _get_project_root() -> Path:
    """
    Determine project root directory.

    Assumes this file is at ROOT/curator/core/paths.py.

    Returns:
        Path object for project root
    """
    return Path(__file__).resolve().parent.parent.parent


# ----- Project directory -----
ROOT: Path = _get_project_root()
PACKAGE_DIR = ROOT / "curator"

# ---- Configuration ----
CONFIG_DIR = ROOT / "config"
CONFIG_PATH = CONFIG_DIR / "curator.yaml"
TAXONOMY_PATH = CONFIG_DIR / "tag-taxonomy.json"

# ---- Logs ----
LOG_DIR = ROOT / "logs"

# ---- Vault defaults ----
DEFAULT_IGNORE_PATTERNS = (".obsidian/**", ".git/**", ".trash/**")
