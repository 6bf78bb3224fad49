"""
ProfileKit - Configuration and well-known locations.

Provides:
  - Default folders scanned by the hiding-rule generator
  - The user's Documents folder (default rule-set output location)
  - Persistent config loading/saving from JSON
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

logger = logging.getLogger(__name__)

CONFIG_DIR = os.path.join(os.environ.get("APPDATA", "."), "ProfileKit")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")

RULE_COMMENT = "Created by ProfileKit rule generator"


# ── Well-known locations ─────────────────────────────────────────────────────

def default_scan_folders(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """Office install roots and Start Menu program folders."""
    if environ is None:
        environ = os.environ
    program_files = environ.get("ProgramFiles", r"C:\Program Files")
    program_files_x86 = environ.get("ProgramFiles(x86)", r"C:\Program Files (x86)")
    program_data = environ.get("ProgramData", r"C:\ProgramData")
    start_menu = os.path.join(program_data, "Microsoft", "Windows", "Start Menu", "Programs")

    folders = []
    for base in (program_files, program_files_x86):
        folders.append(os.path.join(base, "Microsoft Office", "root", "Office16"))
        folders.append(os.path.join(base, "Microsoft Office", "Office16"))
    folders.append(start_menu)
    folders.append(os.path.join(start_menu, "Microsoft Office Tools"))
    return folders


def documents_folder(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the current user's Documents folder."""
    if environ is None:
        environ = os.environ
    profile = environ.get("USERPROFILE") or os.path.expanduser("~")
    return os.path.join(profile, "Documents")


# ── General Config ───────────────────────────────────────────────────────────

@dataclass
class AppConfig:
    """Application-wide configuration."""
    output_dir: str = ""                # Rule-set folder ("" = Documents)
    scan_folders: List[str] = field(default_factory=list)  # [] = defaults
    log_dir: str = ""                   # Cleanup CSV log folder ("" = no log)
    comment: str = RULE_COMMENT


def load_config(path: str = CONFIG_FILE) -> AppConfig:
    """Load app config from disk, or return defaults."""
    config = AppConfig()
    try:
        if os.path.isfile(path):
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            config.output_dir = data.get("output_dir", "")
            config.scan_folders = list(data.get("scan_folders", []))
            config.log_dir = data.get("log_dir", "")
            config.comment = data.get("comment", RULE_COMMENT)
    except (json.JSONDecodeError, OSError, PermissionError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
    return config


def save_config(config: AppConfig, path: str = CONFIG_FILE) -> None:
    """Save app config to disk."""
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        data = {
            "output_dir": config.output_dir,
            "scan_folders": config.scan_folders,
            "log_dir": config.log_dir,
            "comment": config.comment,
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except (OSError, PermissionError) as exc:
        logger.warning("Could not save config %s: %s", path, exc)
