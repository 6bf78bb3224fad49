"""
ProfileKit - Path normalizer.

Rewrites absolute filesystem and registry paths into the symbolic tokens
understood by the app-masking rule engine, so that generated rules are
portable between machines.

Substitutions are grouped into categories that are applied in order. Within
a category the rules are tried most-specific first and only the first match
is applied:

  1. Registry hive roots       HKEY_LOCAL_MACHINE\\...   -> HKLM\\...
                               Registry::HKEY_LOCAL_MACHINE\\... -> HKLM\\...
  2. Program Files             C:\\Program Files (x86)   -> %ProgramFilesFolder32%
                               C:\\Program Files         -> %ProgramFilesFolder64%
  3. Start menu / ProgramData  C:\\ProgramData\\...\\Start Menu -> %CommonStartMenuFolder%
                               C:\\ProgramData           -> %CommonAppDataFolder%
"""

from __future__ import annotations

import os
from typing import List, Mapping, Optional, Tuple

HIVE_ALIASES: List[Tuple[str, str]] = [
    ("HKEY_LOCAL_MACHINE", "HKLM"),
    ("HKEY_CURRENT_USER", "HKCU"),
    ("HKEY_CLASSES_ROOT", "HKCR"),
    ("HKEY_USERS", "HKU"),
]

PROGRAM_FILES_32_TOKEN = "%ProgramFilesFolder32%"
PROGRAM_FILES_64_TOKEN = "%ProgramFilesFolder64%"
START_MENU_TOKEN = "%CommonStartMenuFolder%"
PROGRAM_DATA_TOKEN = "%CommonAppDataFolder%"

# Provider-qualified forms of a registry path, most specific first
REGISTRY_PROVIDER_PREFIXES = ["Microsoft.PowerShell.Core\\Registry::", "Registry::", ""]

_SEPARATORS = ("\\", "/")


def _env(environ: Mapping[str, str], name: str, default: str) -> str:
    # Windows environment names are case-insensitive
    for key, value in environ.items():
        if key.lower() == name.lower() and value:
            return value
    return default


def _starts_with_dir(path: str, prefix: str) -> bool:
    """Case-insensitive prefix test that only matches on a path boundary."""
    if not prefix or len(path) < len(prefix):
        return False
    if path[:len(prefix)].lower() != prefix.lower():
        return False
    return len(path) == len(prefix) or path[len(prefix)] in _SEPARATORS


class PathNormalizer:
    """Token substitution built from a snapshot of the environment."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        if environ is None:
            environ = os.environ
        program_files = _env(environ, "ProgramFiles", r"C:\Program Files")
        program_files_x86 = _env(environ, "ProgramFiles(x86)", r"C:\Program Files (x86)")
        program_data = _env(environ, "ProgramData", r"C:\ProgramData")
        sep = "/" if "/" in program_data and "\\" not in program_data else "\\"
        start_menu = sep.join([program_data.rstrip("\\/"), "Microsoft", "Windows", "Start Menu"])

        self.categories: List[List[Tuple[str, str]]] = [
            [
                (provider + long + "\\", short + "\\")
                for provider in REGISTRY_PROVIDER_PREFIXES
                for long, short in HIVE_ALIASES
            ],
            [
                (program_files_x86.rstrip("\\/"), PROGRAM_FILES_32_TOKEN),
                (program_files.rstrip("\\/"), PROGRAM_FILES_64_TOKEN),
            ],
            [
                (start_menu, START_MENU_TOKEN),
                (program_data.rstrip("\\/"), PROGRAM_DATA_TOKEN),
            ],
        ]

    def normalize(self, path: str) -> str:
        result = path
        for idx, rules in enumerate(self.categories):
            for prefix, token in rules:
                if idx == 0:
                    # Hive aliases carry their own trailing separator
                    matched = result[:len(prefix)].lower() == prefix.lower()
                else:
                    matched = _starts_with_dir(result, prefix)
                if matched:
                    result = token + result[len(prefix):]
                    break
        return result


def normalize_path(path: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Normalize a single path against the current (or given) environment."""
    return PathNormalizer(environ).normalize(path)
