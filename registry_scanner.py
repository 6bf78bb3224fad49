"""
ProfileKit - Registry key scanner (read-only).

Walks a fixed list of well-known registry keys, lists their immediate child
keys, and keeps every child whose default value contains one of the search
terms. Covers:
  1. COM CLSID registrations (native and WOW6432Node)
  2. Office per-application add-in registrations
  3. The Click-to-Run virtual registry copies of both

Never writes to the registry.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Optional, Protocol

from models import CandidatePath, HidingType

logger = logging.getLogger(__name__)

_C2R_ROOT = r"HKEY_LOCAL_MACHINE\SOFTWARE\Microsoft\Office\ClickToRun\REGISTRY\MACHINE\Software"

OFFICE_APPS = [
    "Access", "Excel", "Outlook", "PowerPoint", "Project",
    "Publisher", "Visio", "Word", "OneNote", "MS Project",
]

WELL_KNOWN_KEYS: List[str] = [
    # ── COM registrations ────────────────────────────────────────────────
    r"HKEY_LOCAL_MACHINE\SOFTWARE\Classes\CLSID",
    r"HKEY_LOCAL_MACHINE\SOFTWARE\Classes\WOW6432Node\CLSID",
    _C2R_ROOT + r"\Classes\CLSID",
    _C2R_ROOT + r"\Classes\WOW6432Node\CLSID",
    # ── Office add-ins ───────────────────────────────────────────────────
    *[rf"HKEY_LOCAL_MACHINE\SOFTWARE\Microsoft\Office\{app}\Addins" for app in OFFICE_APPS],
    *[rf"HKEY_LOCAL_MACHINE\SOFTWARE\WOW6432Node\Microsoft\Office\{app}\Addins" for app in OFFICE_APPS],
    *[_C2R_ROOT + rf"\Microsoft\Office\{app}\Addins" for app in OFFICE_APPS],
]


class RegistryBackend(Protocol):
    """Read-only registry access used by scan_registry."""

    def open_key(self, key_path: str) -> Any: ...

    def subkeys(self, handle: Any) -> List[str]: ...

    def default_value(self, handle: Any, subkey_name: str) -> str: ...

    def close_key(self, handle: Any) -> None: ...


class WinRegistryBackend:
    """RegistryBackend implementation over the ``winreg`` module."""

    def __init__(self):
        import winreg
        self._winreg = winreg
        self._hives = {
            "HKEY_LOCAL_MACHINE": winreg.HKEY_LOCAL_MACHINE,
            "HKLM": winreg.HKEY_LOCAL_MACHINE,
            "HKEY_CURRENT_USER": winreg.HKEY_CURRENT_USER,
            "HKCU": winreg.HKEY_CURRENT_USER,
            "HKEY_CLASSES_ROOT": winreg.HKEY_CLASSES_ROOT,
            "HKCR": winreg.HKEY_CLASSES_ROOT,
            "HKEY_USERS": winreg.HKEY_USERS,
            "HKU": winreg.HKEY_USERS,
        }

    def open_key(self, key_path: str) -> Any:
        hive_str, _, sub_path = key_path.partition("\\")
        hive = self._hives.get(hive_str.upper())
        if hive is None:
            raise FileNotFoundError(f"Unknown registry hive: {hive_str}")
        return self._winreg.OpenKey(
            hive, sub_path, 0,
            self._winreg.KEY_READ | self._winreg.KEY_WOW64_64KEY,
        )

    def subkeys(self, handle: Any) -> List[str]:
        count = self._winreg.QueryInfoKey(handle)[0]
        return [self._winreg.EnumKey(handle, i) for i in range(count)]

    def default_value(self, handle: Any, subkey_name: str) -> str:
        """Return the child's default value, or "" if it has none."""
        try:
            with self._winreg.OpenKey(handle, subkey_name) as subkey:
                value, reg_type = self._winreg.QueryValueEx(subkey, "")
        except FileNotFoundError:
            return ""
        if reg_type in (self._winreg.REG_SZ, self._winreg.REG_EXPAND_SZ):
            return str(value)
        return ""

    def close_key(self, handle: Any) -> None:
        self._winreg.CloseKey(handle)


@contextmanager
def opened_key(backend: RegistryBackend, key_path: str) -> Iterator[Any]:
    """Open ``key_path`` and guarantee the handle is released on every exit."""
    handle = backend.open_key(key_path)
    try:
        yield handle
    finally:
        backend.close_key(handle)


def _matches(value: str, search_terms: Iterable[str]) -> bool:
    value_lower = value.lower()
    return any(term.lower() in value_lower for term in search_terms if term)


def scan_registry(
    search_terms: List[str],
    key_paths: Optional[List[str]] = None,
    backend: Optional[RegistryBackend] = None,
) -> List[CandidatePath]:
    """
    Find child keys of the well-known registry keys whose default value
    contains any of the search terms.

    Args:
        search_terms: Substrings to look for (case-insensitive).
        key_paths: Keys to scan; defaults to WELL_KNOWN_KEYS.
        backend: Registry access object; defaults to WinRegistryBackend.

    Returns:
        CandidatePath list of matching keys, in scan order.
    """
    if key_paths is None:
        key_paths = WELL_KNOWN_KEYS
    if backend is None:
        backend = WinRegistryBackend()

    matches: List[CandidatePath] = []
    for key_path in key_paths:
        try:
            with opened_key(backend, key_path) as handle:
                for subkey_name in backend.subkeys(handle):
                    try:
                        value = backend.default_value(handle, subkey_name)
                    except (OSError, PermissionError) as exc:
                        logger.warning("Cannot read %s\\%s, skipping: %s", key_path, subkey_name, exc)
                        continue
                    if value and _matches(value, search_terms):
                        matches.append(CandidatePath(
                            path=f"{key_path}\\{subkey_name}",
                            hiding_type=HidingType.FOLDER_OR_KEY,
                            source="registry",
                        ))
        except FileNotFoundError:
            logger.warning("Registry key not found, skipping: %s", key_path)
            continue
        except PermissionError:
            logger.warning("Registry key not accessible, skipping: %s", key_path)
            continue

    logger.info("Registry scan found %d matching keys", len(matches))
    return matches
