"""
ProfileKit - Data models for hiding rules and profile cleanup.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List


class HidingType(enum.Enum):
    """Classification of a hiding-rule target."""
    FOLDER_OR_KEY = "folder_or_key"     # Directory or registry key
    FILE_OR_VALUE = "file_or_value"     # File or registry value


@dataclass
class CandidatePath:
    """A discovered file, folder, or registry key for a single run."""
    path: str                           # Full filesystem or registry path
    hiding_type: HidingType
    source: str = "filesystem"          # "filesystem" or "registry"


@dataclass(frozen=True)
class NormalizedRuleEntry:
    """A candidate path after token substitution, as written to a rule file."""
    path: str
    hiding_type: HidingType
    comment: str = ""


@dataclass
class GenerationResult:
    """Outcome of one hiding-rule generation run."""
    rule_file: str
    existed_before: bool = False
    entries: List[NormalizedRuleEntry] = field(default_factory=list)

    @property
    def rule_count(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class TargetEntry:
    """One cleanup path with its own age threshold."""
    path: str
    days: int


@dataclass(frozen=True)
class CleanupTarget:
    """A named group of cleanup paths, as declared in the targets XML."""
    name: str
    entries: tuple = ()                 # Tuple[TargetEntry, ...]


@dataclass
class DeletedFileRecord:
    """A file selected for deletion and what happened to it."""
    path: str
    size: int                           # Size in bytes
    modified: float = 0.0               # Last-modification timestamp
    target: str = ""                    # Name of the CleanupTarget it came from
    deleted: bool = False               # False in preview mode or on failure
    error: str = ""

    @property
    def size_human(self) -> str:
        return _format_size(self.size)


@dataclass
class CleanupReport:
    """Aggregated result of a profile cleanup run."""
    records: List[DeletedFileRecord] = field(default_factory=list)
    dry_run: bool = False
    duration_s: float = 0.0
    log_path: str = ""

    @property
    def targeted_bytes(self) -> int:
        return sum(r.size for r in self.records)

    @property
    def freed_bytes(self) -> int:
        return sum(r.size for r in self.records if r.deleted)

    @property
    def deleted_count(self) -> int:
        return sum(1 for r in self.records if r.deleted)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.records if r.error)

    @property
    def freed_mb(self) -> float:
        return _to_mb(self.freed_bytes)

    @property
    def targeted_mb(self) -> float:
        return _to_mb(self.targeted_bytes)


def _to_mb(size_bytes: int) -> float:
    """Convert bytes to megabytes, the fixed unit used in cleanup reports."""
    return round(size_bytes / (1024 * 1024), 2)


def _format_size(size_bytes: int) -> str:
    """Format bytes into a human-readable string."""
    if size_bytes <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(size_bytes)
    idx = 0
    while size >= 1024.0 and idx < len(units) - 1:
        size /= 1024.0
        idx += 1
    return f"{size:.1f} {units[idx]}"


def _format_duration(seconds: float) -> str:
    """Format seconds into a human-readable duration string."""
    if seconds < 0.001:
        return "<1ms"
    if seconds < 1.0:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60.0:
        return f"{seconds:.1f}s"
    minutes = int(seconds // 60)
    secs = seconds % 60
    return f"{minutes}m {secs:.0f}s"
