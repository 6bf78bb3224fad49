"""
ProfileKit - Filesystem scanner.

Two scans:
  - scan_prefixed(): direct children of a set of folders whose names start
    with a search term (used by the hiding-rule generator).
  - scan_aged(): every file below a path that is at least N days old
    (used by the profile cleanup).
"""

from __future__ import annotations

import logging
import os
import time
from typing import Iterable, List, Optional

from models import CandidatePath, DeletedFileRecord, HidingType

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


def scan_prefixed(folders: Iterable[str], search_term: str) -> List[CandidatePath]:
    """
    List files and folders directly inside ``folders`` whose names start
    with ``search_term`` (case-insensitive). Not recursive.

    Missing folders are skipped.
    """
    prefix = search_term.lower()
    found: List[CandidatePath] = []

    for folder in folders:
        if not os.path.isdir(folder):
            logger.debug("Folder not found, skipping: %s", folder)
            continue

        try:
            entries = sorted(os.scandir(folder), key=lambda e: e.name.lower())
        except (OSError, PermissionError) as exc:
            logger.warning("Cannot list %s: %s", folder, exc)
            continue

        for entry in entries:
            if not entry.name.lower().startswith(prefix):
                continue
            try:
                if entry.is_dir(follow_symlinks=False):
                    found.append(CandidatePath(entry.path, HidingType.FOLDER_OR_KEY))
                elif entry.is_file(follow_symlinks=False):
                    found.append(CandidatePath(entry.path, HidingType.FILE_OR_VALUE))
            except (OSError, PermissionError) as exc:
                logger.warning("Cannot inspect %s: %s", entry.path, exc)

    return found


def scan_aged(
    path: str,
    days: int,
    now: Optional[float] = None,
    target: str = "",
) -> List[DeletedFileRecord]:
    """
    Recursively collect files under ``path`` last modified at or before
    ``now - days``. Directories are never returned.

    A missing path yields an empty list.
    """
    if now is None:
        now = time.time()
    cutoff = now - days * SECONDS_PER_DAY

    if os.path.isfile(path):
        candidates = [path]
    elif os.path.isdir(path):
        candidates = _walk_files(path)
    else:
        logger.debug("Cleanup path not found, skipping: %s", path)
        return []

    aged: List[DeletedFileRecord] = []
    for fp in candidates:
        try:
            st = os.stat(fp, follow_symlinks=False)
        except (OSError, PermissionError) as exc:
            logger.warning("Cannot stat %s: %s", fp, exc)
            continue
        if st.st_mtime <= cutoff:
            aged.append(DeletedFileRecord(
                path=fp,
                size=st.st_size,
                modified=st.st_mtime,
                target=target,
            ))
    return aged


def _walk_files(root: str) -> List[str]:
    files: List[str] = []

    def _on_error(exc: OSError) -> None:
        logger.warning("Cannot read %s: %s", exc.filename, exc.strerror)

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_on_error):
        for f in sorted(filenames):
            files.append(os.path.join(dirpath, f))
    return files
