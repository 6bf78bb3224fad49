"""
ProfileKit - Hiding-rule generator.

Entry point for building an app-masking rule set for an installed Office
application: scans the registry and the Office/Start Menu folders for items
matching the search terms, normalizes every path, and appends one hiding
rule per item to ``Microsoft <Term>.fxr``.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any, List, Mapping, Optional

from config import RULE_COMMENT, default_scan_folders, documents_folder
from errors import ConfigurationError
from models import CandidatePath, GenerationResult, NormalizedRuleEntry
from normalizer import PathNormalizer
from registry_scanner import scan_registry
from rulefile import FxrRuleWriter
from scanner import scan_prefixed

logger = logging.getLogger(__name__)

# Characters Windows does not allow in file names
_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def rule_file_name(search_term: str) -> str:
    """Return ``Microsoft <term>.fxr`` with invalid filename characters removed."""
    clean = _INVALID_FILENAME_CHARS.sub("", search_term).strip()
    return f"Microsoft {clean}.fxr"


def generate_hiding_rules(
    search_terms: List[str],
    folders: Optional[List[str]] = None,
    output_dir: Optional[str] = None,
    backend: Any = None,
    writer: Any = None,
    environ: Optional[Mapping[str, str]] = None,
    comment: str = RULE_COMMENT,
    registry_keys: Optional[List[str]] = None,
) -> GenerationResult:
    """
    Generate hiding rules for everything matching ``search_terms``.

    Args:
        search_terms: One or more terms; the first names the rule file.
        folders: Folders to scan for files/folders (default: Office locations).
        output_dir: Folder for the rule file (default: user's Documents).
        backend: Registry backend passed to scan_registry.
        writer: Rule writer (default: FxrRuleWriter).
        environ: Environment for default locations and path normalization.
        comment: Comment stored with every rule.
        registry_keys: Registry keys to scan (default: WELL_KNOWN_KEYS).

    Returns:
        GenerationResult with the rule file path and the emitted entries.

    Raises:
        ConfigurationError: the output folder cannot be created.
    """
    terms = [t for t in search_terms if t and t.strip()]
    if not terms:
        raise ValueError("At least one search term is required")

    if output_dir is None:
        output_dir = documents_folder(environ)
    if folders is None:
        folders = default_scan_folders(environ)
    if writer is None:
        writer = FxrRuleWriter()

    rule_file = os.path.join(output_dir, rule_file_name(terms[0]))
    _ensure_folder(output_dir)

    result = GenerationResult(rule_file=rule_file, existed_before=os.path.isfile(rule_file))
    if result.existed_before:
        logger.warning("%s already exists; rules will be appended, not replaced", rule_file)

    candidates: List[CandidatePath] = scan_registry(terms, key_paths=registry_keys, backend=backend)
    for term in terms:
        candidates.extend(scan_prefixed(folders, term))

    normalizer = PathNormalizer(environ)
    for candidate in candidates:
        entry = NormalizedRuleEntry(
            path=normalizer.normalize(candidate.path),
            hiding_type=candidate.hiding_type,
            comment=comment,
        )
        writer.append_rule(rule_file, entry.path, entry.hiding_type, entry.comment)
        result.entries.append(entry)

    logger.info("Wrote %d rules to %s", result.rule_count, rule_file)
    return result


def _ensure_folder(folder: str) -> None:
    try:
        os.makedirs(folder, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(f"Cannot create output folder {folder}: {exc}", folder) from exc
    if not os.path.isdir(folder):
        raise ConfigurationError(f"Output folder {folder} does not exist", folder)
