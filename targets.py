"""
ProfileKit - Cleanup target loader.

Reads the XML document that declares what the profile cleanup removes:

    <Targets>
      <Target Name="Teams">
        <Path Days="7">%LocalAppData%\\Microsoft\\Teams\\Cache</Path>
        <Path Days="30">%AppData%\\Microsoft\\Teams\\logs.txt</Path>
      </Target>
    </Targets>

Placeholders of the form %NAME% are expanded from the environment at run
time (see expand_placeholders).
"""

from __future__ import annotations

import logging
import os
import re
import xml.etree.ElementTree as ET
from typing import List, Mapping, Optional

from errors import ConfigurationError
from models import CleanupTarget, TargetEntry

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"%([^%\\/]+)%")


def load_targets(source: str) -> List[CleanupTarget]:
    """Parse the targets XML file at ``source``."""
    try:
        tree = ET.parse(source)
    except (ET.ParseError, OSError) as exc:
        raise ConfigurationError(f"Cannot read targets file {source}: {exc}", source) from exc

    root = tree.getroot()
    targets: List[CleanupTarget] = []

    for target_el in root.iter("Target"):
        name = (target_el.get("Name") or "").strip()
        if not name:
            raise ConfigurationError(f"Target without a Name in {source}", source)

        entries = []
        for path_el in target_el.findall("Path"):
            path = (path_el.text or "").strip()
            if not path:
                raise ConfigurationError(f"Empty Path in target '{name}' in {source}", source)
            entries.append(TargetEntry(path=path, days=_parse_days(path_el.get("Days"), name, source)))

        if not entries:
            logger.warning("Target '%s' declares no paths", name)
        targets.append(CleanupTarget(name=name, entries=tuple(entries)))

    logger.info("Loaded %d cleanup targets from %s", len(targets), source)
    return targets


def _parse_days(raw: Optional[str], target: str, source: str) -> int:
    try:
        days = int((raw or "").strip())
    except ValueError:
        raise ConfigurationError(
            f"Invalid Days value {raw!r} in target '{target}' in {source}", source
        ) from None
    if days < 0:
        raise ConfigurationError(
            f"Negative Days value {days} in target '{target}' in {source}", source
        )
    return days


def expand_placeholders(path: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Replace %NAME% tokens with environment values. Names are matched
    case-insensitively; unknown tokens are left as they are.
    """
    if environ is None:
        environ = os.environ
    lookup = {k.lower(): v for k, v in environ.items()}

    def _sub(match: re.Match) -> str:
        return lookup.get(match.group(1).lower(), match.group(0))

    return _PLACEHOLDER.sub(_sub, path)
