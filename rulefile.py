"""
ProfileKit - Rule-set (.fxr) emitter.

The rule engine owns the file format; this module only needs to append one
hiding rule per call. Writers implement:

    append_rule(rule_file, path, hiding_type, comment) -> None

FxrRuleWriter writes the plain-text layout used by the masking rule editor:
a version header on the first line, then for every rule a ``##`` comment
line followed by a tab-separated record of quoted source path, quoted
redirect destination (always empty for hiding rules), flags, and quoted
binary name.
"""

from __future__ import annotations

import logging
import os
from typing import List

from models import HidingType, NormalizedRuleEntry

logger = logging.getLogger(__name__)

RULE_FILE_VERSION = "1"

# Flag bits for hiding rules
RULE_SRC_IS_FOLDER_OR_KEY = 0x00000001
RULE_SRC_IS_FILE_OR_VALUE = 0x00000002
RULE_TYPE_HIDE = 0x00000100

_TYPE_FLAGS = {
    HidingType.FOLDER_OR_KEY: RULE_SRC_IS_FOLDER_OR_KEY,
    HidingType.FILE_OR_VALUE: RULE_SRC_IS_FILE_OR_VALUE,
}


class FxrRuleWriter:
    """Appends hiding rules to a rule-set file, creating it if needed."""

    encoding = "utf-8"

    def append_rule(
        self,
        rule_file: str,
        path: str,
        hiding_type: HidingType,
        comment: str = "",
    ) -> None:
        is_new = not os.path.isfile(rule_file)
        flags = RULE_TYPE_HIDE | _TYPE_FLAGS[hiding_type]

        with open(rule_file, "a", encoding=self.encoding, newline="\r\n") as f:
            if is_new:
                f.write(RULE_FILE_VERSION + "\n")
            if comment:
                f.write(f"##{comment}\n")
            f.write(f'"{path}"\t""\t0x{flags:08X}\t""\n')
        logger.debug("Appended %s rule for %s", hiding_type.value, path)


def read_rules(rule_file: str) -> List[NormalizedRuleEntry]:
    """Parse the hiding rules back out of a file written by FxrRuleWriter."""
    by_flags = {flag: kind for kind, flag in _TYPE_FLAGS.items()}
    entries: List[NormalizedRuleEntry] = []
    comment = ""

    with open(rule_file, "r", encoding=FxrRuleWriter.encoding) as f:
        lines = f.read().splitlines()

    for line in lines[1:]:
        if line.startswith("##"):
            comment = line[2:]
            continue
        fields = line.split("\t")
        if len(fields) != 4:
            continue
        flags = int(fields[2], 16)
        entries.append(NormalizedRuleEntry(
            path=fields[0].strip('"'),
            hiding_type=by_flags.get(flags & 0xFF, HidingType.FILE_OR_VALUE),
            comment=comment,
        ))
        comment = ""
    return entries
