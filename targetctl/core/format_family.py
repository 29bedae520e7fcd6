"""Classification of texture format names into substitution families."""

from __future__ import annotations

import enum


class FormatFamily(enum.Enum):
    DXT = "dxt"
    BC = "bc"
    OTHER = "other"


def _dxt_match(name: str) -> bool:
    return "DXT" in name


def _bc_match(name: str) -> bool:
    return name.startswith("BC")


def classify(name: str) -> FormatFamily:
    # DXT is checked first: a name in both families is treated as DXT
    if _dxt_match(name):
        return FormatFamily.DXT
    if _bc_match(name):
        return FormatFamily.BC
    return FormatFamily.OTHER
