#!/usr/bin/env python3
"""Merging of per-source alias tables under a fixed precedence."""

from typing import Dict, Iterable, Mapping, Optional, Tuple

from .alias_extractor import ExtractedAliases
from .config_reader import ConfigFormat

# Later entries override earlier ones on key collision.
MERGE_ORDER: Tuple[ConfigFormat, ...] = (
    ConfigFormat.WEBPACK,
    ConfigFormat.BABEL,
    ConfigFormat.TSCONFIG,
    ConfigFormat.JSCONFIG,
    ConfigFormat.VUE_CLI,
)

# First non-empty candidate wins.
BASE_URL_ORDER: Tuple[ConfigFormat, ...] = (
    ConfigFormat.TSCONFIG,
    ConfigFormat.JSCONFIG,
)


def merge_aliases(tables: Iterable[Mapping[str, str]]) -> Dict[str, str]:
    """Merge alias tables; a key keeps its first position but takes the last value."""
    merged: Dict[str, str] = {}
    for table in tables:
        merged.update(table)
    return merged


def select_base_url(candidates: Iterable[Optional[str]]) -> str:
    """Return the first non-empty base URL, or "" when there is none."""
    for candidate in candidates:
        if candidate:
            return candidate
    return ""


def merge(extracted: Mapping[ConfigFormat, ExtractedAliases]) -> Tuple[Dict[str, str], str]:
    """Combine everything extracted for a project.

    Args:
        extracted: Extraction result per format; missing formats count as empty.

    Returns:
        Tuple of (alias table, base URL).
    """
    empty = ExtractedAliases()
    aliases = merge_aliases(extracted.get(fmt, empty).aliases for fmt in MERGE_ORDER)
    base_url = select_base_url(extracted.get(fmt, empty).base_url for fmt in BASE_URL_ORDER)
    return aliases, base_url
