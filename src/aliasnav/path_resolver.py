#!/usr/bin/env python3
"""Reconstruction of a location from a matched path.

URLs pass through untouched. Any other match is checked against the alias
table segment by segment; an aliased path is rebuilt under the project root
and base URL, anything else is resolved relative to the directory of the
file it was found in. No existence check is made.

Example:
    >>> resolve_path('@/assets/a.png', '/proj/src/App.vue', {'@': 'src'}, '', '/proj')
    '/proj/src/assets/a.png'
    >>> resolve_path('../img/c.png', '/proj/a/b.ts', {}, '', '/proj')
    '/proj/img/c.png'
"""

import os
import posixpath
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from .path_matcher import MatchResult, URL_PATTERN

_REPEATED_SLASHES = re.compile(r"/{2,}")
_DRIVE_ROOT = re.compile(r"^[A-Za-z]:/")


@dataclass(frozen=True)
class ResolvedLocation:
    """Where a matched path points.

    Attributes:
        location: Pass-through URL or absolute, forward-slash filesystem path.
        is_url: True when ``location`` is a URL.
        match: The match it was built from.
    """

    location: str
    is_url: bool
    match: Optional[MatchResult] = None

    @property
    def is_local(self) -> bool:
        return not self.is_url

    def __str__(self) -> str:
        return self.location


def normalize_slashes(path: str) -> str:
    """Forward slashes only, no repeated or trailing slash.

    A leading ``//`` (UNC share) is preserved.
    """
    if not path:
        return ""
    path = path.replace("\\", "/")
    prefix = "//" if path.startswith("//") and not path.startswith("///") else ""
    path = prefix + _REPEATED_SLASHES.sub("/", path[len(prefix) :])
    if len(path) > 1 and path.endswith("/") and not path.endswith(":/"):
        path = path[:-1]
    return path


def is_absolute(path: str) -> bool:
    """POSIX root or Windows drive root, after normalize_slashes."""
    return path.startswith("/") or bool(_DRIVE_ROOT.match(path))


def find_alias_key(path: str, aliases: Mapping[str, str]) -> Optional[str]:
    """First alias key (table order) that equals a whole ``/`` segment of ``path``."""
    segments = set(path.split("/"))
    for key in aliases:
        if key in segments:
            return key
    return None


def _join(*parts: str) -> str:
    joined = ""
    for part in parts:
        if not part:
            continue
        if is_absolute(part) or not joined:
            joined = part
        else:
            joined = f"{joined}/{part}"
    return posixpath.normpath(joined) if joined else ""


def join_alias_location(project_root: str, base_url: str, path: str) -> str:
    """Join root, base URL and path; an absolute part overrides what precedes it.

    The root goes first so that a relative base URL such as ``"."`` still
    yields an absolute location.
    """
    return _join(*(normalize_slashes(part) for part in (project_root, base_url, path)))


def resolve_relative(path: str, current_file: str) -> str:
    """Resolve ``path`` against the directory holding ``current_file``."""
    directory = posixpath.dirname(normalize_slashes(current_file))
    if not is_absolute(directory):
        directory = _join(normalize_slashes(os.getcwd()), directory)
    return _join(directory, normalize_slashes(path))


def resolve_path(
    text: str,
    current_file: str,
    aliases: Mapping[str, str],
    base_url: str = "",
    project_root: Optional[str] = None,
) -> str:
    """Resolve matched text to a location string.

    Args:
        text: The path-like text, e.g. "@/assets/a.png" or "../b.png".
        current_file: File the text was found in.
        aliases: Merged alias table.
        base_url: Base URL for aliased paths.
        project_root: Active project root.

    Returns:
        The URL unchanged, or an absolute forward-slash path.
    """
    if URL_PATTERN.search(text):
        return text

    key = find_alias_key(text, aliases)
    if key is None:
        return resolve_relative(text, current_file)

    substituted = text.replace(key, aliases[key], 1)
    return join_alias_location(project_root or "", base_url, substituted)


def resolve_match(
    match: MatchResult,
    current_file: str,
    aliases: Mapping[str, str],
    base_url: str = "",
    project_root: Optional[str] = None,
) -> ResolvedLocation:
    """Resolve a PathMatcher result."""
    if match.is_url:
        return ResolvedLocation(match.text, is_url=True, match=match)

    location = resolve_path(match.text, current_file, aliases, base_url, project_root)
    return ResolvedLocation(location, is_url=False, match=match)
