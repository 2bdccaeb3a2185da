#!/usr/bin/env python3
"""Single entry point for editor integrations.

The facade owns the alias state of the active project as one immutable
snapshot. The snapshot is rebuilt wholesale on every project change and
swapped in with a single assignment, so a lookup always sees either the old
or the new table, never a half-built one.

Example:
    >>> facade = ResolutionFacade(['/my/project'])
    >>> facade.aliases
    mappingproxy({'@': 'src'})
    >>> facade.resolve('<img src="@/assets/logo.png">', '/my/project/src/App.vue')
    ResolvedLocation(location='/my/project/src/assets/logo.png', is_url=False, ...)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .alias_extractor import ExtractedAliases, extract
from .alias_merger import merge
from .config_reader import CONFIG_SOURCES, ConfigFormat, ConfigSource, read_config
from .js_module import ModuleEvaluator, default_evaluators
from .path_matcher import PathMatcher
from .path_resolver import ResolvedLocation, normalize_slashes, resolve_match

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AliasSnapshot:
    """Alias state built from one project root.

    Attributes:
        root: Project root the snapshot was built from (None: no project).
        aliases: Read-only merged alias table.
        base_url: Selected base URL, possibly empty.
    """

    root: Optional[str] = None
    aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    base_url: str = ""


def build_snapshot(
    project_root: Optional[str],
    sources: Sequence[ConfigSource] = CONFIG_SOURCES,
    evaluators: Optional[Sequence[ModuleEvaluator]] = None,
) -> AliasSnapshot:
    """Read, extract and merge every source of ``project_root``."""
    if not project_root:
        logger.debug("No active project; aliasing disabled")
        return AliasSnapshot()

    extracted: Dict[ConfigFormat, ExtractedAliases] = {}
    for source in sources:
        raw = read_config(source, project_root, evaluators)
        extracted[source.format] = extract(source.format, raw)

    aliases, base_url = merge(extracted)
    logger.debug("aliases for %s: %s", project_root, aliases)
    logger.debug("base url for %s: %r", project_root, base_url)
    return AliasSnapshot(
        root=project_root,
        aliases=MappingProxyType(aliases),
        base_url=base_url,
    )


def _contains(folder: str, path: str) -> bool:
    return path == folder or path.startswith(folder.rstrip("/") + "/")


class ResolutionFacade:
    """Resolves path-like text against the alias state of the active project.

    Attributes:
        workspace_folders: Known project roots, first one is the default.
        sources: Configuration sources read on every rebuild.
        matcher: PathMatcher used for lookups.

    Example:
        >>> facade = ResolutionFacade(['/proj'])
        >>> facade.resolve('../img/c.png', '/proj/a/b.ts').location
        '/proj/img/c.png'
    """

    def __init__(
        self,
        workspace_folders: Optional[Iterable[str]] = None,
        sources: Sequence[ConfigSource] = CONFIG_SOURCES,
        evaluators: Optional[Sequence[ModuleEvaluator]] = None,
        matcher: Optional[PathMatcher] = None,
    ):
        """Initialize and build the first snapshot.

        Args:
            workspace_folders: Project roots (absolute paths).
            sources: Configuration sources (default: the five standard files).
            evaluators: Module evaluators for JS configs (default: node if
                installed, then the static evaluator).
            matcher: PathMatcher to use (default: standard strategies).
        """
        self.workspace_folders: List[str] = self._normalize_folders(workspace_folders)
        self.sources = tuple(sources)
        self.evaluators = list(evaluators) if evaluators is not None else default_evaluators()
        self.matcher = matcher or PathMatcher()
        self._snapshot = AliasSnapshot()
        self.reinitialize()

    @staticmethod
    def _normalize_folders(folders: Optional[Iterable[str]]) -> List[str]:
        return [normalize_slashes(os.path.abspath(str(folder))) for folder in folders or ()]

    @property
    def snapshot(self) -> AliasSnapshot:
        return self._snapshot

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._snapshot.aliases

    @property
    def base_url(self) -> str:
        return self._snapshot.base_url

    @property
    def project_root(self) -> Optional[str]:
        return self._snapshot.root

    def set_workspace_folders(self, folders: Optional[Iterable[str]]) -> AliasSnapshot:
        """Project-change notification: replace the folders and rebuild."""
        self.workspace_folders = self._normalize_folders(folders)
        return self.reinitialize()

    def project_root_for(self, current_file: Optional[str] = None) -> Optional[str]:
        """Workspace folder holding ``current_file``, else the first folder."""
        if not self.workspace_folders:
            return None
        if current_file:
            path = normalize_slashes(current_file)
            owners = [folder for folder in self.workspace_folders if _contains(folder, path)]
            if owners:
                return max(owners, key=len)
        return self.workspace_folders[0]

    def reinitialize(self, current_file: Optional[str] = None) -> AliasSnapshot:
        """Rebuild the alias snapshot for the active project root.

        Args:
            current_file: File whose project is active (default: first folder).

        Returns:
            The new snapshot.
        """
        snapshot = build_snapshot(
            self.project_root_for(current_file), self.sources, self.evaluators
        )
        self._snapshot = snapshot
        return snapshot

    def resolve(self, text: str, current_file: str) -> Optional[ResolvedLocation]:
        """Resolve the first path-like substring of ``text``.

        Args:
            text: Raw text, e.g. an ``src`` attribute value.
            current_file: Absolute path of the file the text was found in.

        Returns:
            ResolvedLocation, or None if nothing path-like is in ``text``.
        """
        snapshot = self._snapshot
        root = self.project_root_for(current_file)
        if root != snapshot.root:
            logger.debug("Project root changed to %s; rebuilding aliases", root)
            snapshot = self.reinitialize(current_file)

        match = self.matcher.match(text, snapshot.aliases.keys())
        if match is None:
            return None

        return resolve_match(
            match,
            current_file,
            snapshot.aliases,
            snapshot.base_url,
            snapshot.root,
        )

    def describe(self) -> Dict[str, Any]:
        """JSON-serialisable view of the current snapshot."""
        snapshot = self._snapshot
        return {
            "root": snapshot.root,
            "base_url": snapshot.base_url,
            "aliases": dict(snapshot.aliases),
            "sources": [
                {
                    "format": source.format.value,
                    "file": source.filename,
                    "present": bool(snapshot.root)
                    and Path(snapshot.root, source.filename).is_file(),
                }
                for source in self.sources
            ],
        }
