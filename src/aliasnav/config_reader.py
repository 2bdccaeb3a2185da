#!/usr/bin/env python3
"""Reading of the build-tool configuration files that declare aliases.

Every source has a fixed filename relative to the project root. Reading a
source yields the loosely-typed value found in it, or None when the file is
missing or cannot be understood. Failures never propagate: they are logged
here and the caller moves on to the next source.

Example:
    >>> raw = read_config(source_for(ConfigFormat.TSCONFIG), '/my/project')
    >>> raw['compilerOptions']['paths']
    {'@/*': ['src/*']}
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Set, Tuple, Union

from .js_module import ModuleEvaluator, default_evaluators

logger = logging.getLogger(__name__)


class ConfigFormat(Enum):
    """The configuration schemas aliases are harvested from."""

    WEBPACK = "webpack"
    BABEL = "babel"
    TSCONFIG = "tsconfig"
    JSCONFIG = "jsconfig"
    VUE_CLI = "vue-cli"


@dataclass(frozen=True)
class ConfigSource:
    """One configuration origin.

    Attributes:
        format: Schema of the file.
        filename: Path relative to the project root.
        kind: "module" for executable JS config, "json" for JSON with comments.
    """

    format: ConfigFormat
    filename: str
    kind: str

    @property
    def is_module(self) -> bool:
        return self.kind == "module"

    def path_in(self, project_root: Union[str, Path]) -> Path:
        return Path(project_root) / self.filename


# Merge order: later sources override earlier ones.
CONFIG_SOURCES: Tuple[ConfigSource, ...] = (
    ConfigSource(ConfigFormat.WEBPACK, "webpack.config.js", "module"),
    ConfigSource(ConfigFormat.BABEL, ".babelrc", "json"),
    ConfigSource(ConfigFormat.TSCONFIG, "tsconfig.json", "json"),
    ConfigSource(ConfigFormat.JSCONFIG, "jsconfig.json", "json"),
    ConfigSource(ConfigFormat.VUE_CLI, "vue.config.js", "module"),
)

PATH_MAP_FORMATS = frozenset({ConfigFormat.TSCONFIG, ConfigFormat.JSCONFIG})


def source_for(config_format: ConfigFormat) -> ConfigSource:
    """Return the standard source for a format."""
    for source in CONFIG_SOURCES:
        if source.format is config_format:
            return source
    raise ValueError(f"No config source for format: {config_format}")


# Strings are matched first so that "//" inside them is left alone.
_COMMENT_RE = re.compile(
    r'"(?:\\.|[^"\\])*"|//[^\r\n]*|/\*.*?\*/',
    re.DOTALL,
)
_TRAILING_COMMA_RE = re.compile(r'"(?:\\.|[^"\\])*"|,(\s*[}\]])')


def strip_json_comments(content: str) -> str:
    """Remove // and /* */ comments and trailing commas from JSON text."""

    def drop_comment(match: "re.Match[str]") -> str:
        text = match.group(0)
        return text if text.startswith('"') else ""

    def drop_comma(match: "re.Match[str]") -> str:
        if match.group(1) is not None:
            return match.group(1)
        return match.group(0)

    content = _COMMENT_RE.sub(drop_comment, content)
    return _TRAILING_COMMA_RE.sub(drop_comma, content)


def load_jsonc(path: Path) -> Any:
    """Parse a JSON-with-comments file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the content is not valid JSON once comments are gone
            (json.JSONDecodeError and UnicodeDecodeError are both ValueErrors).
    """
    content = path.read_text(encoding="utf-8")
    if content.startswith("\ufeff"):
        content = content[1:]
    return json.loads(strip_json_comments(content))


def _load_path_map_config(config_path: Path, seen: Optional[Set[str]] = None) -> Any:
    """Load a tsconfig/jsconfig, folding in the files it ``extends``.

    Parent ``compilerOptions.paths`` sit under the child's, and the child's
    ``baseUrl`` falls back to the parent's.
    """
    if seen is None:
        seen = set()

    key = str(config_path.resolve())
    if key in seen:
        logger.debug("extends cycle at %s", config_path)
        return None
    seen.add(key)

    config = load_jsonc(config_path)
    if not isinstance(config, dict):
        return config

    extends = config.get("extends")
    if not isinstance(extends, str) or not extends:
        return config

    parent_path = Path(extends)
    if not parent_path.is_absolute():
        if not extends.startswith("."):
            # Package reference, lives in node_modules.
            logger.debug("Not following package extends %r in %s", extends, config_path)
            return config
        parent_path = config_path.parent / extends
    if not parent_path.name.endswith(".json") and not parent_path.is_file():
        parent_path = parent_path.with_name(parent_path.name + ".json")

    try:
        parent = _load_path_map_config(parent_path, seen)
    except (OSError, ValueError) as e:
        logger.debug("Ignoring extends %s of %s: %s", parent_path, config_path, e)
        return config

    if not isinstance(parent, dict):
        return config

    parent_options = parent.get("compilerOptions")
    child_options = config.get("compilerOptions")
    if not isinstance(parent_options, dict):
        return config
    if not isinstance(child_options, dict):
        child_options = {}

    merged_options: Dict[str, Any] = dict(parent_options)
    merged_options.update(child_options)

    parent_paths = parent_options.get("paths")
    child_paths = child_options.get("paths")
    if isinstance(parent_paths, dict):
        merged_paths = dict(parent_paths)
        if isinstance(child_paths, dict):
            merged_paths.update(child_paths)
        merged_options["paths"] = merged_paths

    if not child_options.get("baseUrl") and parent_options.get("baseUrl"):
        merged_options["baseUrl"] = parent_options["baseUrl"]

    merged = dict(config)
    merged["compilerOptions"] = merged_options
    return merged


def read_config(
    source: ConfigSource,
    project_root: Union[str, Path],
    evaluators: Optional[Sequence[ModuleEvaluator]] = None,
) -> Optional[Any]:
    """Read one configuration source.

    Args:
        source: Which file to read and how.
        project_root: Directory the source's filename is relative to.
        evaluators: Module evaluators tried in order for executable configs
            (default: default_evaluators()).

    Returns:
        The parsed value, or None if the file is missing or unusable.
    """
    path = source.path_in(project_root)
    if not path.is_file():
        logger.debug("No %s at %s", source.filename, path)
        return None

    if source.is_module:
        if evaluators is None:
            evaluators = default_evaluators()
        for evaluator in evaluators:
            value = evaluator.evaluate(path)
            if value is not None:
                logger.debug("Evaluated %s with %s evaluator", path, evaluator.name)
                return value
        logger.warning("Could not evaluate %s", path)
        return None

    try:
        if source.format in PATH_MAP_FORMATS:
            return _load_path_map_config(path)
        return load_jsonc(path)
    except (OSError, ValueError) as e:
        logger.warning("Error reading %s: %s", path, e)
        return None
