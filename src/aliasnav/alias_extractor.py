#!/usr/bin/env python3
"""Alias extraction - one strategy per configuration schema.

Each extractor takes the raw value read from a config file and returns the
alias table it declares, plus a base URL for the path-map schemas
(tsconfig.json / jsconfig.json). Extractors are pure and never raise on
unexpected shapes: a missing or mistyped link anywhere along the lookup
chain simply yields an empty result.

Example:
    >>> extract_path_map({'compilerOptions': {'baseUrl': '.', 'paths': {'@/*': ['src/*']}}})
    ExtractedAliases(aliases={'@': 'src'}, base_url='.')
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config_reader import ConfigFormat

logger = logging.getLogger(__name__)

MODULE_RESOLVER_PLUGIN = "module-resolver"
WILDCARD_SUFFIX = "/*"


@dataclass
class ExtractedAliases:
    """Aliases declared by a single configuration source.

    Attributes:
        aliases: Alias key -> target, in declaration order.
        base_url: Base URL candidate (path-map schemas only).
    """

    aliases: Dict[str, str] = field(default_factory=dict)
    base_url: Optional[str] = None


def lookup(raw: Any, *keys: str) -> Any:
    """Follow a chain of mapping keys, returning None on any missing link."""
    value = raw
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def strip_wildcard(pattern: str) -> str:
    """Drop a trailing ``/*`` wildcard marker ("@/*" -> "@")."""
    if pattern.endswith(WILDCARD_SUFFIX):
        return pattern[: -len(WILDCARD_SUFFIX)]
    return pattern


def _first_target(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, list) and value and isinstance(value[0], str):
        return value[0]
    return None


def _alias_table(mapping: Any) -> Dict[str, str]:
    """Build a table from a ``{alias: target}`` object, keys used as-is."""
    if not isinstance(mapping, dict):
        return {}

    aliases: Dict[str, str] = {}
    for key, value in mapping.items():
        target = _first_target(value)
        if target is None:
            logger.debug("Skipping alias %r with unsupported target %r", key, value)
            continue
        aliases[str(key)] = target
    return aliases


def extract_webpack(raw: Any) -> ExtractedAliases:
    """``resolve.alias`` of a webpack config."""
    return ExtractedAliases(aliases=_alias_table(lookup(raw, "resolve", "alias")))


def extract_babel(raw: Any) -> ExtractedAliases:
    """``alias`` option of the first ``["module-resolver", {...}]`` plugin entry."""
    plugins = lookup(raw, "plugins")
    if not isinstance(plugins, list):
        return ExtractedAliases()

    for plugin in plugins:
        if isinstance(plugin, list) and len(plugin) == 2 and plugin[0] == MODULE_RESOLVER_PLUGIN:
            return ExtractedAliases(aliases=_alias_table(lookup(plugin[1], "alias")))

    return ExtractedAliases()


def extract_path_map(raw: Any) -> ExtractedAliases:
    """``compilerOptions.paths`` and ``compilerOptions.baseUrl``.

    Wildcards are stripped from keys and targets and only the first target
    of each key is kept.
    """
    base_url = lookup(raw, "compilerOptions", "baseUrl")
    if not isinstance(base_url, str):
        base_url = None

    paths = lookup(raw, "compilerOptions", "paths")
    aliases: Dict[str, str] = {}
    if isinstance(paths, dict):
        for pattern, targets in paths.items():
            target = _first_target(targets)
            if target is None:
                logger.debug("Skipping path mapping %r with targets %r", pattern, targets)
                continue
            aliases[strip_wildcard(str(pattern))] = strip_wildcard(target)

    return ExtractedAliases(aliases=aliases, base_url=base_url)


def extract_vue_cli(raw: Any) -> ExtractedAliases:
    """``configureWebpack.resolve.alias`` of a Vue CLI config."""
    return ExtractedAliases(
        aliases=_alias_table(lookup(raw, "configureWebpack", "resolve", "alias"))
    )


EXTRACTORS: Dict[ConfigFormat, Callable[[Any], ExtractedAliases]] = {
    ConfigFormat.WEBPACK: extract_webpack,
    ConfigFormat.BABEL: extract_babel,
    ConfigFormat.TSCONFIG: extract_path_map,
    ConfigFormat.JSCONFIG: extract_path_map,
    ConfigFormat.VUE_CLI: extract_vue_cli,
}


def extract(config_format: ConfigFormat, raw: Any) -> ExtractedAliases:
    """Run the extractor registered for ``config_format``.

    Raises:
        ValueError: If no extractor exists for the format.
    """
    try:
        extractor = EXTRACTORS[config_format]
    except KeyError:
        raise ValueError(f"No alias extractor for format: {config_format}") from None
    if raw is None:
        return ExtractedAliases()
    return extractor(raw)
