"""aliasnav - resolve aliased asset paths the way a project's build tools do.

Aliases are harvested from webpack.config.js, .babelrc (module-resolver),
tsconfig.json, jsconfig.json and vue.config.js, merged under a fixed
precedence and used to turn text such as ``@/assets/logo.png`` into an
absolute path.

Components:
    - ResolutionFacade: owns the alias state, entry point for lookups
    - PathMatcher: finds URLs, relative paths and aliased paths in text
    - read_config / extract / merge: the alias harvesting pipeline

Quick Start:
    >>> from aliasnav import ResolutionFacade
    >>> facade = ResolutionFacade(['/my/project'])
    >>> facade.resolve('@/assets/logo.png', '/my/project/src/App.vue').location
    '/my/project/src/assets/logo.png'
"""

from .alias_extractor import ExtractedAliases, extract
from .alias_merger import BASE_URL_ORDER, MERGE_ORDER, merge
from .config_reader import CONFIG_SOURCES, ConfigFormat, ConfigSource, load_jsonc, read_config
from .facade import AliasSnapshot, ResolutionFacade, build_snapshot
from .js_module import ModuleEvaluator, NodeModuleEvaluator, StaticModuleEvaluator
from .path_matcher import MatchKind, MatchResult, PathMatcher, match_path
from .path_resolver import ResolvedLocation, resolve_match, resolve_path

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__license__",
    # Entry point
    "ResolutionFacade",
    "AliasSnapshot",
    "build_snapshot",
    # Configuration sources
    "ConfigFormat",
    "ConfigSource",
    "CONFIG_SOURCES",
    "read_config",
    "load_jsonc",
    # Module evaluation
    "ModuleEvaluator",
    "NodeModuleEvaluator",
    "StaticModuleEvaluator",
    # Extraction and merging
    "ExtractedAliases",
    "extract",
    "merge",
    "MERGE_ORDER",
    "BASE_URL_ORDER",
    # Matching and resolution
    "MatchKind",
    "MatchResult",
    "PathMatcher",
    "match_path",
    "ResolvedLocation",
    "resolve_match",
    "resolve_path",
]
