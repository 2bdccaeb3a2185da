#!/usr/bin/env python3
"""Tests for per-format alias extraction."""

import pytest

from aliasnav.alias_extractor import (
    ExtractedAliases,
    extract,
    extract_babel,
    extract_path_map,
    extract_vue_cli,
    extract_webpack,
    lookup,
    strip_wildcard,
)
from aliasnav.config_reader import ConfigFormat


class TestHelpers:
    """Tests for lookup chains and wildcard stripping."""

    def test_lookup_chain(self):
        assert lookup({"a": {"b": {"c": 1}}}, "a", "b", "c") == 1

    def test_lookup_missing_link(self):
        assert lookup({"a": {}}, "a", "b", "c") is None
        assert lookup({"a": "text"}, "a", "b") is None
        assert lookup(None, "a") is None
        assert lookup([1, 2], "a") is None

    def test_strip_wildcard(self):
        assert strip_wildcard("@/*") == "@"
        assert strip_wildcard("@components/*") == "@components"
        assert strip_wildcard("~") == "~"
        assert strip_wildcard("a/*/b") == "a/*/b"


class TestWebpack:
    """Tests for webpack resolve.alias."""

    def test_aliases_used_as_is(self):
        raw = {"resolve": {"alias": {"@": "/proj/src", "vue$": "vue/dist/vue.esm.js"}}}
        result = extract_webpack(raw)
        assert result.aliases == {"@": "/proj/src", "vue$": "vue/dist/vue.esm.js"}
        assert result.base_url is None

    def test_missing_resolve(self):
        assert extract_webpack({"entry": "./main.js"}) == ExtractedAliases()

    def test_alias_not_a_mapping(self):
        assert extract_webpack({"resolve": {"alias": [{"name": "@", "alias": "src"}]}}).aliases == {}

    def test_unsupported_targets_skipped(self):
        raw = {"resolve": {"alias": {"ignored$": False, "multi": ["a", "b"], "ok": "src"}}}
        assert extract_webpack(raw).aliases == {"multi": "a", "ok": "src"}


class TestBabel:
    """Tests for babel module-resolver plugin aliases."""

    def test_module_resolver_plugin(self):
        raw = {
            "presets": ["@babel/preset-env"],
            "plugins": [
                "transform-runtime",
                ["other-plugin", {"alias": {"x": "y"}}],
                ["module-resolver", {"root": ["./src"], "alias": {"~": "./src", "@utils": "./src/utils"}}],
            ],
        }
        assert extract_babel(raw).aliases == {"~": "./src", "@utils": "./src/utils"}

    def test_first_matching_entry_wins(self):
        raw = {
            "plugins": [
                ["module-resolver", {"alias": {"a": "first"}}],
                ["module-resolver", {"alias": {"a": "second"}}],
            ]
        }
        assert extract_babel(raw).aliases == {"a": "first"}

    def test_entry_must_have_two_elements(self):
        raw = {"plugins": [["module-resolver", {"alias": {"a": "x"}}, "extra"]]}
        assert extract_babel(raw).aliases == {}

    def test_no_plugin(self):
        assert extract_babel({"plugins": ["module-resolver"]}).aliases == {}
        assert extract_babel({}).aliases == {}

    def test_plugin_without_alias(self):
        raw = {"plugins": [["module-resolver", {"root": ["./src"]}]]}
        assert extract_babel(raw) == ExtractedAliases()

    def test_no_base_url(self):
        raw = {"plugins": [["module-resolver", {"alias": {"a": "x"}}]]}
        assert extract_babel(raw).base_url is None


class TestPathMap:
    """Tests for tsconfig/jsconfig compilerOptions.paths."""

    def test_wildcards_stripped_first_target_taken(self):
        raw = {
            "compilerOptions": {
                "baseUrl": "./",
                "paths": {
                    "@/*": ["src/*", "fallback/*"],
                    "@components/*": ["src/components/*"],
                    "config": ["config/index.ts"],
                },
            }
        }
        result = extract_path_map(raw)
        assert result.aliases == {
            "@": "src",
            "@components": "src/components",
            "config": "config/index.ts",
        }
        assert result.base_url == "./"

    def test_target_wildcard_stripped(self):
        """A "src/*" target maps the key to the directory, not to "src/*"."""
        raw = {"compilerOptions": {"paths": {"@/*": ["src/*"], "~/*": ["./lib/*"]}}}
        assert extract_path_map(raw).aliases == {"@": "src", "~": "./lib"}

    def test_base_url_without_paths(self):
        result = extract_path_map({"compilerOptions": {"baseUrl": "src"}})
        assert result.aliases == {}
        assert result.base_url == "src"

    def test_missing_compiler_options(self):
        assert extract_path_map({"include": ["src"]}) == ExtractedAliases()

    def test_empty_target_list_skipped(self):
        raw = {"compilerOptions": {"paths": {"@/*": [], "~/*": ["lib/*"]}}}
        assert extract_path_map(raw).aliases == {"~": "lib"}

    def test_non_string_base_url_ignored(self):
        assert extract_path_map({"compilerOptions": {"baseUrl": 1}}).base_url is None


class TestVueCli:
    """Tests for vue.config.js configureWebpack.resolve.alias."""

    def test_configure_webpack_alias(self):
        raw = {"configureWebpack": {"resolve": {"alias": {"@": "/p/src", "assets": "/p/src/assets"}}}}
        result = extract_vue_cli(raw)
        assert result.aliases == {"@": "/p/src", "assets": "/p/src/assets"}
        assert result.base_url is None

    def test_function_configure_webpack(self):
        # A configureWebpack function evaluates to nothing usable.
        assert extract_vue_cli({"configureWebpack": None}).aliases == {}

    def test_top_level_resolve_ignored(self):
        assert extract_vue_cli({"resolve": {"alias": {"@": "src"}}}).aliases == {}


class TestDispatch:
    """Tests for the format dispatch."""

    @pytest.mark.parametrize(
        "config_format, raw, expected",
        [
            (ConfigFormat.WEBPACK, {"resolve": {"alias": {"@": "a"}}}, {"@": "a"}),
            (
                ConfigFormat.BABEL,
                {"plugins": [["module-resolver", {"alias": {"@": "b"}}]]},
                {"@": "b"},
            ),
            (ConfigFormat.TSCONFIG, {"compilerOptions": {"paths": {"@/*": ["c/*"]}}}, {"@": "c"}),
            (ConfigFormat.JSCONFIG, {"compilerOptions": {"paths": {"@/*": ["d/*"]}}}, {"@": "d"}),
            (
                ConfigFormat.VUE_CLI,
                {"configureWebpack": {"resolve": {"alias": {"@": "e"}}}},
                {"@": "e"},
            ),
        ],
    )
    def test_each_format(self, config_format, raw, expected):
        assert extract(config_format, raw).aliases == expected

    def test_absent_raw_value(self):
        for config_format in ConfigFormat:
            assert extract(config_format, None) == ExtractedAliases()

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="No alias extractor"):
            extract("rollup", {})
