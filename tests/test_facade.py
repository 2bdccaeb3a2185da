#!/usr/bin/env python3
"""Tests for the ResolutionFacade entry point."""

import json

import pytest

from aliasnav.facade import AliasSnapshot, ResolutionFacade, build_snapshot
from aliasnav.js_module import StaticModuleEvaluator
from aliasnav.path_matcher import MatchKind


@pytest.fixture
def static_only():
    """Module evaluators that never start node."""
    return [StaticModuleEvaluator()]


@pytest.fixture
def vue_project(tmp_path):
    """Create a project declaring aliases in every supported config file."""
    (tmp_path / "src" / "assets").mkdir(parents=True)
    (tmp_path / "src" / "App.vue").write_text('<img src="@/assets/logo.png">')

    (tmp_path / "webpack.config.js").write_text(
        """
const path = require('path');
module.exports = {
  resolve: {
    alias: {
      '@': path.resolve(__dirname, 'webpack-src'),
      'wp': path.resolve(__dirname, 'webpack-only'),
    },
  },
};
"""
    )
    (tmp_path / ".babelrc").write_text(
        json.dumps({"plugins": [["module-resolver", {"alias": {"~": "./src", "wp": "babel"}}]]})
    )
    (tmp_path / "tsconfig.json").write_text(
        """{
  // TypeScript paths
  "compilerOptions": {
    "baseUrl": ".",
    "paths": {
      "@/*": ["ts-src/*"],
      "@components/*": ["src/components/*"],
    }
  }
}"""
    )
    (tmp_path / "jsconfig.json").write_text(
        json.dumps({"compilerOptions": {"baseUrl": "js-base", "paths": {"#/*": ["shared/*"]}}})
    )
    (tmp_path / "vue.config.js").write_text(
        """
const path = require('path')
function resolve (dir) {
  return path.join(__dirname, dir)
}
module.exports = {
  configureWebpack: {
    resolve: {
      alias: {
        '@': resolve('src')
      }
    }
  }
}
"""
    )
    return tmp_path


@pytest.fixture
def ts_project(tmp_path):
    """Create a TypeScript project with a single tsconfig alias."""
    root = tmp_path / "ts-app"
    (root / "src").mkdir(parents=True)
    (root / "tsconfig.json").write_text(
        json.dumps({"compilerOptions": {"baseUrl": ".", "paths": {"@/*": ["src/*"]}}})
    )
    return root


class TestReinitialize:
    """Tests for building the alias snapshot."""

    def test_merged_aliases(self, vue_project, static_only):
        facade = ResolutionFacade([str(vue_project)], evaluators=static_only)
        root = vue_project.as_posix()

        assert dict(facade.aliases) == {
            "@": f"{root}/src",
            "wp": "babel",
            "~": "./src",
            "@components": "src/components",
            "#": "shared",
        }
        assert facade.base_url == "."
        assert facade.project_root == root

    def test_iteration_order_follows_first_declaration(self, vue_project, static_only):
        facade = ResolutionFacade([str(vue_project)], evaluators=static_only)
        assert list(facade.aliases) == ["@", "wp", "~", "@components", "#"]

    def test_reinitialize_is_repeatable(self, vue_project, static_only):
        facade = ResolutionFacade([str(vue_project)], evaluators=static_only)
        first = facade.reinitialize()
        second = facade.reinitialize()

        assert list(first.aliases.items()) == list(second.aliases.items())
        assert first.base_url == second.base_url
        assert first.root == second.root

    def test_no_config_files(self, tmp_path, static_only):
        facade = ResolutionFacade([str(tmp_path)], evaluators=static_only)
        assert dict(facade.aliases) == {}
        assert facade.base_url == ""

        result = facade.resolve("../x/y.png", str(tmp_path / "a" / "b.ts"))
        assert result.location == f"{tmp_path.as_posix()}/x/y.png"

    def test_no_workspace(self, static_only):
        facade = ResolutionFacade(evaluators=static_only)
        assert facade.snapshot == AliasSnapshot()
        assert facade.project_root is None

        result = facade.resolve("../img/c.png", "/proj/a/b.ts")
        assert result.location == "/proj/img/c.png"

    def test_snapshot_is_read_only(self, ts_project, static_only):
        facade = ResolutionFacade([str(ts_project)], evaluators=static_only)
        with pytest.raises(TypeError):
            facade.aliases["x"] = "y"

    def test_old_snapshot_untouched_by_rebuild(self, ts_project, static_only):
        facade = ResolutionFacade([str(ts_project)], evaluators=static_only)
        before = facade.snapshot

        (ts_project / "tsconfig.json").write_text(
            json.dumps({"compilerOptions": {"paths": {"~/*": ["lib/*"]}}})
        )
        after = facade.reinitialize()

        assert dict(before.aliases) == {"@": "src"}
        assert before.base_url == "."
        assert dict(after.aliases) == {"~": "lib"}
        assert after.base_url == ""
        assert facade.snapshot is after

    def test_build_snapshot_without_root(self):
        assert build_snapshot(None) == AliasSnapshot()


class TestResolve:
    """Tests for end-to-end lookups."""

    def test_alias_lookup(self, ts_project, static_only):
        facade = ResolutionFacade([str(ts_project)], evaluators=static_only)
        result = facade.resolve("@/assets/a.png", str(ts_project / "src" / "App.vue"))

        assert result.location == f"{ts_project.as_posix()}/src/assets/a.png"
        assert result.match.kind is MatchKind.ALIAS
        assert result.is_local

    def test_alias_inside_markup(self, vue_project, static_only):
        facade = ResolutionFacade([str(vue_project)], evaluators=static_only)
        text = (vue_project / "src" / "App.vue").read_text()
        result = facade.resolve(text, str(vue_project / "src" / "App.vue"))

        assert result.location == f"{vue_project.as_posix()}/src/assets/logo.png"

    def test_url_lookup(self, vue_project, static_only):
        facade = ResolutionFacade([str(vue_project)], evaluators=static_only)
        result = facade.resolve("https://example.com/x/y.png", str(vue_project / "a.ts"))

        assert result.location == "https://example.com/x/y.png"
        assert result.is_url

    def test_relative_lookup(self, ts_project, static_only):
        facade = ResolutionFacade([str(ts_project)], evaluators=static_only)
        result = facade.resolve("'../img/c.png'", str(ts_project / "src" / "b.ts"))

        assert result.location == f"{ts_project.as_posix()}/img/c.png"
        assert result.match.kind is MatchKind.PLAIN

    def test_nothing_path_like(self, ts_project, static_only):
        facade = ResolutionFacade([str(ts_project)], evaluators=static_only)
        assert facade.resolve("color: red;", str(ts_project / "src" / "b.css")) is None


class TestProjectRoots:
    """Tests for the stale-alias guarantee across workspace folders."""

    @pytest.fixture
    def two_projects(self, tmp_path):
        roots = []
        for name in ("alpha", "beta"):
            root = tmp_path / name
            root.mkdir()
            (root / "tsconfig.json").write_text(
                json.dumps({"compilerOptions": {"paths": {"@/*": [f"{name}-src/*"]}}})
            )
            roots.append(root)
        return roots

    def test_root_for_file(self, two_projects, static_only):
        alpha, beta = two_projects
        facade = ResolutionFacade([str(alpha), str(beta)], evaluators=static_only)

        assert facade.project_root_for(str(beta / "x.ts")) == beta.as_posix()
        assert facade.project_root_for("/elsewhere/x.ts") == alpha.as_posix()
        assert facade.project_root_for(None) == alpha.as_posix()

    def test_nested_folder_preferred(self, tmp_path, static_only):
        inner = tmp_path / "packages" / "web"
        inner.mkdir(parents=True)
        facade = ResolutionFacade([str(tmp_path), str(inner)], evaluators=static_only)
        assert facade.project_root_for(str(inner / "a.ts")) == inner.as_posix()

    def test_sibling_prefix_not_confused(self, tmp_path, static_only):
        (tmp_path / "app").mkdir()
        (tmp_path / "app2").mkdir()
        facade = ResolutionFacade(
            [str(tmp_path / "app"), str(tmp_path / "app2")], evaluators=static_only
        )
        assert facade.project_root_for(str(tmp_path / "app2" / "x.ts")) == (
            tmp_path / "app2"
        ).as_posix()

    def test_lookup_in_other_project_rebuilds(self, two_projects, static_only):
        alpha, beta = two_projects
        facade = ResolutionFacade([str(alpha), str(beta)], evaluators=static_only)
        assert dict(facade.aliases) == {"@": "alpha-src"}

        result = facade.resolve("@/a.png", str(beta / "main.ts"))

        assert result.location == f"{beta.as_posix()}/beta-src/a.png"
        assert facade.project_root == beta.as_posix()
        assert dict(facade.aliases) == {"@": "beta-src"}

    def test_set_workspace_folders(self, two_projects, static_only):
        alpha, beta = two_projects
        facade = ResolutionFacade([str(alpha)], evaluators=static_only)

        snapshot = facade.set_workspace_folders([str(beta)])

        assert snapshot.root == beta.as_posix()
        assert dict(facade.aliases) == {"@": "beta-src"}

    def test_closing_all_folders(self, two_projects, static_only):
        alpha, _ = two_projects
        facade = ResolutionFacade([str(alpha)], evaluators=static_only)
        facade.set_workspace_folders([])
        assert facade.snapshot == AliasSnapshot()


class TestDescribe:
    """Tests for the JSON view of the snapshot."""

    def test_describe(self, ts_project, static_only):
        facade = ResolutionFacade([str(ts_project)], evaluators=static_only)
        info = facade.describe()

        assert info["root"] == ts_project.as_posix()
        assert info["aliases"] == {"@": "src"}
        assert info["base_url"] == "."
        present = {s["file"]: s["present"] for s in info["sources"]}
        assert present == {
            "webpack.config.js": False,
            ".babelrc": False,
            "tsconfig.json": True,
            "jsconfig.json": False,
            "vue.config.js": False,
        }
        json.dumps(info)
