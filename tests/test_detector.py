"""Tests for project type and monorepo detection."""

import dataclasses
import json

import pytest

from agent_readiness.detector import (
    detect_monorepo,
    detect_project,
    detect_types,
    resolve_workspace_globs,
)
from agent_readiness.types import ProjectInfo


def _pkg(name: str) -> str:
    return json.dumps({"name": name})


# ─── Project Types ───────────────────────────────────────────────────


class TestDetectTypes:
    def test_empty_repo(self, make_repo):
        assert detect_types(make_repo({})) == []

    def test_multiple_types_in_order(self, make_repo):
        repo = make_repo({
            "go.mod": "module x",
            "package.json": "{}",
            "requirements.txt": "httpx",
        })
        assert detect_types(repo) == ["node", "python", "go"]

    def test_gradle_kts_is_kotlin(self, make_repo):
        assert detect_types(make_repo({"build.gradle.kts": ""})) == ["kotlin"]

    def test_groovy_gradle_with_kotlin_plugin(self, make_repo):
        repo = make_repo({"build.gradle": "apply plugin: 'kotlin-android'"})
        assert detect_types(repo) == ["java", "kotlin"]

    def test_plain_java(self, make_repo):
        repo = make_repo({"pom.xml": "<project><artifactId>app</artifactId></project>"})
        assert detect_types(repo) == ["java"]

    def test_pom_with_kotlin_plugin(self, make_repo):
        repo = make_repo({"pom.xml": "<plugin>kotlin-maven-plugin</plugin>"})
        assert detect_types(repo) == ["java", "kotlin"]


# ─── Workspaces ──────────────────────────────────────────────────────


class TestWorkspaceGlobs:
    def test_parent_wildcard(self, make_repo):
        repo = make_repo({
            "packages/b/package.json": _pkg("b"),
            "packages/a/package.json": _pkg("a"),
            "packages/not-a-package/README.md": "",
        })
        assert resolve_workspace_globs(repo, ["packages/*"]) == ["packages/a", "packages/b"]

    def test_concrete_package_path(self, make_repo):
        repo = make_repo({"tools/cli/package.json": _pkg("cli")})
        assert resolve_workspace_globs(repo, ["tools/cli"]) == ["tools/cli"]

    def test_deduplicates(self, make_repo):
        repo = make_repo({"apps/web/package.json": _pkg("web")})
        assert resolve_workspace_globs(repo, ["apps/*", "apps"]) == ["apps/web"]


class TestDetectMonorepo:
    def test_npm_workspaces(self, make_repo):
        repo = make_repo({
            "package.json": json.dumps({"workspaces": ["packages/*"]}),
            "packages/core/package.json": _pkg("core"),
        })
        assert detect_monorepo(repo) == (True, ["packages/core"])

    def test_yarn_workspaces_object(self, make_repo):
        repo = make_repo({
            "package.json": json.dumps({"workspaces": {"packages": ["libs/*"]}}),
            "libs/ui/package.json": _pkg("ui"),
        })
        assert detect_monorepo(repo) == (True, ["libs/ui"])

    def test_pnpm_workspace(self, make_repo):
        repo = make_repo({
            "pnpm-workspace.yaml": "packages:\n  - 'apps/*'\n",
            "apps/site/package.json": _pkg("site"),
        })
        assert detect_monorepo(repo) == (True, ["apps/site"])

    def test_pnpm_file_without_packages(self, make_repo):
        repo = make_repo({"pnpm-workspace.yaml": "# nothing here\n"})
        assert detect_monorepo(repo) == (True, [])

    def test_pnpm_file_not_utf8(self, make_repo):
        repo = make_repo({})
        (repo / "pnpm-workspace.yaml").write_bytes(b"packages:\n  - \xff\n")
        assert detect_monorepo(repo) == (True, [])

    def test_lerna_defaults_to_packages(self, make_repo):
        repo = make_repo({
            "lerna.json": json.dumps({"version": "1.0.0"}),
            "packages/x/package.json": _pkg("x"),
        })
        assert detect_monorepo(repo) == (True, ["packages/x"])

    def test_nx_scans_conventional_dirs(self, make_repo):
        repo = make_repo({
            "nx.json": "{}",
            "apps/api/package.json": _pkg("api"),
            "libs/shared/package.json": _pkg("shared"),
        })
        assert detect_monorepo(repo) == (True, ["apps/api", "libs/shared"])

    def test_turbo(self, make_repo):
        repo = make_repo({"turbo.json": "{}"})
        assert detect_monorepo(repo) == (True, [])

    def test_single_package(self, make_repo):
        repo = make_repo({"package.json": json.dumps({"name": "solo"})})
        assert detect_monorepo(repo) == (False, [])


def test_detect_project(make_repo):
    repo = make_repo({
        "package.json": json.dumps({"workspaces": ["packages/*"]}),
        "packages/a/package.json": _pkg("a"),
        "pyproject.toml": "[project]\nname = 'x'\n",
    })
    info = detect_project(str(repo))
    assert info.detected_types == ["node", "python"]
    assert info.is_monorepo is True
    assert info.packages == ["packages/a"]


def test_detect_project_survives_undecodable_workspace(make_repo):
    repo = make_repo({"package.json": _pkg("web")})
    (repo / "pnpm-workspace.yaml").write_bytes(b"\xff\xfe\x00bad")
    info = detect_project(repo)
    assert info.detected_types == ["node"]
    assert info.is_monorepo is True
    assert info.packages == []


def test_project_info_is_read_only():
    info = ProjectInfo(detected_types=["go"])
    with pytest.raises(dataclasses.FrozenInstanceError):
        info.is_monorepo = True
