# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""CI/CD pillar.

Most checks grep the CI configuration files for well-known commands, so
they work the same across GitHub Actions, GitLab CI, CircleCI, Jenkins
and Travis.
"""

from __future__ import annotations

import functools
import re
from typing import Optional

from agent_readiness.pillars.utils import (
    CI_CONFIG_PATTERNS,
    ci_config_contents,
    file_exists,
    package_json_has,
    read_file_content,
)
from agent_readiness.types import Criterion, CriterionResult, Evaluator, Pillar, ProjectInfo

PILLAR_ID = "ci-cd"

TEST_COMMANDS = re.compile(
    r"\b(npm\s+test|yarn\s+test|pnpm\s+test|bun\s+test|jest|vitest|pytest|tox|nox"
    r"|go\s+test|make\s+test|npm\s+run\s+test|gradle\s+test|\./gradlew\s+test"
    r"|gradlew\s+test|gradle\s+check|\./gradlew\s+check|mvn\s+test|\./mvnw\s+test"
    r"|mvn\s+verify|\./mvnw\s+verify|cargo\s+test)\b",
    re.IGNORECASE,
)

LINT_COMMANDS = re.compile(
    r"\b(npm\s+run\s+lint|yarn\s+lint|pnpm\s+lint|bun\s+run\s+lint|eslint"
    r"|biome\s+check|biome\s+lint|ruff\s+check|ruff\s+lint|flake8|pylint"
    r"|golangci-lint|make\s+lint|gradle\s+ktlintCheck|\./gradlew\s+ktlintCheck"
    r"|gradle\s+detekt|\./gradlew\s+detekt|gradle\s+ktfmtCheck|\./gradlew\s+ktfmtCheck"
    r"|\./gradlew\s+spotlessCheck|gradle\s+spotlessCheck|mvn\s+checkstyle"
    r"|\./mvnw\s+checkstyle|mvn\s+pmd|cargo\s+clippy|cargo\s+fmt\s+--check)\b",
    re.IGNORECASE,
)

BUILD_COMMANDS = re.compile(
    r"\b(npm\s+run\s+build|yarn\s+build|pnpm\s+build|bun\s+run\s+build|make\s+build"
    r"|go\s+build|cargo\s+build|docker\s+build|gradle\s+build|\./gradlew\s+build"
    r"|gradle\s+assemble|\./gradlew\s+assemble|mvn\s+package|mvn\s+install"
    r"|\./mvnw\s+package|\./mvnw\s+install|mvn\s+compile|python\s+-m\s+build"
    r"|poetry\s+build|uv\s+build)\b",
    re.IGNORECASE,
)

DEPLOY_KEYWORDS = re.compile(r"\b(deploy|deployment|publish|release|cd\s*:)\b", re.IGNORECASE)

DEPLOY_CONFIGS = (
    "vercel.json",
    "netlify.toml",
    "fly.toml",
    "railway.json",
    "render.yaml",
    "app.yaml",
    "serverless.yml",
    "serverless.yaml",
    "terraform",
    "pulumi",
)

BRANCH_PROTECTION = re.compile(r"branch.?protection|protected.?branch", re.IGNORECASE)
BRANCH_PROTECTION_DOCS = re.compile(
    r"branch.?protection|protected.?branch|required.?review", re.IGNORECASE
)

_MAKE_BUILD_TARGET = re.compile(r"^build\s*:", re.MULTILINE)

_criterion = functools.partial(Criterion, pillar_id=PILLAR_ID)


def _first_match(configs: list[tuple[str, str]], pattern: re.Pattern) -> Optional[str]:
    for ci_file, content in configs:
        if pattern.search(content):
            return ci_file
    return None


async def check_ci_config(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(repo_path, *CI_CONFIG_PATTERNS)
    if found:
        return CriterionResult("ci-config", True, f"CI configuration found: {found}")
    return CriterionResult(
        "ci-config",
        False,
        "No CI configuration found.",
        details="Add a CI pipeline using GitHub Actions, GitLab CI, CircleCI, or similar.",
    )


async def check_ci_runs_tests(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "ci-runs-tests"
    configs = ci_config_contents(repo_path)
    if not configs:
        return CriterionResult(cid, False, "No CI configuration found to check for test execution.")

    ci_file = _first_match(configs, TEST_COMMANDS)
    if ci_file:
        return CriterionResult(cid, True, f"CI runs tests in {ci_file}")
    return CriterionResult(
        cid,
        False,
        "CI configuration found but no test execution detected.",
        details="Add a test step to your CI pipeline to run tests automatically.",
    )


async def check_ci_runs_linters(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "ci-runs-linters"
    configs = ci_config_contents(repo_path)
    if not configs:
        return CriterionResult(
            cid, False, "No CI configuration found to check for linter execution."
        )

    ci_file = _first_match(configs, LINT_COMMANDS)
    if ci_file:
        return CriterionResult(cid, True, f"CI runs linters in {ci_file}")
    return CriterionResult(
        cid,
        False,
        "CI configuration found but no linter execution detected.",
        details="Add a lint step to your CI pipeline to enforce code quality.",
    )


async def check_build_automated(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "build-automated"
    if package_json_has(repo_path, "scripts.build"):
        return CriterionResult(cid, True, '"build" script found in package.json')

    ci_file = _first_match(ci_config_contents(repo_path), BUILD_COMMANDS)
    if ci_file:
        return CriterionResult(cid, True, f"Build step found in CI: {ci_file}")

    makefile = read_file_content(repo_path, "Makefile")
    if makefile and _MAKE_BUILD_TARGET.search(makefile):
        return CriterionResult(cid, True, '"build" target found in Makefile')

    return CriterionResult(
        cid,
        False,
        "No automated build process found.",
        details='Add a "build" script in package.json or a build step in your CI pipeline.',
    )


async def check_deploy_pipeline(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "deploy-pipeline"
    ci_file = _first_match(ci_config_contents(repo_path), DEPLOY_KEYWORDS)
    if ci_file:
        return CriterionResult(cid, True, f"Deploy stage found in {ci_file}")

    deploy_config = file_exists(repo_path, *DEPLOY_CONFIGS)
    if deploy_config:
        return CriterionResult(cid, True, f"Deploy configuration found: {deploy_config}")

    return CriterionResult(
        cid,
        False,
        "No deploy pipeline found.",
        details="Add a deploy stage to your CI or configure a deployment platform.",
    )


async def check_branch_protection(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "branch-protection"
    settings_file = file_exists(
        repo_path, ".github/branch-protection*", ".github/settings.yml", ".github/settings.yaml"
    )
    if settings_file:
        content = read_file_content(repo_path, settings_file)
        if content and BRANCH_PROTECTION.search(content):
            return CriterionResult(
                cid, True, f"Branch protection configuration found in {settings_file}"
            )

    contributing = read_file_content(repo_path, "CONTRIBUTING.md")
    if contributing and BRANCH_PROTECTION_DOCS.search(contributing):
        return CriterionResult(cid, True, "Branch protection mentioned in CONTRIBUTING.md")

    settings = read_file_content(repo_path, ".github/settings.yml")
    if settings and re.search(r"branches:", settings, re.IGNORECASE):
        return CriterionResult(cid, True, "Branch configuration found in .github/settings.yml")

    return CriterionResult(
        cid,
        False,
        "No branch protection rules documented or configured.",
        details=(
            "Document branch protection rules in CONTRIBUTING.md or configure "
            "via .github/settings.yml."
        ),
    )


CI_CD = Pillar(
    id=PILLAR_ID,
    name="CI/CD",
    description=(
        "Verifies that continuous integration and delivery pipelines are in place "
        "and comprehensive."
    ),
    icon="⚙️",
    criteria=(
        _criterion(
            id="ci-config",
            name="CI configuration present",
            description=(
                "A CI configuration file exists "
                "(GitHub Actions, GitLab CI, CircleCI, Jenkins, Travis)."
            ),
            level=2,
            check=check_ci_config,
        ),
        _criterion(
            id="ci-runs-tests",
            name="CI runs tests",
            description=(
                "The CI pipeline runs tests "
                "(jest, vitest, pytest, go test, or generic test commands)."
            ),
            level=3,
            check=check_ci_runs_tests,
        ),
        _criterion(
            id="ci-runs-linters",
            name="CI runs linters",
            description=(
                "The CI pipeline runs linting "
                "(eslint, biome, ruff, golangci-lint, or generic lint commands)."
            ),
            level=3,
            check=check_ci_runs_linters,
        ),
        _criterion(
            id="build-automated",
            name="Build automated",
            description="The build process is automated via a script or CI step.",
            level=3,
            check=check_build_automated,
        ),
        _criterion(
            id="deploy-pipeline",
            name="Deploy pipeline",
            description=(
                "A deployment pipeline or stage is configured in CI or as a "
                "dedicated deploy config."
            ),
            level=4,
            check=check_deploy_pipeline,
        ),
        _criterion(
            id="branch-protection",
            name="Branch protection awareness",
            description=(
                "Branch protection rules are mentioned in docs or configured via "
                ".github settings."
            ),
            level=4,
            check=check_branch_protection,
        ),
    ),
)
