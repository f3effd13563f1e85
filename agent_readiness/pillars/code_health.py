# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""Code Health pillar."""

from __future__ import annotations

import functools
import time
from typing import Optional

from agent_readiness.pillars.utils import (
    file_exists,
    file_mtime,
    package_json_has,
    read_file_content,
    read_json,
)
from agent_readiness.types import Criterion, CriterionResult, Evaluator, Pillar, ProjectInfo

PILLAR_ID = "code-health"

DAY_SECONDS = 24 * 60 * 60
MONTH_SECONDS = 30 * DAY_SECONDS
FRESHNESS_WINDOW = 6 * MONTH_SECONDS

# Checked in order; the first one present decides freshness
DEPENDENCY_FILES = (
    "package-lock.json",
    "bun.lockb",
    "yarn.lock",
    "pnpm-lock.yaml",
    "gradle.lockfile",
    "build.gradle.kts",
    "build.gradle",
    "poetry.lock",
    "uv.lock",
    "Pipfile.lock",
    "go.sum",
    "Cargo.lock",
)

PROJECT_MANIFESTS = (
    "package.json",
    "build.gradle.kts",
    "build.gradle",
    "pom.xml",
    "pyproject.toml",
    "go.mod",
    "Cargo.toml",
)

ESLINT_LEGACY_CONFIGS = (
    ".eslintrc",
    ".eslintrc.js",
    ".eslintrc.cjs",
    ".eslintrc.json",
    ".eslintrc.yml",
    ".eslintrc.yaml",
)

DETEKT_CONFIGS = ("detekt.yml", ".detekt.yml", "detekt-config.yml")

BUNDLE_ANALYZERS = (
    "webpack-bundle-analyzer",
    "@next/bundle-analyzer",
    "size-limit",
    "@size-limit/preset-small-lib",
    "@size-limit/preset-app",
    "bundlewatch",
    "bundlephobia",
)

_criterion = functools.partial(Criterion, pillar_id=PILLAR_ID)


async def check_no_outdated_deps(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    """Lock file modification time as a freshness heuristic.

    Skipped when the repository has no recognised project manifest at all.
    """
    cid = "no-outdated-deps"
    now = time.time()
    for dep_file in DEPENDENCY_FILES:
        mtime = file_mtime(repo_path, dep_file)
        if mtime is None:
            continue
        age = now - mtime
        if age < FRESHNESS_WINDOW:
            days = int(age / DAY_SECONDS + 0.5)
            return CriterionResult(cid, True, f"{dep_file} was modified {days} day(s) ago")
        months = int(age / MONTH_SECONDS + 0.5)
        return CriterionResult(
            cid,
            False,
            f"{dep_file} was last modified ~{months} month(s) ago",
            details=(
                "Run dependency updates regularly to avoid security vulnerabilities "
                "and incompatibilities."
            ),
        )

    if not file_exists(repo_path, *PROJECT_MANIFESTS):
        return CriterionResult(
            cid,
            True,
            "No recognized project manifest found; skipping dependency freshness check.",
            skipped=True,
        )

    return CriterionResult(
        cid,
        False,
        "Project manifest found but no lock file or recent build file detected.",
        details="Add and commit a lock file to track dependency versions.",
    )


async def check_dead_code_detection(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "dead-code-detection"

    found = file_exists(repo_path, "knip.json", "knip.ts", "knip.config.ts", ".knip.json", ".deadcode*")
    if found:
        return CriterionResult(cid, True, f"Dead code detection configured: {found}")

    for detekt_file in DETEKT_CONFIGS:
        content = read_file_content(repo_path, detekt_file)
        if content and "UnusedPrivateMember" in content:
            return CriterionResult(
                cid, True, f"detekt UnusedPrivateMember rule found in {detekt_file}"
            )

    for gradle_file in ("build.gradle.kts", "build.gradle"):
        content = read_file_content(repo_path, gradle_file)
        if content and "detekt" in content:
            return CriterionResult(
                cid, True, f"detekt configured in {gradle_file} (includes dead code detection)"
            )

    pyproject = read_file_content(repo_path, "pyproject.toml")
    if pyproject and "vulture" in pyproject:
        return CriterionResult(cid, True, "vulture dead code detection found in pyproject.toml")

    whitelist = file_exists(repo_path, ".vulture_whitelist.py", "vulture_whitelist.py")
    if whitelist:
        return CriterionResult(cid, True, f"vulture whitelist found: {whitelist}")

    cargo = read_file_content(repo_path, "Cargo.toml")
    if cargo and "cargo-udeps" in cargo:
        return CriterionResult(cid, True, "cargo-udeps configured in Cargo.toml")

    pom = read_file_content(repo_path, "pom.xml")
    if pom and ("spotbugs" in pom or "findbugs" in pom):
        return CriterionResult(
            cid, True, "SpotBugs/FindBugs found in pom.xml (includes dead code detection)"
        )

    if package_json_has(repo_path, "scripts.knip"):
        return CriterionResult(cid, True, "knip script found in package.json")

    eslint_configs = list(ESLINT_LEGACY_CONFIGS)
    flat_config = file_exists(repo_path, "eslint.config.*")
    if flat_config:
        eslint_configs.append(flat_config)
    for eslint_file in eslint_configs:
        content = read_file_content(repo_path, eslint_file)
        if content and "unused-exports" in content:
            return CriterionResult(
                cid, True, f"ESLint unused-exports plugin found in {eslint_file}"
            )

    return CriterionResult(
        cid,
        False,
        "No dead code detection tool found.",
        details=(
            "Add knip, vulture, deadcode detection, or eslint-plugin-unused-exports "
            "to find unused code."
        ),
    )


async def check_bundle_analysis(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "bundle-analysis"
    pkg = read_json(repo_path, "package.json")
    if isinstance(pkg, dict):
        all_deps = {}
        for section in ("dependencies", "devDependencies"):
            if isinstance(pkg.get(section), dict):
                all_deps.update(pkg[section])
        for analyzer in BUNDLE_ANALYZERS:
            if all_deps.get(analyzer):
                return CriterionResult(
                    cid, True, f"Bundle analyzer found in dependencies: {analyzer}"
                )

    size_limit = file_exists(repo_path, ".size-limit.json", ".size-limit.js", ".size-limit.cjs")
    if size_limit:
        return CriterionResult(cid, True, f"Size limit configuration found: {size_limit}")

    if package_json_has(repo_path, "size-limit"):
        return CriterionResult(cid, True, "size-limit configuration found in package.json")

    return CriterionResult(
        cid,
        False,
        "No bundle analysis configuration found.",
        details=(
            "Add webpack-bundle-analyzer, @next/bundle-analyzer, or size-limit "
            "to monitor bundle size."
        ),
    )


CODE_HEALTH = Pillar(
    id=PILLAR_ID,
    name="Code Health",
    description=(
        "Measures ongoing code health signals such as dependency freshness, "
        "dead code detection, and bundle analysis."
    ),
    icon="💚",
    criteria=(
        _criterion(
            id="no-outdated-deps",
            name="Dependencies recently updated",
            description=(
                "The lock file or build file was modified within the last 6 months "
                "(heuristic for freshness)."
            ),
            level=3,
            check=check_no_outdated_deps,
        ),
        _criterion(
            id="dead-code-detection",
            name="Dead code detection configured",
            description=(
                "A tool for detecting dead/unused code is configured "
                "(knip, vulture, detekt, eslint unused-exports)."
            ),
            level=4,
            check=check_dead_code_detection,
        ),
        _criterion(
            id="bundle-analysis",
            name="Bundle analysis configured",
            description=(
                "Bundle analysis or size limits are configured "
                "(webpack-bundle-analyzer, @next/bundle-analyzer, size-limit)."
            ),
            level=5,
            check=check_bundle_analysis,
        ),
    ),
)
