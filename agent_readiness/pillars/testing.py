# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""Testing pillar."""

from __future__ import annotations

import functools
import re
from typing import Optional

from agent_readiness.pillars.utils import (
    GITHUB_WORKFLOW_PATTERNS,
    file_exists,
    glob_files,
    package_json_has,
    read_file_content,
)
from agent_readiness.types import Criterion, CriterionResult, Evaluator, Pillar, ProjectInfo

PILLAR_ID = "testing"

TEST_FILE_PATTERNS = ["**/*.test.*", "**/*.spec.*", "**/test_*.py", "**/*_test.go"]

_MAKE_TEST_TARGET = re.compile(r"^test\s*:", re.MULTILINE)

_criterion = functools.partial(Criterion, pillar_id=PILLAR_ID)


async def check_test_framework(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "test-framework"
    found = file_exists(repo_path, "jest.config.*", "vitest.config.*", "pytest.ini", "conftest.py")
    if found:
        return CriterionResult(cid, True, f"Test framework configuration found: {found}")

    go_tests = glob_files(repo_path, "**/*_test.go")
    if go_tests:
        return CriterionResult(cid, True, f"Go test files found ({len(go_tests)} files)")

    pyproject = read_file_content(repo_path, "pyproject.toml")
    if pyproject and "[tool.pytest" in pyproject:
        return CriterionResult(cid, True, "pytest configuration found in pyproject.toml")

    return CriterionResult(
        cid,
        False,
        "No test framework configuration found.",
        details="Set up Jest, Vitest, pytest, or Go testing to enable automated testing.",
    )


async def check_test_files_exist(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "test-files-exist"
    test_files = glob_files(repo_path, TEST_FILE_PATTERNS)
    if test_files:
        return CriterionResult(
            cid,
            True,
            f"Found {len(test_files)} test file(s)",
            details=", ".join(test_files[:10]),
        )
    return CriterionResult(
        cid,
        False,
        "No test files found.",
        details=(
            "Add test files following naming conventions: "
            "*.test.ts, *.spec.ts, test_*.py, *_test.go."
        ),
    )


async def check_test_script(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "test-script"
    if package_json_has(repo_path, "scripts.test"):
        return CriterionResult(cid, True, '"test" script found in package.json')

    makefile = read_file_content(repo_path, "Makefile")
    if makefile and _MAKE_TEST_TARGET.search(makefile):
        return CriterionResult(cid, True, '"test" target found in Makefile')

    return CriterionResult(
        cid,
        False,
        "No test script or target found.",
        details='Add a "test" script in package.json or a "test" target in Makefile.',
    )


async def check_coverage_config(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "coverage-config"
    found = file_exists(repo_path, ".coveragerc", ".nycrc", ".nycrc.*")
    if found:
        return CriterionResult(cid, True, f"Coverage configuration found: {found}")

    for pattern in ("jest.config.*", "vitest.config.*"):
        config_file = file_exists(repo_path, pattern)
        if config_file:
            content = read_file_content(repo_path, config_file)
            if content and "coverage" in content:
                return CriterionResult(cid, True, f"Coverage configured in {config_file}")

    for ci_file in glob_files(repo_path, list(GITHUB_WORKFLOW_PATTERNS)):
        content = read_file_content(repo_path, ci_file)
        if content and "coverage" in content:
            return CriterionResult(cid, True, f"Coverage mentioned in CI config: {ci_file}")

    return CriterionResult(
        cid,
        False,
        "No coverage configuration found.",
        details="Configure test coverage reporting in your test framework or CI pipeline.",
    )


async def check_e2e_tests(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "e2e-tests"
    found = file_exists(
        repo_path,
        "playwright.config.*",
        "cypress.config.*",
        "cypress",
        "e2e",
        "tests/e2e",
        "integration",
    )
    if found:
        return CriterionResult(cid, True, f"E2E / integration testing found: {found}")
    return CriterionResult(
        cid,
        False,
        "No E2E or integration test setup found.",
        details="Add Playwright, Cypress, or an e2e/integration directory for higher-level tests.",
    )


async def check_test_quality(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "test-quality"
    if evaluator is None:
        return CriterionResult(cid, False, "Unable to evaluate test quality.")

    test_files = glob_files(repo_path, TEST_FILE_PATTERNS)
    if not test_files:
        return CriterionResult(cid, False, "No test files found to evaluate quality.")

    snippets = []
    for f in test_files[:3]:
        content = read_file_content(repo_path, f)
        if content:
            snippets.append(f"--- {f} ---\n{content[:4000]}")

    verdict = await evaluator.evaluate(
        "Evaluate the quality of these test files. Good tests should: test meaningful "
        "behavior (not just implementation details), have descriptive test names, cover "
        "both happy path and error cases, be readable and maintainable, and avoid "
        "excessive mocking. Are these tests sufficient for an AI agent to confidently "
        "make changes and verify correctness?",
        "\n\n".join(snippets),
    )
    return verdict.for_criterion(cid)


TESTING = Pillar(
    id=PILLAR_ID,
    name="Testing",
    description="Evaluates the presence, breadth, and automation of the project's test suite.",
    icon="🧪",
    criteria=(
        _criterion(
            id="test-framework",
            name="Test framework configured",
            description=(
                "A test framework is installed and configured (Jest, Vitest, pytest, Go testing)."
            ),
            level=2,
            check=check_test_framework,
        ),
        _criterion(
            id="test-files-exist",
            name="Test files exist",
            description=(
                "The project contains actual test files "
                "(.test.*, .spec.*, test_*.py, *_test.go)."
            ),
            level=2,
            check=check_test_files_exist,
        ),
        _criterion(
            id="test-script",
            name="Test script defined",
            description='A "test" script is defined in package.json or a test target in Makefile.',
            level=2,
            check=check_test_script,
        ),
        _criterion(
            id="coverage-config",
            name="Coverage configured",
            description=(
                "Test coverage reporting is configured "
                "(coverage in Jest/Vitest, .coveragerc, .nycrc)."
            ),
            level=4,
            check=check_coverage_config,
        ),
        _criterion(
            id="e2e-tests",
            name="E2E / integration tests",
            description=(
                "End-to-end or integration tests are configured "
                "(Playwright, Cypress, e2e directories)."
            ),
            level=4,
            check=check_e2e_tests,
        ),
        _criterion(
            id="test-quality",
            name="Test quality (AI)",
            description=(
                "Tests are meaningful, well-structured, and provide good coverage "
                "of key functionality."
            ),
            level=5,
            requires_llm=True,
            check=check_test_quality,
        ),
    ),
)
