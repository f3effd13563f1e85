# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""agent-readiness — Recommendation Ranker.

Turns failed criteria into a short, ordered to-do list: fixes that
unlock the next maturity level first, then by impact, then cheapest
effort first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from agent_readiness.types import (
    MAX_RECOMMENDATIONS,
    CriterionResult,
    Effort,
    Impact,
    LevelResult,
    Pillar,
    PillarScore,
    Recommendation,
)

# ─── Advisory text per criterion id ──────────────────────────────────

CRITERION_INFO: dict[str, dict[str, str]] = {
    # Style & Linting
    "linter": {
        "description": "Add a linter like ESLint, Biome or Ruff to enforce code style and catch common mistakes",
        "reason": "Linters give agents instant feedback on style issues, preventing CI failures and reducing review churn",
    },
    "formatter": {
        "description": "Configure an auto-formatter such as Prettier, Biome, Black or Ruff so code style is applied automatically",
        "reason": "Auto-formatting removes style debates and lets agents produce consistently formatted code without guesswork",
    },
    "type-checker": {
        "description": "Enable strict type checking (e.g. strict mode in tsconfig.json, mypy, or pyright)",
        "reason": "Strict types help agents catch errors at compile time instead of at runtime, dramatically improving code reliability",
    },
    "pre-commit-hooks": {
        "description": "Set up pre-commit hooks with Husky, Lefthook, or pre-commit to run checks before every commit",
        "reason": "Pre-commit hooks provide a fast feedback loop so agents discover issues before pushing code",
    },
    "editorconfig": {
        "description": "Create an .editorconfig file to standardize indentation, line endings, and charset across editors",
        "reason": "EditorConfig ensures agents produce files with correct whitespace and encoding regardless of tooling",
    },
    "naming-conventions": {
        "description": "Establish and document consistent naming conventions for files, functions, and variables",
        "reason": "Consistent naming lets agents predict correct patterns when writing new code, reducing review friction",
    },
    # Testing
    "test-framework": {
        "description": "Configure a test framework such as Jest, Vitest, pytest, or Go testing with a config file",
        "reason": "A configured test framework lets agents write and run tests to verify their changes automatically",
    },
    "test-files-exist": {
        "description": "Add test files alongside source code following standard naming conventions (*.test.*, *.spec.*, test_*.py, *_test.go)",
        "reason": "Existing tests give agents examples to follow and a safety net to validate new code against",
    },
    "test-script": {
        "description": "Define a 'test' script in package.json or a test target in a Makefile so tests can be run with a single command",
        "reason": "A standard test command allows agents to verify changes without guessing how to run the test suite",
    },
    "coverage-config": {
        "description": "Set up code coverage reporting in your test framework configuration",
        "reason": "Coverage metrics help agents understand which parts of the codebase are well-tested and which need attention",
    },
    "e2e-tests": {
        "description": "Add end-to-end or integration tests using Playwright, Cypress, or a similar framework",
        "reason": "E2E tests give agents confidence that the whole application works correctly after changes, not just individual units",
    },
    "test-quality": {
        "description": "Improve test quality: add descriptive names, cover edge cases, and test behavior rather than implementation",
        "reason": "High-quality tests give agents confidence that their changes work correctly and don't break existing behavior",
    },
    # Documentation
    "readme": {
        "description": "Create a comprehensive README.md with project overview, setup instructions, and usage examples",
        "reason": "A good README helps agents understand the project context, conventions, and how to get started quickly",
    },
    "contributing": {
        "description": "Add a CONTRIBUTING.md with development workflow, coding standards, and PR guidelines",
        "reason": "Contributing guidelines teach agents the team's workflow so their PRs match expectations from the start",
    },
    "api-docs": {
        "description": "Add API documentation using OpenAPI/Swagger specs, JSDoc, TypeDoc, or a dedicated docs folder",
        "reason": "API docs let agents understand available endpoints, data shapes, and contracts without reading every source file",
    },
    "codeowners": {
        "description": "Create a CODEOWNERS file to define ownership for different parts of the codebase",
        "reason": "CODEOWNERS helps agents understand who to tag for reviews and which areas have strict oversight",
    },
    "ai-context": {
        "description": "Add AI context files such as CLAUDE.md, .cursorrules, or .github/copilot-instructions.md with project-specific guidance",
        "reason": "AI context files give agents tailored instructions about architecture decisions, patterns to follow, and pitfalls to avoid",
    },
    "architecture-docs": {
        "description": "Create architecture documentation (ARCHITECTURE.md or docs/adr/) describing system design and decisions",
        "reason": "Architecture docs help agents make design choices consistent with the existing system instead of guessing",
    },
    "readme-quality": {
        "description": "Improve your README content: add clear sections for installation, usage, architecture, and contributing",
        "reason": "A high-quality README gives agents rich context about the project beyond just file presence",
    },
    "docs-agent-friendliness": {
        "description": "Improve documentation to be more AI-agent-friendly: explain project structure, coding conventions, and testing patterns",
        "reason": "Agent-friendly docs help autonomous coding agents make correct changes without constant human guidance",
    },
    # Dev Environment
    "lock-file": {
        "description": "Commit a dependency lock file (package-lock.json, yarn.lock, poetry.lock, go.sum, etc.)",
        "reason": "Lock files ensure agents install the exact same dependency versions, preventing 'works on my machine' issues",
    },
    "containerization": {
        "description": "Add a Dockerfile, docker-compose.yml, or .devcontainer configuration for reproducible environments",
        "reason": "Containerization gives agents a fully reproducible environment, eliminating setup discrepancies",
    },
    "env-documentation": {
        "description": "Create a .env.example or .env.template documenting all required environment variables",
        "reason": "Environment variable documentation lets agents understand required configuration without accessing secrets",
    },
    "setup-script": {
        "description": "Add a setup script (Makefile, scripts/setup.sh, or npm run setup) to automate development environment setup",
        "reason": "A one-command setup lets agents bootstrap the project quickly and correctly every time",
    },
    "version-pinned": {
        "description": "Pin the runtime version with .nvmrc, .node-version, .python-version, .tool-versions, or .mise.toml",
        "reason": "Pinned runtime versions prevent agents from hitting version incompatibilities during execution",
    },
    # CI/CD
    "ci-config": {
        "description": "Set up a CI pipeline configuration (GitHub Actions, GitLab CI, CircleCI, or similar)",
        "reason": "CI pipelines give agents automated feedback on whether their changes pass all quality gates",
    },
    "ci-runs-tests": {
        "description": "Ensure your CI pipeline runs the test suite on every push and pull request",
        "reason": "Running tests in CI means agents get immediate feedback if their changes break existing functionality",
    },
    "ci-runs-linters": {
        "description": "Add linting and formatting checks to your CI pipeline",
        "reason": "CI lint checks catch style issues agents may miss locally, keeping the codebase consistent",
    },
    "build-automated": {
        "description": "Add an automated build step to your CI pipeline or package.json scripts",
        "reason": "An automated build step verifies that agents' changes compile and bundle correctly before merging",
    },
    "deploy-pipeline": {
        "description": "Configure a deploy pipeline or stage in your CI/CD system for automated deployments",
        "reason": "Automated deployments let agents' changes reach production safely through a controlled pipeline",
    },
    "branch-protection": {
        "description": "Document or configure branch protection rules requiring reviews and passing checks before merging",
        "reason": "Branch protection ensures agents' PRs go through proper review and validation before reaching main",
    },
    # Code Health
    "no-outdated-deps": {
        "description": "Update critically outdated dependencies to their latest stable versions",
        "reason": "Current dependencies reduce compatibility issues agents encounter and ensure security patches are applied",
    },
    "dead-code-detection": {
        "description": "Configure dead code detection using Knip, vulture, or a similar tool",
        "reason": "Dead code detection helps agents avoid modifying unused code and keeps the codebase lean",
    },
    "bundle-analysis": {
        "description": "Set up bundle analysis with webpack-bundle-analyzer, @next/bundle-analyzer, or size-limit",
        "reason": "Bundle analysis helps agents understand the impact of adding dependencies on application size",
    },
    # Security
    "security-scanning": {
        "description": "Configure security scanning with CodeQL, Snyk, Trivy, or Semgrep in your CI pipeline",
        "reason": "Security scanning catches vulnerabilities agents might introduce before they reach production",
    },
    "secrets-detection": {
        "description": "Set up secrets detection using Gitleaks, detect-secrets, or trufflehog",
        "reason": "Secrets detection prevents agents from accidentally committing API keys, tokens, or credentials",
    },
    "license": {
        "description": "Add a LICENSE file specifying the project's open-source or proprietary license",
        "reason": "A clear license file helps agents understand what code and dependencies they can use",
    },
    "security-policy": {
        "description": "Create a SECURITY.md file describing how to report vulnerabilities",
        "reason": "A security policy gives agents guidance on handling security-sensitive changes appropriately",
    },
    "dep-update-automation": {
        "description": "Configure automated dependency updates with Dependabot or Renovate",
        "reason": "Automated dependency updates keep the project current so agents work with well-maintained libraries",
    },
}

# ─── Effort per criterion id ─────────────────────────────────────────

EFFORT_MAP: dict[str, Effort] = {
    # Creating a single file
    "editorconfig": "low",
    "license": "low",
    "readme": "low",
    "contributing": "low",
    "codeowners": "low",
    "security-policy": "low",
    "ai-context": "low",
    "env-documentation": "low",
    "lock-file": "low",
    "version-pinned": "low",
    # Tool configuration
    "linter": "medium",
    "formatter": "medium",
    "type-checker": "medium",
    "pre-commit-hooks": "medium",
    "test-framework": "medium",
    "test-files-exist": "medium",
    "test-script": "medium",
    "ci-config": "medium",
    "ci-runs-tests": "medium",
    "ci-runs-linters": "medium",
    "build-automated": "medium",
    "setup-script": "medium",
    "api-docs": "medium",
    "dead-code-detection": "medium",
    "secrets-detection": "medium",
    "dep-update-automation": "medium",
    "branch-protection": "medium",
    "no-outdated-deps": "medium",
    "naming-conventions": "medium",
    # Broader setup work
    "e2e-tests": "high",
    "coverage-config": "high",
    "containerization": "high",
    "deploy-pipeline": "high",
    "security-scanning": "high",
    "architecture-docs": "high",
    "bundle-analysis": "high",
    "readme-quality": "high",
    "docs-agent-friendliness": "high",
    "test-quality": "high",
}

DEFAULT_EFFORT: Effort = "medium"

IMPACT_ORDER = {"high": 0, "medium": 1, "low": 2}
EFFORT_ORDER = {"low": 0, "medium": 1, "high": 2}


@dataclass(frozen=True)
class _FailedItem:
    pillar_id: str
    criterion_id: str
    criterion_name: str
    criterion_level: int


def determine_impact(criterion_level: int, current_level: int) -> Impact:
    """Only the exact next two levels rate above ``low``."""
    if criterion_level == current_level + 1:
        return "high"
    if criterion_level == current_level + 2:
        return "medium"
    return "low"


def _collect_failed(
    pillars: Sequence[Pillar],
    results: Mapping[str, list[CriterionResult]],
) -> list[_FailedItem]:
    failed: list[_FailedItem] = []
    for pillar in pillars:
        by_id = {}
        for r in results.get(pillar.id, []):
            by_id.setdefault(r.criterion_id, r)

        for criterion in pillar.criteria:
            result = by_id.get(criterion.id)
            if result is not None and not result.passed and not result.skipped:
                failed.append(_FailedItem(
                    pillar_id=pillar.id,
                    criterion_id=criterion.id,
                    criterion_name=criterion.name,
                    criterion_level=criterion.level,
                ))
    return failed


def _build(item: _FailedItem, current_level: int) -> Recommendation:
    info = CRITERION_INFO.get(item.criterion_id)
    if info is not None:
        description, reason = info["description"], info["reason"]
    else:
        description = (
            f'Address the failing "{item.criterion_id}" criterion to improve agent readiness'
        )
        reason = "Meeting this criterion improves the codebase's readiness for autonomous AI agents"

    return Recommendation(
        title=item.criterion_name,
        description=description,
        reason=reason,
        effort=EFFORT_MAP.get(item.criterion_id, DEFAULT_EFFORT),
        impact=determine_impact(item.criterion_level, current_level),
        pillar_id=item.pillar_id,
        criterion_id=item.criterion_id,
    )


def generate_recommendations(
    pillars: Sequence[Pillar],
    results: Mapping[str, list[CriterionResult]],
    pillar_scores: Sequence[PillarScore],
    level_result: LevelResult,
) -> list[Recommendation]:
    """Ranked remediation items for failed, non-skipped criteria.

    ``pillar_scores`` is accepted for interface symmetry with the other
    derived structures; ranking only depends on levels.
    """
    current_level = level_result.level
    next_level = current_level + 1

    failed = _collect_failed(pillars, results)
    ranked = [(item, _build(item, current_level)) for item in failed]

    # Stable sort: equal keys keep catalog order
    ranked.sort(key=lambda pair: (
        0 if pair[0].criterion_level == next_level else 1,
        IMPACT_ORDER[pair[1].impact],
        EFFORT_ORDER[pair[1].effort],
    ))

    return [rec for _, rec in ranked[:MAX_RECOMMENDATIONS]]
