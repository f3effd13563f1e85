# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""Security pillar."""

from __future__ import annotations

import functools
import re
from typing import Optional

from agent_readiness.pillars.utils import file_exists, read_file_content, workflow_contents
from agent_readiness.types import Criterion, CriterionResult, Evaluator, Pillar, ProjectInfo

PILLAR_ID = "security"

LICENSE_FILES = ("LICENSE", "LICENSE.md", "LICENSE.txt", "LICENCE", "LICENCE.md", "LICENCE.txt")

SCANNERS = re.compile(
    r"\b(codeql|snyk|trivy|semgrep|sonarqube|sonarcloud|dependabot|bandit|pip-audit"
    r"|security[_-]scan|sast)\b",
    re.IGNORECASE,
)

SECRET_SCANNERS = re.compile(r"\b(gitleaks|detect-secrets|trufflehog|git-secrets)\b", re.IGNORECASE)

DEPENDENCY_BOTS = (
    ".github/dependabot.yml",
    ".github/dependabot.yaml",
    "renovate.json",
    ".renovaterc",
    ".renovaterc.json",
)

_criterion = functools.partial(Criterion, pillar_id=PILLAR_ID)


async def check_license(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(repo_path, *LICENSE_FILES)
    if found:
        return CriterionResult("license", True, f"License file found: {found}")
    return CriterionResult(
        "license",
        False,
        "No license file found.",
        details="Add a LICENSE file to clarify how the code can be used and distributed.",
    )


async def check_security_scanning(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "security-scanning"
    for wf, content in workflow_contents(repo_path):
        if SCANNERS.search(content):
            return CriterionResult(cid, True, f"Security scanning found in CI: {wf}")

    if file_exists(repo_path, ".snyk"):
        return CriterionResult(cid, True, "Snyk configuration found: .snyk")

    gitlab_ci = read_file_content(repo_path, ".gitlab-ci.yml")
    if gitlab_ci and SCANNERS.search(gitlab_ci):
        return CriterionResult(cid, True, "Security scanning found in .gitlab-ci.yml")

    return CriterionResult(
        cid,
        False,
        "No security scanning configured in CI.",
        details="Add CodeQL, Snyk, Trivy, or Semgrep to your CI pipeline for vulnerability scanning.",
    )


async def check_secrets_detection(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "secrets-detection"
    if file_exists(repo_path, ".gitleaks.toml"):
        return CriterionResult(cid, True, "Gitleaks configuration found: .gitleaks.toml")

    precommit = read_file_content(repo_path, ".pre-commit-config.yaml")
    if precommit and ("detect-secrets" in precommit or "gitleaks" in precommit):
        return CriterionResult(cid, True, "Secrets detection hook found in .pre-commit-config.yaml")

    for wf, content in workflow_contents(repo_path):
        if SECRET_SCANNERS.search(content):
            return CriterionResult(cid, True, f"Secrets detection found in CI: {wf}")

    return CriterionResult(
        cid,
        False,
        "No secrets detection tool configured.",
        details="Add gitleaks, detect-secrets, or trufflehog to prevent secrets from being committed.",
    )


async def check_security_policy(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(repo_path, "SECURITY.md", ".github/SECURITY.md")
    if found:
        return CriterionResult("security-policy", True, f"Security policy found: {found}")
    return CriterionResult(
        "security-policy",
        False,
        "No security policy found.",
        details="Add a SECURITY.md to document how to report security vulnerabilities.",
    )


async def check_dep_update_automation(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(repo_path, *DEPENDENCY_BOTS)
    if found:
        return CriterionResult(
            "dep-update-automation", True, f"Dependency update automation found: {found}"
        )
    return CriterionResult(
        "dep-update-automation",
        False,
        "No dependency update automation found.",
        details="Add Dependabot or Renovate to automatically keep dependencies up to date.",
    )


SECURITY = Pillar(
    id=PILLAR_ID,
    name="Security",
    description=(
        "Evaluates the project's security posture including licensing, "
        "vulnerability scanning, and secret detection."
    ),
    icon="🔒",
    criteria=(
        _criterion(
            id="license",
            name="License file present",
            description="A LICENSE file exists in the repository root.",
            level=1,
            check=check_license,
        ),
        _criterion(
            id="security-scanning",
            name="Security scanning in CI",
            description="CI workflows include security scanning tools (CodeQL, Snyk, Trivy, Semgrep).",
            level=4,
            check=check_security_scanning,
        ),
        _criterion(
            id="secrets-detection",
            name="Secrets detection configured",
            description="A secrets detection tool is configured (gitleaks, detect-secrets, or similar).",
            level=4,
            check=check_secrets_detection,
        ),
        _criterion(
            id="security-policy",
            name="Security policy",
            description="A SECURITY.md file exists outlining the security disclosure process.",
            level=3,
            check=check_security_policy,
        ),
        _criterion(
            id="dep-update-automation",
            name="Dependency update automation",
            description="Automated dependency updates are configured (Dependabot, Renovate).",
            level=3,
            check=check_dep_update_automation,
        ),
    ),
)
