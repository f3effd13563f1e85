# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""Developer Environment pillar."""

from __future__ import annotations

import functools
import re
from typing import Optional

from agent_readiness.pillars.utils import file_exists, package_json_has, read_file_content
from agent_readiness.types import Criterion, CriterionResult, Evaluator, Pillar, ProjectInfo

PILLAR_ID = "dev-environment"

LOCK_FILES = (
    "package-lock.json",
    "bun.lockb",
    "yarn.lock",
    "pnpm-lock.yaml",
    "poetry.lock",
    "uv.lock",
    "Pipfile.lock",
    "go.sum",
    "Cargo.lock",
    "gradle.lockfile",
    "gradle/verification-metadata.xml",
)

CONTAINER_FILES = (
    "Dockerfile",
    "docker-compose.yml",
    "docker-compose.yaml",
    "compose.yml",
    "compose.yaml",
    ".devcontainer",
    "**/Dockerfile",
    "**/docker-compose.yml",
    "**/docker-compose.yaml",
)

ENV_TEMPLATES = (".env.example", ".env.template", ".env.sample")

VERSION_FILES = (
    ".nvmrc",
    ".node-version",
    ".python-version",
    ".tool-versions",
    ".mise.toml",
    "go.mod",
    ".sdkmanrc",
    ".java-version",
    "gradle.properties",
    "rust-toolchain.toml",
    "rust-toolchain",
)

_MAKE_SETUP_TARGET = re.compile(r"^(setup|install)\s*:", re.MULTILINE)

_criterion = functools.partial(Criterion, pillar_id=PILLAR_ID)


async def check_lock_file(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(repo_path, *LOCK_FILES)
    if found:
        return CriterionResult("lock-file", True, f"Lock file found: {found}")
    return CriterionResult(
        "lock-file",
        False,
        "No dependency lock file found.",
        details="Commit a lock file to ensure reproducible dependency resolution.",
    )


async def check_containerization(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(repo_path, *CONTAINER_FILES)
    if found:
        return CriterionResult("containerization", True, f"Container configuration found: {found}")
    return CriterionResult(
        "containerization",
        False,
        "No container configuration found.",
        details="Add a Dockerfile, docker-compose, or .devcontainer for reproducible environments.",
    )


async def check_env_documentation(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(repo_path, *ENV_TEMPLATES)
    if found:
        return CriterionResult(
            "env-documentation", True, f"Environment documentation found: {found}"
        )
    return CriterionResult(
        "env-documentation",
        False,
        "No environment variable documentation found.",
        details="Add a .env.example file listing all required environment variables.",
    )


async def check_setup_script(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "setup-script"
    makefile = read_file_content(repo_path, "Makefile")
    if makefile and _MAKE_SETUP_TARGET.search(makefile):
        return CriterionResult(cid, True, "Setup/install target found in Makefile")

    setup_script = file_exists(repo_path, "scripts/setup*")
    if setup_script:
        return CriterionResult(cid, True, f"Setup script found: {setup_script}")

    if file_exists(repo_path, "gradlew"):
        return CriterionResult(cid, True, "Gradle wrapper (gradlew) found as setup mechanism")
    if file_exists(repo_path, "mvnw"):
        return CriterionResult(cid, True, "Maven wrapper (mvnw) found as setup mechanism")

    if package_json_has(repo_path, "scripts.dev"):
        return CriterionResult(cid, True, '"dev" script found in package.json')

    return CriterionResult(
        cid,
        False,
        "No setup script or dev command found.",
        details=(
            "Add a Makefile with setup/install targets, scripts/setup, "
            'or a "dev" script in package.json.'
        ),
    )


async def check_version_pinned(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(repo_path, *VERSION_FILES)
    if found:
        return CriterionResult("version-pinned", True, f"Version pinning found: {found}")
    return CriterionResult(
        "version-pinned",
        False,
        "No runtime version pinning found.",
        details="Add .nvmrc, .python-version, .tool-versions, or .mise.toml to pin runtime versions.",
    )


DEV_ENVIRONMENT = Pillar(
    id=PILLAR_ID,
    name="Developer Environment",
    description=(
        "Checks that the project provides a reproducible, well-documented "
        "developer environment."
    ),
    icon="🔧",
    criteria=(
        _criterion(
            id="lock-file",
            name="Lock file present",
            description=(
                "A dependency lock file exists "
                "(package-lock.json, yarn.lock, pnpm-lock.yaml, go.sum, etc.)."
            ),
            level=1,
            check=check_lock_file,
        ),
        _criterion(
            id="containerization",
            name="Containerization",
            description=(
                "The project includes container configuration "
                "(Dockerfile, docker-compose, devcontainer)."
            ),
            level=3,
            check=check_containerization,
        ),
        _criterion(
            id="env-documentation",
            name="Environment variables documented",
            description=(
                "An .env.example, .env.template, or .env.sample file documents "
                "required environment variables."
            ),
            level=2,
            check=check_env_documentation,
        ),
        _criterion(
            id="setup-script",
            name="Setup script or dev command",
            description=(
                "A setup script or dev command is available "
                '(Makefile setup/install, scripts/setup, package.json "dev").'
            ),
            level=2,
            check=check_setup_script,
        ),
        _criterion(
            id="version-pinned",
            name="Runtime version pinned",
            description=(
                "The runtime/language version is pinned "
                "(.nvmrc, .python-version, .tool-versions, go.mod)."
            ),
            level=2,
            check=check_version_pinned,
        ),
    ),
)
