# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""agent-readiness — Project Detection.

Works out which ecosystems a repository uses and whether it is a
monorepo, from marker files only. Nothing is executed.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Optional

import yaml

from agent_readiness.pillars.utils import glob_files, read_file_content, read_json
from agent_readiness.types import ProjectInfo

logger = logging.getLogger("agent_readiness.detector")

# (type, marker files) in reporting order; one marker per type is enough
TYPE_INDICATORS = (
    ("node", ("package.json",)),
    ("python", ("pyproject.toml", "setup.py", "requirements.txt")),
    ("go", ("go.mod",)),
    ("rust", ("Cargo.toml",)),
    ("kotlin", ("build.gradle.kts",)),
    ("java", ("pom.xml", "build.gradle")),
)

_GRADLE_KOTLIN = re.compile(r"\bkotlin\s*\(|id\s+['\"]kotlin")

_TRAILING_WILDCARD = re.compile(r"/?\*?$")


def detect_types(repo_path: str | Path) -> list[str]:
    root = Path(repo_path)
    detected: list[str] = []
    for project_type, markers in TYPE_INDICATORS:
        if any((root / m).exists() for m in markers) and project_type not in detected:
            detected.append(project_type)

    if "kotlin" not in detected:
        gradle = read_file_content(root, "build.gradle")
        if gradle and (
            "org.jetbrains.kotlin" in gradle
            or "kotlin-android" in gradle
            or "kotlin-jvm" in gradle
            or _GRADLE_KOTLIN.search(gradle)
        ):
            detected.append("kotlin")

    if "kotlin" not in detected:
        pom = read_file_content(root, "pom.xml")
        if pom and ("kotlin-maven-plugin" in pom or "org.jetbrains.kotlin" in pom):
            detected.append("kotlin")

    return detected


def resolve_workspace_globs(repo_path: str | Path, patterns: list[str]) -> list[str]:
    """Workspace patterns to the sorted package directories they cover.

    Only directories holding a ``package.json`` count as packages. Each
    pattern is tried both as a parent (``packages/*``) and as a concrete
    package path (``packages/foo``).
    """
    candidates: list[str] = []
    for pattern in patterns:
        cleaned = _TRAILING_WILDCARD.sub("", str(pattern), count=1)
        candidates.append(f"{cleaned}/*/package.json")
        candidates.append(f"{cleaned}/package.json")

    matches = glob_files(repo_path, candidates)
    return sorted({Path(m).parent.as_posix() for m in matches})


def _read_yaml(path: Path) -> Optional[Any]:
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.debug("Could not parse %s: %s", path, e)
        return None


def _string_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    return []


def detect_monorepo(repo_path: str | Path) -> tuple[bool, list[str]]:
    """Return ``(is_monorepo, packages)``.

    Sources are tried in order: npm/yarn workspaces, pnpm, Lerna, Nx,
    Turborepo. The first match wins.
    """
    root = Path(repo_path)

    pkg = read_json(root, "package.json")
    if isinstance(pkg, dict) and pkg.get("workspaces"):
        workspaces = pkg["workspaces"]
        if isinstance(workspaces, dict):
            patterns = _string_list(workspaces.get("packages"))
        else:
            patterns = _string_list(workspaces)
        if patterns:
            return True, resolve_workspace_globs(root, patterns)

    pnpm = root / "pnpm-workspace.yaml"
    if pnpm.exists():
        config = _read_yaml(pnpm)
        patterns = _string_list(config.get("packages")) if isinstance(config, dict) else []
        if patterns:
            return True, resolve_workspace_globs(root, patterns)
        # The file alone marks a monorepo
        return True, []

    if (root / "lerna.json").exists():
        lerna = read_json(root, "lerna.json")
        patterns = ["packages/*"]
        if isinstance(lerna, dict) and "packages" in lerna:
            patterns = _string_list(lerna["packages"])
        return True, resolve_workspace_globs(root, patterns)

    if (root / "nx.json").exists():
        return True, resolve_workspace_globs(root, ["packages", "apps", "libs"])

    if (root / "turbo.json").exists():
        return True, resolve_workspace_globs(root, ["packages", "apps"])

    return False, []


def detect_project(repo_path: str | Path) -> ProjectInfo:
    root = Path(repo_path).resolve()
    is_monorepo, packages = detect_monorepo(root)
    info = ProjectInfo(
        detected_types=detect_types(root),
        is_monorepo=is_monorepo,
        packages=packages,
    )
    logger.debug(
        "Detected %s (monorepo=%s, %d packages)",
        info.detected_types or "no known types",
        info.is_monorepo,
        len(info.packages),
    )
    return info
