# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""Filesystem helpers shared by the pillar checks."""

from __future__ import annotations

import fnmatch
import json
import os
from pathlib import Path
from typing import Any, Optional

# Directories never descended into by recursive globs
SKIP_DIRS = {
    ".git",
    "node_modules",
    "__pycache__",
    ".venv",
    "venv",
    "dist",
    "build",
    "target",
    ".next",
    ".svelte-kit",
    "vendor",
    ".pytest_cache",
    ".mypy_cache",
    ".ruff_cache",
}

CI_CONFIG_PATTERNS = (
    ".github/workflows/*.yml",
    ".github/workflows/*.yaml",
    ".gitlab-ci.yml",
    ".circleci/config.yml",
    "Jenkinsfile",
    ".travis.yml",
)

GITHUB_WORKFLOW_PATTERNS = (".github/workflows/*.yml", ".github/workflows/*.yaml")

_WILDCARDS = ("*", "?", "[")


def _is_glob(pattern: str) -> bool:
    return any(ch in pattern for ch in _WILDCARDS)


def _match_parts(path_parts: list[str], pattern_parts: list[str]) -> bool:
    """Segment-wise glob match where ``**`` spans zero or more directories."""
    if not pattern_parts:
        return not path_parts
    head, rest = pattern_parts[0], pattern_parts[1:]
    if head == "**":
        return any(_match_parts(path_parts[i:], rest) for i in range(len(path_parts) + 1))
    if not path_parts:
        return False
    return fnmatch.fnmatchcase(path_parts[0], head) and _match_parts(path_parts[1:], rest)


def _split_base(pattern: str) -> tuple[str, list[str]]:
    """Split a pattern into its literal leading directory and the rest."""
    parts = pattern.split("/")
    base: list[str] = []
    for i, part in enumerate(parts):
        if _is_glob(part) or i == len(parts) - 1:
            return "/".join(base), parts[i:]
        base.append(part)
    return "/".join(base), []


def glob_files(
    repo_path: str | Path,
    patterns: str | list[str] | tuple[str, ...],
    ignore: Optional[set[str]] = None,
) -> list[str]:
    """Repo-relative POSIX paths of files matching any pattern.

    Dotfiles are matched. Results are sorted and de-duplicated.
    """
    if isinstance(patterns, str):
        patterns = [patterns]
    root = Path(repo_path)
    skip = SKIP_DIRS if ignore is None else ignore
    found: set[str] = set()

    for pattern in patterns:
        base, rest = _split_base(pattern)
        start = root / base if base else root
        if not start.is_dir():
            continue

        recursive = "**" in rest
        for current, dirs, files in os.walk(start):
            rel_dir = Path(current).relative_to(start)
            depth = 0 if str(rel_dir) == "." else len(rel_dir.parts)
            if not recursive and depth >= len(rest) - 1:
                dirs[:] = []
            else:
                dirs[:] = [d for d in dirs if d not in skip]

            for name in files:
                rel_parts = [] if depth == 0 else list(rel_dir.parts)
                rel_parts.append(name)
                if _match_parts(rel_parts, rest):
                    full = Path(current) / name
                    found.add(full.relative_to(root).as_posix())

    return sorted(found)


def file_exists(repo_path: str | Path, *patterns: str) -> Optional[str]:
    """Return the first pattern (or glob match) present in the repo.

    Literal patterns match files or directories; glob patterns only
    match files.
    """
    root = Path(repo_path)
    for pattern in patterns:
        if _is_glob(pattern):
            matches = glob_files(root, pattern)
            if matches:
                return matches[0]
        elif (root / pattern).exists():
            return pattern
    return None


def read_file_content(repo_path: str | Path, file_path: str) -> Optional[str]:
    """Read a repo file as text. Returns None if it cannot be read."""
    try:
        return (Path(repo_path) / file_path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


def read_json(repo_path: str | Path, file_path: str) -> Optional[Any]:
    content = read_file_content(repo_path, file_path)
    if content is None:
        return None
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        return None


def package_json_has(repo_path: str | Path, key: str) -> bool:
    """True if the dotted ``key`` exists in package.json."""
    node: Any = read_json(repo_path, "package.json")
    if node is None:
        return False
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return False
        node = node[part]
    return node is not None


def file_mtime(repo_path: str | Path, file_path: str) -> Optional[float]:
    """Modification time in seconds since the epoch, or None."""
    try:
        return (Path(repo_path) / file_path).stat().st_mtime
    except OSError:
        return None


def ci_config_contents(repo_path: str | Path) -> list[tuple[str, str]]:
    """(file, content) for every CI configuration file in the repo."""
    configs: list[tuple[str, str]] = []
    for ci_file in glob_files(repo_path, list(CI_CONFIG_PATTERNS)):
        content = read_file_content(repo_path, ci_file)
        if content:
            configs.append((ci_file, content))
    return configs


def workflow_contents(repo_path: str | Path) -> list[tuple[str, str]]:
    """(file, content) for GitHub Actions workflows only."""
    configs: list[tuple[str, str]] = []
    for wf in glob_files(repo_path, list(GITHUB_WORKFLOW_PATTERNS)):
        content = read_file_content(repo_path, wf)
        if content:
            configs.append((wf, content))
    return configs


def source_files(repo_path: str | Path, extensions: set[str]) -> list[str]:
    """Repo-relative source files with one of ``extensions``."""
    root = Path(repo_path)
    files: list[str] = []
    for current, dirs, names in os.walk(root):
        dirs[:] = sorted(d for d in dirs if d not in SKIP_DIRS)
        for name in sorted(names):
            if Path(name).suffix in extensions:
                files.append((Path(current) / name).relative_to(root).as_posix())
    return files
