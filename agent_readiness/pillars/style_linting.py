# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""Style & Linting pillar."""

from __future__ import annotations

import functools
import json
import re
from typing import Optional

from agent_readiness.pillars.utils import (
    file_exists,
    package_json_has,
    read_file_content,
    source_files,
)
from agent_readiness.types import (
    Criterion,
    CriterionResult,
    Evaluator,
    Pillar,
    ProjectInfo,
)

PILLAR_ID = "style-linting"

_criterion = functools.partial(Criterion, pillar_id=PILLAR_ID)

SOURCE_EXTENSIONS = {".ts", ".tsx", ".js", ".jsx", ".py", ".go", ".rs", ".kt", ".kts", ".java"}

GRADLE_FILES = ("build.gradle.kts", "build.gradle")

# (needle, message prefix) pairs, checked in order
GRADLE_LINTERS = (
    ("detekt", "detekt linter"),
    ("ktlint", "ktlint linter"),
    ("checkstyle", "Checkstyle"),
    ("pmd", "PMD"),
    ("spotbugs", "SpotBugs"),
)

GRADLE_FORMATTERS = (
    ("ktlint", "ktlint formatter"),
    ("ktfmt", "ktfmt formatter"),
    ("spotless", "Spotless formatter"),
    ("google-java-format", "google-java-format"),
)

STATIC_LANGS = (
    ("kotlin", "Kotlin has a built-in static type system with null safety"),
    ("go", "Go has a built-in static type system"),
    ("java", "Java has a built-in static type system"),
    ("rust", "Rust has a built-in static type system with ownership model"),
)

_JSON_COMMENTS = re.compile(r"//.*?$|/\*.*?\*/", re.MULTILINE | re.DOTALL)


async def check_linter(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "linter"
    found = file_exists(
        repo_path,
        ".eslintrc",
        ".eslintrc.*",
        "eslint.config.*",
        "biome.json",
        "biome.jsonc",
        ".ruff.toml",
        "ruff.toml",
        ".golangci.yml",
        ".golangci.yaml",
        "detekt.yml",
        ".detekt.yml",
        "detekt-config.yml",
    )
    if found:
        return CriterionResult(cid, True, f"Linter configuration found: {found}")

    pyproject = read_file_content(repo_path, "pyproject.toml")
    if pyproject and ("[tool.ruff" in pyproject or "[tool.pylint" in pyproject or "flake8" in pyproject):
        return CriterionResult(cid, True, "Python linter configured in pyproject.toml")

    for gradle_file in GRADLE_FILES:
        content = read_file_content(repo_path, gradle_file)
        if not content:
            continue
        for needle, label in GRADLE_LINTERS:
            if needle in content:
                return CriterionResult(cid, True, f"{label} configured in {gradle_file}")

    java_found = file_exists(
        repo_path, "checkstyle.xml", ".checkstyle", "pmd.xml", ".pmd", "spotbugs-exclude.xml"
    )
    if java_found:
        return CriterionResult(cid, True, f"Java linter configuration found: {java_found}")

    pom = read_file_content(repo_path, "pom.xml")
    if pom and ("checkstyle" in pom or "maven-pmd-plugin" in pom or "spotbugs" in pom):
        return CriterionResult(cid, True, "Java linter plugin found in pom.xml")

    clippy = file_exists(repo_path, "clippy.toml", ".clippy.toml")
    if clippy:
        return CriterionResult(cid, True, f"Clippy configuration found: {clippy}")

    if file_exists(repo_path, "Cargo.toml"):
        return CriterionResult(
            cid, True, "Rust project detected (clippy is built-in via cargo clippy)"
        )

    return CriterionResult(
        cid,
        False,
        "No linter configuration found.",
        details=(
            "Add ESLint, Biome, Ruff, golangci-lint, detekt, ktlint, Checkstyle, "
            "or clippy configuration to enforce code quality."
        ),
    )


async def check_formatter(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "formatter"
    prettier = file_exists(repo_path, ".prettierrc", ".prettierrc.*", "prettier.config.*")
    if prettier:
        return CriterionResult(cid, True, f"Formatter configuration found: {prettier}")

    for biome_file in ("biome.json", "biome.jsonc"):
        content = read_file_content(repo_path, biome_file)
        if content is not None:
            if "formatter" in content:
                return CriterionResult(
                    cid, True, f"Biome formatter configuration found in {biome_file}"
                )
            break

    pyproject = read_file_content(repo_path, "pyproject.toml")
    if pyproject and ("[tool.black]" in pyproject or "[tool.ruff" in pyproject):
        return CriterionResult(cid, True, "Python formatter configuration found in pyproject.toml")

    if "go" in project_info.detected_types:
        return CriterionResult(cid, True, "Go has built-in formatting via gofmt/goimports")

    rustfmt = file_exists(repo_path, "rustfmt.toml", ".rustfmt.toml")
    if rustfmt:
        return CriterionResult(cid, True, f"Rust formatter configuration found: {rustfmt}")
    if "rust" in project_info.detected_types:
        return CriterionResult(
            cid, True, "Rust project detected (rustfmt is built-in via cargo fmt)"
        )

    for gradle_file in GRADLE_FILES:
        content = read_file_content(repo_path, gradle_file)
        if not content:
            continue
        for needle, label in GRADLE_FORMATTERS:
            if needle in content:
                return CriterionResult(cid, True, f"{label} configured in {gradle_file}")

    pom = read_file_content(repo_path, "pom.xml")
    if pom and any(n in pom for n in ("spotless", "google-java-format", "formatter-maven-plugin")):
        return CriterionResult(cid, True, "Java formatter plugin found in pom.xml")

    return CriterionResult(
        cid,
        False,
        "No formatter configuration found.",
        details=(
            "Add Prettier, Biome, Black, Ruff, ktlint, ktfmt, Spotless, "
            "google-java-format, or rustfmt to enforce consistent code formatting."
        ),
    )


def _tsconfig_strict(content: str) -> bool:
    try:
        parsed = json.loads(_JSON_COMMENTS.sub("", content))
    except json.JSONDecodeError:
        return False
    options = parsed.get("compilerOptions") if isinstance(parsed, dict) else None
    return isinstance(options, dict) and options.get("strict") is True


async def check_type_checker(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "type-checker"
    for lang, message in STATIC_LANGS:
        if lang in project_info.detected_types:
            return CriterionResult(cid, True, message)

    tsconfig = read_file_content(repo_path, "tsconfig.json")
    if tsconfig and _tsconfig_strict(tsconfig):
        return CriterionResult(cid, True, "TypeScript configured with strict mode in tsconfig.json")

    mypy = file_exists(repo_path, "mypy.ini", ".mypy.ini")
    if mypy:
        return CriterionResult(cid, True, f"Type checker configuration found: {mypy}")

    setup_cfg = read_file_content(repo_path, "setup.cfg")
    if setup_cfg and "[mypy]" in setup_cfg:
        return CriterionResult(cid, True, "mypy configuration found in setup.cfg")

    pyproject = read_file_content(repo_path, "pyproject.toml")
    if pyproject and ("[tool.mypy]" in pyproject or "[tool.pyright]" in pyproject):
        return CriterionResult(cid, True, "Type checker configuration found in pyproject.toml")

    if file_exists(repo_path, "pyrightconfig.json"):
        return CriterionResult(cid, True, "Pyright configuration found: pyrightconfig.json")

    return CriterionResult(
        cid,
        False,
        "No type checker with strict mode found.",
        details="Enable TypeScript strict mode, or add mypy/pyright for Python projects.",
    )


async def check_pre_commit_hooks(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "pre-commit-hooks"
    found = file_exists(
        repo_path, ".husky", ".lefthook.yml", "lefthook.yml", ".pre-commit-config.yaml"
    )
    if found:
        return CriterionResult(cid, True, f"Pre-commit hooks configured: {found}")

    if package_json_has(repo_path, "lint-staged"):
        return CriterionResult(cid, True, "lint-staged configured in package.json")

    return CriterionResult(
        cid,
        False,
        "No pre-commit hooks found.",
        details="Add Husky, Lefthook, or pre-commit to run checks before commits.",
    )


async def check_editorconfig(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "editorconfig"
    if file_exists(repo_path, ".editorconfig"):
        return CriterionResult(cid, True, ".editorconfig found")
    return CriterionResult(
        cid,
        False,
        "No .editorconfig found.",
        details="Add an .editorconfig to standardize indentation and file encoding across editors.",
    )


async def check_naming_conventions(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "naming-conventions"
    if evaluator is None:
        return CriterionResult(cid, False, "Unable to evaluate naming conventions.")

    files = source_files(repo_path, SOURCE_EXTENSIONS)
    if not files:
        return CriterionResult(cid, False, "No source files found to evaluate.")

    snippets = ["File names:\n" + "\n".join(files[:30])]
    for f in files[:3]:
        content = read_file_content(repo_path, f)
        if content:
            snippets.append(f"--- {f} ---\n{content[:3000]}")

    verdict = await evaluator.evaluate(
        "Evaluate naming convention consistency in this codebase. Check: Are file names "
        "consistently cased (kebab-case, camelCase, PascalCase, snake_case)? Are "
        "functions/methods consistently named? Are variables descriptively named? Is there "
        "a clear pattern that an AI agent could follow when writing new code?",
        "\n\n".join(snippets),
    )
    return verdict.for_criterion(cid)


STYLE_LINTING = Pillar(
    id=PILLAR_ID,
    name="Style & Linting",
    description=(
        "Ensures the project enforces consistent code style and catches errors "
        "through static analysis."
    ),
    icon="🎨",
    criteria=(
        _criterion(
            id="linter",
            name="Linter configured",
            description=(
                "A static analysis linter is configured (ESLint, Biome, Ruff, golangci-lint, etc.)."
            ),
            level=2,
            check=check_linter,
        ),
        _criterion(
            id="formatter",
            name="Formatter configured",
            description=(
                "A code formatter is configured (Prettier, Biome formatter, Black, Ruff format)."
            ),
            level=2,
            check=check_formatter,
        ),
        _criterion(
            id="type-checker",
            name="Type checker configured",
            description=(
                "A type-checking tool is configured in strict mode "
                "(TypeScript strict, mypy, pyright)."
            ),
            level=3,
            check=check_type_checker,
        ),
        _criterion(
            id="pre-commit-hooks",
            name="Pre-commit hooks configured",
            description=(
                "Git hooks run linting/formatting before commits (Husky, Lefthook, pre-commit)."
            ),
            level=3,
            check=check_pre_commit_hooks,
        ),
        _criterion(
            id="editorconfig",
            name="EditorConfig present",
            description="An .editorconfig file is present to enforce consistent editor settings.",
            level=1,
            check=check_editorconfig,
        ),
        _criterion(
            id="naming-conventions",
            name="Naming conventions (AI)",
            description=(
                "The codebase follows consistent naming conventions for files, "
                "functions, and variables."
            ),
            level=5,
            check=check_naming_conventions,
            requires_llm=True,
        ),
    ),
)
