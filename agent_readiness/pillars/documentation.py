# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""Documentation pillar.

Covers both human-facing docs (README, contributing guide, ADRs) and the
context files coding agents read before touching a repository.
"""

from __future__ import annotations

import functools
from typing import Optional

from agent_readiness.pillars.utils import file_exists, glob_files, read_file_content
from agent_readiness.types import Criterion, CriterionResult, Evaluator, Pillar, ProjectInfo

PILLAR_ID = "documentation"

README_NAMES = ("README.md", "readme.md", "Readme.md")
README_MIN_CHARS = 500

DOC_FILE_PATTERNS = [
    "README.md",
    "CONTRIBUTING.md",
    "CLAUDE.md",
    ".cursorrules",
    "docs/**/*.md",
    "ARCHITECTURE.md",
]

_criterion = functools.partial(Criterion, pillar_id=PILLAR_ID)


async def check_readme(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "readme"
    found = file_exists(repo_path, *README_NAMES)
    if not found:
        return CriterionResult(
            cid,
            False,
            "No README.md found.",
            details="Add a README.md with project overview, setup instructions, and usage.",
        )

    content = read_file_content(repo_path, found) or ""
    if len(content) > README_MIN_CHARS:
        return CriterionResult(cid, True, f"README.md found with {len(content)} characters")
    return CriterionResult(
        cid,
        False,
        f"README.md found but has only {len(content)} characters (needs >{README_MIN_CHARS}).",
        details="Expand your README with project overview, setup instructions, and usage examples.",
    )


async def check_contributing(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(repo_path, "CONTRIBUTING.md", "docs/contributing*")
    if found:
        return CriterionResult("contributing", True, f"Contributing guide found: {found}")
    return CriterionResult(
        "contributing",
        False,
        "No contributing guide found.",
        details="Add a CONTRIBUTING.md to document how to contribute to the project.",
    )


async def check_api_docs(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(
        repo_path, "openapi.*", "swagger.*", "docs/api*", "jsdoc.json", "typedoc.json"
    )
    if found:
        return CriterionResult("api-docs", True, f"API documentation found: {found}")
    return CriterionResult(
        "api-docs",
        False,
        "No API documentation found.",
        details="Add OpenAPI/Swagger specs, JSDoc/TypeDoc config, or a docs/api directory.",
    )


async def check_codeowners(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(repo_path, "CODEOWNERS", ".github/CODEOWNERS")
    if found:
        return CriterionResult("codeowners", True, f"CODEOWNERS found: {found}")
    return CriterionResult(
        "codeowners",
        False,
        "No CODEOWNERS file found.",
        details="Add a CODEOWNERS file to assign ownership of different parts of the codebase.",
    )


async def check_ai_context(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(
        repo_path,
        "CLAUDE.md",
        "AGENTS.md",
        ".cursor/rules",
        ".cursorrules",
        ".github/copilot-instructions.md",
    )
    if found:
        return CriterionResult("ai-context", True, f"AI context file found: {found}")
    return CriterionResult(
        "ai-context",
        False,
        "No AI context files found.",
        details=(
            "Add CLAUDE.md, AGENTS.md, .cursorrules, or .github/copilot-instructions.md "
            "to provide context for AI agents."
        ),
    )


async def check_architecture_docs(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    found = file_exists(repo_path, "docs/architecture*", "docs/adr/*", "ARCHITECTURE.md")
    if found:
        return CriterionResult(
            "architecture-docs", True, f"Architecture documentation found: {found}"
        )
    return CriterionResult(
        "architecture-docs",
        False,
        "No architecture documentation found.",
        details=(
            "Add docs/architecture, docs/adr, or ARCHITECTURE.md to document "
            "high-level design decisions."
        ),
    )


async def check_readme_quality(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "readme-quality"
    readme = file_exists(repo_path, *README_NAMES)
    if not readme:
        return CriterionResult(cid, False, "No README.md found to evaluate.")

    content = read_file_content(repo_path, readme)
    if not content or evaluator is None:
        return CriterionResult(cid, False, "Unable to evaluate README quality.")

    verdict = await evaluator.evaluate(
        "Evaluate this README for quality. A good README should cover: project "
        "overview/purpose, installation/setup instructions, usage examples, and how to "
        "contribute. Does it have clear structure with headings? Is it helpful for someone "
        "new to the project? Is it useful for an AI coding agent trying to understand the "
        "project?",
        content[:8000],
    )
    return verdict.for_criterion(cid)


async def check_docs_agent_friendliness(
    repo_path: str, project_info: ProjectInfo, evaluator: Optional[Evaluator] = None
) -> CriterionResult:
    cid = "docs-agent-friendliness"
    if evaluator is None:
        return CriterionResult(cid, False, "Unable to evaluate documentation agent-friendliness.")

    doc_files = glob_files(repo_path, DOC_FILE_PATTERNS)
    if not doc_files:
        return CriterionResult(cid, False, "No documentation files found to evaluate.")

    snippets = []
    for f in doc_files[:5]:
        content = read_file_content(repo_path, f)
        if content:
            snippets.append(f"--- {f} ---\n{content[:3000]}")

    verdict = await evaluator.evaluate(
        "Evaluate these documentation files for AI-agent-friendliness. Good agent-friendly "
        "docs should: explain project structure, describe key abstractions, specify coding "
        "conventions, note testing patterns, and provide context that helps an AI agent "
        "make correct changes. Are these docs sufficient for an autonomous coding agent to "
        "work on this project effectively?",
        "\n\n".join(snippets),
    )
    return verdict.for_criterion(cid)


DOCUMENTATION = Pillar(
    id=PILLAR_ID,
    name="Documentation",
    description=(
        "Assesses the quality and breadth of project documentation for both "
        "humans and AI agents."
    ),
    icon="📚",
    criteria=(
        _criterion(
            id="readme",
            name="README with substance",
            description=(
                "A README.md exists and has meaningful content (more than 500 characters)."
            ),
            level=1,
            check=check_readme,
        ),
        _criterion(
            id="contributing",
            name="Contributing guide",
            description=(
                "A CONTRIBUTING.md or docs/contributing guide exists to help new contributors."
            ),
            level=2,
            check=check_contributing,
        ),
        _criterion(
            id="api-docs",
            name="API documentation",
            description=(
                "API documentation exists (OpenAPI/Swagger specs, JSDoc/TypeDoc config, docs/api)."
            ),
            level=3,
            check=check_api_docs,
        ),
        _criterion(
            id="codeowners",
            name="CODEOWNERS defined",
            description="A CODEOWNERS file is present to define ownership of code areas.",
            level=3,
            check=check_codeowners,
        ),
        _criterion(
            id="ai-context",
            name="AI context files",
            description=(
                "AI-specific context files exist "
                "(CLAUDE.md, AGENTS.md, .cursor/rules, copilot-instructions.md)."
            ),
            level=3,
            check=check_ai_context,
        ),
        _criterion(
            id="architecture-docs",
            name="Architecture documentation",
            description=(
                "Architecture documentation or ADRs exist "
                "(docs/architecture, docs/adr, ARCHITECTURE.md)."
            ),
            level=4,
            check=check_architecture_docs,
        ),
        _criterion(
            id="readme-quality",
            name="README quality (AI)",
            description=(
                "The README effectively communicates project purpose, setup, usage, "
                "and contributing guidelines."
            ),
            level=5,
            requires_llm=True,
            check=check_readme_quality,
        ),
        _criterion(
            id="docs-agent-friendliness",
            name="Documentation agent-friendliness (AI)",
            description=(
                "Documentation is structured and detailed enough for AI agents to "
                "understand the codebase."
            ),
            level=5,
            requires_llm=True,
            check=check_docs_agent_friendliness,
        ),
    ),
)
