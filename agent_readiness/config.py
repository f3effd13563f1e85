# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""
agent-readiness — Configuration.

Process-wide settings come from environment variables; per-repository
toggles come from ``.agent-readiness.yml`` at the repository root.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml

from agent_readiness.exceptions import ConfigError
from agent_readiness.types import LEVEL_THRESHOLD, Pillar

logger = logging.getLogger("agent_readiness.config")

CONFIG_FILENAMES = (".agent-readiness.yml", ".agent-readiness.yaml")

# ─── Environment ─────────────────────────────────────────────────────

LLM_PROVIDER = os.environ.get("AGENT_READINESS_LLM_PROVIDER", "openai")
LLM_MODEL = os.environ.get("AGENT_READINESS_LLM_MODEL", "")  # Override preset model
LLM_BASE_URL = os.environ.get("AGENT_READINESS_LLM_BASE_URL", "")  # For 'custom' provider
API_KEY = os.environ.get("AGENT_READINESS_API_KEY", "")
LLM_TIMEOUT = float(os.environ.get("AGENT_READINESS_LLM_TIMEOUT", "60"))
LOG_LEVEL = os.environ.get("AGENT_READINESS_LOG_LEVEL", "WARNING")


def reload() -> None:
    """Re-read the environment into the module-level settings."""
    global LLM_PROVIDER, LLM_MODEL, LLM_BASE_URL, API_KEY, LLM_TIMEOUT, LOG_LEVEL
    LLM_PROVIDER = os.environ.get("AGENT_READINESS_LLM_PROVIDER", "openai")
    LLM_MODEL = os.environ.get("AGENT_READINESS_LLM_MODEL", "")
    LLM_BASE_URL = os.environ.get("AGENT_READINESS_LLM_BASE_URL", "")
    API_KEY = os.environ.get("AGENT_READINESS_API_KEY", "")
    LLM_TIMEOUT = float(os.environ.get("AGENT_READINESS_LLM_TIMEOUT", "60"))
    LOG_LEVEL = os.environ.get("AGENT_READINESS_LOG_LEVEL", "WARNING")


# ─── Repository config ───────────────────────────────────────────────


@dataclass
class RepoConfig:
    """Toggles and AI settings read from the repository's config file."""

    pillars: dict[str, bool] = field(default_factory=dict)
    criteria: dict[str, bool] = field(default_factory=dict)
    thresholds: dict[str, float] = field(default_factory=dict)
    ai_enabled: bool = False
    api_key: Optional[str] = None
    api_base_url: Optional[str] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    source: Optional[str] = None  # File the values came from


def _toggles(raw: Any, section: str, path: Path) -> dict[str, bool]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring '%s' in %s: expected a mapping", section, path)
        return {}
    return {str(k): bool(v) for k, v in raw.items() if v is not None}


def _thresholds(raw: Any, path: Path) -> dict[str, float]:
    if not isinstance(raw, dict):
        return {}
    out: dict[str, float] = {}
    for key, value in raw.items():
        try:
            out[str(key)] = float(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring threshold %s=%r in %s", key, value, path)
    return out


def _optional_str(raw: Any) -> Optional[str]:
    return str(raw) if raw not in (None, "") else None


def parse_repo_config(data: Any, path: Path) -> RepoConfig:
    if data is None:
        return RepoConfig(source=str(path))
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    return RepoConfig(
        pillars=_toggles(data.get("pillars"), "pillars", path),
        criteria=_toggles(data.get("criteria"), "criteria", path),
        thresholds=_thresholds(data.get("thresholds"), path),
        ai_enabled=bool(data.get("aiEnabled", False)),
        api_key=_optional_str(data.get("apiKey")),
        api_base_url=_optional_str(data.get("apiBaseUrl")),
        provider=_optional_str(data.get("provider")),
        model=_optional_str(data.get("model")),
        source=str(path),
    )


def find_config_file(repo_path: str | Path) -> Optional[Path]:
    for name in CONFIG_FILENAMES:
        candidate = Path(repo_path) / name
        if candidate.is_file():
            return candidate
    return None


def load_repo_config(repo_path: str | Path) -> RepoConfig:
    """Load the repository config, or defaults.

    A missing file is normal. An unreadable or malformed file is logged
    as a warning and the defaults are used instead.
    """
    path = find_config_file(repo_path)
    if path is None:
        return RepoConfig()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return parse_repo_config(data, path)
    except (OSError, UnicodeDecodeError, yaml.YAMLError, ConfigError) as e:
        logger.warning("Failed to parse config file %s: %s", path, e)
        return RepoConfig()


def filter_pillars(pillars: Sequence[Pillar], cfg: RepoConfig) -> list[Pillar]:
    """Drop pillars and criteria toggled ``false``. Input is left untouched."""
    filtered: list[Pillar] = []
    for pillar in pillars:
        if cfg.pillars.get(pillar.id) is False:
            continue
        criteria = tuple(c for c in pillar.criteria if cfg.criteria.get(c.id) is not False)
        if len(criteria) == len(pillar.criteria):
            filtered.append(pillar)
        else:
            filtered.append(dataclasses.replace(pillar, criteria=criteria))
    return filtered


def level_threshold(cfg: RepoConfig) -> float:
    """Pass share required per level: ``thresholds.level-pass`` if sane."""
    value = cfg.thresholds.get("level-pass")
    if value is not None and 0 < value <= 1:
        return value
    return LEVEL_THRESHOLD


# ─── Template ────────────────────────────────────────────────────────


def generate_default_config(pillars: Optional[Sequence[Pillar]] = None) -> str:
    """Commented YAML template listing every pillar and criterion."""
    if pillars is None:
        from agent_readiness.pillars import ALL_PILLARS
        pillars = ALL_PILLARS

    lines = [
        "# ──────────────────────────────────────────────────────────────",
        "# Agent-Readiness configuration",
        "# Place this file at the root of your repository as",
        "#   .agent-readiness.yml   or   .agent-readiness.yaml",
        "# ──────────────────────────────────────────────────────────────",
        "",
        "# ── Pillars ──────────────────────────────────────────────────",
        "# Toggle entire assessment pillars on or off.",
        "# Set a pillar to false to skip all of its criteria.",
        "pillars:",
    ]
    lines += [f"  {p.id}: true" for p in pillars]
    lines += [
        "",
        "# ── Criteria ─────────────────────────────────────────────────",
        "# Fine-grained toggles for individual criteria.",
        "# Set a criterion to false to skip it during assessment.",
        "criteria:",
    ]
    for i, pillar in enumerate(pillars):
        if i:
            lines.append("")
        lines.append(f"  # {pillar.name}")
        lines += [f"  {c.id}: true" for c in pillar.criteria]
    lines += [
        "",
        "# ── Thresholds ───────────────────────────────────────────────",
        "# Share of a level's criteria that must pass (0 < value <= 1).",
        "thresholds:",
        f"  # level-pass: {LEVEL_THRESHOLD}",
        "",
        "# ── AI Settings ──────────────────────────────────────────────",
        "# When AI is enabled, criteria marked (AI) ask an LLM for a",
        "# qualitative verdict (e.g. README quality).",
        "# aiEnabled: false",
        "# provider: openai     # Or set AGENT_READINESS_LLM_PROVIDER",
        '# model: ""           # Defaults to the provider preset',
        '# apiKey: ""          # Or set AGENT_READINESS_API_KEY',
        '# apiBaseUrl: ""      # Custom OpenAI-compatible endpoint',
        "",
    ]
    return "\n".join(lines)


def write_default_config(repo_path: str | Path) -> Path:
    """Write the template to ``<repo>/.agent-readiness.yml``.

    Raises:
        ConfigError: if a config file already exists or cannot be written.
    """
    existing = find_config_file(repo_path)
    if existing is not None:
        raise ConfigError(f"Config file already exists: {existing}")

    target = Path(repo_path) / CONFIG_FILENAMES[0]
    try:
        target.write_text(generate_default_config(), encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Could not write {target}: {e}") from e
    logger.info("Wrote default config to %s", target)
    return target
