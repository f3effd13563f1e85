# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""Criterion catalog: the seven readiness pillars, in report order."""

from agent_readiness.pillars.ci_cd import CI_CD
from agent_readiness.pillars.code_health import CODE_HEALTH
from agent_readiness.pillars.dev_environment import DEV_ENVIRONMENT
from agent_readiness.pillars.documentation import DOCUMENTATION
from agent_readiness.pillars.security import SECURITY
from agent_readiness.pillars.style_linting import STYLE_LINTING
from agent_readiness.pillars.testing import TESTING

ALL_PILLARS = (
    STYLE_LINTING,
    TESTING,
    DOCUMENTATION,
    DEV_ENVIRONMENT,
    CI_CD,
    CODE_HEALTH,
    SECURITY,
)

__all__ = [
    "ALL_PILLARS",
    "CI_CD",
    "CODE_HEALTH",
    "DEV_ENVIRONMENT",
    "DOCUMENTATION",
    "SECURITY",
    "STYLE_LINTING",
    "TESTING",
]
