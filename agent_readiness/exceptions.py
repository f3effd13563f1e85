# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""
agent-readiness — Custom Exceptions.

Typed error hierarchy for the outer layers (config, evaluator setup).
The scoring core never raises these: check failures are turned into
failing results by the engine.
"""


class ReadinessError(Exception):
    """Base exception for all agent-readiness errors."""


class ConfigError(ReadinessError):
    """Raised when a repository config file cannot be read or written."""


class EvaluatorError(ReadinessError):
    """Raised when the external LLM evaluator is misconfigured.

    Covers unknown provider presets, missing API keys and a custom
    provider without a base URL.
    """
