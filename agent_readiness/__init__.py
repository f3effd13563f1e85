"""
agent-readiness — How ready is a repository for autonomous coding agents?

Runs a catalog of pass/fail checks grouped into pillars, turns the
results into a 5-level maturity score and ranks what to fix next.
"""

__version__ = "0.3.0"

from agent_readiness.engine import AnalysisEngine  # noqa: E402

__all__ = ["AnalysisEngine", "__version__"]
