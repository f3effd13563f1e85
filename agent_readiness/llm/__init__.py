"""agent-readiness — LLM evaluator module.

OpenAI-compatible chat client and the evaluator that the AI-backed
criteria call for qualitative verdicts.
"""

from agent_readiness.llm.evaluator import LLMEvaluator, build_evaluator
from agent_readiness.llm.provider import LLMProvider

__all__ = ["LLMEvaluator", "LLMProvider", "build_evaluator"]
