# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""agent-readiness — LLM-backed criterion evaluator.

Turns a criterion prompt plus repository context into a pass/fail
verdict by asking a chat model for a small JSON object. Every failure
mode (HTTP error, timeout, malformed reply) becomes a failing verdict,
so callers never need to handle exceptions from ``evaluate``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any, Optional

import httpx

from agent_readiness import config
from agent_readiness.config import RepoConfig
from agent_readiness.llm.provider import LLMProvider
from agent_readiness.types import EvaluationResult

logger = logging.getLogger("agent_readiness.llm")

SYSTEM_PROMPT = """You are a code repository evaluator. Your job is to assess whether a repository meets specific readiness criteria.

You will receive:
- A criterion prompt describing what to evaluate
- Context gathered from the repository (file contents, structure, etc.)

Analyze the provided context against the criterion and respond with a JSON object in this exact format:
{
  "pass": boolean,
  "message": "A concise summary of the evaluation result",
  "details": "Optional detailed explanation with specific findings"
}

Rules:
- "pass" must be true if the criterion is clearly met, false otherwise.
- "message" should be a single sentence summarizing the result.
- "details" should include specific evidence from the context when relevant.
- Respond ONLY with the JSON object, no markdown fences or extra text."""

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def build_user_message(prompt: str, context: str) -> str:
    return f"## Criterion\n{prompt}\n\n## Repository Context\n{context}"


def parse_verdict(content: str) -> EvaluationResult:
    """Parse the model's JSON reply.

    Raises:
        ValueError: if the reply is not a JSON object.
    """
    text = content.strip()
    fenced = _FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    parsed: Any = json.loads(text)
    if not isinstance(parsed, dict):
        raise ValueError("expected a JSON object")

    details = parsed.get("details")
    return EvaluationResult(
        passed=bool(parsed.get("pass", False)),
        message=str(parsed.get("message") or "No message provided"),
        details=str(details) if details is not None else None,
    )


class LLMEvaluator:
    """Evaluator backed by an OpenAI-compatible chat model.

    Safe to share between concurrently running checks: the only state is
    the provider's HTTP client.
    """

    def __init__(self, provider: LLMProvider, timeout: Optional[float] = None):
        self.provider = provider
        self.timeout = timeout if timeout is not None else config.LLM_TIMEOUT

    async def evaluate(self, prompt: str, context: str) -> EvaluationResult:
        try:
            content = await asyncio.wait_for(
                self.provider.complete(
                    build_user_message(prompt, context),
                    system=SYSTEM_PROMPT,
                    json_mode=True,
                ),
                timeout=self.timeout,
            )
            return parse_verdict(content)
        except httpx.HTTPStatusError as e:
            return EvaluationResult(
                passed=False,
                message=f"LLM API request failed with status {e.response.status_code}",
                details=e.response.text[:2000] or None,
            )
        except asyncio.TimeoutError:
            logger.warning("LLM evaluation timed out after %.0fs", self.timeout)
            return EvaluationResult(
                passed=False,
                message=f"LLM evaluation timed out after {self.timeout:g}s",
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("LLM evaluation failed: %s", e)
            return EvaluationResult(passed=False, message=f"LLM evaluation failed: {e}")

    async def close(self) -> None:
        await self.provider.close()

    def __repr__(self) -> str:
        return f"LLMEvaluator({self.provider!r})"


def build_evaluator(
    api_key: Optional[str] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    repo_config: Optional[RepoConfig] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> LLMEvaluator:
    """Create an evaluator from CLI flags, then repo config, then env.

    Raises:
        EvaluatorError: on an unknown provider or a missing API key.
    """
    cfg = repo_config or RepoConfig()
    llm = LLMProvider(
        provider=provider or cfg.provider or config.LLM_PROVIDER,
        api_key=api_key or cfg.api_key,
        model=model or cfg.model,
        base_url=base_url or cfg.api_base_url,
        timeout=timeout,
        transport=transport,
    )
    return LLMEvaluator(llm, timeout=timeout)
