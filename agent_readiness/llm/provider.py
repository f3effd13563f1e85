# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""agent-readiness — OpenAI-compatible chat client.

One async client for every endpoint that speaks the chat/completions
protocol. Hosted and local providers are named presets; anything else
works with ``provider="custom"`` plus a base URL.

Environment:
    AGENT_READINESS_API_KEY        (wins over the preset's own key)
    AGENT_READINESS_LLM_MODEL      (optional model override)
    AGENT_READINESS_LLM_BASE_URL   (required if provider='custom')
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from agent_readiness import config
from agent_readiness.exceptions import EvaluatorError

logger = logging.getLogger("agent_readiness.llm")

CUSTOM = "custom"


@dataclass(frozen=True)
class ProviderPreset:
    base_url: str
    default_model: str
    env_key: str = ""  # Empty for keyless local servers
    extra_headers: dict[str, str] = field(default_factory=dict)


# ─── Provider Presets ─────────────────────────────────────────────────

PROVIDER_PRESETS: dict[str, ProviderPreset] = {
    # Hosted
    "openai": ProviderPreset(
        "https://api.openai.com/v1", "gpt-4o-mini", "OPENAI_API_KEY"
    ),
    "anthropic": ProviderPreset(
        "https://api.anthropic.com/v1",
        "claude-sonnet-4-20250514",
        "ANTHROPIC_API_KEY",
        extra_headers={"anthropic-version": "2023-06-01"},
    ),
    "gemini": ProviderPreset(
        "https://generativelanguage.googleapis.com/v1beta/openai",
        "gemini-2.0-flash",
        "GEMINI_API_KEY",
    ),
    "mistral": ProviderPreset(
        "https://api.mistral.ai/v1", "mistral-large-latest", "MISTRAL_API_KEY"
    ),
    "deepseek": ProviderPreset(
        "https://api.deepseek.com/v1", "deepseek-chat", "DEEPSEEK_API_KEY"
    ),
    "groq": ProviderPreset(
        "https://api.groq.com/openai/v1", "llama-3.3-70b-versatile", "GROQ_API_KEY"
    ),
    "openrouter": ProviderPreset(
        "https://openrouter.ai/api/v1", "openai/gpt-4o-mini", "OPENROUTER_API_KEY"
    ),
    "together": ProviderPreset(
        "https://api.together.xyz/v1",
        "meta-llama/Llama-3.3-70B-Instruct-Turbo",
        "TOGETHER_API_KEY",
    ),
    # Local
    "ollama": ProviderPreset("http://localhost:11434/v1", "qwen2.5"),
    "lmstudio": ProviderPreset("http://localhost:1234/v1", "local-model"),
}


def _resolve(
    provider: str,
    api_key: Optional[str],
    model: Optional[str],
    base_url: Optional[str],
) -> tuple[str, str, str, dict[str, str]]:
    """(base_url, model, api_key, extra headers) for ``provider``.

    Raises:
        EvaluatorError: unknown provider, missing key, or a custom
            provider without a base URL.
    """
    api_key = api_key or config.API_KEY
    model = model or config.LLM_MODEL
    base_url = base_url or config.LLM_BASE_URL

    if provider == CUSTOM:
        if not base_url:
            raise EvaluatorError(
                "Custom provider requires AGENT_READINESS_LLM_BASE_URL or a base URL."
            )
        return base_url, model or "custom-model", api_key or "", {}

    preset = PROVIDER_PRESETS.get(provider)
    if preset is None:
        raise EvaluatorError(
            f"Unknown LLM provider '{provider}'. Supported: {LLMProvider.list_providers()}"
        )

    if not api_key and preset.env_key:
        api_key = os.environ.get(preset.env_key, "")
        if not api_key:
            raise EvaluatorError(
                f"An API key is required for '{provider}'. Pass --api-key or set "
                f"AGENT_READINESS_API_KEY / {preset.env_key}."
            )

    return (
        base_url or preset.base_url,
        model or preset.default_model,
        api_key or "",
        dict(preset.extra_headers),
    )


class LLMProvider:
    """Async chat client for one provider.

    Usage::

        llm = LLMProvider(provider="groq", api_key="gsk-...")
        reply = await llm.complete("Summarise this README", json_mode=True)
        await llm.close()

    ``transport`` goes straight to ``httpx.AsyncClient``; tests hand in an
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        provider: str = "openai",
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url, self._model, self._api_key, self._extra_headers = _resolve(
            provider, api_key, model, base_url
        )
        self._provider = provider
        self._client = httpx.AsyncClient(
            timeout=config.LLM_TIMEOUT if timeout is None else timeout,
            transport=transport,
        )
        logger.info("LLM provider %s ready (model=%s)", provider, self._model)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", **self._extra_headers}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def complete(
        self,
        prompt: str,
        system: str = "You are a helpful assistant.",
        temperature: float = 0.1,
        max_tokens: int = 1024,
        json_mode: bool = False,
    ) -> str:
        """One chat completion; returns the assistant's text.

        Raises:
            httpx.HTTPError: transport failures and non-2xx replies.
            ValueError: a reply without message content.
        """
        body: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            body["response_format"] = {"type": "json_object"}

        endpoint = self._base_url.rstrip("/") + "/chat/completions"
        try:
            response = await self._client.post(endpoint, headers=self._headers(), json=body)
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except httpx.HTTPStatusError as e:
            logger.error(
                "%s returned HTTP %s: %s",
                self._provider, e.response.status_code, e.response.text[:500],
            )
            raise
        except (KeyError, IndexError, TypeError) as e:
            logger.error("Malformed completion from %s: %s", self._provider, e)
            raise ValueError(f"Unexpected response from {self._provider}") from e

        if not content:
            raise ValueError(f"Empty response from {self._provider}")
        return content

    @property
    def model(self) -> str:
        return self._model

    @property
    def provider_name(self) -> str:
        return self._provider

    async def close(self) -> None:
        await self._client.aclose()

    def __repr__(self) -> str:
        return f"LLMProvider(provider={self._provider!r}, model={self._model!r})"

    @classmethod
    def list_providers(cls) -> list[str]:
        """Preset names plus 'custom', sorted."""
        return sorted([*PROVIDER_PRESETS, CUSTOM])
