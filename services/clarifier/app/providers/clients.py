from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from time import perf_counter
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ProviderClientError(RuntimeError):
    pass


@dataclass(frozen=True)
class GenerationResult:
    provider: str
    model: str
    text: str
    success: bool
    tokens_input: int = 0
    tokens_output: int = 0
    latency_s: float = 0.0
    error: str | None = None


EMPTY_CONTENT = "empty_content"


def _default_timeout() -> float:
    raw = os.getenv("CLARIFIER_PROVIDER_TIMEOUT_S", "60")
    try:
        return max(1.0, float(raw))
    except ValueError:
        return 60.0


class BaseProviderClient:
    provider: str
    model: str

    def generate(self, prompt: str, max_tokens: int | None = None, timeout_s: float = 60.0) -> GenerationResult:
        started = perf_counter()
        try:
            data = self._post(prompt, max_tokens=max_tokens, timeout_s=timeout_s)
            text, tokens_input, tokens_output = self._extract(data)
        except Exception as exc:  # noqa: BLE001
            logger.warning("%s generation failed: %s", self.provider, exc)
            return self._failure(started, str(exc))
        if not text.strip():
            return self._failure(started, EMPTY_CONTENT)
        return GenerationResult(
            provider=self.provider,
            model=self.model,
            text=text,
            success=True,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            latency_s=max(0.0, perf_counter() - started),
        )

    def _post(self, prompt: str, max_tokens: int | None, timeout_s: float) -> dict[str, Any]:
        raise NotImplementedError

    def _extract(self, data: dict[str, Any]) -> tuple[str, int, int]:
        raise NotImplementedError

    def _failure(self, started: float, error: str) -> GenerationResult:
        return GenerationResult(
            provider=self.provider,
            model=self.model,
            text="",
            success=False,
            latency_s=max(0.0, perf_counter() - started),
            error=error,
        )


def _post_json(url: str, payload: dict[str, Any], headers: dict[str, str], timeout_s: float) -> dict[str, Any]:
    with httpx.Client(timeout=timeout_s) as client:
        response = client.post(url, headers=headers, json=payload)
        response.raise_for_status()
    return response.json()


class GeminiClient(BaseProviderClient):
    provider = "gemini"

    def __init__(self) -> None:
        self.api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        self.model = os.getenv("GEMINI_MODEL", "gemini-2.0-flash-lite")
        self.temperature = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))
        if not self.api_key:
            raise ProviderClientError("GEMINI_API_KEY or GOOGLE_API_KEY is not set")

    def _post(self, prompt: str, max_tokens: int | None, timeout_s: float) -> dict[str, Any]:
        url = f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
        generation_config: dict[str, object] = {"temperature": self.temperature}
        if max_tokens is not None:
            generation_config["maxOutputTokens"] = max_tokens
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        return _post_json(url, payload, {"x-goog-api-key": self.api_key}, timeout_s)

    def _extract(self, data: dict[str, Any]) -> tuple[str, int, int]:
        candidates = data.get("candidates") or []
        text = ""
        if candidates:
            parts = (candidates[0].get("content") or {}).get("parts") or []
            text = "".join(str(part.get("text", "") or "") for part in parts)
        usage = data.get("usageMetadata") or {}
        return (
            text,
            int(usage.get("promptTokenCount", 0) or 0),
            int(usage.get("candidatesTokenCount", 0) or 0),
        )


class OpenAICompatibleClient(BaseProviderClient):
    api_key_env_name: str
    default_base_url: str
    default_model: str

    def __init__(self) -> None:
        prefix = self.provider.upper()
        self.api_key = os.getenv(self.api_key_env_name)
        self.model = os.getenv(f"{prefix}_MODEL", self.default_model)
        self.base_url = os.getenv(f"{prefix}_BASE_URL", self.default_base_url).rstrip("/")
        self.temperature = float(os.getenv(f"{prefix}_TEMPERATURE", "0.7"))
        if not self.api_key:
            raise ProviderClientError(f"{self.api_key_env_name} is not set")

    def _post(self, prompt: str, max_tokens: int | None, timeout_s: float) -> dict[str, Any]:
        payload: dict[str, object] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        headers = {"Authorization": f"Bearer {self.api_key}"}
        return _post_json(f"{self.base_url}/v1/chat/completions", payload, headers, timeout_s)

    def _extract(self, data: dict[str, Any]) -> tuple[str, int, int]:
        message = (data.get("choices") or [{}])[0].get("message") or {}
        text = str(message.get("content", "") or "")
        usage = data.get("usage") or {}
        return (
            text,
            int(usage.get("prompt_tokens", 0) or 0),
            int(usage.get("completion_tokens", 0) or 0),
        )


class OpenAIClient(OpenAICompatibleClient):
    provider = "openai"
    api_key_env_name = "OPENAI_API_KEY"
    default_base_url = "https://api.openai.com"
    default_model = "gpt-4o-mini"


class DeepSeekClient(OpenAICompatibleClient):
    provider = "deepseek"
    api_key_env_name = "DEEPSEEK_API_KEY"
    default_base_url = "https://api.deepseek.com"
    default_model = "deepseek-chat"


class MistralClient(OpenAICompatibleClient):
    provider = "mistral"
    api_key_env_name = "MISTRAL_API_KEY"
    default_base_url = "https://api.mistral.ai"
    default_model = "mistral-large-latest"


class AnthropicClient(BaseProviderClient):
    provider = "anthropic"

    def __init__(self) -> None:
        self.api_key = os.getenv("ANTHROPIC_API_KEY")
        self.model = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-5")
        self.temperature = float(os.getenv("ANTHROPIC_TEMPERATURE", "0.7"))
        if not self.api_key:
            raise ProviderClientError("ANTHROPIC_API_KEY is not set")

    def _post(self, prompt: str, max_tokens: int | None, timeout_s: float) -> dict[str, Any]:
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            # Messages API requires max_tokens.
            "max_tokens": max_tokens if max_tokens is not None else 4096,
        }
        return _post_json("https://api.anthropic.com/v1/messages", payload, headers, timeout_s)

    def _extract(self, data: dict[str, Any]) -> tuple[str, int, int]:
        if str(data.get("stop_reason", "")).lower() == "refusal":
            raise ProviderClientError("refusal")
        text = "".join(
            str(block.get("text", "") or "") for block in data.get("content", []) if block.get("type") == "text"
        )
        usage = data.get("usage") or {}
        return (
            text,
            int(usage.get("input_tokens", 0) or 0),
            int(usage.get("output_tokens", 0) or 0),
        )


_CLIENTS: dict[str, type[BaseProviderClient]] = {
    "gemini": GeminiClient,
    "google": GeminiClient,
    "openai": OpenAIClient,
    "anthropic": AnthropicClient,
    "deepseek": DeepSeekClient,
    "mistral": MistralClient,
}


def make_provider_client(provider: str) -> BaseProviderClient:
    client_cls = _CLIENTS.get(provider.lower())
    if client_cls is None:
        raise ProviderClientError(f"Unsupported provider: {provider}")
    return client_cls()


def generate_text(
    provider: str, prompt: str, max_tokens: int | None = None, timeout_s: float | None = None
) -> GenerationResult:
    try:
        client = make_provider_client(provider)
    except ProviderClientError as exc:
        logger.warning("provider %s unavailable: %s", provider, exc)
        return GenerationResult(provider=provider, model="unknown", text="", success=False, error=str(exc))
    resolved_timeout = timeout_s if timeout_s is not None else _default_timeout()
    return client.generate(prompt=prompt, max_tokens=max_tokens, timeout_s=resolved_timeout)
