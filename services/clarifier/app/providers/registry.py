from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderStatus:
    provider: str
    configured: bool
    env_var: str


class ProviderRegistry:
    def __init__(self, mapping: dict[str, list[str]]) -> None:
        self.mapping = mapping

    def status(self, provider: str) -> ProviderStatus:
        key_candidates = self.mapping.get(provider.lower())
        if not key_candidates:
            return ProviderStatus(provider=provider, configured=False, env_var="unsupported")
        for env_name in key_candidates:
            if os.getenv(env_name):
                return ProviderStatus(provider=provider, configured=True, env_var=env_name)
        return ProviderStatus(provider=provider, configured=False, env_var=key_candidates[0])

    def resolve(self, providers: list[str]) -> list[ProviderStatus]:
        return [self.status(provider) for provider in providers]

    def known(self) -> list[str]:
        return sorted(self.mapping)


def build_default_registry() -> ProviderRegistry:
    return ProviderRegistry(
        {
            "gemini": ["GEMINI_API_KEY", "GOOGLE_API_KEY"],
            "google": ["GOOGLE_API_KEY", "GEMINI_API_KEY"],
            "openai": ["OPENAI_API_KEY"],
            "anthropic": ["ANTHROPIC_API_KEY"],
            "deepseek": ["DEEPSEEK_API_KEY"],
            "mistral": ["MISTRAL_API_KEY"],
        }
    )
