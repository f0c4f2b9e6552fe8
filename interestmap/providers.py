"""LLM provider registry and specifications.

Centralises provider metadata, aliases and the settings each provider needs.
Used by config.py, llm/client.py and cli.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ProviderSpec:
    """Specification for an LLM provider."""

    name: str  # Internal name: "google", "anthropic", "openai", "local"
    display_name: str  # User-facing: "Gemini", "Claude", ...
    aliases: list[str] = field(default_factory=list)  # CLI aliases: ["gemini"], ["ollama"]
    key_setting: str = ""  # settings attribute holding the API key ("" = none needed)
    env_var: str = ""
    default_model: str = ""
    sdk_module: str = ""  # e.g. "google.genai", "anthropic"
    key_url: str = ""


# Provider registry: single source of truth for all provider metadata.
PROVIDERS: dict[str, ProviderSpec] = {
    "google": ProviderSpec(
        name="google",
        display_name="Gemini",
        aliases=["gemini"],
        key_setting="google_api_key",
        env_var="INTERESTMAP_GOOGLE_API_KEY",
        default_model="gemini-2.0-flash",
        sdk_module="google.genai",
        key_url="aistudio.google.com",
    ),
    "anthropic": ProviderSpec(
        name="anthropic",
        display_name="Claude",
        aliases=["claude"],
        key_setting="anthropic_api_key",
        env_var="INTERESTMAP_ANTHROPIC_API_KEY",
        default_model="claude-sonnet-4-20250514",
        sdk_module="anthropic",
        key_url="console.anthropic.com",
    ),
    "openai": ProviderSpec(
        name="openai",
        display_name="ChatGPT",
        aliases=["chatgpt", "gpt"],
        key_setting="openai_api_key",
        env_var="INTERESTMAP_OPENAI_API_KEY",
        default_model="gpt-4o",
        sdk_module="openai",
        key_url="platform.openai.com",
    ),
    "local": ProviderSpec(
        name="local",
        display_name="Local (Ollama)",
        aliases=["ollama"],
        default_model="llama3.2:3b",
        sdk_module="openai",  # Ollama is OpenAI-compatible
    ),
}


def resolve_provider(name: str) -> str:
    """Resolve a provider alias to its canonical name.

    Args:
        name: Provider name or alias (case-insensitive).

    Returns:
        Canonical provider name.

    Raises:
        ValueError: If the provider is not recognised.
    """
    name = name.lower()
    if name in PROVIDERS:
        return name
    for provider_name, spec in PROVIDERS.items():
        if name in spec.aliases:
            return provider_name
    valid = sorted(PROVIDERS.keys())
    aliases = [a for spec in PROVIDERS.values() for a in spec.aliases]
    raise ValueError(
        f"Unknown LLM provider: {name}. "
        f"Valid providers: {', '.join(valid + aliases)}"
    )
