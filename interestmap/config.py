"""Application settings loaded from environment variables or .env."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_files() -> list[Path]:
    """Find .env files to load: the package's parent dir, then upward from CWD.

    Last wins in pydantic-settings, so a project-local .env overrides one
    sitting next to an editable install.
    """
    candidates: list[Path] = []

    pkg_env = Path(__file__).resolve().parent.parent / ".env"
    if pkg_env.is_file():
        candidates.append(pkg_env)

    cwd = Path.cwd().resolve()
    for parent in [cwd, *cwd.parents]:
        env_path = parent / ".env"
        if env_path.is_file() and env_path not in candidates:
            candidates.append(env_path)
            break  # stop at first match going upward

    return candidates


class InterestmapSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="INTERESTMAP_",
        env_file=_find_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM
    llm_provider: str = "google"  # "google", "anthropic", "openai", or "local"
    llm_model: str = ""  # empty → provider default (see providers.py)
    llm_max_tokens: int = 2048
    llm_temperature: float = 0.7

    google_api_key: str = ""
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # Local LLM (Ollama)
    local_url: str = "http://localhost:11434/v1"
    local_model: str = ""  # empty → llm_model

    # Categories
    categories_file: Path | None = None  # None → bundled default.yaml

    # Views
    overview_top_n: int = Field(default=10, ge=1)
    word_cloud_size: int = Field(default=50, ge=1)
    category_top_n: int = Field(default=5, ge=1)
    connections_limit: int = Field(default=15, ge=1)
    persona_top_n: int = Field(default=30, ge=1)

    # Upload
    max_upload_bytes: int = 10 * 1024 * 1024

    # Log file goes to <output_dir>/.interestmap/ when set
    output_dir: Path | None = None
    log_level: str = "INFO"  # log file level; the terminal follows -v


def load_settings(**overrides: object) -> InterestmapSettings:
    """Load settings with optional CLI overrides.

    Normalises LLM provider aliases (gemini → google, claude → anthropic,
    chatgpt/gpt → openai, ollama → local) and fills in the provider's
    default model when none is configured.

    Raises:
        ValueError: If the provider name is not recognised.
    """
    # Import here to avoid circular import at module load time
    from interestmap.providers import PROVIDERS, resolve_provider

    overrides = {k: v for k, v in overrides.items() if v is not None}
    settings = InterestmapSettings(**overrides)  # type: ignore[arg-type]

    provider = resolve_provider(settings.llm_provider)
    updates: dict[str, object] = {}
    if provider != settings.llm_provider:
        updates["llm_provider"] = provider
    if not settings.llm_model:
        updates["llm_model"] = PROVIDERS[provider].default_model

    if not updates:
        return settings
    return settings.model_copy(update=updates)
