"""Shared test fixtures for Interestmap tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from interestmap.analysis.models import Category, CategorySpec
from interestmap.config import InterestmapSettings

SAMPLE_TEXT = (
    "AI, Elbilar, Kärnkraft\n"
    "ai, Tesla (Model 3), Rymd\n"
    "Kärnkraft, Gripen, Spel\n"
    "\n"
    "ai, kärnkraft, Quiz\n"
    "xx, ab\n"
)


@pytest.fixture
def sample_text() -> str:
    """Raw upload with a blank record and an all-noise record."""
    return SAMPLE_TEXT


@pytest.fixture
def sample_lines() -> list[tuple[str, ...]]:
    """What ``parse(SAMPLE_TEXT)`` yields ("ai" and noise records drop out)."""
    return [
        ("elbilar", "kärnkraft"),
        ("tesla", "rymd"),
        ("kärnkraft", "gripen", "spel"),
        ("kärnkraft", "quiz"),
    ]


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "intressen.txt"
    path.write_text(SAMPLE_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def small_spec() -> CategorySpec:
    """Three-category table with a deliberate first-match overlap on "volvo"."""
    return CategorySpec(
        categories=(
            Category(name="Bilar", keywords=("volvo xc", "tesla")),
            Category(name="Industri", keywords=("volvo", "saab")),
            Category(name="Övrigt", keywords=("spel",)),
        ),
        catch_all="Övrigt",
    )


@pytest.fixture
def settings(tmp_path: Path) -> InterestmapSettings:
    """Settings isolated from any .env on the machine running the tests."""
    return InterestmapSettings(
        _env_file=None,  # type: ignore[call-arg]
        llm_provider="google",
        llm_model="gemini-2.0-flash",
        google_api_key="AIzaSyTest123456789",
        output_dir=None,
    )
