"""LLM prompt loader: reads prompt templates from Markdown files.

Each narrative has one ``.md`` file in this directory holding a
``str.format`` template.  Placeholders: ``{interests}`` for the persona
prompt, ``{term}`` for the explain-a-term prompt.
"""

from __future__ import annotations

from functools import cache
from pathlib import Path

_PROMPTS_DIR = Path(__file__).resolve().parent

PERSONA = "persona"
EXPLAIN_TERM = "explain-term"


@cache
def get_prompt(name: str) -> str:
    """Load a prompt template by kebab-case name (e.g. ``"explain-term"``).

    Raises:
        FileNotFoundError: If there is no ``<name>.md`` file.
    """
    path = _PROMPTS_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def persona_prompt(interests: list[str]) -> str:
    """Persona prompt listing ``interests`` comma-joined, in rank order."""
    return get_prompt(PERSONA).format(interests=", ".join(interests))


def explain_term_prompt(term: str) -> str:
    return get_prompt(EXPLAIN_TERM).format(term=term)
