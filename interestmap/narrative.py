"""AI narratives: reader persona and plain-language term explanations.

The LLM is an opaque collaborator here.  Whatever goes wrong on the way
(no API key, network trouble, provider error, empty reply) the caller gets a
fixed apology string instead of an exception, and nothing is retried.
"""

from __future__ import annotations

import html
import logging
from collections.abc import Sequence

from interestmap.config import InterestmapSettings
from interestmap.llm.client import LLMClient
from interestmap.llm.prompts import explain_term_prompt, persona_prompt

logger = logging.getLogger(__name__)

APOLOGY = "Ett fel uppstod vid kommunikation med AI-tjänsten. Försök igen senare."
MISSING_TERM = "Vänligen ange ett begrepp att förklara."


def to_html(text: str) -> str:
    """Escape ``text`` and turn its line breaks into ``<br>``."""
    return html.escape(text).replace("\r\n", "\n").replace("\n", "<br>")


class NarrativeService:
    """Builds the narrative prompts and recovers from any LLM failure."""

    def __init__(self, settings: InterestmapSettings, client: LLMClient | None = None) -> None:
        self.settings = settings
        self._client = client

    def _get_client(self) -> LLMClient:
        if self._client is None:
            self._client = LLMClient(self.settings)
        return self._client

    async def _ask(self, prompt: str, purpose: str) -> str:
        try:
            client = self._get_client()
        except ValueError as exc:
            logger.warning("AI %s unavailable: %s", purpose, exc)
            return APOLOGY
        before = client.tracker.total_tokens
        try:
            text = await client.generate(prompt)
        except Exception:
            logger.exception("AI %s request failed (provider=%s)", purpose, client.provider)
            return APOLOGY
        logger.info(
            "AI %s: %d tokens (%d over %d calls)",
            purpose,
            client.tracker.total_tokens - before,
            client.tracker.total_tokens,
            client.tracker.calls,
        )
        return text

    async def persona(self, ranked: Sequence[tuple[str, int]]) -> str:
        """Describe the typical reader from the top-ranked interests."""
        interests = [token for token, _count in ranked[: self.settings.persona_top_n]]
        logger.info("Generating persona from %d interests", len(interests))
        return await self._ask(persona_prompt(interests), "persona")

    async def explain(self, term: str) -> str:
        """Explain ``term`` for a technically curious non-expert.

        Raises:
            ValueError: If ``term`` is blank.
        """
        term = term.strip()
        if not term:
            raise ValueError(MISSING_TERM)
        logger.info("Explaining term %r", term)
        return await self._ask(explain_term_prompt(term), "explanation")
