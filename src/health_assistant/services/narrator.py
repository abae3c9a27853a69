"""Text generation with a bounded timeout and fallback text."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from health_assistant.domain.errors import NarratorError

_logger = logging.getLogger(__name__)


class Narrator(Protocol):
    """Interface for an LLM that turns a prompt into free text."""

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        max_tokens: int = 200,
        temperature: float = 0.7,
    ) -> str:
        """Return generated text or raise NarratorError."""


@dataclass
class UnconfiguredNarrator(Narrator):
    """Narrator used when no API key is configured."""

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        max_tokens: int = 200,
        temperature: float = 0.7,
    ) -> str:
        """Always fail so callers use their canned text."""
        raise NarratorError("Text generation is not configured")


@dataclass
class InsightNarrator:
    """Calls a narrator and degrades to fallback text on any failure."""

    narrator: Narrator
    timeout_seconds: float = 12.0

    @property
    def configured(self) -> bool:
        """Return whether a real narrator is wired in."""
        return not isinstance(self.narrator, UnconfiguredNarrator)

    async def narrate(
        self,
        prompt: str,
        fallback: str,
        *,
        system_prompt: str | None = None,
        max_tokens: int = 200,
        temperature: float = 0.7,
    ) -> str:
        """Return generated text, or ``fallback`` if generation fails."""
        try:
            async with asyncio.timeout(self.timeout_seconds):
                text = await self.narrator.generate(
                    prompt,
                    system_prompt=system_prompt,
                    max_tokens=max_tokens,
                    temperature=temperature,
                )
        except TimeoutError:
            _logger.warning(
                "Narrator timed out after %ss, using fallback", self.timeout_seconds
            )
            return fallback
        except NarratorError as exc:
            _logger.warning("Narrator unavailable, using fallback: %s", exc)
            return fallback
        except Exception:
            _logger.exception("Narrator failed, using fallback")
            return fallback
        if not text or not text.strip():
            return fallback
        return text.strip()
