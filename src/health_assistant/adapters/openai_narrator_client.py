"""OpenAI Responses API client for text generation."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from health_assistant.domain.errors import NarratorError
from health_assistant.services.narrator import Narrator


@dataclass
class OpenAINarratorClient(Narrator):
    """Narrator backed by the OpenAI Responses API."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(cls, api_key: str, model: str) -> "OpenAINarratorClient":
        """Create an OpenAI narrator client."""
        return cls(client=AsyncOpenAI(api_key=api_key), model=model)

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        max_tokens: int = 200,
        temperature: float = 0.7,
    ) -> str:
        """Generate free text for a prompt."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "input": prompt,
            "max_output_tokens": max_tokens,
            "temperature": temperature,
        }
        if system_prompt:
            request_payload["instructions"] = system_prompt

        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise NarratorError(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise NarratorError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
