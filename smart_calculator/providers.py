"""Model providers for Smart Calculator.

A provider turns (prompt, schema, system instruction) into the raw JSON
text produced by a language model. Any fault on the way is raised as
ProviderError so the calculation client has a single thing to catch.
"""

import logging
from typing import Optional

from google import genai
from google.genai import types


logger = logging.getLogger(__name__)


class SmartCalculatorError(Exception):
    """Base error for Smart Calculator."""


class ProviderError(SmartCalculatorError):
    """The provider call failed or returned nothing usable."""


class CalculationProvider:
    """Capability interface for structured-output model calls."""

    async def generate(self, prompt: str, schema: dict, system_instruction: str) -> str:
        """Return the model's JSON text for the prompt.

        Raises:
            ProviderError: On any transport or response fault.
        """
        raise NotImplementedError


class GeminiProvider(CalculationProvider):
    """Google Gemini via the google-genai SDK."""

    def __init__(self, api_key: str, model: str, client: Optional[genai.Client] = None):
        """Initialize the provider.

        Args:
            api_key: Gemini API key.
            model: Model identifier, e.g. "gemini-2.5-flash".
            client: Pre-built SDK client (tests inject a fake).
        """
        self.model = model
        self._client = client or genai.Client(api_key=api_key)

    async def generate(self, prompt: str, schema: dict, system_instruction: str) -> str:
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
            system_instruction=system_instruction,
        )

        logger.debug("Calling Gemini: model=%s, prompt_len=%d", self.model, len(prompt))
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            raise ProviderError(f"Gemini request failed: {e}") from e

        text = getattr(response, "text", None)
        if not text:
            raise ProviderError("No response from AI")

        logger.debug("Gemini response received: %d chars", len(text))
        return text
