"""Calculation client.

Turns one input string into at most one provider call and always
resolves to a CalculationResponse. Nothing raised below this layer
reaches the caller.
"""

import asyncio
import json
import logging
from typing import Optional

from .config import DEFAULT_API_KEY_ENV
from .models import CalculationResponse, ErrorKind
from .prompts import RESPONSE_SCHEMA, SYSTEM_INSTRUCTION, render_solve_prompt
from .providers import CalculationProvider


logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API Key is missing. Please set {env_name} in your environment or .env file."
EMPTY_INPUT_MESSAGE = "Please enter a math problem."
TRANSPORT_ERROR_MESSAGE = (
    "Failed to connect to the smart calculator service. "
    "Please check your network or API key."
)


def config_error_response(env_name: str = DEFAULT_API_KEY_ENV) -> CalculationResponse:
    return CalculationResponse(
        result="Config Error",
        explanation=MISSING_KEY_MESSAGE.format(env_name=env_name),
        is_error=True,
        error_kind=ErrorKind.CONFIGURATION,
    )


def empty_input_response() -> CalculationResponse:
    return CalculationResponse(
        result="",
        explanation=EMPTY_INPUT_MESSAGE,
        is_error=True,
        error_kind=ErrorKind.EMPTY_INPUT,
    )


def transport_error_response() -> CalculationResponse:
    return CalculationResponse(
        result="Error",
        explanation=TRANSPORT_ERROR_MESSAGE,
        is_error=True,
        error_kind=ErrorKind.TRANSPORT,
    )


class CalculationClient:
    """Sends math problems to a provider with a fixed response schema."""

    def __init__(
        self,
        provider: Optional[CalculationProvider],
        api_key: Optional[str],
        api_key_env: str = DEFAULT_API_KEY_ENV,
    ):
        """Initialize the client.

        Args:
            provider: Model provider; may be None when no credential is set.
            api_key: Service credential. Missing or blank short-circuits
                every solve with a configuration error.
            api_key_env: Variable named in the missing-key message.
        """
        self.provider = provider
        self.api_key = api_key
        self.api_key_env = api_key_env

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.provider is not None

    async def solve(self, problem: str) -> CalculationResponse:
        """Solve a math problem.

        Args:
            problem: Raw user input, embedded verbatim in the prompt.

        Returns:
            The provider's response, or an error response describing why
            no answer was obtained.
        """
        if not self.is_configured:
            return config_error_response(self.api_key_env)

        if not problem or not problem.strip():
            return empty_input_response()

        try:
            prompt = render_solve_prompt(problem)
            text = await self.provider.generate(prompt, RESPONSE_SCHEMA, SYSTEM_INSTRUCTION)
            if not text:
                raise ValueError("No response from AI")
            response = CalculationResponse.from_payload(json.loads(text))
        except Exception:
            logger.exception("Calculation request failed for input %r", problem)
            return transport_error_response()

        if response.is_error:
            logger.info("Provider declined input %r: %s", problem, response.explanation)
        return response

    def solve_sync(self, problem: str) -> CalculationResponse:
        """Blocking wrapper around solve() for one-shot use."""
        return asyncio.run(self.solve(problem))
