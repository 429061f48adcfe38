"""Tests for client.py - Calculation client and error classification."""

import asyncio

import pytest

from smart_calculator.client import (
    EMPTY_INPUT_MESSAGE,
    TRANSPORT_ERROR_MESSAGE,
    CalculationClient,
)
from smart_calculator.models import ErrorKind
from smart_calculator.prompts import RESPONSE_SCHEMA, SYSTEM_INSTRUCTION
from smart_calculator.providers import ProviderError


class TestPreconditions:
    """Checks made before any provider call."""

    def test_missing_key(self, make_provider, answer_payload):
        """Test missing credential short-circuits with a config error."""
        provider = make_provider(payload=answer_payload)
        client = CalculationClient(provider=provider, api_key=None)

        response = asyncio.run(client.solve("2+2"))

        assert response.is_error is True
        assert response.result == "Config Error"
        assert response.explanation.startswith("API Key is missing")
        assert response.error_kind is ErrorKind.CONFIGURATION
        assert provider.calls == []

    def test_missing_provider(self):
        """Test a key without a provider is a config error."""
        client = CalculationClient(provider=None, api_key="key")
        response = asyncio.run(client.solve("2+2"))
        assert response.error_kind is ErrorKind.CONFIGURATION

    def test_missing_key_names_configured_variable(self):
        """Test the missing-key message names the configured variable."""
        client = CalculationClient(provider=None, api_key=None, api_key_env="MY_CALC_KEY")
        response = asyncio.run(client.solve("2+2"))
        assert "MY_CALC_KEY" in response.explanation
        assert "GEMINI_API_KEY" not in response.explanation

    def test_key_checked_before_input(self, make_provider):
        """Test the credential check comes first."""
        client = CalculationClient(provider=make_provider(), api_key="")
        response = asyncio.run(client.solve("   "))
        assert response.error_kind is ErrorKind.CONFIGURATION

    @pytest.mark.parametrize("problem", ["", "   ", "\n\t"])
    def test_blank_input(self, make_provider, answer_payload, problem):
        """Test blank input short-circuits with a prompt message."""
        provider = make_provider(payload=answer_payload)
        client = CalculationClient(provider=provider, api_key="key")

        response = asyncio.run(client.solve(problem))

        assert response.is_error is True
        assert response.result == ""
        assert response.explanation == EMPTY_INPUT_MESSAGE
        assert response.error_kind is ErrorKind.EMPTY_INPUT
        assert provider.calls == []


class TestSuccessPath:
    """Tests for well-formed provider answers."""

    def test_returns_payload(self, make_provider, answer_payload):
        """Test the provider answer is returned as-is."""
        provider = make_provider(payload=answer_payload)
        client = CalculationClient(provider=provider, api_key="key")

        response = asyncio.run(client.solve("5*24"))

        assert response.is_error is False
        assert response.result == "120"
        assert response.explanation == "5 × 24 = 120"

    def test_exactly_one_call_with_contract(self, make_provider, answer_payload):
        """Test one call carrying the prompt, schema and persona."""
        provider = make_provider(payload=answer_payload)
        client = CalculationClient(provider=provider, api_key="key")

        asyncio.run(client.solve("5*24"))

        assert len(provider.calls) == 1
        call = provider.calls[0]
        assert '"5*24"' in call["prompt"]
        assert call["schema"] is RESPONSE_SCHEMA
        assert call["system_instruction"] == SYSTEM_INSTRUCTION

    def test_input_embedded_verbatim(self, make_provider, answer_payload):
        """Test whitespace and markup survive in the prompt."""
        provider = make_provider(payload=answer_payload)
        client = CalculationClient(provider=provider, api_key="key")

        asyncio.run(client.solve("  integral of x^2 <dx> & more  "))

        assert "  integral of x^2 <dx> & more  " in provider.calls[0]["prompt"]

    def test_provider_decline_passes_through(self, make_provider):
        """Test provider isError=true is returned verbatim."""
        provider = make_provider(
            payload={
                "result": "N/A",
                "explanation": "I can only help with math questions.",
                "isError": True,
            }
        )
        client = CalculationClient(provider=provider, api_key="key")

        response = asyncio.run(client.solve("what is the weather"))

        assert response.is_error is True
        assert response.result == "N/A"
        assert response.explanation == "I can only help with math questions."
        assert response.error_kind is ErrorKind.PROVIDER_DECLINED


class TestFailurePath:
    """Every fault resolves to the generic transport error."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"text": "this is not json"},
            {"text": '{"result": "1"}'},
            {"text": '["1", "x", false]'},
            {"text": ""},
            {"error": ProviderError("connection reset")},
            {"error": RuntimeError("boom")},
        ],
    )
    def test_fault_becomes_transport_error(self, make_provider, kwargs):
        """Test each fault maps to the generic transport error."""
        provider = make_provider(**kwargs)
        client = CalculationClient(provider=provider, api_key="key")

        response = asyncio.run(client.solve("2+2"))

        assert response.is_error is True
        assert response.result == "Error"
        assert response.explanation == TRANSPORT_ERROR_MESSAGE
        assert response.error_kind is ErrorKind.TRANSPORT
        assert len(provider.calls) == 1

    def test_fault_is_logged(self, make_provider, caplog):
        """Test the underlying fault is logged, not returned."""
        provider = make_provider(error=ProviderError("connection reset"))
        client = CalculationClient(provider=provider, api_key="key")

        with caplog.at_level("ERROR", logger="smart_calculator.client"):
            response = asyncio.run(client.solve("2+2"))

        assert "connection reset" not in response.explanation
        assert "connection reset" in caplog.text


class TestSolveSync:
    """Tests for the blocking wrapper."""

    def test_solve_sync(self, make_provider, answer_payload):
        """Test the blocking wrapper returns the answer."""
        client = CalculationClient(provider=make_provider(payload=answer_payload), api_key="key")
        assert client.solve_sync("5*24").result == "120"
