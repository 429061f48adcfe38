"""Shared fixtures for Smart Calculator tests."""

import json

import pytest

from smart_calculator.providers import CalculationProvider


class FakeProvider(CalculationProvider):
    """Provider returning canned output and recording every call."""

    def __init__(self, payload=None, text=None, error=None, gate=None, on_call=None):
        self.payload = payload
        self.text = text
        self.error = error
        self.gate = gate
        self.on_call = on_call
        self.calls = []

    async def generate(self, prompt, schema, system_instruction):
        self.calls.append(
            {"prompt": prompt, "schema": schema, "system_instruction": system_instruction}
        )
        if self.on_call is not None:
            self.on_call()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if self.text is not None:
            return self.text
        return json.dumps(self.payload)


@pytest.fixture
def make_provider():
    """Factory for FakeProvider instances."""
    return FakeProvider


@pytest.fixture
def answer_payload():
    """A successful provider answer."""
    return {"result": "120", "explanation": "5 × 24 = 120", "isError": False}


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate from real credentials, .env files and data directories."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("SMART_CALCULATOR_HOME", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
