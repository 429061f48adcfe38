"""Data model for Smart Calculator.

Defines the records that flow between the calculation client, the
controller and the history store:
- HistoryItem: one persisted past calculation
- CalculationResponse: the three-field result every solve resolves to
- ErrorKind: local classification of error responses
- CalculatorState: immutable snapshot of the controller state
"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ErrorKind(Enum):
    """Why a calculation produced an error response."""

    CONFIGURATION = "configuration"
    EMPTY_INPUT = "empty_input"
    TRANSPORT = "transport"
    PROVIDER_DECLINED = "provider_declined"
    BUSY = "busy"


def new_item_id() -> str:
    """Return a fresh 128-bit random identifier."""
    return uuid.uuid4().hex


def now_millis() -> int:
    """Current time in milliseconds since the Unix epoch."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class HistoryItem:
    """A single successful calculation."""

    id: str
    expression: str
    result: str
    explanation: Optional[str] = None
    timestamp: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "expression": self.expression,
            "result": self.result,
            "explanation": self.explanation,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryItem":
        """Create from a persisted record.

        Raises:
            KeyError: If a required field is missing.
            TypeError: If a field has the wrong type.
        """
        if not isinstance(data, dict):
            raise TypeError(f"History record must be an object, got {type(data).__name__}")

        for key in ("id", "expression", "result"):
            if not isinstance(data[key], str):
                raise TypeError(f"History field '{key}' must be a string")

        explanation = data.get("explanation")
        if explanation is not None and not isinstance(explanation, str):
            raise TypeError("History field 'explanation' must be a string")

        timestamp = data["timestamp"]
        # bool is an int subclass; reject it explicitly
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise TypeError("History field 'timestamp' must be a number")

        return cls(
            id=data["id"],
            expression=data["expression"],
            result=data["result"],
            explanation=explanation,
            timestamp=int(timestamp),
        )


@dataclass(frozen=True)
class CalculationResponse:
    """Outcome of one calculation attempt, success or failure alike."""

    result: str
    explanation: str
    is_error: bool
    error_kind: Optional[ErrorKind] = None

    def to_payload(self) -> dict:
        """Return the wire representation (without the local error kind)."""
        return {
            "result": self.result,
            "explanation": self.explanation,
            "isError": self.is_error,
        }

    @classmethod
    def from_payload(cls, payload) -> "CalculationResponse":
        """Validate and convert a provider JSON object.

        Args:
            payload: Decoded JSON returned by the provider.

        Returns:
            CalculationResponse carrying the provider's fields verbatim.

        Raises:
            ValueError: If the payload does not match the response schema.
        """
        if not isinstance(payload, dict):
            raise ValueError("Response payload must be a JSON object")

        missing = [k for k in ("result", "explanation", "isError") if k not in payload]
        if missing:
            raise ValueError(f"Response payload missing fields: {', '.join(missing)}")

        if not isinstance(payload["result"], str):
            raise ValueError("Response field 'result' must be a string")
        if not isinstance(payload["explanation"], str):
            raise ValueError("Response field 'explanation' must be a string")
        if not isinstance(payload["isError"], bool):
            raise ValueError("Response field 'isError' must be a boolean")

        is_error = payload["isError"]
        return cls(
            result=payload["result"],
            explanation=payload["explanation"],
            is_error=is_error,
            error_kind=ErrorKind.PROVIDER_DECLINED if is_error else None,
        )


@dataclass(frozen=True)
class CalculatorState:
    """Observable state of the calculator."""

    input: str = ""
    result: str = ""
    explanation: str = ""
    is_loading: bool = False
    history: Tuple[HistoryItem, ...] = field(default_factory=tuple)

    @property
    def has_solution(self) -> bool:
        """True when there is a result or explanation to show."""
        return bool(self.result or self.explanation)
