"""Smart Calculator - LLM-backed terminal calculator.

Sends math problems, symbolic or in plain words, to a Gemini model with a
fixed JSON response schema and shows the result with a short
explanation:
- Calculation client with a swappable model provider
- State controller driving the keypad session
- Local JSON history of successful calculations
"""

__version__ = "1.0.0"

from .models import (
    CalculationResponse,
    CalculatorState,
    ErrorKind,
    HistoryItem,
)
from .client import CalculationClient
from .controller import CalculatorController
from .history_store import (
    HistoryStore,
    JsonHistoryStore,
    InMemoryHistoryStore,
)
from .providers import (
    CalculationProvider,
    GeminiProvider,
    ProviderError,
    SmartCalculatorError,
)

__all__ = [
    # Data model
    "CalculationResponse",
    "CalculatorState",
    "ErrorKind",
    "HistoryItem",
    # Core
    "CalculationClient",
    "CalculatorController",
    # History
    "HistoryStore",
    "JsonHistoryStore",
    "InMemoryHistoryStore",
    # Providers
    "CalculationProvider",
    "GeminiProvider",
    "ProviderError",
    "SmartCalculatorError",
]
