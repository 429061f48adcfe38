"""Application state controller for Smart Calculator.

Holds the current input, latest result and explanation, the loading
flag and the history list. Presentation code sends user intents here and
re-renders from the snapshots passed to subscribed listeners.
"""

import logging
from typing import Callable, List, Optional

from .client import CalculationClient
from .history_store import HistoryStore
from .models import (
    CalculationResponse,
    CalculatorState,
    ErrorKind,
    HistoryItem,
    new_item_id,
    now_millis,
)


logger = logging.getLogger(__name__)

ERROR_MARKER = "Error"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."
BUSY_MESSAGE = "A calculation is already in progress."

Listener = Callable[[CalculatorState], None]


class CalculatorController:
    """Serializes user intents into state transitions."""

    def __init__(
        self,
        client: CalculationClient,
        store: HistoryStore,
        clock: Callable[[], int] = now_millis,
        id_factory: Callable[[], str] = new_item_id,
    ):
        """Initialize and load saved history.

        Args:
            client: Calculation client used by solve().
            store: History persistence.
            clock: Returns the current time in epoch milliseconds.
            id_factory: Returns a fresh unique history item id.
        """
        self.client = client
        self.store = store
        self._clock = clock
        self._id_factory = id_factory
        self._listeners: List[Listener] = []

        self._input = ""
        self._result = ""
        self._explanation = ""
        self._is_loading = False
        self._history: List[HistoryItem] = list(store.load())

    # --- Observable state ---

    @property
    def input(self) -> str:
        return self._input

    @property
    def result(self) -> str:
        return self._result

    @property
    def explanation(self) -> str:
        return self._explanation

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def history(self) -> List[HistoryItem]:
        """History items, newest first (a copy)."""
        return list(self._history)

    def snapshot(self) -> CalculatorState:
        return CalculatorState(
            input=self._input,
            result=self._result,
            explanation=self._explanation,
            is_loading=self._is_loading,
            history=tuple(self._history),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with a snapshot after each change.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        state = self.snapshot()
        for listener in list(self._listeners):
            listener(state)

    # --- Input editing ---

    def append_input(self, fragment: str):
        """Append a fragment to the input. Any text is accepted."""
        self._input += fragment
        self._notify()

    def set_input(self, text: str):
        """Replace the whole input, as when editing it directly."""
        self._input = text
        self._notify()

    def delete_last(self):
        """Remove the last input character; no-op when empty."""
        if not self._input:
            return
        self._input = self._input[:-1]
        self._notify()

    def clear(self):
        """Reset input, result and explanation. History is kept."""
        self._input = ""
        self._result = ""
        self._explanation = ""
        self._notify()

    # --- Solving ---

    async def solve(self) -> Optional[CalculationResponse]:
        """Send the current input to the calculation client.

        Returns:
            None when the input is blank (nothing happens), otherwise the
            response that was applied. A call made while another solve is
            in flight is rejected with a BUSY response and changes nothing.
        """
        if not self._input.strip():
            return None

        if self._is_loading:
            logger.info("Rejected solve while another calculation is in flight")
            return CalculationResponse(
                result=ERROR_MARKER,
                explanation=BUSY_MESSAGE,
                is_error=True,
                error_kind=ErrorKind.BUSY,
            )

        expression = self._input
        self._is_loading = True
        self._result = ""
        self._explanation = ""

        try:
            self._notify()
            response = await self.client.solve(expression)
        except Exception:
            logger.exception("Solve failed before a response was produced")
            response = CalculationResponse(
                result=ERROR_MARKER,
                explanation=UNEXPECTED_ERROR_MESSAGE,
                is_error=True,
                error_kind=ErrorKind.TRANSPORT,
            )
        finally:
            self._is_loading = False

        if response.is_error:
            self._result = ERROR_MARKER
            self._explanation = response.explanation
        else:
            self._result = response.result
            self._explanation = response.explanation
            self._record(expression, response)

        self._notify()
        return response

    def _record(self, expression: str, response: CalculationResponse):
        timestamp = self._clock()
        if self._history and timestamp < self._history[0].timestamp:
            # Wall clock stepped back; keep history ordered
            timestamp = self._history[0].timestamp

        item = HistoryItem(
            id=self._id_factory(),
            expression=expression,
            result=response.result,
            explanation=response.explanation,
            timestamp=timestamp,
        )
        self._history.insert(0, item)
        self._persist()

    # --- History ---

    def load_from_history(self, item: HistoryItem):
        """Show a past calculation without calling the service."""
        self._input = item.expression
        self._result = item.result
        self._explanation = item.explanation or ""
        self._notify()

    def clear_history(self):
        """Remove every history item."""
        self._history = []
        self._persist()
        self._notify()

    def find_history_item(self, id_prefix: str) -> Optional[HistoryItem]:
        """Find a history item by full id or unique id prefix."""
        if not id_prefix:
            return None

        matches = [item for item in self._history if item.id.startswith(id_prefix)]
        for item in matches:
            if item.id == id_prefix:
                return item
        if len(matches) == 1:
            return matches[0]
        return None

    def _persist(self):
        try:
            self.store.save(self._history)
        except (IOError, OSError) as e:
            logger.error("Could not save history: %s", e)

    # --- Presentation event surface ---

    def on_input(self, fragment: str):
        self.append_input(fragment)

    def on_clear(self):
        self.clear()

    def on_delete(self):
        self.delete_last()

    async def on_solve(self) -> Optional[CalculationResponse]:
        return await self.solve()

    def on_select_history_item(self, item: HistoryItem):
        self.load_from_history(item)

    def on_clear_history(self):
        self.clear_history()
