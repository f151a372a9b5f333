"""
MathSheet Sheet Controller
Owns the rows of an expression sheet, keeps them synchronized with the
asynchronous evaluation service and applies navigation gestures.

Every mutation marks the sheet dirty, which issues one evaluation of the whole
sheet tagged with a new sequence number. Only the response carrying the latest
sequence number is ever applied; slower responses to older requests are
discarded when they arrive.
"""

import asyncio
import logging
from collections.abc import Sequence
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

from mathsheet.constants import (
    DEFAULT_EVALUATION_TIMEOUT, MODE_SWITCH_MESSAGE, COPIED_MESSAGE, OPENED_MESSAGE
)
from mathsheet.errors import EvaluationError, EvaluationTimeoutError
from mathsheet.mode_detector import Mode, detect
from mathsheet.result_classifier import DefinitionNotFoundError, Err, Result, classify
from mathsheet.sheet_model import Row, Sheet

logger = logging.getLogger(__name__)

# Listener signature: callback(event_name, payload)
Listener = Callable[[str, Dict[str, Any]], None]


def _check_text(text: Any) -> None:
    if not isinstance(text, str):
        raise TypeError(f"Row text must be a string, got {type(text).__name__}")


class FocusAfterDelete(str, Enum):
    """Which row receives focus after a row is deleted."""
    PREVIOUS = "previous"  # row now at max(0, i - 1)
    SAME = "same"          # row that slid into position i


class SheetController:
    """
    State machine over a Sheet.

    The evaluator is any object with an ``async evaluate(mode, text)`` method
    returning one raw outcome per line of ``text``.
    """

    def __init__(self, evaluator, timeout: Optional[float] = DEFAULT_EVALUATION_TIMEOUT,
                 focus_after_delete: FocusAfterDelete = FocusAfterDelete.PREVIOUS,
                 mode: Mode = Mode.FLOAT):
        self.evaluator = evaluator
        self.timeout = timeout
        self.focus_after_delete = FocusAfterDelete(focus_after_delete)
        self.sheet = Sheet(mode=Mode(mode))
        self.focused_row = 0

        self._sequence = 0
        self._deferred = False
        self._tasks: Set[asyncio.Task] = set()
        self._listeners: List[Listener] = []

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    @property
    def rows(self) -> List[Row]:
        return self.sheet.rows

    @property
    def mode(self) -> Mode:
        return self.sheet.mode

    @property
    def mode_locked(self) -> bool:
        return self.sheet.mode_locked

    @property
    def sequence(self) -> int:
        """Sequence number of the most recently issued evaluation."""
        return self._sequence

    def results(self) -> List[Optional[Result]]:
        return [row.result for row in self.sheet.rows]

    def full_text(self) -> str:
        return self.sheet.full_text()

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the sheet for the rendering layer."""
        return {
            "rows": [row.to_dict() for row in self.sheet.rows],
            "mode": self.sheet.mode.value,
            "mode_locked": self.sheet.mode_locked,
            "focused_row": self.focused_row,
            "sequence": self._sequence,
        }

    # =========================================================================
    # LISTENERS
    # =========================================================================

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: str, payload: Dict[str, Any]) -> None:
        for listener in list(self._listeners):
            listener(event, payload)

    def _emit_changed(self) -> None:
        self._emit("sheet_changed", self.snapshot())

    def notify(self, message: str) -> None:
        """Send a fire-and-forget status message to listeners."""
        self._emit("notification", {"message": message})

    def _set_focus(self, index: int) -> None:
        self.focused_row = index
        self._emit("focus", {"row": index})

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.sheet.rows):
            raise IndexError(f"Row {index} out of range (sheet has {len(self.sheet.rows)} rows)")

    # =========================================================================
    # ROW MUTATIONS
    # =========================================================================

    def edit_row(self, index: int, text: str) -> None:
        """Replace the text of row ``index`` and re-evaluate the sheet."""
        self._check_index(index)
        _check_text(text)
        self.sheet.rows[index].text = text
        self._emit_changed()
        self._request_evaluation()

    def append_row(self) -> int:
        """Append a blank row and return its index."""
        self.sheet.rows.append(Row())
        self._emit_changed()
        self._request_evaluation()
        return len(self.sheet.rows) - 1

    def enter_at(self, index: int) -> int:
        """
        Handle enter pressed in row ``index``.

        Appends a row when ``index`` is the last row, then focuses the row
        after ``index``.

        Returns:
            int: Index of the newly focused row
        """
        self._check_index(index)
        if index == len(self.sheet.rows) - 1:
            self.append_row()
        self._set_focus(index + 1)
        return index + 1

    def focus_up_from(self, index: int) -> bool:
        return self._move_focus(index - 1)

    def focus_down_from(self, index: int) -> bool:
        return self._move_focus(index + 1)

    def _move_focus(self, target: int) -> bool:
        # Focus never wraps around
        if not 0 <= target < len(self.sheet.rows):
            return False
        self._set_focus(target)
        return True

    def delete_out_from(self, index: int) -> bool:
        """
        Remove row ``index`` unless it is the only row left.

        Returns:
            bool: True if a row was removed
        """
        self._check_index(index)
        if len(self.sheet.rows) == 1:
            return False

        del self.sheet.rows[index]
        if self.focus_after_delete is FocusAfterDelete.SAME:
            target = min(index, len(self.sheet.rows) - 1)
        else:
            target = max(0, index - 1)

        self._emit_changed()
        self._set_focus(target)
        self._request_evaluation()
        return True

    def load_text(self, blob: str, name: Optional[str] = None) -> None:
        """
        Replace every row with the lines of ``blob`` (an opened file).

        An empty blob resets the sheet to a single blank row.
        """
        _check_text(blob)
        self.sheet.replace_texts(blob.replace("\r\n", "\n").split("\n"))
        self.focused_row = 0
        self._emit_changed()
        self._set_focus(0)
        if name:
            self.notify(OPENED_MESSAGE.format(name=name))
        self._request_evaluation()

    def copy_row(self, index: int) -> str:
        """Return the raw input text of row ``index`` for the clipboard."""
        self._check_index(index)
        self.notify(COPIED_MESSAGE.format(line=index + 1))
        return self.sheet.rows[index].text

    # =========================================================================
    # EVALUATION
    # =========================================================================

    def refresh(self) -> int:
        """Issue a new evaluation of the current sheet."""
        return self._request_evaluation()

    def _request_evaluation(self) -> int:
        self._sequence += 1
        sequence = self._sequence

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Picked up by flush() once an event loop is available
            self._deferred = True
            logger.debug("Evaluation #%d deferred until an event loop runs", sequence)
            return sequence

        self._deferred = False
        mode = self.sheet.mode
        text = self.sheet.full_text()
        task = loop.create_task(self._run_evaluation(sequence, mode, text))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug("Issued evaluation #%d (%s mode, %d rows)", sequence, mode.value, len(self.sheet.rows))
        return sequence

    async def _run_evaluation(self, sequence: int, mode: Mode, text: str) -> None:
        try:
            response = await asyncio.wait_for(self.evaluator.evaluate(mode, text), timeout=self.timeout)
        except asyncio.TimeoutError:
            self.on_evaluation_failed(
                sequence, EvaluationTimeoutError(f"Evaluation timed out after {self.timeout}s"))
            return
        except Exception as e:
            self.on_evaluation_failed(sequence, e)
            return
        self.on_evaluation_complete(sequence, response)

    def on_evaluation_complete(self, sequence: int, response: Any) -> bool:
        """
        Apply an evaluation response if it answers the latest request.

        Args:
            sequence (int): Sequence number the request was issued with
            response: One raw outcome per line, in line order

        Returns:
            bool: True if the results were published to the rows
        """
        if sequence != self._sequence:
            logger.debug("Discarding stale evaluation #%d (latest is #%d)", sequence, self._sequence)
            return False

        if not isinstance(response, Sequence) or isinstance(response, (str, bytes)):
            self.on_evaluation_failed(
                sequence, EvaluationError(f"Expected a list of outcomes, got {type(response).__name__}"))
            return False

        rows = self.sheet.rows
        results = [classify(response[i]) if i < len(response) else None for i in range(len(rows))]

        if self._maybe_switch_mode(results):
            return False

        for row, result in zip(rows, results):
            row.result = result
        self._emit_changed()
        return True

    def on_evaluation_failed(self, sequence: int, error: BaseException) -> None:
        """Clear every result after a transport failure of the latest request."""
        if sequence != self._sequence:
            logger.debug("Ignoring failure of stale evaluation #%d: %s", sequence, error)
            return

        logger.error("Evaluation #%d failed: %s", sequence, error)
        self.sheet.clear_results()
        self._emit_changed()

    def _maybe_switch_mode(self, results: List[Optional[Result]]) -> bool:
        if self.sheet.mode_locked:
            return False

        for result in results:
            if not (isinstance(result, Err) and isinstance(result.error, DefinitionNotFoundError)):
                continue
            suggested = detect(result.error.symbol)
            if suggested is not None and suggested != self.sheet.mode:
                self._switch_mode(suggested, result.error.symbol)
                return True
        return False

    def _switch_mode(self, mode: Mode, symbol: str) -> None:
        logger.info("Switching evaluation mode %s -> %s (undefined '%s')",
                    self.sheet.mode.value, mode.value, symbol)
        self.sheet.mode = mode
        self.sheet.mode_locked = True
        self.notify(MODE_SWITCH_MESSAGE.format(mode=mode.label))
        self._emit_changed()
        # The response was computed under the old mode
        self._request_evaluation()

    async def flush(self) -> None:
        """Issue any deferred evaluation and wait until none is in flight."""
        if self._deferred:
            self._request_evaluation()

        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                break
            await asyncio.gather(*pending, return_exceptions=True)

    async def close(self) -> None:
        """Cancel in-flight evaluations."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()


__all__ = ["SheetController", "FocusAfterDelete", "Listener"]
