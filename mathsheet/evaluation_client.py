"""
MathSheet Evaluation Client
HTTP client for the external evaluation engine.
"""

import asyncio
import logging
import threading
from typing import Any, List, Optional

import requests

from mathsheet.constants import DEFAULT_EVALUATOR_URL, DEFAULT_EVALUATION_TIMEOUT
from mathsheet.errors import EvaluationError
from mathsheet.mode_detector import Mode

logger = logging.getLogger(__name__)


class HttpEvaluationService:
    """
    Evaluates a whole sheet by posting it to the engine's ``/api/evaluate``.

    The engine answers with one raw outcome per line, either as a JSON list or
    wrapped as ``{"results": [...]}``.
    """

    def __init__(self, base_url: str = DEFAULT_EVALUATOR_URL,
                 timeout: float = DEFAULT_EVALUATION_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        # requests.Session is not thread-safe; evaluate() runs on worker threads
        self._session_lock = threading.Lock()

    @property
    def url(self) -> str:
        return f"{self.base_url}/api/evaluate"

    def evaluate_sync(self, mode: Mode, text: str) -> List[Any]:
        """
        Blocking evaluation request.

        Args:
            mode (Mode): Evaluation entry point
            text (str): Newline-joined sheet text

        Returns:
            list: Raw outcomes in line order

        Raises:
            EvaluationError: On network failure, error status or malformed body
        """
        payload = {"mode": Mode(mode).value, "input": text}
        try:
            with self._session_lock:
                response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.warning("Evaluation request to %s failed: %s", self.url, e)
            raise EvaluationError(f"Evaluation request failed: {e}") from e
        except ValueError as e:
            raise EvaluationError(f"Evaluator returned invalid JSON: {e}") from e

        if isinstance(data, dict) and "results" in data:
            data = data["results"]
        if not isinstance(data, list):
            raise EvaluationError(f"Evaluator returned {type(data).__name__}, expected a list")
        return data

    async def evaluate(self, mode: Mode, text: str) -> List[Any]:
        return await asyncio.to_thread(self.evaluate_sync, mode, text)

    def close(self) -> None:
        self.session.close()


__all__ = ["HttpEvaluationService"]
