import asyncio

import pytest

from mathsheet.mode_detector import Mode


class TableEvaluator:
    """
    Fake evaluation service answering each line from a lookup table keyed by
    (mode, line). Unknown non-blank lines echo back as successes.
    """

    def __init__(self, table=None):
        self.table = table or {}
        self.calls = []

    async def evaluate(self, mode, text):
        self.calls.append((Mode(mode), text))
        outcomes = []
        for line in text.split("\n"):
            if (mode, line) in self.table:
                outcomes.append(self.table[(mode, line)])
            elif not line:
                outcomes.append({"Ok": None})
            else:
                outcomes.append({"Ok": line})
        return outcomes


class GatedEvaluator:
    """Fake evaluation service whose responses are released by the test."""

    def __init__(self):
        self.requests = []

    async def evaluate(self, mode, text):
        gate = asyncio.get_running_loop().create_future()
        self.requests.append((mode, text, gate))
        return await gate


@pytest.fixture
def table_evaluator():
    return TableEvaluator


@pytest.fixture
def gated_evaluator():
    return GatedEvaluator()
