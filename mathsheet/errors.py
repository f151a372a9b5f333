"""Exceptions raised by the evaluation plumbing."""


class EvaluationError(Exception):
    """Raised when the evaluation service cannot produce a response."""
    pass


class EvaluationTimeoutError(EvaluationError):
    """Raised when an evaluation request outlives the configured timeout."""
    pass


__all__ = ["EvaluationError", "EvaluationTimeoutError"]
