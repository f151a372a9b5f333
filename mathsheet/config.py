"""Configuration classes for the sheet server and command line."""

import os

from mathsheet.constants import (
    DEFAULT_EVALUATOR_URL, DEFAULT_EVALUATION_TIMEOUT, DEFAULT_HOST,
    DEFAULT_PORT, DEFAULT_LOG_LEVEL, DEFAULT_FOCUS_AFTER_DELETE
)


class BaseConfig:
    EVALUATOR_URL = os.environ.get("MATHSHEET_EVALUATOR_URL", DEFAULT_EVALUATOR_URL)
    EVALUATION_TIMEOUT = float(os.environ.get("MATHSHEET_EVALUATION_TIMEOUT", DEFAULT_EVALUATION_TIMEOUT))
    HOST = os.environ.get("MATHSHEET_HOST", DEFAULT_HOST)
    PORT = int(os.environ.get("MATHSHEET_PORT", DEFAULT_PORT))
    LOG_LEVEL = os.environ.get("MATHSHEET_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    FOCUS_AFTER_DELETE = os.environ.get("MATHSHEET_FOCUS_AFTER_DELETE", DEFAULT_FOCUS_AFTER_DELETE)


class TestingConfig(BaseConfig):
    EVALUATION_TIMEOUT = 1.0
    LOG_LEVEL = "DEBUG"


_CONFIGS = {
    "BaseConfig": BaseConfig,
    "TestingConfig": TestingConfig,
}


def get_config(name: str = "BaseConfig") -> type:
    """Return the configuration class registered under ``name``."""
    try:
        return _CONFIGS[name]
    except KeyError:
        raise ValueError(f"Unknown configuration '{name}'") from None


__all__ = ["BaseConfig", "TestingConfig", "get_config"]
