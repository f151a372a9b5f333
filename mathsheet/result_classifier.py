"""
MathSheet Result Classifier
Turns the untyped per-line outcomes returned by the evaluation service into
display-ready results.

The evaluator serializes each line as ``{"Ok": payload}`` or
``{"Err": {"<Kind>": detail}}``. Anything else is preserved verbatim as an
``Unrecognized`` error so that every row can always be rendered.
"""

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Union

from mathsheet.constants import DEFINITION_NOT_FOUND_TEMPLATE, SUPERSCRIPT_MAP


# =============================================================================
# ERROR DESCRIPTORS
# =============================================================================

@dataclass(frozen=True)
class ParseError:
    message: str
    offending_fragment: str
    kind: ClassVar[str] = "ParseError"

    @property
    def display(self) -> str:
        return f"{self.message}: '{self.offending_fragment}'"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "display": self.display,
                "message": self.message, "fragment": self.offending_fragment}


@dataclass(frozen=True)
class EvalError:
    message: str
    kind: ClassVar[str] = "EvalError"

    @property
    def display(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "display": self.display, "message": self.message}


@dataclass(frozen=True)
class UnitError:
    message: str
    kind: ClassVar[str] = "UnitError"

    @property
    def display(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "display": self.display, "message": self.message}


@dataclass(frozen=True)
class DefinitionNotFoundError:
    symbol: str
    kind: ClassVar[str] = "DefinitionNotFoundError"

    @property
    def display(self) -> str:
        return DEFINITION_NOT_FOUND_TEMPLATE.format(symbol=self.symbol)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "display": self.display, "symbol": self.symbol}


@dataclass(frozen=True)
class Unrecognized:
    """Fallback for outcome shapes the classifier does not know."""
    raw: str
    kind: ClassVar[str] = "Unrecognized"

    @property
    def display(self) -> str:
        return self.raw

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "display": self.display, "raw": self.raw}


ErrorDescriptor = Union[ParseError, EvalError, UnitError, DefinitionNotFoundError, Unrecognized]


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class Ok:
    text: str

    @property
    def display(self) -> str:
        return self.text

    def to_dict(self) -> Dict[str, Any]:
        return {"status": "ok", "display": self.text}


@dataclass(frozen=True)
class Err:
    error: ErrorDescriptor

    @property
    def display(self) -> str:
        return self.error.display

    def to_dict(self) -> Dict[str, Any]:
        return {"status": "error", **self.error.to_dict()}


# A row whose result is None has not been computed (blank display)
Result = Union[Ok, Err]


def result_to_dict(result: Optional[Result]) -> Optional[Dict[str, Any]]:
    """JSON-ready form of a row result; None stays None."""
    if result is None:
        return None
    return result.to_dict()


# =============================================================================
# SUPERSCRIPT FORMATTING
# =============================================================================

_EXPONENT_PATTERN = re.compile(r"\^\{(-?\d+)\}|\^(-?\d+)")


def superscript_exponents(text: str) -> str:
    """
    Rewrite caret exponents ("m^2", "s^{-1}") with superscript characters.

    The output contains no caret for any rewritten exponent, so applying the
    function again leaves it unchanged.
    """
    def replace(match):
        digits = match.group(1) if match.group(1) is not None else match.group(2)
        return "".join(SUPERSCRIPT_MAP[ch] for ch in digits)

    return _EXPONENT_PATTERN.sub(replace, text)


# =============================================================================
# CLASSIFICATION
# =============================================================================

def _serialize(raw: Any) -> str:
    try:
        return json.dumps(raw, ensure_ascii=False, default=str)
    except (TypeError, ValueError, RecursionError):
        return repr(raw)


def _payload_text(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    if isinstance(payload, bool):
        return str(payload).lower()
    if isinstance(payload, float) and payload.is_integer():
        return str(int(payload))
    if isinstance(payload, (int, float)):
        return repr(payload)
    return _serialize(payload)


def _single_entry(value: Any):
    """Return (key, detail) for a one-key mapping, otherwise None."""
    if isinstance(value, Mapping) and len(value) == 1:
        key, detail = next(iter(value.items()))
        if isinstance(key, str):
            return key, detail
    return None


def _message_of(detail: Any) -> Optional[str]:
    if isinstance(detail, str):
        return detail
    if isinstance(detail, Mapping) and isinstance(detail.get("message"), str):
        return detail["message"]
    return None


def _parse_error(detail: Any) -> Optional[ParseError]:
    # Serialized as {"source": {...}} when wrapped by the top-level error
    if isinstance(detail, Mapping) and "source" in detail and "message" not in detail:
        detail = detail["source"]
    if not isinstance(detail, Mapping):
        return None
    message = detail.get("message")
    span = detail.get("span")
    fragment = span.get("fragment") if isinstance(span, Mapping) else None
    if not isinstance(message, str) or not isinstance(fragment, str):
        return None
    return ParseError(message=message, offending_fragment=fragment)


def _classify_error(detail: Any) -> Optional[ErrorDescriptor]:
    entry = _single_entry(detail)
    if entry is None:
        return None
    kind, inner = entry

    if kind == "ParseError":
        return _parse_error(inner)
    if kind == "EvalError":
        message = _message_of(inner)
        return EvalError(message) if message is not None else None
    if kind == "UnitError":
        message = _message_of(inner)
        return UnitError(message) if message is not None else None
    if kind == "DefinitionNotFoundError":
        if isinstance(inner, Mapping):
            inner = inner.get("symbol")
        return DefinitionNotFoundError(inner) if isinstance(inner, str) else None
    return None


def classify(raw: Any) -> Optional[Result]:
    """
    Classify one raw evaluation outcome.

    Args:
        raw: Outcome for one line as decoded from the evaluator's JSON

    Returns:
        Ok or Err, or None when the line has no result (absent outcome or a
        blank line). Never raises.
    """
    if raw is None:
        return None

    entry = _single_entry(raw)
    if entry is not None:
        tag, payload = entry
        if tag == "Ok":
            if payload is None:
                return None
            return Ok(superscript_exponents(_payload_text(payload)))
        if tag == "Err":
            descriptor = _classify_error(payload)
            if descriptor is not None:
                return Err(descriptor)

    return Err(Unrecognized(_serialize(raw)))


__all__ = [
    "ParseError", "EvalError", "UnitError", "DefinitionNotFoundError",
    "Unrecognized", "ErrorDescriptor", "Ok", "Err", "Result",
    "classify", "superscript_exponents", "result_to_dict",
]
