"""
Tests for classifying raw evaluator outcomes into display results.
"""

import pytest

from mathsheet.result_classifier import (
    classify, superscript_exponents, result_to_dict,
    Ok, Err, ParseError, EvalError, UnitError, DefinitionNotFoundError, Unrecognized,
)


def test_absent_outcome_is_not_computed():
    assert classify(None) is None
    assert classify({"Ok": None}) is None


def test_success_text_is_kept():
    assert classify({"Ok": "4"}) == Ok("4")
    assert classify({"Ok": ""}) == Ok("")


def test_success_numbers_are_formatted():
    assert classify({"Ok": 4.0}).display == "4"
    assert classify({"Ok": 2.5}).display == "2.5"
    assert classify({"Ok": 7}).display == "7"


@pytest.mark.parametrize("raw, expected", [
    ("3 m^2", "3 m²"),
    ("1 m^3 s^-2", "1 m³ s⁻²"),
    ("2 s^{-1}", "2 s⁻¹"),
    ("10^12", "10¹²"),
    ("no exponent", "no exponent"),
    ("x^y", "x^y"),
])
def test_superscript_exponents(raw, expected):
    assert superscript_exponents(raw) == expected
    assert classify({"Ok": raw}) == Ok(expected)


def test_superscript_is_idempotent():
    for text in ["3 m^2", "1 m^3 s^-2", "a^2^3", "N^{10}"]:
        once = superscript_exponents(text)
        assert superscript_exponents(once) == once


def test_parse_error_display():
    raw = {"Err": {"ParseError": {"message": "unexpected character ')'",
                                  "span": {"fragment": ")+2", "line": 1, "offset": 3}}}}
    result = classify(raw)
    assert result == Err(ParseError("unexpected character ')'", ")+2"))
    assert result.display == "unexpected character ')': ')+2'"


def test_parse_error_wrapped_in_source():
    raw = {"Err": {"ParseError": {"source": {"message": "bad", "span": {"fragment": "x"}}}}}
    assert classify(raw).display == "bad: 'x'"


def test_eval_and_unit_errors_are_verbatim():
    assert classify({"Err": {"EvalError": "Division by zero"}}) == Err(EvalError("Division by zero"))
    result = classify({"Err": {"UnitError": "Invalid unit prefix 'q'"}})
    assert result == Err(UnitError("Invalid unit prefix 'q'"))
    assert result.display == "Invalid unit prefix 'q'"


def test_definition_not_found():
    result = classify({"Err": {"DefinitionNotFoundError": "i"}})
    assert result == Err(DefinitionNotFoundError("i"))
    assert result.display == "Definition not found: 'i'"


@pytest.mark.parametrize("raw", [
    "plain string",
    42,
    ["Ok", "4"],
    {"Ok": "1", "Err": "2"},
    {"Err": "oops"},
    {"Err": {"SomethingElse": 1}},
    {"Err": {"ParseError": {"message": "no span"}}},
    {"Err": {"EvalError": 12}},
    {"Weird": object()},
])
def test_unknown_shapes_degrade_to_unrecognized(raw):
    result = classify(raw)
    assert isinstance(result, Err)
    assert isinstance(result.error, Unrecognized)
    assert result.display


def test_unrecognized_preserves_raw_json():
    result = classify({"Err": "oops"})
    assert result.display == '{"Err": "oops"}'


def test_result_to_dict():
    assert result_to_dict(None) is None
    assert result_to_dict(Ok("4")) == {"status": "ok", "display": "4"}
    assert result_to_dict(Err(DefinitionNotFoundError("kg"))) == {
        "status": "error",
        "kind": "DefinitionNotFoundError",
        "display": "Definition not found: 'kg'",
        "symbol": "kg",
    }
