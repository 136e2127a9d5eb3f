"""Infrastructure tests: settings, error envelopes, structured logging, result models.

Tests cover:
    - CLINICALC_* environment overrides
    - Error codes, categories, severities and the to_response envelope
    - JSONFormatter extras; setup_logging handler installation and CLINICALC_LOG_* defaults
    - ValidationResult consistency between is_valid and errors
"""

import json
import logging

import pytest
from pydantic import ValidationError

from clinicalc.config import Settings, get_settings
from clinicalc.errors import (
    CalculatorNotFoundError,
    ClinicalcError,
    ErrorCategory,
    ErrorSeverity,
    InvalidInputError,
)
from clinicalc.models import ValidationResult
from clinicalc.observability import JSONFormatter, setup_logging


# -- settings -----------------------------------------------------------------

def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("CLINICALC_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("CLINICALC_LOG_FORMAT", "json")
    monkeypatch.setenv("CLINICALC_WARN_ON_OVERWRITE", "false")
    settings = Settings(_env_file=None)
    assert settings.log_level == "WARNING"
    assert settings.log_format == "json"
    assert settings.warn_on_overwrite is False


def test_settings_reject_unknown_log_format():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_format="xml")


# -- errors -------------------------------------------------------------------

def test_not_found_envelope():
    err = CalculatorNotFoundError("nope")
    body = err.to_response()["error"]
    assert body["code"] == "CALCULATOR_NOT_FOUND"
    assert body["message"] == "Calculator not found: nope"
    assert body["category"] == "resource_not_found"
    assert body["severity"] == "error"
    assert body["calculator_id"] == "nope"
    assert isinstance(err, ClinicalcError)


def test_invalid_input_keeps_individual_messages():
    err = InvalidInputError(["a", "b"], calculator_id="bmi_calculator")
    assert str(err) == "a; b"
    assert err.errors == ["a", "b"]
    assert err.category is ErrorCategory.VALIDATION
    assert err.to_response()["error"]["calculator_id"] == "bmi_calculator"


def test_invalid_input_is_a_warning_and_not_found_an_error():
    assert InvalidInputError(["a"]).severity is ErrorSeverity.WARNING
    assert InvalidInputError(["a"]).to_response()["error"]["severity"] == "warning"
    assert CalculatorNotFoundError("nope").severity is ErrorSeverity.ERROR


# -- logging ------------------------------------------------------------------

def _record(**extra):
    record = logging.LogRecord("clinicalc.test", logging.WARNING, __file__, 1, "Unknown calculator %s", ("x",), None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_surfaces_extras():
    line = JSONFormatter().format(_record(calculator_id="x", error_code="CALCULATOR_NOT_FOUND"))
    payload = json.loads(line)
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "clinicalc.test"
    assert payload["message"] == "Unknown calculator x"
    assert payload["calculator_id"] == "x"
    assert payload["error_code"] == "CALCULATOR_NOT_FOUND"
    assert "field_count" not in payload


def test_json_formatter_keeps_non_ascii():
    record = logging.LogRecord("clinicalc.test", logging.INFO, __file__, 1, "Interpretación", (), None)
    assert "Interpretación" in JSONFormatter().format(record)


def test_setup_logging_installs_handler():
    root = logging.getLogger()
    level = root.level
    handler = setup_logging("debug", "json")
    try:
        assert handler in root.handlers
        assert isinstance(handler.formatter, JSONFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.removeHandler(handler)
        root.setLevel(level)


def test_setup_logging_defaults_come_from_environment(monkeypatch):
    monkeypatch.setenv("CLINICALC_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("CLINICALC_LOG_FORMAT", "text")
    get_settings.cache_clear()
    root = logging.getLogger()
    level = root.level
    handler = setup_logging()
    try:
        assert root.level == logging.WARNING
        assert not isinstance(handler.formatter, JSONFormatter)
    finally:
        root.removeHandler(handler)
        root.setLevel(level)
        get_settings.cache_clear()


# -- models -------------------------------------------------------------------

def test_validation_result_must_be_consistent():
    assert ValidationResult.from_errors([]).is_valid is True
    assert ValidationResult.from_errors(["x"]).is_valid is False
    with pytest.raises(ValidationError):
        ValidationResult(is_valid=True, errors=["x"])
    with pytest.raises(ValidationError):
        ValidationResult(is_valid=False, errors=[])
