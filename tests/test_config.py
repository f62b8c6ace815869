import logging

import pytest

from floatbits.config import DEFAULT_PRECISION, Settings, getenv, load_settings
from floatbits.errors import InvalidPrecisionError, UnknownPresetError


def test_defaults_without_environment() -> None:
    settings = load_settings({})
    assert settings == Settings()
    assert settings.precision == DEFAULT_PRECISION
    assert settings.layout.widths == (1, 8, 23)
    assert settings.log_level_number == logging.WARNING


def test_environment_overrides() -> None:
    settings = load_settings(
        {
            "FLOATBITS_PRECISION": "9",
            "FLOATBITS_LAYOUT": "bfloat16",
            "FLOATBITS_LOG_LEVEL": "debug",
        }
    )
    assert settings.precision == 9
    assert settings.layout.widths == (1, 8, 7)
    assert settings.log_level_number == logging.DEBUG


def test_invalid_environment_values_raise() -> None:
    with pytest.raises(InvalidPrecisionError):
        load_settings({"FLOATBITS_PRECISION": "many"})
    with pytest.raises(InvalidPrecisionError):
        load_settings({"FLOATBITS_PRECISION": "0"})
    with pytest.raises(UnknownPresetError):
        load_settings({"FLOATBITS_LAYOUT": "float99"})


def test_getenv_reads_prefixed_names() -> None:
    environ = {"FLOATBITS_PRECISION": "12"}
    assert getenv("PRECISION", dtype=int, environ=environ) == 12
    assert getenv("LAYOUT", defval="single", environ=environ) == "single"


def test_unknown_log_level_falls_back_to_warning() -> None:
    assert Settings(log_level="chatty").log_level_number == logging.WARNING
