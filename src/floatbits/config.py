from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from .converter import check_precision
from .errors import InvalidPrecisionError
from .layouts import Layout, get_predefined_layout

DEFAULT_PRECISION = 20
DEFAULT_LAYOUT = "single"
DEFAULT_LOG_LEVEL = "WARNING"

ENV_PREFIX = "FLOATBITS_"


@dataclass(frozen=True)
class Settings:
    precision: int = DEFAULT_PRECISION
    layout_name: str = DEFAULT_LAYOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def layout(self) -> Layout:
        return get_predefined_layout(self.layout_name)

    @property
    def log_level_number(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING


def getenv(
    name: str,
    dtype: Callable[[str], Any] | None = None,
    defval: Any = None,
    environ: Mapping[str, str] | None = None,
) -> Any:
    source = os.environ if environ is None else environ
    env = source.get(ENV_PREFIX + name)
    if env is None:
        return defval
    return dtype(env) if dtype is not None else env


def _parse_precision(text: str) -> int:
    try:
        value = int(text.strip())
    except ValueError as exc:
        raise InvalidPrecisionError(f"Invalid precision: {text!r}") from exc
    return check_precision(value)


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    settings = Settings(
        precision=getenv(
            "PRECISION",
            dtype=_parse_precision,
            defval=DEFAULT_PRECISION,
            environ=environ,
        ),
        layout_name=getenv("LAYOUT", defval=DEFAULT_LAYOUT, environ=environ),
        log_level=getenv("LOG_LEVEL", defval=DEFAULT_LOG_LEVEL, environ=environ),
    )
    get_predefined_layout(settings.layout_name)
    return settings
