# settings.py
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

import structlog

from charts import MIN_HEIGHT, MIN_WIDTH

DEFAULT_API_URL = (
    "https://rc-vault-fap-live-1.azurewebsites.net/api/gettimeentries"
    "?code=vO17RnE8vuzXzPJo5eaLLjXjmRW07law99QTD90zat9FfOQJKKUcgQ=="
)
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_RETRIES = 0
DEFAULT_CHART_WIDTH = 800
DEFAULT_CHART_HEIGHT = 600
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    retries: int = DEFAULT_RETRIES
    chart_width: int = DEFAULT_CHART_WIDTH
    chart_height: int = DEFAULT_CHART_HEIGHT
    data_dir: Path = field(default_factory=Path.cwd)
    log_level: str = DEFAULT_LOG_LEVEL


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    try:
        val = float(env.get(key, default) or default)
        return val if val > 0 else default
    except ValueError:
        return default


def _env_int(env: Mapping[str, str], key: str, default: int, minimum: int = 1) -> int:
    try:
        val = int(env.get(key, default) or default)
        return val if val >= minimum else default
    except ValueError:
        return default


def pick_data_dir(env: Mapping[str, str] | None = None) -> Path:
    """First writable folder among $DATA_DIR, /data and ./data; falls back to the cwd."""
    env = os.environ if env is None else env
    candidates = []
    if env.get("DATA_DIR"):
        candidates.append(Path(env["DATA_DIR"]))
    candidates += [Path("/data"), Path.cwd() / "data"]

    for p in candidates:
        try:
            p.mkdir(parents=True, exist_ok=True)
            t = p / ".rwtest"
            t.write_text("ok")
            t.unlink(missing_ok=True)
            return p
        except OSError:
            continue
    return Path.cwd()


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Reads settings from the environment. Invalid numbers fall back to defaults."""
    env = os.environ if environ is None else environ
    return Settings(
        api_url=env.get("TIME_ENTRIES_URL") or DEFAULT_API_URL,
        timeout_s=_env_float(env, "TIME_ENTRIES_TIMEOUT", DEFAULT_TIMEOUT_S),
        retries=_env_int(env, "TIME_ENTRIES_RETRIES", DEFAULT_RETRIES, minimum=0),
        chart_width=_env_int(env, "CHART_WIDTH", DEFAULT_CHART_WIDTH, minimum=MIN_WIDTH),
        chart_height=_env_int(env, "CHART_HEIGHT", DEFAULT_CHART_HEIGHT, minimum=MIN_HEIGHT),
        data_dir=pick_data_dir(env),
        log_level=(env.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Console logging through structlog, filtered at `level`."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


__all__ = ["Settings", "configure_logging", "load_settings", "pick_data_dir"]
