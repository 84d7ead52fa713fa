from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_REGION = "europe-west2"
DEFAULT_MAX_INSTANCES = 10
# Midnight UTC, once per day.
DEFAULT_PUBLISH_SCHEDULE = "0 0 * * *"
DEFAULT_PUBLISH_TIMEZONE = "Etc/UTC"
DEFAULT_FETCH_MAX_WORKERS = 16
DEFAULT_SERVICE_NAME = "learnhub-functions"


def _parse_str_env(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip()
    return raw or default


def _parse_int_env(name: str, default: int, *, minimum: int | None = None) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return int(default)
    try:
        value = int(raw)
    except Exception:
        return int(default)
    if minimum is not None and value < minimum:
        return int(default)
    return value


@dataclass(frozen=True)
class FunctionsConfig:
    region: str = DEFAULT_REGION
    max_instances: int = DEFAULT_MAX_INSTANCES
    publish_schedule: str = DEFAULT_PUBLISH_SCHEDULE
    publish_timezone: str = DEFAULT_PUBLISH_TIMEZONE
    fetch_max_workers: int = DEFAULT_FETCH_MAX_WORKERS
    log_level: str = "INFO"
    service_name: str = DEFAULT_SERVICE_NAME


def load_functions_config() -> FunctionsConfig:
    """
    Resolve deploy/runtime settings from the environment.

    Decorator options (region, schedule, instance cap) are read at import time,
    so changes only take effect on the next deploy. Unparseable or out-of-range
    values fall back to the module defaults.
    """
    return FunctionsConfig(
        region=_parse_str_env("FUNCTIONS_REGION", DEFAULT_REGION),
        max_instances=_parse_int_env("FUNCTIONS_MAX_INSTANCES", DEFAULT_MAX_INSTANCES, minimum=1),
        publish_schedule=_parse_str_env("PUBLISH_SCHEDULE", DEFAULT_PUBLISH_SCHEDULE),
        publish_timezone=_parse_str_env("PUBLISH_TIMEZONE", DEFAULT_PUBLISH_TIMEZONE),
        fetch_max_workers=_parse_int_env("FETCH_MAX_WORKERS", DEFAULT_FETCH_MAX_WORKERS, minimum=1),
        log_level=_parse_str_env("LOG_LEVEL", "INFO").upper(),
        service_name=_parse_str_env("SERVICE_NAME", DEFAULT_SERVICE_NAME),
    )
