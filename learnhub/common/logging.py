"""
JSON-lines logging for Cloud Functions.

The Functions runtime ships stdout to Cloud Logging, which parses each JSON line
and maps `severity` onto the entry's log level. Each line carries the deployment
identity (service, env, version, sha), the invocation's request id, a stable
`event_type` and any `extra={...}` fields.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

_REQUEST_ID: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Every attribute a bare LogRecord has; anything else on a record came from `extra`.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime", "taskName"}

# Cloud Logging severities that differ from the stdlib level names.
_SEVERITY_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


def _one_line(value: Any, limit: int) -> str:
    text = " ".join(str(value).split()) if value is not None else ""
    return text if len(text) <= limit else text[: limit - 1] + "…"


def _first_env(*names: str) -> str:
    for name in names:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return "unknown"


def _deployment_labels(**overrides: Optional[str]) -> Dict[str, str]:
    labels = {
        "service": _first_env("SERVICE_NAME", "K_SERVICE", "FUNCTION_TARGET"),
        "env": _first_env("ENVIRONMENT", "ENV"),
        "version": _first_env("APP_VERSION", "K_REVISION"),
        "sha": _first_env("GIT_SHA", "COMMIT_SHA"),
    }
    labels.update({k: _one_line(v, 128) for k, v in overrides.items() if v})
    return labels


def get_request_id() -> Optional[str]:
    return _REQUEST_ID.get()


@contextmanager
def bind_request_id(*, request_id: Optional[str] = None) -> Iterator[str]:
    """Scope a request id to the current invocation, generating one when absent."""
    rid = _one_line(request_id, 128) or uuid.uuid4().hex
    token = _REQUEST_ID.set(rid)
    try:
        yield rid
    finally:
        _REQUEST_ID.reset(token)


class JsonLogFormatter(logging.Formatter):
    def __init__(
        self,
        *,
        service: Optional[str] = None,
        env: Optional[str] = None,
        version: Optional[str] = None,
        sha: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._labels = _deployment_labels(service=service, env=env, version=version, sha=sha)

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        severity = record.levelname.upper()
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "severity": _SEVERITY_ALIASES.get(severity, severity),
            **self._labels,
            "request_id": get_request_id(),
            "event_type": "log",
            "message": _one_line(record.getMessage(), 4000),
            "logger": record.name,
        }
        if record.exc_info:
            payload["exception"] = "".join(traceback.format_exception(*record.exc_info))[-8000:]

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                payload[key] = value

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def init_structured_logging(
    *,
    service: Optional[str] = None,
    level: Optional[str] = None,
) -> None:
    """
    Route the root logger to stdout as JSON lines.

    Calling it again swaps in a fresh handler; handlers installed by anything
    else (pytest's caplog, for one) are left in place.
    """
    root = logging.getLogger()
    root.setLevel((level or os.getenv("LOG_LEVEL") or "INFO").upper())
    for handler in list(root.handlers):
        if isinstance(handler.formatter, JsonLogFormatter):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonLogFormatter(service=service))
    root.addHandler(handler)


def log_event(
    logger: logging.Logger,
    event_type: str,
    *,
    level: int = logging.INFO,
    message: Optional[str] = None,
    **fields: Any,
) -> None:
    """Log a semantic event; `fields` become top-level keys of the JSON line."""
    logger.log(level, message or event_type, extra={"event_type": event_type, **fields})
