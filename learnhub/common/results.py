"""
Call result contract for callable handlers.

Handlers never raise for expected failure paths. They return a `CallResult`
that is either a success payload or one of three named error conditions; the
Firebase adapter in `functions/` is the only place that turns a failure into an
`HttpsError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class CallErrorCode(str, Enum):
    # Values match the Firebase callable error code strings.
    UNAUTHENTICATED = "unauthenticated"
    INVALID_ARGUMENT = "invalid-argument"
    INTERNAL = "internal"


@dataclass(frozen=True)
class CallError:
    code: CallErrorCode
    message: str


@dataclass(frozen=True)
class CallResult:
    payload: Dict[str, Any] = field(default_factory=dict)
    error: Optional[CallError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, payload: Dict[str, Any]) -> "CallResult":
        return cls(payload=dict(payload), error=None)

    @classmethod
    def failure(cls, code: CallErrorCode, message: str) -> "CallResult":
        return cls(payload={}, error=CallError(code=code, message=message))
