from __future__ import annotations

from typing import Any, Dict

from firebase_functions import https_fn

from learnhub.common.results import CallErrorCode, CallResult

_ERROR_CODES: Dict[CallErrorCode, https_fn.FunctionsErrorCode] = {
    CallErrorCode.UNAUTHENTICATED: https_fn.FunctionsErrorCode.UNAUTHENTICATED,
    CallErrorCode.INVALID_ARGUMENT: https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
    CallErrorCode.INTERNAL: https_fn.FunctionsErrorCode.INTERNAL,
}


def to_callable_response(result: CallResult) -> Dict[str, Any]:
    """
    Return the success payload, or raise the HttpsError the callable protocol
    expects for a failed result.
    """
    error = result.error
    if error is None:
        return dict(result.payload)

    raise https_fn.HttpsError(
        code=_ERROR_CODES.get(error.code, https_fn.FunctionsErrorCode.INTERNAL),
        message=error.message,
    )
