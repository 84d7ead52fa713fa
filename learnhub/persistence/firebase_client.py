"""
Firebase Admin bootstrap for the deployed functions.

The Admin app is created lazily on the first `get_firestore_client()` call,
never at import, so tests can import `functions.main` without credentials.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Optional

import firebase_admin
from firebase_admin import firestore

_init_lock = threading.Lock()


def _env(name: str) -> str:
    return (os.getenv(name) or "").strip()


def is_local_execution() -> bool:
    """True unless we are on Cloud Functions / Cloud Run (or ENV=local forces it)."""
    if _env("ENV").lower() == "local":
        return True
    return not (_env("K_SERVICE") or _env("FUNCTION_TARGET"))


def require_firestore_emulator_or_allow_prod(*, caller: str) -> None:
    """
    Fail closed when running locally against real Firestore.

    Set FIRESTORE_EMULATOR_HOST, or ALLOW_PROD_FIRESTORE=1 to opt in.
    """
    if not is_local_execution() or _env("FIRESTORE_EMULATOR_HOST") or _env("ALLOW_PROD_FIRESTORE") == "1":
        return
    sys.stderr.write(
        f"Refusing to touch production Firestore from a local run (caller={caller}).\n"
        "Start the emulator and set FIRESTORE_EMULATOR_HOST, or set ALLOW_PROD_FIRESTORE=1.\n"
    )
    raise SystemExit(2)


def _resolve_project_id() -> Optional[str]:
    return _env("FIREBASE_PROJECT_ID") or _env("GOOGLE_CLOUD_PROJECT") or None


def _ensure_app() -> firebase_admin.App:
    with _init_lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            pass
        # No options: the runtime service account and project (ADC) apply.
        project_id = _resolve_project_id()
        return firebase_admin.initialize_app(options={"projectId": project_id} if project_id else None)


def get_firestore_client() -> firestore.Client:
    require_firestore_emulator_or_allow_prod(caller="learnhub.persistence.get_firestore_client")
    return firestore.client(_ensure_app())
