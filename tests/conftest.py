from __future__ import annotations

import pytest

from tests.fake_firestore import FakeFirestore


@pytest.fixture
def fake_db() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture(autouse=True)
def _local_firestore_env(monkeypatch):
    """
    Test hygiene: never let a test reach a real Firestore project.

    Clears the runtime markers that would disable the local emulator guard.
    """
    for name in ("K_SERVICE", "FUNCTION_TARGET", "ALLOW_PROD_FIRESTORE", "FIRESTORE_EMULATOR_HOST"):
        monkeypatch.delenv(name, raising=False)
