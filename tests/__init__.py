"""
Test package marker so `tests.fake_firestore` is importable from test modules.
"""
