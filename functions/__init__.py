"""Cloud Functions for Firebase source directory (`main.py` is the entry module)."""
