"""Firestore-backed handlers behind the learnhub Cloud Functions."""
