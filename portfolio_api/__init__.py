"""
Backend package for the portfolio site API.

This package provides a FastAPI application over a Firestore-backed
document store, with in-memory gateways for local runs and tests.
"""
