"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

import firebase_admin
from firebase_admin import credentials, firestore

from portfolio_api.config import get_settings
from portfolio_api.db import DbClient, FirestoreDbClient, InMemoryDbClient
from portfolio_api.identity import (
    FirebaseIdentityClient,
    IdentityClient,
    InMemoryIdentityClient,
)

logger = logging.getLogger(__name__)

_firebase_app: firebase_admin.App | None = None
_db_client: DbClient | None = None
_identity_client: IdentityClient | None = None


def _use_in_memory() -> bool:
    settings = get_settings()
    if settings.use_in_memory_backends:
        return True
    if not settings.service_account_info:
        logger.warning(
            "SERVICE_ACCOUNT_KEY is not set; using in-memory backends."
        )
        return True
    return False


def get_firebase_app() -> firebase_admin.App:
    """Initialize the Firebase app once from the configured service account."""
    global _firebase_app
    if _firebase_app:
        return _firebase_app

    settings = get_settings()
    cred = credentials.Certificate(settings.service_account_info)
    _firebase_app = firebase_admin.initialize_app(cred)
    return _firebase_app


def get_db_client() -> DbClient:
    """
    Return a singleton store client; in-memory state must survive across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    if _use_in_memory():
        _db_client = InMemoryDbClient()
    else:
        _db_client = FirestoreDbClient(firestore.client(get_firebase_app()))
    return _db_client


def get_identity_client() -> IdentityClient:
    global _identity_client
    if _identity_client:
        return _identity_client

    if _use_in_memory():
        _identity_client = InMemoryIdentityClient()
    else:
        _identity_client = FirebaseIdentityClient(get_firebase_app())
    return _identity_client
