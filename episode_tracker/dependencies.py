"""
Dependency wiring for the remote store and authentication clients.
"""

from __future__ import annotations

import logging

import firebase_admin
from firebase_admin import credentials, firestore

from episode_tracker.auth import AuthClient, FirebaseAuthClient, InMemoryAuthClient
from episode_tracker.config import get_settings
from episode_tracker.store import (
    DocumentStore,
    FirestoreDocumentStore,
    InMemoryDocumentStore,
)

logger = logging.getLogger(__name__)

_auth_client: AuthClient | None = None
_document_store: DocumentStore | None = None


def _use_in_memory() -> bool:
    settings = get_settings()
    if settings.use_in_memory_backends:
        return True
    if not settings.firebase_configured:
        logger.warning(
            "Firebase is not configured; using in-memory backends that last only "
            "for this process"
        )
        return True
    return False


def _initialize_firebase_app() -> None:
    # Check if Firebase is already initialized to prevent re-initialization.
    if firebase_admin._apps:
        return
    settings = get_settings()
    if settings.firebase_service_account_path:
        cred = credentials.Certificate(settings.firebase_service_account_path)
    else:
        cred = credentials.ApplicationDefault()
    firebase_admin.initialize_app(cred, {"projectId": settings.firebase_project_id})
    logger.info("Firebase Admin SDK initialized for %s", settings.firebase_project_id)


def get_auth_client() -> AuthClient:
    """
    Return a singleton auth client so the signed-in user persists across calls.
    """
    global _auth_client
    if _auth_client:
        return _auth_client

    settings = get_settings()
    if _use_in_memory():
        _auth_client = InMemoryAuthClient()
    else:
        _auth_client = FirebaseAuthClient(
            api_key=settings.firebase_api_key,
            timeout=settings.auth_request_timeout,
        )
    return _auth_client


def get_document_store() -> DocumentStore:
    global _document_store
    if _document_store:
        return _document_store

    if _use_in_memory():
        _document_store = InMemoryDocumentStore()
    else:
        _initialize_firebase_app()
        _document_store = FirestoreDocumentStore(firestore.client())
    return _document_store


def reset_clients() -> None:
    """Drop the cached clients (useful in tests)."""
    global _auth_client, _document_store
    _auth_client = None
    _document_store = None
