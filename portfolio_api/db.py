"""
Document store abstraction for Firestore and an in-memory test implementation.
"""

from __future__ import annotations

import functools
import itertools
import logging
import threading
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Optional, Protocol

from firebase_admin import firestore
from google.api_core import exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP, Increment, Query

from portfolio_api.errors import StoreError
from portfolio_api.records import (
    LIKES_COLLECTION,
    MESSAGES_COLLECTION,
    OFFERS_COLLECTION,
    PROJECTS_COLLECTION,
    LikeRecord,
    MessageRecord,
    OfferRecord,
    OfferStatus,
    ProjectRecord,
)

logger = logging.getLogger(__name__)

StatusDecision = Callable[[OfferStatus], OfferStatus]


class LikeOutcome(Enum):
    RECORDED = "recorded"
    DUPLICATE = "duplicate"
    PROJECT_MISSING = "project_missing"


class DbClient(Protocol):
    """Interface for document store access."""

    def save_message(self, message: MessageRecord) -> MessageRecord:
        ...

    def list_messages(self) -> list[MessageRecord]:
        ...

    def add_project(self, project: ProjectRecord) -> ProjectRecord:
        ...

    def list_projects(self) -> list[ProjectRecord]:
        ...

    def add_like(self, like: LikeRecord) -> LikeOutcome:
        """
        Atomically check for an existing like and the project, then bump the
        project's counter and write the like. Nothing is written unless the
        outcome is RECORDED.
        """
        ...

    def create_offer(self, offer: OfferRecord) -> OfferRecord:
        ...

    def list_offers(self) -> list[OfferRecord]:
        ...

    def update_offer_status(
        self, document_id: str, decide: StatusDecision
    ) -> Optional[OfferRecord]:
        """
        Read the offer stored under ``document_id``, ask ``decide`` for its
        next status and write it, all in one transaction. Returns None if the offer does not exist. If
        ``decide`` raises, nothing is written and the error propagates.
        """
        ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDbClient:
    """Simple in-memory document store for development and tests."""

    def __init__(self):
        self._lock = threading.RLock()
        self._sequence = itertools.count()
        self.projects: Dict[str, ProjectRecord] = {}
        self.likes: Dict[str, LikeRecord] = {}
        self.offers: Dict[str, OfferRecord] = {}
        self.messages: Dict[str, MessageRecord] = {}
        # Insertion order breaks ties between equal timestamps.
        self._order: Dict[str, int] = {}

    def _stamp(self, key: str) -> datetime:
        self._order[key] = next(self._sequence)
        return _utcnow()

    def _newest_first(self, records: dict, key_of, created_of) -> list:
        return sorted(
            records.values(),
            key=lambda r: (created_of(r), self._order[key_of(r)]),
            reverse=True,
        )

    def save_message(self, message: MessageRecord) -> MessageRecord:
        with self._lock:
            message.message_id = uuid.uuid4().hex
            message.created_at = self._stamp(message.message_id)
            self.messages[message.message_id] = message
            return message

    def list_messages(self) -> list[MessageRecord]:
        with self._lock:
            return self._newest_first(
                self.messages, lambda m: m.message_id, lambda m: m.created_at
            )

    def add_project(self, project: ProjectRecord) -> ProjectRecord:
        with self._lock:
            project.project_id = uuid.uuid4().hex
            self._stamp(project.project_id)
            self.projects[project.project_id] = project
            return project

    def list_projects(self) -> list[ProjectRecord]:
        with self._lock:
            return list(self.projects.values())

    def add_like(self, like: LikeRecord) -> LikeOutcome:
        with self._lock:
            if like.like_id in self.likes:
                return LikeOutcome.DUPLICATE
            project = self.projects.get(like.project_id)
            if project is None:
                return LikeOutcome.PROJECT_MISSING
            project.likes += 1
            like.created_at = _utcnow()
            self.likes[like.like_id] = like
            return LikeOutcome.RECORDED

    def create_offer(self, offer: OfferRecord) -> OfferRecord:
        with self._lock:
            if offer.document_id in self.offers:
                raise StoreError()
            offer.created_at = self._stamp(offer.document_id)
            self.offers[offer.document_id] = offer
            return offer

    def list_offers(self) -> list[OfferRecord]:
        with self._lock:
            return self._newest_first(
                self.offers, lambda o: o.document_id, lambda o: o.created_at
            )

    def update_offer_status(
        self, document_id: str, decide: StatusDecision
    ) -> Optional[OfferRecord]:
        with self._lock:
            offer = self.offers.get(document_id)
            if offer is None:
                return None
            offer.status = decide(offer.status)
            offer.updated_at = _utcnow()
            return offer

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.projects.clear()
            self.likes.clear()
            self.offers.clear()
            self.messages.clear()
            self._order.clear()


def _store_call(func):
    """Turn Google API failures into StoreError, keeping details in the log."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except exceptions.GoogleAPIError as exc:
            logger.exception("Firestore call %s failed: %s", func.__name__, exc)
            raise StoreError() from exc

    return wrapper


class FirestoreDbClient:
    """
    Firestore-backed implementation. Expects a ``google.cloud.firestore.Client``,
    e.g. ``firebase_admin.firestore.client(app)``.
    """

    def __init__(self, client):
        self.client = client

    @_store_call
    def save_message(self, message: MessageRecord) -> MessageRecord:
        update_time, doc_ref = self.client.collection(MESSAGES_COLLECTION).add(
            {**message.to_document(), "timestamp": SERVER_TIMESTAMP}
        )
        message.message_id = doc_ref.id
        message.created_at = update_time
        return message

    @_store_call
    def list_messages(self) -> list[MessageRecord]:
        query = self.client.collection(MESSAGES_COLLECTION).order_by(
            "timestamp", direction=Query.DESCENDING
        )
        return [MessageRecord.from_document(doc.id, doc.to_dict()) for doc in query.stream()]

    @_store_call
    def add_project(self, project: ProjectRecord) -> ProjectRecord:
        _, doc_ref = self.client.collection(PROJECTS_COLLECTION).add(
            project.to_document()
        )
        project.project_id = doc_ref.id
        return project

    @_store_call
    def list_projects(self) -> list[ProjectRecord]:
        return [
            ProjectRecord.from_document(doc.id, doc.to_dict())
            for doc in self.client.collection(PROJECTS_COLLECTION).stream()
        ]

    @_store_call
    def add_like(self, like: LikeRecord) -> LikeOutcome:
        transaction = self.client.transaction()
        like_ref = self.client.collection(LIKES_COLLECTION).document(like.like_id)
        project_ref = self.client.collection(PROJECTS_COLLECTION).document(
            like.project_id
        )

        @firestore.transactional
        def _like_transaction(transaction, like_ref, project_ref):
            # Firestore requires every read before the first write.
            if like_ref.get(transaction=transaction).exists:
                return LikeOutcome.DUPLICATE
            if not project_ref.get(transaction=transaction).exists:
                return LikeOutcome.PROJECT_MISSING

            transaction.update(project_ref, {"likes": Increment(1)})
            transaction.set(
                like_ref, {**like.to_document(), "timestamp": SERVER_TIMESTAMP}
            )
            return LikeOutcome.RECORDED

        return _like_transaction(transaction, like_ref, project_ref)

    @_store_call
    def create_offer(self, offer: OfferRecord) -> OfferRecord:
        # create() fails if the id is taken, so offers are never overwritten.
        result = (
            self.client.collection(OFFERS_COLLECTION)
            .document(offer.offer_id)
            .create({**offer.to_document(), "timestamp": SERVER_TIMESTAMP})
        )
        offer.created_at = result.update_time
        return offer

    @_store_call
    def list_offers(self) -> list[OfferRecord]:
        query = self.client.collection(OFFERS_COLLECTION).order_by(
            "timestamp", direction=Query.DESCENDING
        )
        return [
            OfferRecord.from_document(doc.to_dict(), doc.id) for doc in query.stream()
        ]

    @_store_call
    def update_offer_status(
        self, document_id: str, decide: StatusDecision
    ) -> Optional[OfferRecord]:
        transaction = self.client.transaction()
        offer_ref = self.client.collection(OFFERS_COLLECTION).document(document_id)

        @firestore.transactional
        def _status_transaction(transaction, offer_ref):
            doc = offer_ref.get(transaction=transaction)
            if not doc.exists:
                return None
            offer = OfferRecord.from_document(doc.to_dict(), doc.id)
            offer.status = decide(offer.status)
            transaction.update(
                offer_ref,
                {"status": offer.status.value, "updatedTimestamp": SERVER_TIMESTAMP},
            )
            return offer

        return _status_transaction(transaction, offer_ref)
