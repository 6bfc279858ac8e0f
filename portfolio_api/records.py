"""
Records stored in the document database.

Each record knows how to turn itself into a Firestore document body and
back. Document field names stay camelCase so the existing frontend and
stored data keep working.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

PROJECTS_COLLECTION = "projects"
LIKES_COLLECTION = "likes"
OFFERS_COLLECTION = "offers"
MESSAGES_COLLECTION = "messages"


class OfferStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Status strings found on offers stored before the English statuses.
LEGACY_OFFER_STATUSES = {
    "beklemede": OfferStatus.PENDING,
    "onaylandı": OfferStatus.APPROVED,
    "reddedildi": OfferStatus.REJECTED,
}


def parse_offer_status(value: Optional[str]) -> OfferStatus:
    if value in LEGACY_OFFER_STATUSES:
        return LEGACY_OFFER_STATUSES[value]
    return OfferStatus(value or OfferStatus.PENDING.value)


def like_key(project_id: str, user_identifier: str) -> str:
    """Document id of the like a given identifier left on a project."""
    return f"{project_id}_{user_identifier}"


def is_valid_document_id(value: str) -> bool:
    """Whether Firestore accepts ``value`` as a single document id."""
    if not value or "/" in value or value in (".", ".."):
        return False
    if value.startswith("__") and value.endswith("__"):
        return False
    return len(value.encode("utf-8")) <= 1500


@dataclass
class ProjectRecord:
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    likes: int = 0
    comments: list = field(default_factory=list)
    offers: list = field(default_factory=list)
    project_id: Optional[str] = None

    def to_document(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url,
            "likes": self.likes,
            "comments": list(self.comments),
            "offers": list(self.offers),
        }

    @classmethod
    def from_document(cls, project_id: str, data: dict) -> "ProjectRecord":
        return cls(
            project_id=project_id,
            title=data.get("title"),
            description=data.get("description"),
            image_url=data.get("imageUrl"),
            likes=data.get("likes", 0),
            comments=data.get("comments") or [],
            offers=data.get("offers") or [],
        )


@dataclass
class LikeRecord:
    project_id: str
    user_identifier: str
    created_at: Any = None  # Firestore timestamp or datetime

    @property
    def like_id(self) -> str:
        return like_key(self.project_id, self.user_identifier)

    def to_document(self) -> dict:
        return {
            "projectId": self.project_id,
            "userIdentifier": self.user_identifier,
        }


@dataclass
class OfferRecord:
    offer_id: str
    project_id: str
    email: str
    subject: str
    amount: float
    status: OfferStatus = OfferStatus.PENDING
    created_at: Any = None
    updated_at: Any = None
    # Offers added with auto-generated ids live under a different document id.
    document_id: Optional[str] = None

    def __post_init__(self):
        if self.document_id is None:
            self.document_id = self.offer_id

    def to_document(self) -> dict:
        return {
            "offerId": self.offer_id,
            "projectId": self.project_id,
            "email": self.email,
            "subject": self.subject,
            "amount": self.amount,
            "status": self.status.value,
        }

    @classmethod
    def from_document(
        cls, data: dict, document_id: Optional[str] = None
    ) -> "OfferRecord":
        return cls(
            offer_id=data.get("offerId") or document_id,
            document_id=document_id,
            project_id=data.get("projectId"),
            email=data.get("email"),
            subject=data.get("subject"),
            amount=data.get("amount"),
            status=parse_offer_status(data.get("status")),
            created_at=data.get("timestamp"),
            updated_at=data.get("updatedTimestamp"),
        )


@dataclass
class MessageRecord:
    name: Optional[str]
    surname: Optional[str]
    email: str
    subject: Optional[str]
    message: str
    message_id: Optional[str] = None
    created_at: Any = None

    def to_document(self) -> dict:
        return {
            "Name": self.name,
            "Soyad": self.surname,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
        }

    @classmethod
    def from_document(cls, message_id: str, data: dict) -> "MessageRecord":
        return cls(
            message_id=message_id,
            name=data.get("Name"),
            surname=data.get("Soyad"),
            email=data.get("email"),
            subject=data.get("subject"),
            message=data.get("message"),
            created_at=data.get("timestamp"),
        )
