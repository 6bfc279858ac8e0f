"""
Pydantic schemas for the portfolio FastAPI backend.

Request fields are optional at the schema level so that missing values reach
the workflows and come back as a 400 with the usual error body.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from portfolio_api.records import MessageRecord, OfferRecord, ProjectRecord


class LoginPayload(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    message: str
    user: dict


class SendMessagePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, alias="Name")
    surname: Optional[str] = Field(default=None, alias="Soyad")
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class ContactMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: Optional[str] = Field(default=None, alias="Name")
    surname: Optional[str] = Field(default=None, alias="Soyad")
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: MessageRecord) -> "ContactMessage":
        return cls(
            id=record.message_id,
            name=record.name,
            surname=record.surname,
            email=record.email,
            subject=record.subject,
            message=record.message,
            timestamp=record.created_at,
        )


class StatusMessage(BaseModel):
    message: str


class AddProjectPayload(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    imageUrl: Optional[str] = None


class AddProjectResponse(BaseModel):
    message: str
    id: str


class Project(BaseModel):
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    imageUrl: Optional[str] = None
    likes: int = 0
    comments: list = Field(default_factory=list)
    offers: list = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: ProjectRecord) -> "Project":
        return cls(
            id=record.project_id,
            title=record.title,
            description=record.description,
            imageUrl=record.image_url,
            likes=record.likes,
            comments=record.comments,
            offers=record.offers,
        )


class LikeProjectPayload(BaseModel):
    projectId: Optional[str] = None
    userId: Optional[str] = None


class AddOfferPayload(BaseModel):
    projectId: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    amount: Any = None


class OfferIdPayload(BaseModel):
    offerId: Optional[str] = None


class Offer(BaseModel):
    id: str
    offerId: str
    projectId: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    amount: Any = None
    status: str
    timestamp: Optional[datetime] = None
    updatedTimestamp: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: OfferRecord) -> "Offer":
        return cls(
            id=record.document_id,
            offerId=record.offer_id,
            projectId=record.project_id,
            email=record.email,
            subject=record.subject,
            amount=record.amount,
            status=record.status.value,
            timestamp=record.created_at,
            updatedTimestamp=record.updated_at,
        )


class OfferResponse(BaseModel):
    message: str
    offer: Offer
