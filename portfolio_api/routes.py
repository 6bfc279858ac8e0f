"""
HTTP routes for the portfolio backend API.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from portfolio_api import likes, offers
from portfolio_api.db import DbClient
from portfolio_api.dependencies import get_db_client, get_identity_client
from portfolio_api.errors import ValidationError
from portfolio_api.identity import IdentityClient
from portfolio_api.records import MessageRecord, ProjectRecord
from portfolio_api.schemas import (
    AddOfferPayload,
    AddProjectPayload,
    AddProjectResponse,
    ContactMessage,
    LikeProjectPayload,
    LoginPayload,
    LoginResponse,
    Offer,
    OfferIdPayload,
    OfferResponse,
    Project,
    SendMessagePayload,
    StatusMessage,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginPayload,
    identity: IdentityClient = Depends(get_identity_client),
):
    """
    Look the admin account up by email. The password itself is verified by
    the Firebase client SDK on the frontend, not here.
    """
    account = identity.get_user_by_email(payload.email)
    logger.info("Login for %s", account.email)
    return LoginResponse(message="Login successful!", user=account.as_dict())


@router.post("/api/send-message", response_model=StatusMessage)
def send_message(payload: SendMessagePayload, db: DbClient = Depends(get_db_client)):
    if not payload.email or not payload.message:
        raise ValidationError("email and message are required.")
    db.save_message(
        MessageRecord(
            name=payload.name,
            surname=payload.surname,
            email=payload.email,
            subject=payload.subject,
            message=payload.message,
        )
    )
    return StatusMessage(message="Message sent successfully!")


@router.get("/messages", response_model=list[ContactMessage])
def list_messages(db: DbClient = Depends(get_db_client)):
    return [ContactMessage.from_record(m) for m in db.list_messages()]


@router.post("/add-project", response_model=AddProjectResponse)
def add_project(payload: AddProjectPayload, db: DbClient = Depends(get_db_client)):
    if not payload.title:
        raise ValidationError("title is required.")
    project = db.add_project(
        ProjectRecord(
            title=payload.title,
            description=payload.description,
            image_url=payload.imageUrl,
        )
    )
    logger.info("Project %s added", project.project_id)
    return AddProjectResponse(message="Project added successfully!", id=project.project_id)


@router.get("/projects", response_model=list[Project])
def list_projects(db: DbClient = Depends(get_db_client)):
    return [Project.from_record(p) for p in db.list_projects()]


@router.post("/like-project", response_model=StatusMessage)
def like_project(
    payload: LikeProjectPayload,
    request: Request,
    db: DbClient = Depends(get_db_client),
):
    client_host = request.client.host if request.client else None
    likes.record_like(db, payload.projectId, payload.userId, client_host)
    return StatusMessage(message="Project liked!")


@router.post("/add-offer", response_model=OfferResponse)
def add_offer(payload: AddOfferPayload, db: DbClient = Depends(get_db_client)):
    offer = offers.submit_offer(
        db, payload.projectId, payload.email, payload.subject, payload.amount
    )
    return OfferResponse(
        message="Offer submitted successfully!", offer=Offer.from_record(offer)
    )


@router.get("/offers", response_model=list[Offer])
def list_offers(db: DbClient = Depends(get_db_client)):
    return [Offer.from_record(o) for o in offers.list_offers(db)]


@router.post("/approve-offer", response_model=OfferResponse)
def approve_offer(payload: OfferIdPayload, db: DbClient = Depends(get_db_client)):
    offer = offers.approve_offer(db, payload.offerId)
    return OfferResponse(message="Offer approved!", offer=Offer.from_record(offer))


@router.delete("/reject-offer", response_model=OfferResponse)
def reject_offer(payload: OfferIdPayload, db: DbClient = Depends(get_db_client)):
    offer = offers.reject_offer(db, payload.offerId)
    return OfferResponse(message="Offer rejected!", offer=Offer.from_record(offer))
