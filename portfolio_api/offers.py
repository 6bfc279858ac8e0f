"""
Offer submission and review.

Offers start out ``pending`` and are decided exactly once:

    pending -> approved
    pending -> rejected

Every other transition, including deciding the same way twice, is refused
with InvalidTransitionError and leaves the stored offer untouched.
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import Any, Optional

from portfolio_api.db import DbClient
from portfolio_api.errors import InvalidTransitionError, NotFoundError, ValidationError
from portfolio_api.records import OfferRecord, OfferStatus, is_valid_document_id

logger = logging.getLogger(__name__)

MAX_AMOUNT = 2**63 - 1
INTEGER_STRING = re.compile(r"[0-9]{1,19}")

ALLOWED_TRANSITIONS: dict[OfferStatus, frozenset[OfferStatus]] = {
    OfferStatus.PENDING: frozenset({OfferStatus.APPROVED, OfferStatus.REJECTED}),
    OfferStatus.APPROVED: frozenset(),
    OfferStatus.REJECTED: frozenset(),
}


def next_status(current: OfferStatus, target: OfferStatus) -> OfferStatus:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Offer is already {current.value} and cannot become {target.value}."
        )
    return target


def _parse_amount(amount: Any) -> int | float:
    if isinstance(amount, bool):
        raise ValidationError("amount must be a positive number.")
    if isinstance(amount, str) and INTEGER_STRING.fullmatch(amount.strip()):
        amount = int(amount.strip())
    if isinstance(amount, int):
        # Firestore stores integers as signed 64-bit values.
        if not 0 < amount <= MAX_AMOUNT:
            raise ValidationError("amount must be a positive number.")
        return amount
    try:
        value = float(amount)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError("amount must be a positive number.") from exc
    if not value > 0 or value == float("inf"):
        raise ValidationError("amount must be a positive number.")
    return value


def submit_offer(
    db: DbClient,
    project_id: Optional[str],
    email: Optional[str],
    subject: Optional[str],
    amount: Any,
) -> OfferRecord:
    if not project_id or not email or not subject or amount in (None, ""):
        raise ValidationError()

    offer = OfferRecord(
        offer_id=uuid.uuid4().hex,
        project_id=project_id,
        email=email,
        subject=subject,
        amount=_parse_amount(amount),
        status=OfferStatus.PENDING,
    )
    offer = db.create_offer(offer)
    logger.info("Offer %s submitted for project %s", offer.offer_id, project_id)
    return offer


def list_offers(db: DbClient) -> list[OfferRecord]:
    return db.list_offers()


def _decide_offer(db: DbClient, offer_id: Optional[str], target: OfferStatus) -> OfferRecord:
    if not offer_id:
        raise ValidationError("offerId is required.")
    if not is_valid_document_id(offer_id):
        raise NotFoundError("Offer not found.")

    try:
        offer = db.update_offer_status(
            offer_id, lambda current: next_status(current, target)
        )
    except InvalidTransitionError:
        logger.warning("Refused to mark offer %s as %s", offer_id, target.value)
        raise

    if offer is None:
        logger.info("Offer %s not found", offer_id)
        raise NotFoundError("Offer not found.")
    logger.info("Offer %s is now %s", offer_id, offer.status.value)
    return offer


def approve_offer(db: DbClient, offer_id: Optional[str]) -> OfferRecord:
    return _decide_offer(db, offer_id, OfferStatus.APPROVED)


def reject_offer(db: DbClient, offer_id: Optional[str]) -> OfferRecord:
    return _decide_offer(db, offer_id, OfferStatus.REJECTED)
