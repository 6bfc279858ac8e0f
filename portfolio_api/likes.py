"""
Project likes, at most one per (project, identifier) pair.
"""

from __future__ import annotations

import logging
from typing import Optional

from portfolio_api.db import DbClient, LikeOutcome
from portfolio_api.errors import AlreadyLikedError, NotFoundError, ValidationError
from portfolio_api.records import LikeRecord, is_valid_document_id

logger = logging.getLogger(__name__)


def resolve_identifier(user_id: Optional[str], client_host: Optional[str]) -> str:
    """Prefer the client-supplied user id, fall back to the caller's address."""
    identifier = (user_id or "").strip() or (client_host or "").strip()
    if not identifier:
        raise ValidationError("Could not identify the user for this like.")
    return identifier


def record_like(
    db: DbClient,
    project_id: Optional[str],
    user_id: Optional[str] = None,
    client_host: Optional[str] = None,
) -> LikeRecord:
    if not project_id:
        raise ValidationError("projectId is required.")
    identifier = resolve_identifier(user_id, client_host)
    like = LikeRecord(project_id=project_id, user_identifier=identifier)
    # Both values end up in document ids.
    if not (
        is_valid_document_id(project_id)
        and is_valid_document_id(identifier)
        and is_valid_document_id(like.like_id)
    ):
        raise ValidationError("projectId or userId is not a valid identifier.")

    outcome = db.add_like(like)

    if outcome is LikeOutcome.DUPLICATE:
        logger.info("Duplicate like on project %s by %s", project_id, identifier)
        raise AlreadyLikedError()
    if outcome is LikeOutcome.PROJECT_MISSING:
        logger.warning("Like for unknown project %s", project_id)
        raise NotFoundError("Project not found.")

    logger.info("Recorded like on project %s by %s", project_id, identifier)
    return like
