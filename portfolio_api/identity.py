"""
Account lookup for the admin login, backed by Firebase Authentication.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

from firebase_admin import auth
from firebase_admin import exceptions as firebase_exceptions

from portfolio_api.errors import AuthError, StoreError

logger = logging.getLogger(__name__)


@dataclass
class UserAccount:
    uid: str
    email: str
    display_name: Optional[str] = None
    email_verified: bool = False
    disabled: bool = False

    def as_dict(self) -> dict:
        return {
            "uid": self.uid,
            "email": self.email,
            "displayName": self.display_name,
            "emailVerified": self.email_verified,
            "disabled": self.disabled,
        }


class IdentityClient(Protocol):
    """Resolves an email address to an account record."""

    def get_user_by_email(self, email: str) -> UserAccount:
        ...


@dataclass
class InMemoryIdentityClient:
    """Test double for account lookups."""

    users: Dict[str, UserAccount] = field(default_factory=dict)

    def add_user(self, account: UserAccount) -> None:
        self.users[account.email.lower()] = account

    def get_user_by_email(self, email: str) -> UserAccount:
        account = self.users.get((email or "").lower())
        if account is None:
            raise AuthError()
        return account


class FirebaseIdentityClient:
    """
    Looks accounts up with the Firebase Admin SDK. The Admin SDK cannot check
    passwords; that is left to the client-side Firebase sign-in.
    """

    def __init__(self, app=None):
        self.app = app

    def get_user_by_email(self, email: str) -> UserAccount:
        if not email:
            raise AuthError()
        try:
            record = auth.get_user_by_email(email, app=self.app)
        except auth.UserNotFoundError as exc:
            raise AuthError() from exc
        except ValueError as exc:
            # Malformed email address.
            raise AuthError() from exc
        except firebase_exceptions.FirebaseError as exc:
            logger.exception("Firebase Auth lookup failed: %s", exc)
            raise StoreError() from exc
        return UserAccount(
            uid=record.uid,
            email=record.email,
            display_name=record.display_name,
            email_verified=record.email_verified,
            disabled=record.disabled,
        )
