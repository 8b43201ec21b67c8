"""Auth service and user directory lookups."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from sif_safety.core.config import settings
from sif_safety.core.exceptions import AccountRestricted, UserNotFound
from sif_safety.core.security import hash_password, verify_password
from sif_safety.db.base import as_utc, utcnow
from sif_safety.db.session import commit
from sif_safety.models.user import User
from sif_safety.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get user by email."""
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def get_user(db: Session, user_id: int) -> User:
    """Directory lookup by id. Raises UserNotFound."""
    user = db.get(User, user_id)
    if not user:
        raise UserNotFound()
    return user


def _is_moderator_email(email: str) -> bool:
    return email.lower() in {e.lower() for e in settings.moderator_emails}


def create_user(db: Session, data: RegisterRequest) -> User:
    """Create a new user. Moderator role comes from configuration, never the request."""
    user = User(
        email=data.email,
        hashed_password=hash_password(data.password),
        full_name=data.full_name,
        is_moderator=_is_moderator_email(data.email),
        blocked_users=[],
    )
    db.add(user)
    commit(db)
    db.refresh(user)
    if user.is_moderator:
        logger.info("Registered moderator account user=%s", user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate user by email and password."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    if not user.is_active:
        return None
    return user


def is_currently_suspended(user: User) -> bool:
    """True while a suspension is in force. An elapsed suspension no longer counts."""
    if not user.is_suspended:
        return False
    if user.suspension_end_date is None:
        return True
    return as_utc(user.suspension_end_date) > utcnow()


def ensure_can_post(user: User) -> None:
    """Raise AccountRestricted for banned or currently suspended users."""
    if user.is_banned:
        raise AccountRestricted("Your account has been banned.")
    if is_currently_suspended(user):
        raise AccountRestricted("Your account is suspended.")
