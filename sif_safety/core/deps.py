"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from sif_safety.core.security import decode_access_token
from sif_safety.db.session import get_db
from sif_safety.models.user import User
from sif_safety.services.auth_service import get_user_by_email

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    db: Annotated[Session, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """Require authenticated, non-banned user. Raises 401/403 otherwise."""
    if not credentials:
        raise _unauthorized("Not authenticated")
    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Invalid or expired token")
    # sub is email for our tokens
    user = get_user_by_email(db, payload["sub"])
    if not user:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise _unauthorized("User is inactive")
    if user.is_banned:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account has been banned.",
        )
    return user


def require_moderator(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Require current user to hold the moderator role."""
    if not current_user.is_moderator:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only moderators can perform this action",
        )
    return current_user
