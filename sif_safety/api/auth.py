"""Auth endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from sif_safety.core.deps import get_current_user
from sif_safety.core.security import create_access_token
from sif_safety.db.session import commit, get_db
from sif_safety.models.user import User
from sif_safety.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UpdateProfileRequest, UserMe
from sif_safety.services.auth_service import authenticate_user, create_user, get_user_by_email

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserMe)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Register a new user."""
    if get_user_by_email(db, data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )
    return create_user(db, data)


@router.post("/login", response_model=TokenResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
):
    """Login and return access token."""
    user = authenticate_user(db, data.email, data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return TokenResponse(access_token=create_access_token(user.email, is_moderator=user.is_moderator))


@router.get("/me", response_model=UserMe)
def me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user, including moderator and sanction flags."""
    return current_user


@router.put("/me", response_model=UserMe)
def update_me(
    data: UpdateProfileRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update current user's display name."""
    if data.full_name is not None:
        current_user.full_name = data.full_name
    commit(db)
    db.refresh(current_user)
    return current_user
