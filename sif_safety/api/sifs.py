"""SIF API: creation and the filtered listing surfaces."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from sif_safety.core.deps import get_current_user
from sif_safety.core.exceptions import ContentSafetyError
from sif_safety.db.session import get_db
from sif_safety.models.user import User
from sif_safety.schemas.sif import SifCreate, SifResponse, SifVisibilityResponse
from sif_safety.services.sif_service import (
    create_sif,
    get_feed,
    get_sif_visibility,
    get_visible_sif,
    list_user_sifs,
    search_sifs,
)

router = APIRouter(tags=["sifs"])


@router.post("/sifs", response_model=SifResponse, status_code=status.HTTP_201_CREATED)
def create(
    data: SifCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Post a new SIF. Suspended users are refused."""
    try:
        return create_sif(db, current_user, data.subject, data.message)
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/sifs/feed", response_model=list[SifResponse])
def feed(
    limit: int = Query(default=20, ge=1, le=100),
    before_id: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Newest SIFs, minus removed content and anything across a block."""
    return get_feed(db, current_user.id, limit, before_id)


@router.get("/sifs/search", response_model=list[SifResponse])
def search(
    q: str = Query(min_length=1, max_length=100),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return search_sifs(db, current_user.id, q, limit)


@router.get("/sifs/{sif_id}", response_model=SifResponse)
def get_one(
    sif_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return get_visible_sif(db, current_user.id, sif_id)
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/sifs/{sif_id}/visibility", response_model=SifVisibilityResponse)
def visibility(
    sif_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Why a SIF is or is not shown to the current user."""
    try:
        return SifVisibilityResponse(sif_id=sif_id, visibility=get_sif_visibility(db, current_user.id, sif_id))
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/users/{user_id}/sifs", response_model=list[SifResponse])
def user_sifs(
    user_id: int,
    limit: int = Query(default=20, ge=1, le=100),
    before_id: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return list_user_sifs(db, current_user.id, user_id, limit, before_id)
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
