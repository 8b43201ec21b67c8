"""Blocking API."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from sif_safety.core.deps import get_current_user
from sif_safety.core.exceptions import ContentSafetyError
from sif_safety.db.session import get_db
from sif_safety.models.user import User
from sif_safety.schemas.block import (
    BlockedUserDetail,
    BlockRequest,
    BlockResponse,
    BlockStatusResponse,
    UnblockResponse,
    UserBlockingInfoResponse,
)
from sif_safety.services.block_service import (
    block_user,
    get_blocked_users_with_details,
    get_user_blocking_info,
    is_user_blocked,
    load_blocked_users,
    should_prevent_interaction,
    unblock_user,
)

router = APIRouter(prefix="/blocks", tags=["blocks"])


@router.post("", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
def block(
    data: BlockRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Block another user. Their SIFs disappear from your listings."""
    try:
        return block_user(db, current_user.id, data.user_id, data.reason)
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{user_id}", response_model=UnblockResponse)
def unblock(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        removed = unblock_user(db, current_user.id, user_id)
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return UnblockResponse(user_id=user_id, removed=removed)


@router.get("", response_model=list[int])
def list_blocked(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Ids the current user blocks."""
    return sorted(load_blocked_users(db, current_user.id))


@router.post("/refresh", response_model=list[int])
def refresh(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Reload the cached blocked set from the store."""
    return sorted(load_blocked_users(db, current_user.id))


@router.get("/details", response_model=list[BlockedUserDetail])
def list_details(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_blocked_users_with_details(db, current_user.id)


@router.get("/info", response_model=UserBlockingInfoResponse)
def info(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Both directions: who you block and who blocks you."""
    blocking = get_user_blocking_info(db, current_user.id)
    return UserBlockingInfoResponse(
        user_id=blocking.user_id,
        blocked_users=sorted(blocking.blocked_users),
        blocked_by_users=sorted(blocking.blocked_by_users),
    )


@router.get("/{user_id}", response_model=BlockStatusResponse)
def block_status(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return BlockStatusResponse(
        user_id=user_id,
        is_blocked=is_user_blocked(db, current_user.id, user_id),
        prevents_interaction=should_prevent_interaction(db, current_user.id, user_id),
    )
