"""Moderation API: review, resolve and dismiss reports; sanctions and stats."""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from sif_safety.core.deps import require_moderator
from sif_safety.core.exceptions import ContentSafetyError
from sif_safety.core.moderation_policies import PENDING_COUNT_EVENT
from sif_safety.core.ws_manager import ws_manager
from sif_safety.db.session import get_db
from sif_safety.models.user import User
from sif_safety.schemas.moderation import (
    DismissRequest,
    ModerateRequest,
    ModerationStats,
    PendingCountResponse,
    UserSanctionsResponse,
)
from sif_safety.schemas.report import ReportResponse
from sif_safety.services.moderation_service import (
    dismiss_report,
    get_moderation_stats,
    get_user_sanctions,
    mark_under_review,
    moderate_report,
    refresh_pending_count,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/moderation", tags=["moderation"])


def publish_pending_count(db: Session, background_tasks: BackgroundTasks) -> int:
    """Recompute the queue size and push it to connected moderators after the response."""
    count = refresh_pending_count(db)
    if ws_manager.connected_moderators:
        background_tasks.add_task(ws_manager.send_to_moderators, PENDING_COUNT_EVENT, {"pending_reports": count})
    return count


@router.post("/reports/{report_id}/review", response_model=ReportResponse)
def review(
    report_id: int,
    db: Session = Depends(get_db),
    moderator: User = Depends(require_moderator),
):
    """Take a pending report off the queue for review."""
    try:
        return mark_under_review(db, moderator, report_id)
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/reports/{report_id}/moderate", response_model=ReportResponse)
def moderate(
    report_id: int,
    data: ModerateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    moderator: User = Depends(require_moderator),
):
    """Resolve a report and apply the chosen action."""
    try:
        report = moderate_report(db, moderator, report_id, data.action, data.notes)
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    publish_pending_count(db, background_tasks)
    return report


@router.post("/reports/{report_id}/dismiss", response_model=ReportResponse)
def dismiss(
    report_id: int,
    background_tasks: BackgroundTasks,
    data: DismissRequest | None = Body(default=None),
    db: Session = Depends(get_db),
    moderator: User = Depends(require_moderator),
):
    """Close a report without acting on the content or its author."""
    d = data or DismissRequest()
    try:
        report = dismiss_report(db, moderator, report_id, d.notes)
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    publish_pending_count(db, background_tasks)
    return report


@router.get("/pending-count", response_model=PendingCountResponse)
def pending_count(
    db: Session = Depends(get_db),
    moderator: User = Depends(require_moderator),
):
    return PendingCountResponse(pending_reports=refresh_pending_count(db))


@router.get("/stats", response_model=ModerationStats)
def stats(
    db: Session = Depends(get_db),
    moderator: User = Depends(require_moderator),
):
    return get_moderation_stats(db, moderator)


@router.get("/users/{user_id}/sanctions", response_model=UserSanctionsResponse)
def sanctions(
    user_id: int,
    db: Session = Depends(get_db),
    moderator: User = Depends(require_moderator),
):
    """Warnings, suspensions and ban state for one user."""
    try:
        return get_user_sanctions(db, moderator, user_id)
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
