"""Reports API."""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from sif_safety.api.moderation import publish_pending_count
from sif_safety.core.deps import get_current_user, require_moderator
from sif_safety.core.exceptions import ContentSafetyError
from sif_safety.db.session import get_db
from sif_safety.models.enums import ReportStatus
from sif_safety.models.user import User
from sif_safety.schemas.report import (
    ContentReportStats,
    ReportCheckResponse,
    ReportCreate,
    ReportResponse,
    ReportStatusUpdate,
)
from sif_safety.services.auth_service import ensure_can_post
from sif_safety.services.moderation_service import change_report_status, get_report_for_moderator
from sif_safety.services.report_service import (
    get_content_report_stats,
    get_pending_reports,
    get_reports_by_status,
    get_reports_for_content,
    has_reported,
    submit_report,
)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
def create_report(
    data: ReportCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Report a SIF. One open report per user and SIF."""
    try:
        ensure_can_post(current_user)
        report = submit_report(db, current_user.id, data.content_id, data.category, data.reason)
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    publish_pending_count(db, background_tasks)
    return report


@router.get("/check/{content_id}", response_model=ReportCheckResponse)
def check_reported(
    content_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Has the current user already reported this SIF?"""
    return ReportCheckResponse(content_id=content_id, reported=has_reported(db, current_user.id, content_id))


@router.get("", response_model=list[ReportResponse])
def list_by_status(
    status_filter: ReportStatus = Query(alias="status"),
    db: Session = Depends(get_db),
    moderator: User = Depends(require_moderator),
):
    """Reports in one status, newest first."""
    return get_reports_by_status(db, status_filter)


@router.get("/pending", response_model=list[ReportResponse])
def list_pending(
    db: Session = Depends(get_db),
    moderator: User = Depends(require_moderator),
):
    """Moderation queue, oldest first."""
    return get_pending_reports(db)


@router.get("/content/{content_id}", response_model=list[ReportResponse])
def list_for_content(
    content_id: int,
    db: Session = Depends(get_db),
    moderator: User = Depends(require_moderator),
):
    return get_reports_for_content(db, content_id)


@router.get("/content/{content_id}/stats", response_model=ContentReportStats)
def content_stats(
    content_id: int,
    db: Session = Depends(get_db),
    moderator: User = Depends(require_moderator),
):
    return get_content_report_stats(db, content_id)


@router.get("/{report_id}", response_model=ReportResponse)
def get_one(
    report_id: int,
    db: Session = Depends(get_db),
    moderator: User = Depends(require_moderator),
):
    try:
        return get_report_for_moderator(db, moderator, report_id)
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.patch("/{report_id}/status", response_model=ReportResponse)
def change_status(
    report_id: int,
    data: ReportStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    moderator: User = Depends(require_moderator),
):
    """Set a report's status. Resolving with an action applies that action."""
    try:
        report = change_report_status(db, moderator, report_id, data.status, data.action, data.moderator_notes)
    except ContentSafetyError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    publish_pending_count(db, background_tasks)
    return report
