"""Report store: submission, queries and the status workflow."""

from __future__ import annotations

import logging
from collections import Counter

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from sif_safety.core.exceptions import (
    AlreadyReported,
    CannotReportOwnContent,
    ContentNotFound,
    InsufficientPermissions,
    InvalidStatusTransition,
    NotAuthenticated,
    ReportNotFound,
    ValidationFailed,
)
from sif_safety.core.moderation_policies import (
    ACTIVE_STATUSES,
    MAX_REASON_LENGTH,
    TERMINAL_STATUSES,
    can_transition,
)
from sif_safety.db.base import utcnow
from sif_safety.db.session import commit
from sif_safety.models.enums import ContentVisibility, ModerationAction, ReportCategory, ReportStatus
from sif_safety.models.moderator_action import ModeratorAction
from sif_safety.models.report import Report
from sif_safety.models.sif import Sif
from sif_safety.models.user import User
from sif_safety.schemas.report import ContentReportStats
from sif_safety.services.block_service import get_user_blocking_info
from sif_safety.services.content_filter import visibility_status

logger = logging.getLogger(__name__)


def _clean_reason(category: ReportCategory, reason: str | None) -> str | None:
    reason = reason.strip() if reason else None
    if reason and len(reason) > MAX_REASON_LENGTH:
        raise ValidationFailed(f"Reason must be at most {MAX_REASON_LENGTH} characters.")
    if category is ReportCategory.other and not reason:
        raise ValidationFailed("Please describe the problem when choosing 'other'.")
    return reason or None


def _active_report(db: Session, reporter_id: int, content_id: int) -> Report | None:
    return db.execute(
        select(Report)
        .where(Report.reporter_id == reporter_id)
        .where(Report.reported_content_id == content_id)
        .where(Report.status.in_([s.value for s in ACTIVE_STATUSES]))
        .limit(1)
    ).scalar_one_or_none()


def submit_report(
    db: Session,
    reporter_id: int | None,
    content_id: int,
    category: ReportCategory,
    reason: str | None = None,
    content_author_id: int | None = None,
) -> Report:
    """File a report against a SIF. The new report starts out pending."""
    if reporter_id is None:
        raise NotAuthenticated()

    content = db.get(Sif, content_id)
    if not content:
        raise ContentNotFound()
    if content_author_id is not None and content_author_id != content.author_id:
        raise ValidationFailed("Content author does not match the reported content.")
    # Removed content and content across a block are not reportable
    if visibility_status(content, get_user_blocking_info(db, reporter_id)) is not ContentVisibility.visible:
        raise ContentNotFound()
    if reporter_id == content.author_id:
        raise CannotReportOwnContent()

    reason = _clean_reason(category, reason)

    # Check-then-insert: two simultaneous submissions can both pass this check
    if _active_report(db, reporter_id, content_id):
        raise AlreadyReported()

    report = Report(
        reporter_id=reporter_id,
        reported_content_id=content_id,
        reported_user_id=content.author_id,
        category=category.value,
        reason=reason,
        status=ReportStatus.pending.value,
    )
    db.add(report)
    commit(db)
    db.refresh(report)
    logger.info(
        "Report %s submitted by user=%s content=%s category=%s",
        report.id, reporter_id, content_id, report.category,
    )
    return report


def get_report(db: Session, report_id: int) -> Report:
    report = db.get(Report, report_id)
    if not report:
        raise ReportNotFound()
    return report


def has_reported(db: Session, reporter_id: int, content_id: int) -> bool:
    """Whether the user has any report on record for this content."""
    found = db.execute(
        select(Report.id)
        .where(Report.reporter_id == reporter_id)
        .where(Report.reported_content_id == content_id)
        .limit(1)
    ).scalar_one_or_none()
    return found is not None


def get_open_reported_content_ids(db: Session, reporter_id: int) -> set[int]:
    """Content the user has a pending or under-review report on."""
    result = db.execute(
        select(Report.reported_content_id)
        .where(Report.reporter_id == reporter_id)
        .where(Report.status.in_([s.value for s in ACTIVE_STATUSES]))
    )
    return set(result.scalars().all())


def get_reports_for_content(db: Session, content_id: int) -> list[Report]:
    """All reports on a SIF, newest first."""
    result = db.execute(
        select(Report)
        .where(Report.reported_content_id == content_id)
        .order_by(Report.created_at.desc(), Report.id.desc())
    )
    return list(result.scalars().all())


def get_pending_reports(db: Session) -> list[Report]:
    """The moderation queue: pending reports, oldest first."""
    result = db.execute(
        select(Report)
        .where(Report.status == ReportStatus.pending.value)
        .order_by(Report.created_at.asc(), Report.id.asc())
    )
    return list(result.scalars().all())


def get_reports_by_status(db: Session, status: ReportStatus) -> list[Report]:
    """Reports in one status, newest first."""
    result = db.execute(
        select(Report)
        .where(Report.status == status.value)
        .order_by(Report.created_at.desc(), Report.id.desc())
    )
    return list(result.scalars().all())


def count_pending_reports(db: Session) -> int:
    return db.execute(
        select(func.count(Report.id)).where(Report.status == ReportStatus.pending.value)
    ).scalar_one()


def require_moderator(moderator: User | None) -> User:
    """Raise unless ``moderator`` is an authenticated moderator."""
    if moderator is None:
        raise NotAuthenticated()
    if not moderator.is_moderator:
        raise InsufficientPermissions()
    return moderator


def update_report_status(
    db: Session,
    moderator: User | None,
    report_id: int,
    new_status: ReportStatus,
    action: ModerationAction | None = None,
    moderator_notes: str | None = None,
    *,
    autocommit: bool = True,
) -> Report:
    """Move a report through its workflow and append an audit record.

    With ``autocommit=False`` the changes are only flushed so the caller can
    apply further writes in the same transaction.
    """
    moderator = require_moderator(moderator)
    report = get_report(db, report_id)

    current = ReportStatus(report.status)
    if not can_transition(current, new_status):
        raise InvalidStatusTransition(
            f"Cannot move report from {current.value} to {new_status.value}."
        )

    report.status = new_status.value
    report.moderator_id = moderator.id
    if action is not None:
        report.action_taken = action.value
    if moderator_notes is not None:
        report.moderator_notes = moderator_notes
    if new_status in TERMINAL_STATUSES:
        report.resolved_date = utcnow()

    db.add(
        ModeratorAction(
            moderator_id=moderator.id,
            report_id=report.id,
            action=action.value if action else new_status.value,
            notes=moderator_notes,
        )
    )

    if autocommit:
        commit(db)
        db.refresh(report)
    else:
        db.flush()
    logger.info(
        "Report %s %s -> %s by moderator=%s action=%s",
        report_id, current.value, new_status.value, moderator.id, report.action_taken,
    )
    return report


def get_content_report_stats(db: Session, content_id: int) -> ContentReportStats:
    reports = get_reports_for_content(db, content_id)
    breakdown = Counter(ReportCategory(r.category) for r in reports)
    return ContentReportStats(
        content_id=content_id,
        total_reports=len(reports),
        pending_reports=sum(1 for r in reports if r.status == ReportStatus.pending.value),
        reason_breakdown=dict(breakdown),
        most_recent_report=reports[0].created_at if reports else None,
    )
