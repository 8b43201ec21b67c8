"""Moderation engine: resolve reports and apply sanctions."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sif_safety.core.exceptions import ContentNotFound, UserNotFound, ValidationFailed
from sif_safety.core.moderation_policies import SUSPENSION_DURATION, TERMINAL_STATUSES
from sif_safety.db.base import utcnow
from sif_safety.db.session import commit
from sif_safety.models.enums import ModerationAction, ReportCategory, ReportStatus
from sif_safety.models.report import Report
from sif_safety.models.sif import Sif
from sif_safety.models.user import User
from sif_safety.models.user_suspension import UserSuspension
from sif_safety.models.user_warning import UserWarning
from sif_safety.schemas.moderation import (
    ModerationStats,
    UserSanctionsResponse,
    UserSuspensionResponse,
    UserWarningResponse,
)
from sif_safety.services.report_service import (
    count_pending_reports,
    get_report,
    require_moderator,
    update_report_status,
)

logger = logging.getLogger(__name__)


def _get_target_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise UserNotFound()
    return user


def remove_content(db: Session, moderator_id: int, content_id: int) -> Sif:
    """Flag a SIF as removed. Removed SIFs disappear from every listing."""
    content = db.get(Sif, content_id)
    if not content:
        raise ContentNotFound()
    content.is_removed = True
    content.removed_date = utcnow()
    content.removed_by = moderator_id
    return content


def warn_user(
    db: Session,
    moderator_id: int,
    user_id: int,
    reason: ReportCategory,
    report_id: int | None = None,
) -> UserWarning:
    _get_target_user(db, user_id)
    warning = UserWarning(user_id=user_id, reason=reason.value, report_id=report_id, issued_by=moderator_id)
    db.add(warning)
    return warning


def suspend_user(
    db: Session,
    moderator_id: int,
    user_id: int,
    duration: timedelta = SUSPENSION_DURATION,
    report_id: int | None = None,
) -> UserSuspension:
    user = _get_target_user(db, user_id)
    start = utcnow()
    suspension = UserSuspension(
        user_id=user_id,
        start_date=start,
        end_date=start + duration,
        report_id=report_id,
        issued_by=moderator_id,
    )
    db.add(suspension)
    user.is_suspended = True
    user.suspension_end_date = suspension.end_date
    return suspension


def ban_user(db: Session, moderator_id: int, user_id: int) -> User:
    user = _get_target_user(db, user_id)
    user.is_banned = True
    user.banned_date = utcnow()
    user.banned_by = moderator_id
    return user


def _execute_action(db: Session, moderator_id: int, action: ModerationAction, report: Report) -> None:
    if action is ModerationAction.content_removed:
        remove_content(db, moderator_id, report.reported_content_id)
    elif action is ModerationAction.user_warned:
        warn_user(db, moderator_id, report.reported_user_id, ReportCategory(report.category), report.id)
    elif action is ModerationAction.user_suspended:
        suspend_user(db, moderator_id, report.reported_user_id, report_id=report.id)
    elif action is ModerationAction.user_banned:
        ban_user(db, moderator_id, report.reported_user_id)
    # no_action: the status change is the whole outcome


def moderate_report(
    db: Session,
    moderator: User | None,
    report_id: int,
    action: ModerationAction,
    notes: str | None = None,
) -> Report:
    """Resolve a report and apply ``action`` in a single transaction.

    If the sanction fails the status change is rolled back too, so the call
    can be retried.
    """
    moderator = require_moderator(moderator)
    try:
        report = update_report_status(
            db,
            moderator,
            report_id,
            ReportStatus.resolved,
            action=action,
            moderator_notes=notes,
            autocommit=False,
        )
        _execute_action(db, moderator.id, action, report)
        commit(db)
    except Exception:
        db.rollback()
        raise
    db.refresh(report)
    logger.info("Report %s resolved with %s by moderator=%s", report_id, action.value, moderator.id)
    return report


def change_report_status(
    db: Session,
    moderator: User | None,
    report_id: int,
    new_status: ReportStatus,
    action: ModerationAction | None = None,
    notes: str | None = None,
) -> Report:
    """Direct status change. A resolution that names an action goes through ``moderate_report``
    so the recorded action is always the one applied.
    """
    require_moderator(moderator)
    if action is not None and new_status not in TERMINAL_STATUSES:
        raise ValidationFailed("An action can only be recorded when resolving or dismissing a report.")
    if new_status is ReportStatus.dismissed and action not in (None, ModerationAction.no_action):
        raise ValidationFailed("A dismissed report cannot carry a sanction.")
    if new_status is ReportStatus.resolved and action is not None:
        return moderate_report(db, moderator, report_id, action, notes)
    return update_report_status(db, moderator, report_id, new_status, action=action, moderator_notes=notes)


def mark_under_review(db: Session, moderator: User | None, report_id: int) -> Report:
    return update_report_status(db, moderator, report_id, ReportStatus.under_review)


def dismiss_report(db: Session, moderator: User | None, report_id: int, notes: str | None = None) -> Report:
    return update_report_status(
        db,
        moderator,
        report_id,
        ReportStatus.dismissed,
        action=ModerationAction.no_action,
        moderator_notes=notes,
    )


def refresh_pending_count(db: Session) -> int:
    """Pending queue size for moderator badges. Never raises; 0 on failure."""
    try:
        return count_pending_reports(db)
    except SQLAlchemyError as exc:
        logger.error("Error updating pending reports count: %s", exc)
        db.rollback()
        return 0


def get_moderation_stats(db: Session, moderator: User | None) -> ModerationStats:
    require_moderator(moderator)
    reports = db.execute(select(Report.status, Report.category, Report.action_taken)).all()

    by_status = Counter(status for status, _, _ in reports)
    return ModerationStats(
        total_reports=len(reports),
        pending_reports=by_status[ReportStatus.pending.value],
        under_review_reports=by_status[ReportStatus.under_review.value],
        resolved_reports=by_status[ReportStatus.resolved.value],
        dismissed_reports=by_status[ReportStatus.dismissed.value],
        reports_by_reason=dict(Counter(ReportCategory(category) for _, category, _ in reports)),
        actions_taken=dict(Counter(ModerationAction(action) for _, _, action in reports if action)),
    )


def get_user_sanctions(db: Session, moderator: User | None, user_id: int) -> UserSanctionsResponse:
    require_moderator(moderator)
    user = _get_target_user(db, user_id)
    warnings = db.execute(
        select(UserWarning)
        .where(UserWarning.user_id == user_id)
        .order_by(UserWarning.created_at.desc(), UserWarning.id.desc())
    ).scalars().all()
    suspensions = db.execute(
        select(UserSuspension)
        .where(UserSuspension.user_id == user_id)
        .order_by(UserSuspension.start_date.desc(), UserSuspension.id.desc())
    ).scalars().all()
    return UserSanctionsResponse(
        user_id=user.id,
        is_suspended=user.is_suspended,
        suspension_end_date=user.suspension_end_date,
        is_banned=user.is_banned,
        banned_date=user.banned_date,
        banned_by=user.banned_by,
        warnings=[UserWarningResponse.model_validate(w) for w in warnings],
        suspensions=[UserSuspensionResponse.model_validate(s) for s in suspensions],
    )


def get_report_for_moderator(db: Session, moderator: User | None, report_id: int) -> Report:
    require_moderator(moderator)
    return get_report(db, report_id)
