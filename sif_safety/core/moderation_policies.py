"""Report workflow and moderation policy constants."""

from __future__ import annotations

from datetime import timedelta

from sif_safety.core.config import settings
from sif_safety.models.enums import ReportStatus

# Statuses a report may move to from each non-terminal status
ALLOWED_TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.pending: frozenset(
        {ReportStatus.under_review, ReportStatus.resolved, ReportStatus.dismissed}
    ),
    ReportStatus.under_review: frozenset({ReportStatus.resolved, ReportStatus.dismissed}),
}

TERMINAL_STATUSES = frozenset({ReportStatus.resolved, ReportStatus.dismissed})

# A report in one of these blocks a second report for the same (reporter, content)
ACTIVE_STATUSES = frozenset({ReportStatus.pending, ReportStatus.under_review})

SUSPENSION_DURATION = timedelta(days=settings.suspension_days)

MAX_REASON_LENGTH = settings.report_reason_max_length

UNKNOWN_USER_NAME = "Unknown User"

# Websocket event pushed to moderators after the queue changes
PENDING_COUNT_EVENT = "moderation.pending_count"


def can_transition(current: ReportStatus, new: ReportStatus) -> bool:
    """True when ``current -> new`` is a legal report status change."""
    return new in ALLOWED_TRANSITIONS.get(current, frozenset())
