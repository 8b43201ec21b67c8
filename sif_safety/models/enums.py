"""String enumerations stored on report, block and moderation records."""

from __future__ import annotations

import enum


class ReportCategory(str, enum.Enum):
    spam = "spam"
    harassment = "harassment"
    inappropriate_content = "inappropriate_content"
    false_information = "false_information"
    copyright = "copyright"
    other = "other"


class ReportStatus(str, enum.Enum):
    pending = "pending"
    under_review = "under_review"
    resolved = "resolved"
    dismissed = "dismissed"


class ModerationAction(str, enum.Enum):
    no_action = "no_action"
    content_removed = "content_removed"
    user_warned = "user_warned"
    user_suspended = "user_suspended"
    user_banned = "user_banned"


class BlockReason(str, enum.Enum):
    harassment = "harassment"
    spam = "spam"
    inappropriate = "inappropriate"
    other = "other"
    unspecified = "unspecified"


class ContentVisibility(str, enum.Enum):
    visible = "visible"
    removed_by_moderator = "removed_by_moderator"
    blocked_by_user = "blocked_by_user"
    user_blocked_by_author = "user_blocked_by_author"
    reported_by_viewer = "reported_by_viewer"
