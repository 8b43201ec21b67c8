"""SQLAlchemy models."""

from __future__ import annotations

from sif_safety.models.blocked_user import BlockedUser
from sif_safety.models.moderator_action import ModeratorAction
from sif_safety.models.report import Report
from sif_safety.models.sif import Sif
from sif_safety.models.user import User
from sif_safety.models.user_suspension import UserSuspension
from sif_safety.models.user_warning import UserWarning

__all__ = [
    "User",
    "BlockedUser",
    "ModeratorAction",
    "Report",
    "Sif",
    "UserSuspension",
    "UserWarning",
]
