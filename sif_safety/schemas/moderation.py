"""Moderation schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from sif_safety.models.enums import ModerationAction, ReportCategory


class ModerateRequest(BaseModel):
    action: ModerationAction
    notes: str | None = Field(default=None, max_length=2000)


class DismissRequest(BaseModel):
    notes: str | None = Field(default=None, max_length=2000)


class PendingCountResponse(BaseModel):
    pending_reports: int


class ModerationStats(BaseModel):
    total_reports: int = 0
    pending_reports: int = 0
    under_review_reports: int = 0
    resolved_reports: int = 0
    dismissed_reports: int = 0
    reports_by_reason: dict[ReportCategory, int] = {}
    actions_taken: dict[ModerationAction, int] = {}


class UserWarningResponse(BaseModel):
    id: int
    user_id: int
    reason: ReportCategory
    report_id: int | None
    issued_by: int
    created_at: datetime

    model_config = {"from_attributes": True}


class UserSuspensionResponse(BaseModel):
    id: int
    user_id: int
    start_date: datetime
    end_date: datetime
    report_id: int | None
    issued_by: int

    model_config = {"from_attributes": True}


class UserSanctionsResponse(BaseModel):
    user_id: int
    is_suspended: bool
    suspension_end_date: datetime | None = None
    is_banned: bool
    banned_date: datetime | None = None
    banned_by: int | None = None
    warnings: list[UserWarningResponse] = []
    suspensions: list[UserSuspensionResponse] = []
