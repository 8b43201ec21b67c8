"""Block schemas."""

from datetime import datetime

from pydantic import BaseModel

from sif_safety.models.enums import BlockReason


class BlockRequest(BaseModel):
    user_id: int
    reason: BlockReason | None = None


class BlockResponse(BaseModel):
    id: int
    blocker_id: int
    blocked_id: int
    reason: BlockReason | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class BlockedUserDetail(BaseModel):
    """Block record joined with the blocked user's directory entry."""

    block: BlockResponse
    user_name: str
    user_email: str


class BlockStatusResponse(BaseModel):
    user_id: int
    is_blocked: bool
    prevents_interaction: bool


class UserBlockingInfoResponse(BaseModel):
    user_id: int
    blocked_users: list[int]
    blocked_by_users: list[int]


class UnblockResponse(BaseModel):
    status: str = "unblocked"
    user_id: int
    removed: int
