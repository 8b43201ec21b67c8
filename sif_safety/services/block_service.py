"""Block store: directed blocker -> blocked relationships.

Each actor's blocked set is materialized in a process-local cache so
``is_user_blocked`` is a set lookup. The cache is refreshed with
``load_blocked_users`` and mutated after every successful block/unblock.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sif_safety.core.config import settings
from sif_safety.core.exceptions import (
    AlreadyBlocked,
    BlockNotFound,
    CannotBlockSelf,
    NotAuthenticated,
    UserNotFound,
)
from sif_safety.core.moderation_policies import UNKNOWN_USER_NAME
from sif_safety.db.session import commit
from sif_safety.models.blocked_user import BlockedUser
from sif_safety.models.enums import BlockReason
from sif_safety.models.user import User
from sif_safety.schemas.block import BlockedUserDetail, BlockResponse
from sif_safety.services.content_filter import BlockingInfo

logger = logging.getLogger(__name__)


class BlockedSetCache:
    """Materialized blocked-user sets keyed by the blocking actor.

    Least recently used actors are evicted past ``max_actors``; an evicted
    actor is reloaded from the store on next use.
    """

    def __init__(self, max_actors: int = settings.blocked_cache_max_actors) -> None:
        self.max_actors = max_actors
        self._sets: OrderedDict[int, set[int]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sets)

    def get(self, actor_id: int) -> set[int] | None:
        blocked = self._sets.get(actor_id)
        if blocked is not None:
            self._sets.move_to_end(actor_id)
        return blocked

    def replace(self, actor_id: int, blocked_ids: set[int]) -> None:
        self._sets[actor_id] = set(blocked_ids)
        self._sets.move_to_end(actor_id)
        while len(self._sets) > self.max_actors:
            evicted, _ = self._sets.popitem(last=False)
            logger.debug("Evicted blocked set for user=%s", evicted)

    def add(self, actor_id: int, blocked_id: int) -> None:
        if actor_id in self._sets:
            self._sets[actor_id].add(blocked_id)

    def discard(self, actor_id: int, blocked_id: int) -> None:
        if actor_id in self._sets:
            self._sets[actor_id].discard(blocked_id)

    def invalidate(self, actor_id: int) -> None:
        self._sets.pop(actor_id, None)

    def clear(self) -> None:
        self._sets.clear()


# Singleton instance used across the app
blocked_cache = BlockedSetCache()


def _require_actor(actor_id: int | None) -> int:
    if actor_id is None:
        raise NotAuthenticated()
    return actor_id


def load_blocked_users(db: Session, actor_id: int | None) -> set[int]:
    """Reload the actor's blocked set from the store, replacing the cached copy."""
    actor_id = _require_actor(actor_id)
    result = db.execute(select(BlockedUser.blocked_id).where(BlockedUser.blocker_id == actor_id))
    blocked = set(result.scalars().all())
    blocked_cache.replace(actor_id, blocked)
    return set(blocked)


def _materialized(db: Session, actor_id: int) -> set[int]:
    cached = blocked_cache.get(actor_id)
    if cached is None:
        return load_blocked_users(db, actor_id)
    return cached


def is_user_blocked(db: Session, actor_id: int | None, user_id: int) -> bool:
    """Does ``actor_id`` block ``user_id``? Answered from the materialized set."""
    actor_id = _require_actor(actor_id)
    return user_id in _materialized(db, actor_id)


def block_user(
    db: Session,
    blocker_id: int | None,
    blocked_id: int,
    reason: BlockReason | None = None,
) -> BlockedUser:
    """Block a user."""
    blocker_id = _require_actor(blocker_id)
    if blocker_id == blocked_id:
        raise CannotBlockSelf()

    blocker = db.get(User, blocker_id)
    if not blocker:
        raise NotAuthenticated()
    if not db.get(User, blocked_id):
        raise UserNotFound()

    if blocked_id in _materialized(db, blocker_id):
        raise AlreadyBlocked()

    record = BlockedUser(
        blocker_id=blocker_id,
        blocked_id=blocked_id,
        reason=reason.value if reason else None,
    )
    db.add(record)
    if blocked_id not in blocker.blocked_users:
        blocker.blocked_users = [*blocker.blocked_users, blocked_id]
    try:
        commit(db)
    except IntegrityError:
        # A concurrent request inserted the same pair first
        db.rollback()
        blocked_cache.invalidate(blocker_id)
        raise AlreadyBlocked()
    db.refresh(record)

    blocked_cache.add(blocker_id, blocked_id)
    logger.info("User %s blocked user %s (reason=%s)", blocker_id, blocked_id, record.reason)
    return record


def unblock_user(db: Session, blocker_id: int | None, blocked_id: int) -> int:
    """Remove the block for the pair. Returns how many records were deleted."""
    blocker_id = _require_actor(blocker_id)
    records = list(
        db.execute(
            select(BlockedUser)
            .where(BlockedUser.blocker_id == blocker_id)
            .where(BlockedUser.blocked_id == blocked_id)
        ).scalars().all()
    )
    if not records:
        raise BlockNotFound()
    if len(records) > 1:
        logger.warning("Found %s block records for pair %s->%s", len(records), blocker_id, blocked_id)

    for record in records:
        db.delete(record)
    blocker = db.get(User, blocker_id)
    if blocker:
        blocker.blocked_users = [uid for uid in blocker.blocked_users if uid != blocked_id]
    commit(db)

    blocked_cache.discard(blocker_id, blocked_id)
    logger.info("User %s unblocked user %s", blocker_id, blocked_id)
    return len(records)


def get_user_blocking_info(db: Session, actor_id: int | None) -> BlockingInfo:
    """Both directions: who the actor blocks, and who blocks the actor."""
    actor_id = _require_actor(actor_id)
    blocked = db.execute(select(BlockedUser.blocked_id).where(BlockedUser.blocker_id == actor_id))
    blocked_by = db.execute(select(BlockedUser.blocker_id).where(BlockedUser.blocked_id == actor_id))
    return BlockingInfo(
        user_id=actor_id,
        blocked_users=frozenset(blocked.scalars().all()),
        blocked_by_users=frozenset(blocked_by.scalars().all()),
    )


def should_prevent_interaction(db: Session, actor_id: int | None, other_id: int) -> bool:
    """True when either user blocks the other."""
    return get_user_blocking_info(db, actor_id).has_blocking_relationship(other_id)


def get_blocked_users_with_details(db: Session, actor_id: int | None) -> list[BlockedUserDetail]:
    """Blocked users newest first, each joined with their directory entry."""
    actor_id = _require_actor(actor_id)
    records = db.execute(
        select(BlockedUser)
        .where(BlockedUser.blocker_id == actor_id)
        .order_by(BlockedUser.created_at.desc(), BlockedUser.id.desc())
    ).scalars().all()

    details: list[BlockedUserDetail] = []
    for record in records:
        # One directory read per record; fine for per-user block lists
        other = db.get(User, record.blocked_id)
        details.append(
            BlockedUserDetail(
                block=BlockResponse.model_validate(record),
                user_name=(other.full_name or UNKNOWN_USER_NAME) if other else UNKNOWN_USER_NAME,
                user_email=other.email if other else "",
            )
        )
    return details
