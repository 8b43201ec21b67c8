"""Pure content filtering over authored items.

Items are anything exposing ``id`` and ``author_id`` (and optionally ``is_removed``):
ORM ``Sif`` rows in the service, plain objects in tests.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from sif_safety.models.enums import ContentVisibility

T = TypeVar("T")


@dataclass(frozen=True)
class BlockingInfo:
    """Who a user blocks, and who blocks them."""

    user_id: int
    blocked_users: frozenset[int] = field(default_factory=frozenset)
    blocked_by_users: frozenset[int] = field(default_factory=frozenset)

    def has_blocked(self, user_id: int) -> bool:
        return user_id in self.blocked_users

    def is_blocked_by(self, user_id: int) -> bool:
        return user_id in self.blocked_by_users

    def has_blocking_relationship(self, user_id: int) -> bool:
        return self.has_blocked(user_id) or self.is_blocked_by(user_id)

    @property
    def excluded_authors(self) -> frozenset[int]:
        """Authors hidden from this user in either direction."""
        return self.blocked_users | self.blocked_by_users


def _author(item: Any) -> int:
    return item.author_id


def filter_content(items: Iterable[T], blocked_set: set[int] | frozenset[int]) -> list[T]:
    """Drop items whose author is in ``blocked_set``, keeping the original order."""
    return [item for item in items if _author(item) not in blocked_set]


def visibility_status(
    item: Any,
    blocking_info: BlockingInfo,
    reported_ids: set[int] | frozenset[int] = frozenset(),
) -> ContentVisibility:
    """Explain why an item is (or is not) shown to ``blocking_info.user_id``.

    ``reported_ids`` holds the ids of items the viewer has an open report on.
    """
    if getattr(item, "is_removed", False):
        return ContentVisibility.removed_by_moderator
    author_id = _author(item)
    if blocking_info.has_blocked(author_id):
        return ContentVisibility.blocked_by_user
    if blocking_info.is_blocked_by(author_id):
        return ContentVisibility.user_blocked_by_author
    if item.id in reported_ids:
        return ContentVisibility.reported_by_viewer
    return ContentVisibility.visible


def filter_visible(
    items: Iterable[T],
    blocking_info: BlockingInfo,
    reported_ids: set[int] | frozenset[int] = frozenset(),
) -> list[T]:
    """Keep only items visible to the viewer: not removed, no block either way, not reported."""
    return [
        item for item in items
        if visibility_status(item, blocking_info, reported_ids) is ContentVisibility.visible
    ]
