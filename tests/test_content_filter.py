"""Content filter unit tests (no database)."""

from dataclasses import dataclass

import pytest

from sif_safety.models.enums import ContentVisibility
from sif_safety.services.content_filter import (
    BlockingInfo,
    filter_content,
    filter_visible,
    visibility_status,
)


@dataclass
class Item:
    id: int
    author_id: int
    is_removed: bool = False


ITEMS = [Item(1, 10), Item(2, 20), Item(3, 30), Item(4, 20), Item(5, 10)]


@pytest.mark.parametrize(
    "blocked",
    [set(), {20}, {10, 30}, {10, 20, 30}, {99}],
)
def test_filter_content_is_an_exact_order_preserving_partition(blocked):
    kept = filter_content(ITEMS, blocked)
    excluded = [i for i in ITEMS if i not in kept]

    assert all(i.author_id not in blocked for i in kept)
    assert all(i.author_id in blocked for i in excluded)
    assert len(kept) + len(excluded) == len(ITEMS)
    assert [i.id for i in kept] == [i.id for i in ITEMS if i.author_id not in blocked]


def test_filter_content_on_empty_list():
    assert filter_content([], {1, 2}) == []


def test_blocking_info_relationships():
    info = BlockingInfo(user_id=1, blocked_users=frozenset({2}), blocked_by_users=frozenset({3}))
    assert info.has_blocked(2)
    assert not info.has_blocked(3)
    assert info.is_blocked_by(3)
    assert info.has_blocking_relationship(2)
    assert info.has_blocking_relationship(3)
    assert not info.has_blocking_relationship(4)
    assert info.excluded_authors == {2, 3}


def test_visibility_status_precedence():
    info = BlockingInfo(user_id=1, blocked_users=frozenset({2}), blocked_by_users=frozenset({3}))
    assert visibility_status(Item(1, 2, is_removed=True), info) is ContentVisibility.removed_by_moderator
    assert visibility_status(Item(2, 2), info) is ContentVisibility.blocked_by_user
    assert visibility_status(Item(3, 3), info) is ContentVisibility.user_blocked_by_author
    assert visibility_status(Item(4, 4), info) is ContentVisibility.visible
    assert visibility_status(Item(5, 1), info) is ContentVisibility.visible


def test_filter_visible_drops_removed_and_both_block_directions():
    info = BlockingInfo(user_id=10, blocked_users=frozenset({20}), blocked_by_users=frozenset({30}))
    items = ITEMS + [Item(6, 40, is_removed=True), Item(7, 40)]
    assert [i.id for i in filter_visible(items, info)] == [1, 5, 7]


def test_open_report_hides_item_after_block_reasons():
    info = BlockingInfo(user_id=10, blocked_users=frozenset({20}))
    reported = {1, 2, 6}
    assert visibility_status(Item(1, 10), info, reported) is ContentVisibility.reported_by_viewer
    assert visibility_status(Item(2, 20), info, reported) is ContentVisibility.blocked_by_user
    assert visibility_status(Item(6, 40, is_removed=True), info, reported) is ContentVisibility.removed_by_moderator
    assert visibility_status(Item(3, 30), info, reported) is ContentVisibility.visible
    assert [i.id for i in filter_visible(ITEMS, info, reported)] == [3, 5]
