"""SIF listings. Every list path goes through ``_visible_page``."""

from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from sif_safety.core.config import settings
from sif_safety.core.exceptions import ContentNotFound, NotAuthenticated
from sif_safety.db.session import commit
from sif_safety.models.enums import ContentVisibility
from sif_safety.models.sif import Sif
from sif_safety.models.user import User
from sif_safety.services.auth_service import ensure_can_post, get_user
from sif_safety.services.block_service import get_user_blocking_info
from sif_safety.services.content_filter import filter_visible, visibility_status
from sif_safety.services.report_service import get_open_reported_content_ids

logger = logging.getLogger(__name__)


def _visible_page(db: Session, viewer_id: int, stmt, limit: int, before_id: int | None = None) -> list[Sif]:
    """Single filtering entry point for SIF listings shown to ``viewer_id``.

    Hidden rows are excluded in SQL before the limit so a page is only short
    when the listing is exhausted; ``filter_visible`` re-checks the result.
    """
    info = get_user_blocking_info(db, viewer_id)
    reported = get_open_reported_content_ids(db, viewer_id)

    stmt = stmt.where(Sif.is_removed.is_(False))
    if info.excluded_authors:
        stmt = stmt.where(Sif.author_id.not_in(info.excluded_authors))
    if reported:
        stmt = stmt.where(Sif.id.not_in(reported))
    if before_id is not None:
        stmt = stmt.where(Sif.id < before_id)
    stmt = stmt.order_by(Sif.created_at.desc(), Sif.id.desc()).limit(limit)
    return filter_visible(db.execute(stmt).scalars().all(), info, reported)


def create_sif(db: Session, author: User | None, subject: str, message: str = "") -> Sif:
    if author is None:
        raise NotAuthenticated()
    ensure_can_post(author)
    sif = Sif(author_id=author.id, subject=subject, message=message)
    db.add(sif)
    commit(db)
    db.refresh(sif)
    logger.info("SIF %s created by user=%s", sif.id, author.id)
    return sif


def get_feed(db: Session, viewer_id: int, limit: int | None = None, before_id: int | None = None) -> list[Sif]:
    """Newest SIFs from everyone the viewer may see."""
    return _visible_page(db, viewer_id, select(Sif), limit or settings.feed_page_size, before_id)


def search_sifs(db: Session, viewer_id: int, query: str, limit: int | None = None) -> list[Sif]:
    pattern = f"%{query}%"
    stmt = select(Sif).where(or_(Sif.subject.ilike(pattern), Sif.message.ilike(pattern)))
    return _visible_page(db, viewer_id, stmt, limit or settings.feed_page_size)


def list_user_sifs(
    db: Session,
    viewer_id: int,
    author_id: int,
    limit: int | None = None,
    before_id: int | None = None,
) -> list[Sif]:
    """A profile's message list, as the viewer is allowed to see it."""
    get_user(db, author_id)
    stmt = select(Sif).where(Sif.author_id == author_id)
    return _visible_page(db, viewer_id, stmt, limit or settings.feed_page_size, before_id)


def get_visible_sif(db: Session, viewer_id: int, sif_id: int) -> Sif:
    """Fetch one SIF; hidden SIFs are reported as not found."""
    sif = db.get(Sif, sif_id)
    if not sif or get_sif_visibility(db, viewer_id, sif_id) is not ContentVisibility.visible:
        raise ContentNotFound("SIF not found.")
    return sif


def get_sif_visibility(db: Session, viewer_id: int, sif_id: int) -> ContentVisibility:
    sif = db.get(Sif, sif_id)
    if not sif:
        raise ContentNotFound("SIF not found.")
    return visibility_status(
        sif, get_user_blocking_info(db, viewer_id), get_open_reported_content_ids(db, viewer_id)
    )
