"""Moderation engine tests: actions, sanctions, stats and transactional resolve."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from sif_safety.models.moderator_action import ModeratorAction
from sif_safety.models.report import Report
from sif_safety.models.sif import Sif
from sif_safety.models.user import User
from sif_safety.services.moderation_service import refresh_pending_count


def _report(client, reporter, sif_id, category="spam", reason=None):
    body = {"content_id": sif_id, "category": category}
    if reason:
        body["reason"] = reason
    r = client.post("/reports", headers=reporter["headers"], json=body)
    assert r.status_code == 201, r.json()
    return r.json()


def _moderate(client, moderator, report_id, action, notes=None):
    body = {"action": action}
    if notes:
        body["notes"] = notes
    return client.post(f"/moderation/reports/{report_id}/moderate", headers=moderator["headers"], json=body)


def _parse(ts):
    return datetime.fromisoformat(ts.replace("Z", "+00:00"))


def test_content_removed_resolves_and_hides_content(client, register, post_sif, moderator):
    """Removing content resolves the report and drops the SIF from listings."""
    author, reporter = register(), register()
    sif = post_sif(author)
    report = _report(client, reporter, sif["id"], "inappropriate_content")

    r = _moderate(client, moderator, report["id"], "content_removed", "Graphic")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "resolved"
    assert data["action_taken"] == "content_removed"
    assert data["moderator_id"] == moderator["id"]
    assert data["moderator_notes"] == "Graphic"
    assert data["resolved_date"] is not None

    assert client.get(f"/sifs/{sif['id']}", headers=reporter["headers"]).status_code == 404
    vis = client.get(f"/sifs/{sif['id']}/visibility", headers=reporter["headers"]).json()
    assert vis["visibility"] == "removed_by_moderator"
    assert all(s["id"] != sif["id"] for s in client.get("/sifs/feed", headers=reporter["headers"]).json())


def test_removed_content_flags_moderator(client, register, post_sif, moderator, db):
    author, reporter = register(), register()
    sif = post_sif(author)
    report = _report(client, reporter, sif["id"])
    _moderate(client, moderator, report["id"], "content_removed")

    stored = db.get(Sif, sif["id"])
    assert stored.is_removed is True
    assert stored.removed_by == moderator["id"]
    assert stored.removed_date is not None


@pytest.mark.parametrize(
    "category",
    ["spam", "harassment", "inappropriate_content", "false_information", "copyright", "other"],
)
def test_warning_carries_report_category(client, register, post_sif, moderator, category):
    """pending -> user_warned -> resolved, with one warning for the author."""
    author, reporter = register(), register()
    sif = post_sif(author)
    report = _report(client, reporter, sif["id"], category, reason="Details" if category == "other" else None)
    assert report["status"] == "pending"

    r = _moderate(client, moderator, report["id"], "user_warned")
    assert r.status_code == 200
    assert r.json()["status"] == "resolved"
    assert r.json()["action_taken"] == "user_warned"

    sanctions = client.get(f"/moderation/users/{author['id']}/sanctions", headers=moderator["headers"]).json()
    assert len(sanctions["warnings"]) == 1
    warning = sanctions["warnings"][0]
    assert warning["reason"] == category
    assert warning["report_id"] == report["id"]
    assert warning["issued_by"] == moderator["id"]
    assert sanctions["is_suspended"] is False
    assert sanctions["is_banned"] is False


def test_suspension_lasts_seven_days_and_blocks_posting(client, register, post_sif, moderator):
    author, reporter = register(), register()
    sif = post_sif(author)
    report = _report(client, reporter, sif["id"], "harassment")

    assert _moderate(client, moderator, report["id"], "user_suspended").status_code == 200

    sanctions = client.get(f"/moderation/users/{author['id']}/sanctions", headers=moderator["headers"]).json()
    assert sanctions["is_suspended"] is True
    (suspension,) = sanctions["suspensions"]
    start, end = _parse(suspension["start_date"]), _parse(suspension["end_date"])
    assert end - start == timedelta(days=7)
    assert suspension["report_id"] == report["id"]

    me = client.get("/auth/me", headers=author["headers"]).json()
    assert me["is_suspended"] is True

    r = client.post("/sifs", headers=author["headers"], json={"subject": "Back again"})
    assert r.status_code == 403
    other = post_sif(register())
    r = client.post("/reports", headers=author["headers"], json={"content_id": other["id"], "category": "spam"})
    assert r.status_code == 403


def test_elapsed_suspension_allows_posting(client, register, post_sif, moderator, db):
    author, reporter = register(), register()
    sif = post_sif(author)
    report = _report(client, reporter, sif["id"])
    _moderate(client, moderator, report["id"], "user_suspended")

    user = db.get(User, author["id"])
    user.suspension_end_date = datetime.now(timezone.utc) - timedelta(days=1)
    db.commit()

    assert client.post("/sifs", headers=author["headers"], json={"subject": "Hello"}).status_code == 201


def test_ban_locks_account(client, register, post_sif, moderator):
    author, reporter = register(), register()
    sif = post_sif(author)
    report = _report(client, reporter, sif["id"], "spam")

    assert _moderate(client, moderator, report["id"], "user_banned").status_code == 200

    r = client.get("/auth/me", headers=author["headers"])
    assert r.status_code == 403
    assert r.json()["detail"] == "Your account has been banned."

    sanctions = client.get(f"/moderation/users/{author['id']}/sanctions", headers=moderator["headers"]).json()
    assert sanctions["is_banned"] is True
    assert sanctions["banned_by"] == moderator["id"]


def test_no_action_resolves_without_sanctions(client, register, post_sif, moderator):
    author, reporter = register(), register()
    sif = post_sif(author)
    report = _report(client, reporter, sif["id"])

    r = _moderate(client, moderator, report["id"], "no_action")
    assert r.json()["status"] == "resolved"
    assert r.json()["action_taken"] == "no_action"

    sanctions = client.get(f"/moderation/users/{author['id']}/sanctions", headers=moderator["headers"]).json()
    assert sanctions["warnings"] == []
    assert sanctions["suspensions"] == []
    assert client.get(f"/sifs/{sif['id']}", headers=reporter["headers"]).status_code == 200


def test_dismiss_with_and_without_notes(client, register, post_sif, moderator):
    author = register()
    sif = post_sif(author)
    first = _report(client, register(), sif["id"])
    second = _report(client, register(), sif["id"])

    r = client.post(f"/moderation/reports/{first['id']}/dismiss", headers=moderator["headers"])
    assert r.status_code == 200
    assert r.json()["status"] == "dismissed"
    assert r.json()["action_taken"] == "no_action"

    r = client.post(
        f"/moderation/reports/{second['id']}/dismiss",
        headers=moderator["headers"],
        json={"notes": "Satire"},
    )
    assert r.json()["moderator_notes"] == "Satire"


def test_review_then_moderate(client, register, post_sif, moderator, db):
    author, reporter = register(), register()
    sif = post_sif(author)
    report = _report(client, reporter, sif["id"])

    r = client.post(f"/moderation/reports/{report['id']}/review", headers=moderator["headers"])
    assert r.json()["status"] == "under_review"
    assert _moderate(client, moderator, report["id"], "user_warned").json()["status"] == "resolved"

    actions = db.execute(
        select(ModeratorAction.action)
        .where(ModeratorAction.report_id == report["id"])
        .order_by(ModeratorAction.id)
    ).scalars().all()
    assert actions == ["under_review", "user_warned"]


def test_moderating_resolved_report_is_409(client, register, post_sif, moderator):
    author, reporter = register(), register()
    sif = post_sif(author)
    report = _report(client, reporter, sif["id"])
    _moderate(client, moderator, report["id"], "no_action")

    assert _moderate(client, moderator, report["id"], "user_warned").status_code == 409
    assert client.post(f"/moderation/reports/{report['id']}/dismiss", headers=moderator["headers"]).status_code == 409


def test_moderation_endpoints_require_moderator(client, register, post_sif):
    author, reporter = register(), register()
    sif = post_sif(author)
    report = _report(client, reporter, sif["id"])

    assert _moderate(client, reporter, report["id"], "user_banned").status_code == 403
    assert client.post(f"/moderation/reports/{report['id']}/dismiss", headers=reporter["headers"]).status_code == 403
    assert client.get("/moderation/stats", headers=reporter["headers"]).status_code == 403
    assert client.get("/moderation/pending-count", headers=reporter["headers"]).status_code == 403
    me = client.get("/auth/me", headers=author["headers"])
    assert me.status_code == 200


def test_failed_sanction_rolls_back_status(client, register, post_sif, moderator, db):
    """If the content is gone the report stays pending with no audit row."""
    author, reporter = register(), register()
    sif = post_sif(author)
    report = _report(client, reporter, sif["id"])

    db.delete(db.get(Sif, sif["id"]))
    db.commit()

    r = _moderate(client, moderator, report["id"], "content_removed")
    assert r.status_code == 404

    db.expire_all()
    stored = db.get(Report, report["id"])
    assert stored.status == "pending"
    assert stored.moderator_id is None
    assert stored.action_taken is None
    assert db.execute(select(ModeratorAction).where(ModeratorAction.report_id == report["id"])).first() is None


def test_pending_count_and_stats(client, register, post_sif, moderator):
    author = register()
    sif = post_sif(author)
    other = post_sif(author, subject="Second")
    r1 = _report(client, register(), sif["id"], "spam")
    r2 = _report(client, register(), sif["id"], "harassment")
    r3 = _report(client, register(), other["id"], "spam")
    _report(client, register(), other["id"], "copyright")

    count = client.get("/moderation/pending-count", headers=moderator["headers"]).json()
    assert count == {"pending_reports": 4}

    client.post(f"/moderation/reports/{r1['id']}/review", headers=moderator["headers"])
    _moderate(client, moderator, r2["id"], "user_warned")
    client.post(f"/moderation/reports/{r3['id']}/dismiss", headers=moderator["headers"])

    stats = client.get("/moderation/stats", headers=moderator["headers"]).json()
    assert stats["total_reports"] == 4
    assert stats["pending_reports"] == 1
    assert stats["under_review_reports"] == 1
    assert stats["resolved_reports"] == 1
    assert stats["dismissed_reports"] == 1
    assert stats["reports_by_reason"] == {"spam": 2, "harassment": 1, "copyright": 1}
    assert stats["actions_taken"] == {"user_warned": 1, "no_action": 1}
    assert client.get("/moderation/pending-count", headers=moderator["headers"]).json()["pending_reports"] == 1


def test_sanctions_for_unknown_user_is_404(client, moderator):
    assert client.get("/moderation/users/9999/sanctions", headers=moderator["headers"]).status_code == 404


def test_pending_count_survives_store_errors():
    class BrokenSession:
        def execute(self, *args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        def rollback(self):
            pass

    assert refresh_pending_count(BrokenSession()) == 0
