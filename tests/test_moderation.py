from unittest.mock import patch

import pytest
from fastapi import HTTPException

from app.models.blog import Blog
from app.models.profile import Profile
from app.services.moderation import can_transition, change_status, resubmit_after_edit


@pytest.fixture
def blog(db):
    author = Profile(user_id="sub-writer", email="writer@example.com", full_name="Writer")
    db.add(author)
    db.commit()
    blog = Blog(author_id=author.id, title="Draft", slug="draft-1", content="text")
    db.add(blog)
    db.commit()
    db.refresh(blog)
    return blog


@pytest.mark.parametrize("current,target", [
    ("pending", "approved"),
    ("pending", "rejected"),
    ("approved", "rejected"),
    ("rejected", "approved"),
    ("approved", "hidden"),
    ("hidden", "approved"),
])
def test_allowed_transitions(current, target):
    assert can_transition(current, target)


@pytest.mark.parametrize("current,target", [
    ("pending", "pending"),
    ("pending", "hidden"),
    ("rejected", "hidden"),
    ("hidden", "rejected"),
    ("approved", "pending"),
    ("approved", "approved"),
])
def test_refused_transitions(current, target):
    assert not can_transition(current, target)


def test_new_blog_starts_pending(blog):
    assert blog.status == "pending"
    assert blog.published_at is None


def test_approval_sets_published_at_and_notifies(db, blog):
    with patch("app.services.moderation.send_notification_safely") as notify:
        change_status(db, blog, "approved")

    assert blog.status == "approved"
    assert blog.published_at is not None
    notify.assert_called_once()
    payload = notify.call_args[0][0]
    assert payload["type"] == "blog_approved"
    assert payload["recipientEmail"] == "writer@example.com"
    assert payload["recipientName"] == "Writer"
    assert payload["blogSlug"] == "draft-1"


def test_unpublish_clears_published_at_without_notifying(db, blog):
    with patch("app.services.moderation.send_notification_safely") as notify:
        change_status(db, blog, "approved")
        notify.reset_mock()
        change_status(db, blog, "rejected")

    assert blog.status == "rejected"
    assert blog.published_at is None
    notify.assert_not_called()


def test_invalid_transition_is_conflict(db, blog):
    with pytest.raises(HTTPException) as exc:
        change_status(db, blog, "hidden")
    assert exc.value.status_code == 409
    assert blog.status == "pending"


def test_unknown_status_is_bad_request(db, blog):
    with pytest.raises(HTTPException) as exc:
        change_status(db, blog, "published")
    assert exc.value.status_code == 400


def test_approval_succeeds_when_email_fails(db, blog, monkeypatch):
    monkeypatch.setenv("RESEND_API_KEY", "re_test")
    with patch("app.services.notifications.requests.post", side_effect=RuntimeError("boom")):
        change_status(db, blog, "approved")
    assert blog.status == "approved"


def test_resubmit_after_edit(db, blog):
    with patch("app.services.moderation.send_notification_safely"):
        change_status(db, blog, "approved")
    resubmit_after_edit(blog)
    assert blog.status == "pending"
    assert blog.published_at is None
