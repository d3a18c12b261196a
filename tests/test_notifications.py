from unittest.mock import patch, MagicMock

import pytest
import requests

from app.services.notifications import (
    render_notification,
    send_notification,
    send_notification_safely,
    InvalidNotification,
    NotificationDeliveryError,
)


def payload(**overrides):
    data = {
        "type": "blog_approved",
        "recipientEmail": "writer@example.com",
        "recipientName": "Writer",
        "blogTitle": "My Post",
        "blogSlug": "my-post-1",
    }
    data.update(overrides)
    return data


def provider_response(status_code=200, body=None):
    response = MagicMock(status_code=status_code, text="error text")
    response.json.return_value = body or {"id": "email_123"}
    return response


class TestTemplates:
    def test_blog_approved(self):
        email = render_notification(payload())
        assert email["subject"] == "Your blog post has been approved: My Post"
        assert "Hi Writer" in email["html"]
        assert "/blog/my-post-1" in email["html"]

    def test_new_comment_quotes_comment(self):
        email = render_notification(payload(type="new_comment", commentContent="Nice one"))
        assert email["subject"] == "New comment on: My Post"
        assert '"Nice one"' in email["html"]

    def test_new_blog_mentions_author(self):
        email = render_notification(payload(type="new_blog", authorName="Ada"))
        assert email["subject"] == "New blog post: My Post"
        assert "by Ada" in email["html"]

    def test_link_omitted_without_slug(self):
        email = render_notification(payload(blogSlug=None))
        assert "<a href" not in email["html"]

    def test_user_values_are_escaped(self):
        email = render_notification(payload(type="new_comment", commentContent="<script>x</script>"))
        assert "<script>" not in email["html"]
        assert "&lt;script&gt;" in email["html"]


class TestValidation:
    @pytest.mark.parametrize("field", ["type", "recipientEmail", "recipientName", "blogTitle"])
    def test_missing_required_field(self, field):
        with pytest.raises(InvalidNotification):
            render_notification(payload(**{field: ""}))

    def test_unknown_type(self):
        with pytest.raises(InvalidNotification, match="Invalid notification type"):
            render_notification(payload(type="weekly_digest"))

    def test_body_must_be_object(self):
        with pytest.raises(InvalidNotification):
            render_notification(["not", "a", "dict"])


class TestDelivery:
    def test_sends_through_provider(self, monkeypatch):
        monkeypatch.setenv("RESEND_API_KEY", "re_test")
        with patch("app.services.notifications.requests.post", return_value=provider_response()) as post:
            result = send_notification(payload())

        assert result == {"id": "email_123"}
        kwargs = post.call_args.kwargs
        assert kwargs["headers"]["Authorization"] == "Bearer re_test"
        assert kwargs["json"]["to"] == ["writer@example.com"]
        assert kwargs["json"]["subject"].startswith("Your blog post has been approved")

    def test_missing_api_key(self):
        with pytest.raises(NotificationDeliveryError):
            send_notification(payload())

    def test_provider_error_status(self, monkeypatch):
        monkeypatch.setenv("RESEND_API_KEY", "re_test")
        with patch("app.services.notifications.requests.post", return_value=provider_response(422)):
            with pytest.raises(NotificationDeliveryError, match="422"):
                send_notification(payload())

    def test_network_error(self, monkeypatch):
        monkeypatch.setenv("RESEND_API_KEY", "re_test")
        with patch(
            "app.services.notifications.requests.post",
            side_effect=requests.exceptions.ConnectionError("down")
        ):
            with pytest.raises(NotificationDeliveryError):
                send_notification(payload())

    def test_safe_send_swallows_failures(self):
        assert send_notification_safely(payload()) is None
        assert send_notification_safely(payload(type="bogus")) is None
