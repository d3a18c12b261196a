"""
Transactional email notifications.

Templates are picked by notification ``type`` and delivery is delegated to the
Resend HTTP API. ``send_notification`` raises on any problem; callers that
fire notifications as a side effect use ``send_notification_safely``.
"""
import logging
import os
from html import escape

import requests

from app.config import SITE_URL, RESEND_API_URL, NOTIFICATION_FROM

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10  # seconds

REQUIRED_FIELDS = ("type", "recipientEmail", "recipientName", "blogTitle")


class InvalidNotification(ValueError):
    """The notification payload is missing fields or has an unknown type."""


class NotificationDeliveryError(RuntimeError):
    """The email provider could not be reached or rejected the message."""


def _button(data, label, color):
    if not data.get("blogSlug"):
        return ""
    url = f"{SITE_URL.rstrip('/')}/blog/{escape(data['blogSlug'])}"
    return (
        f'<a href="{url}" style="background-color: {color}; color: white; padding: 10px 20px; '
        f'text-decoration: none; border-radius: 5px; display: inline-block;">{label}</a>'
    )


SIGNATURE = """
        <p style="margin-top: 20px; color: #666; font-size: 14px;">
          Best regards,<br>
          The Blog Team
        </p>"""


def _new_blog(data):
    return {
        "subject": f"New blog post: {data['blogTitle']}",
        "html": f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #333;">New Blog Post Published!</h2>
        <p>Hi {escape(data['recipientName'])},</p>
        <p>A new blog post has been published:</p>
        <h3 style="color: #0066cc;">{escape(data['blogTitle'])}</h3>
        <p>by {escape(data.get('authorName') or 'an author')}</p>
        {_button(data, 'Read Article', '#0066cc')}{SIGNATURE}
      </div>
    """,
    }


def _new_comment(data):
    return {
        "subject": f"New comment on: {data['blogTitle']}",
        "html": f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #333;">New Comment on Your Blog Post!</h2>
        <p>Hi {escape(data['recipientName'])},</p>
        <p>Someone commented on your blog post:</p>
        <h3 style="color: #0066cc;">{escape(data['blogTitle'])}</h3>
        <div style="background-color: #f5f5f5; padding: 15px; border-left: 4px solid #0066cc; margin: 15px 0;">
          "{escape(data.get('commentContent') or '')}"
        </div>
        {_button(data, 'View Comment', '#0066cc')}{SIGNATURE}
      </div>
    """,
    }


def _blog_approved(data):
    return {
        "subject": f"Your blog post has been approved: {data['blogTitle']}",
        "html": f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #28a745;">Congratulations! Your Blog Post is Live!</h2>
        <p>Hi {escape(data['recipientName'])},</p>
        <p>Great news! Your blog post has been approved and is now live:</p>
        <h3 style="color: #0066cc;">{escape(data['blogTitle'])}</h3>
        {_button(data, 'View Your Post', '#28a745')}
        <p style="margin-top: 20px;">
          Your post is now visible to all readers. Share it with your network to get more engagement!
        </p>{SIGNATURE}
      </div>
    """,
    }


TEMPLATES = {
    "new_blog": _new_blog,
    "new_comment": _new_comment,
    "blog_approved": _blog_approved,
}


def validate_notification(data):
    if not isinstance(data, dict):
        raise InvalidNotification("Request body must be a JSON object")

    missing = [field for field in REQUIRED_FIELDS if not data.get(field)]
    if missing:
        raise InvalidNotification(f"Missing required fields: {', '.join(missing)}")

    if data["type"] not in TEMPLATES:
        raise InvalidNotification("Invalid notification type")


def render_notification(data):
    """Return ``{"subject", "html"}`` for a validated payload."""
    validate_notification(data)
    return TEMPLATES[data["type"]](data)


def send_notification(data):
    """Render and deliver one email. Returns the provider's JSON response."""
    email = render_notification(data)

    api_key = os.getenv("RESEND_API_KEY")
    if not api_key:
        raise NotificationDeliveryError("RESEND_API_KEY is not configured")

    try:
        response = requests.post(
            RESEND_API_URL,
            headers={"Authorization": f"Bearer {api_key}"},
            json={
                "from": NOTIFICATION_FROM,
                "to": [data["recipientEmail"]],
                "subject": email["subject"],
                "html": email["html"],
            },
            timeout=REQUEST_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        raise NotificationDeliveryError(f"Could not reach email provider: {e}") from e

    if response.status_code >= 400:
        raise NotificationDeliveryError(
            f"Email provider returned {response.status_code}: {response.text}"
        )

    logger.info("Email sent: type=%s to=%s", data["type"], data["recipientEmail"])
    return response.json()


def send_notification_safely(data):
    """Fire-and-forget wrapper: failures are logged, never raised."""
    try:
        return send_notification(data)
    except (InvalidNotification, NotificationDeliveryError) as e:
        logger.warning("Failed to send %s notification: %s", data.get("type"), e)
    except Exception:
        logger.exception("Unexpected error sending %s notification", data.get("type"))
    return None
