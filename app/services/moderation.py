import logging
from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.blog import (
    Blog,
    BLOG_STATUSES,
    STATUS_PENDING,
    STATUS_APPROVED,
    STATUS_REJECTED,
    STATUS_HIDDEN,
)
from app.services.notifications import send_notification_safely

logger = logging.getLogger(__name__)

# Admin-triggered transitions: current status -> statuses it may move to
ALLOWED_TRANSITIONS = {
    STATUS_PENDING: {STATUS_APPROVED, STATUS_REJECTED},
    STATUS_APPROVED: {STATUS_REJECTED, STATUS_HIDDEN},
    STATUS_REJECTED: {STATUS_APPROVED},
    STATUS_HIDDEN: {STATUS_APPROVED},
}


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, set())


def utcnow():
    return datetime.now(timezone.utc)


def change_status(db: Session, blog: Blog, target: str) -> Blog:
    """
    Move a blog to ``target`` on behalf of an admin.
    Raises HTTPException(400) for unknown statuses and (409) for transitions
    that are not allowed from the blog's current status.
    """
    if target not in BLOG_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status '{target}'")

    if not can_transition(blog.status, target):
        raise HTTPException(
            status_code=409,
            detail=f"Cannot change status from '{blog.status}' to '{target}'"
        )

    previous = blog.status
    blog.status = target
    blog.published_at = utcnow() if target == STATUS_APPROVED else None
    db.commit()
    db.refresh(blog)

    logger.info("Blog %s moved from %s to %s", blog.id, previous, target)

    if target == STATUS_APPROVED:
        notify_approval(blog)

    return blog


def notify_approval(blog: Blog):
    """Tell the author their blog is live. Never raises."""
    author = blog.author
    if not author or not author.email:
        logger.warning("Blog %s approved but author has no email, skipping notification", blog.id)
        return

    send_notification_safely({
        "type": "blog_approved",
        "recipientEmail": author.email,
        "recipientName": author.display_name,
        "blogTitle": blog.title,
        "blogSlug": blog.slug,
    })


def resubmit_after_edit(blog: Blog):
    """An author edit always sends the blog back to the review queue."""
    blog.status = STATUS_PENDING
    blog.published_at = None
