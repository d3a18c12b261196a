"""
ADMIN API - Review queue, moderation and the admin whitelist.
Every route requires a profile with role 'admin'.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.blog import Blog, BLOG_STATUSES, STATUS_PENDING
from app.models.profile import Profile, ROLE_ADMIN
from app.models.admin_whitelist import AdminWhitelist
from app.dependencies import require_admin
from app.api.blog import get_blog_or_404, serialize_blog
from app.services.moderation import change_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


class StatusUpdateRequest(BaseModel):
    status: str


class WhitelistRequest(BaseModel):
    email: str


@router.get("/blogs")
def get_review_queue(status: Optional[str] = None, db: Session = Depends(get_db)):
    """All blogs, newest first, optionally filtered by status"""
    query = db.query(Blog)
    if status:
        if status not in BLOG_STATUSES:
            raise HTTPException(status_code=400, detail=f"Invalid status '{status}'")
        query = query.filter(Blog.status == status)

    blogs = query.order_by(Blog.created_at.desc(), Blog.id.desc()).all()
    return [serialize_blog(b, include_content=False) for b in blogs]


@router.get("/stats")
def get_stats(db: Session = Depends(get_db)):
    return {
        "total_blogs": db.query(Blog).count(),
        "pending_review": db.query(Blog).filter(Blog.status == STATUS_PENDING).count(),
        "total_users": db.query(Profile).count(),
        "total_views": db.query(func.coalesce(func.sum(Blog.views_count), 0)).scalar(),
    }


@router.put("/blogs/{blog_id}/status")
def update_blog_status(blog_id: int, data: StatusUpdateRequest, db: Session = Depends(get_db)):
    """
    Approve or reject a pending blog. Beyond the review workflow, admins can
    also hide an approved blog and restore a hidden one to approved.
    Approval also emails the author; a failed email does not fail the request.
    """
    blog = get_blog_or_404(db, blog_id)

    try:
        blog = change_status(db, blog, data.status)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error updating status of blog %s: %s", blog_id, e)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to update blog status")

    return {
        "message": f"Blog {blog.status} successfully",
        "blog": serialize_blog(blog, include_content=False)
    }


# --- Admin whitelist ---

@router.get("/whitelist")
def list_whitelist(db: Session = Depends(get_db)):
    entries = db.query(AdminWhitelist).order_by(AdminWhitelist.email).all()
    return [
        {
            "email": w.email,
            "created_at": w.created_at.isoformat() if w.created_at else None
        }
        for w in entries
    ]


@router.post("/whitelist", status_code=201)
def add_to_whitelist(data: WhitelistRequest, db: Session = Depends(get_db)):
    """
    Whitelisted emails become admins when their profile is first created.
    Existing profiles with that email are promoted immediately.
    """
    email = data.email.strip().lower()
    if not email or "@" not in email:
        raise HTTPException(status_code=400, detail="A valid email is required")

    if db.query(AdminWhitelist).filter(AdminWhitelist.email == email).first():
        raise HTTPException(status_code=400, detail="Email is already whitelisted")

    db.add(AdminWhitelist(email=email))
    promoted = db.query(Profile).filter(func.lower(Profile.email) == email).update(
        {Profile.role: ROLE_ADMIN}, synchronize_session=False
    )
    db.commit()

    logger.info("Whitelisted %s as admin (%d existing profile(s) promoted)", email, promoted)
    return {"message": "Email whitelisted successfully", "email": email, "promoted": promoted}


@router.delete("/whitelist/{email}")
def remove_from_whitelist(email: str, db: Session = Depends(get_db)):
    """Removing an email stops future admin grants; existing roles are left alone"""
    entry = db.query(AdminWhitelist).filter(AdminWhitelist.email == email.strip().lower()).first()
    if not entry:
        raise HTTPException(status_code=404, detail="Email not found in whitelist")

    db.delete(entry)
    db.commit()
    return {"message": "Email removed from whitelist"}
