import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.profile import Profile
from app.models.blog import Blog, STATUS_APPROVED
from app.dependencies import get_current_profile
from app.api.blog import serialize_blog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["profile"])


class ProfileRequest(BaseModel):
    username: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None


def serialize_profile(profile, private=False):
    data = {
        "id": profile.id,
        "username": profile.username,
        "full_name": profile.full_name,
        "avatar_url": profile.avatar_url,
        "bio": profile.bio,
        "role": profile.role,
        "created_at": profile.created_at.isoformat() if profile.created_at else None,
    }
    if private:
        data["email"] = profile.email
    return data


@router.get("/profile")
def get_profile(profile: Profile = Depends(get_current_profile)):
    return serialize_profile(profile, private=True)


@router.put("/profile")
def save_profile(
    data: ProfileRequest,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Update the caller's profile. Role and email are never client-editable."""
    if data.username is not None:
        username = data.username.strip()
        if not username:
            raise HTTPException(status_code=400, detail="Username cannot be empty")

        taken = db.query(Profile).filter(
            Profile.username == username,
            Profile.id != profile.id
        ).first()
        if taken:
            raise HTTPException(status_code=400, detail="Username is already taken")
        profile.username = username

    if data.full_name is not None:
        profile.full_name = data.full_name.strip() or None
    if data.avatar_url is not None:
        profile.avatar_url = data.avatar_url or None
    if data.bio is not None:
        profile.bio = data.bio

    try:
        db.commit()
    except Exception as e:
        logger.error("Error saving profile %s: %s", profile.id, e)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to save profile")

    db.refresh(profile)
    return {
        "message": "Profile saved successfully",
        "profile": serialize_profile(profile, private=True)
    }


@router.get("/profiles/{username}")
def get_public_profile(username: str, db: Session = Depends(get_db)):
    """Public author page: profile plus approved blogs."""
    profile = db.query(Profile).filter(Profile.username == username).first()
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    blogs = db.query(Blog).filter(
        Blog.author_id == profile.id,
        Blog.status == STATUS_APPROVED
    ).order_by(Blog.published_at.desc()).all()

    return {
        "profile": serialize_profile(profile),
        "blogs": [serialize_blog(b, include_content=False) for b in blogs]
    }
