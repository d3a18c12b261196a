import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.blog import Blog, STATUS_APPROVED
from app.models.like import BlogLike
from app.models.bookmark import Bookmark
from app.models.profile import Profile
from app.dependencies import get_current_profile, get_optional_profile
from app.services.authoring import make_slug, reading_time, parse_tags
from app.services.moderation import resubmit_after_edit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["blog"])


def serialize_author(profile):
    if profile is None:
        return None
    return {
        "id": profile.id,
        "full_name": profile.full_name,
        "username": profile.username,
        "avatar_url": profile.avatar_url,
    }


def serialize_blog(blog, include_content=True):
    """Convert Blog ORM object to dict for JSON serialization"""
    data = {
        "id": blog.id,
        "author_id": blog.author_id,
        "title": blog.title,
        "slug": blog.slug,
        "excerpt": blog.excerpt,
        "cover_image_url": blog.cover_image_url,
        "status": blog.status,
        "tags": blog.tags or [],
        "reading_time": blog.reading_time,
        "likes_count": blog.likes_count,
        "comments_count": blog.comments_count,
        "views_count": blog.views_count,
        "created_at": blog.created_at.isoformat() if blog.created_at else None,
        "updated_at": blog.updated_at.isoformat() if blog.updated_at else None,
        "published_at": blog.published_at.isoformat() if blog.published_at else None,
        "author": serialize_author(blog.author),
    }
    if include_content:
        data["content"] = blog.content
    return data


class BlogCreate(BaseModel):
    title: str
    content: str
    excerpt: Optional[str] = None
    cover_image_url: Optional[str] = None
    tags: Optional[str | List[str]] = None


class BlogUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    cover_image_url: Optional[str] = None
    tags: Optional[str | List[str]] = None


def get_blog_or_404(db: Session, blog_id: int) -> Blog:
    blog = db.query(Blog).filter(Blog.id == blog_id).first()
    if not blog:
        raise HTTPException(status_code=404, detail="Blog not found")
    return blog


def get_approved_blog_or_404(db: Session, blog_id: int) -> Blog:
    blog = get_blog_or_404(db, blog_id)
    if blog.status != STATUS_APPROVED:
        raise HTTPException(status_code=404, detail="Blog not found")
    return blog


def approved_blogs(db: Session):
    return db.query(Blog).filter(Blog.status == STATUS_APPROVED)


# --- Authoring ---

@router.post("/blogs", status_code=status.HTTP_201_CREATED)
def create_blog(
    data: BlogCreate,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Submit a new blog. It waits in the review queue as 'pending'."""
    title = data.title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title is required")
    if not data.content.strip():
        raise HTTPException(status_code=400, detail="Content is required")

    slug = make_slug(title)
    if db.query(Blog).filter(Blog.slug == slug).first():
        raise HTTPException(status_code=400, detail="A blog with this slug already exists")

    try:
        blog = Blog(
            author_id=profile.id,
            title=title,
            slug=slug,
            content=data.content,
            excerpt=data.excerpt,
            cover_image_url=data.cover_image_url,
            tags=parse_tags(data.tags),
            reading_time=reading_time(data.content),
        )
        db.add(blog)
        db.commit()
        db.refresh(blog)
    except Exception as e:
        logger.error("Error creating blog: %s", e)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to save blog")

    logger.info("Blog %s submitted for review by profile %s", blog.id, profile.id)
    return serialize_blog(blog)


@router.put("/blogs/{blog_id}")
def update_blog(
    blog_id: int,
    data: BlogUpdate,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Author edit. Any edit sends the blog back to review."""
    blog = get_blog_or_404(db, blog_id)
    if blog.author_id != profile.id:
        raise HTTPException(status_code=403, detail="Access denied")

    if data.title is not None:
        if not data.title.strip():
            raise HTTPException(status_code=400, detail="Title is required")
        blog.title = data.title.strip()
    if data.content is not None:
        if not data.content.strip():
            raise HTTPException(status_code=400, detail="Content is required")
        blog.content = data.content
        blog.reading_time = reading_time(data.content)
    if data.excerpt is not None:
        blog.excerpt = data.excerpt
    if data.cover_image_url is not None:
        blog.cover_image_url = data.cover_image_url or None
    if data.tags is not None:
        blog.tags = parse_tags(data.tags)

    resubmit_after_edit(blog)

    try:
        db.commit()
        db.refresh(blog)
    except Exception as e:
        logger.error("Error updating blog %s: %s", blog_id, e)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to update blog")

    return serialize_blog(blog)


@router.delete("/blogs/{blog_id}")
def delete_blog(
    blog_id: int,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    blog = get_blog_or_404(db, blog_id)
    if blog.author_id != profile.id and not profile.is_admin:
        raise HTTPException(status_code=403, detail="Access denied")

    try:
        db.delete(blog)
        db.commit()
    except Exception as e:
        logger.error("Error deleting blog %s: %s", blog_id, e)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to delete blog")

    return {"message": "Blog deleted successfully"}


# --- Feeds ---

@router.get("/blogs/latest")
def get_latest_blogs(limit: int = Query(6, ge=1, le=50), db: Session = Depends(get_db)):
    """Newest approved blogs; the first one is the featured blog on the home page."""
    blogs = approved_blogs(db).order_by(Blog.published_at.desc()).limit(limit).all()
    return [serialize_blog(b, include_content=False) for b in blogs]


@router.get("/blogs/trending")
def get_trending_blogs(
    limit: int = Query(5, ge=1, le=50),
    days: int = Query(7, ge=1, le=365),
    db: Session = Depends(get_db)
):
    """Most liked approved blogs created within the last ``days`` days."""
    since = datetime.now(timezone.utc) - timedelta(days=days)
    blogs = approved_blogs(db).filter(
        Blog.created_at >= since
    ).order_by(Blog.likes_count.desc()).limit(limit).all()
    return [serialize_blog(b, include_content=False) for b in blogs]


@router.get("/blogs/search")
def search_blogs(
    q: Optional[str] = None,
    tags: Optional[str] = None,
    db: Session = Depends(get_db)
):
    query = approved_blogs(db)

    # Text search
    if q and q.strip():
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(
            Blog.title.ilike(pattern),
            Blog.content.ilike(pattern),
            Blog.excerpt.ilike(pattern)
        ))

    blogs = query.order_by(Blog.published_at.desc()).all()

    # Filter by tags: keep blogs sharing at least one selected tag
    selected = parse_tags(tags)
    if selected:
        blogs = [b for b in blogs if any(tag in selected for tag in (b.tags or []))]

    return [serialize_blog(b, include_content=False) for b in blogs]


@router.get("/blogs/tags")
def get_available_tags(db: Session = Depends(get_db)):
    """Sorted, distinct tags across approved blogs"""
    rows = approved_blogs(db).with_entities(Blog.tags).all()
    unique_tags = {tag for (tags,) in rows for tag in (tags or []) if tag}
    return {"tags": sorted(unique_tags)}


@router.get("/blogs/mine")
def get_my_blogs(
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Author dashboard: every blog the caller wrote, whatever its status, plus totals."""
    blogs = db.query(Blog).filter(
        Blog.author_id == profile.id
    ).order_by(Blog.created_at.desc()).all()

    return {
        "blogs": [serialize_blog(b, include_content=False) for b in blogs],
        "stats": {
            "total_blogs": len(blogs),
            "published_blogs": sum(1 for b in blogs if b.status == STATUS_APPROVED),
            "total_views": sum(b.views_count or 0 for b in blogs),
            "total_likes": sum(b.likes_count or 0 for b in blogs),
        }
    }


@router.get("/blogs/{slug}")
def get_blog(
    slug: str,
    profile: Optional[Profile] = Depends(get_optional_profile),
    db: Session = Depends(get_db)
):
    """
    Read a blog by slug. Approved blogs are public; the author and admins
    can also read it in any other status. Public reads count as a view.
    """
    blog = db.query(Blog).filter(Blog.slug == slug).first()
    if not blog:
        raise HTTPException(status_code=404, detail="Blog not found")

    if blog.status != STATUS_APPROVED:
        if profile is None or (profile.id != blog.author_id and not profile.is_admin):
            raise HTTPException(status_code=404, detail="Blog not found")
        return serialize_blog(blog)

    # Read-then-write: concurrent readers may overwrite each other's increment
    try:
        blog.views_count = (blog.views_count or 0) + 1
        db.commit()
        db.refresh(blog)
    except Exception as e:
        logger.warning("Could not increment views for blog %s: %s", blog.id, e)
        db.rollback()

    return serialize_blog(blog)


# --- Like Endpoints ---

@router.post("/blogs/{blog_id}/like")
def toggle_like(
    blog_id: int,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Toggle like status for a blog"""
    blog = get_approved_blog_or_404(db, blog_id)

    try:
        existing_like = db.query(BlogLike).filter(
            BlogLike.blog_id == blog_id,
            BlogLike.user_id == profile.id
        ).first()

        if existing_like:
            # Unlike: remove the like
            db.delete(existing_like)
            liked = False
        else:
            db.add(BlogLike(blog_id=blog_id, user_id=profile.id))
            liked = True
        db.commit()
        db.refresh(blog)
    except Exception as e:
        logger.error("Error toggling like: %s", e)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to update like status")

    return {
        "liked": liked,
        "likes_count": blog.likes_count
    }


@router.get("/blogs/{blog_id}/like")
def get_like_status(
    blog_id: int,
    profile: Optional[Profile] = Depends(get_optional_profile),
    db: Session = Depends(get_db)
):
    blog = get_approved_blog_or_404(db, blog_id)

    liked = False
    if profile is not None:
        liked = db.query(BlogLike).filter(
            BlogLike.blog_id == blog_id,
            BlogLike.user_id == profile.id
        ).first() is not None

    return {
        "liked": liked,
        "likes_count": blog.likes_count
    }


# --- Bookmark Endpoints ---

@router.post("/blogs/{blog_id}/bookmark")
def toggle_bookmark(
    blog_id: int,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    get_approved_blog_or_404(db, blog_id)

    try:
        existing = db.query(Bookmark).filter(
            Bookmark.blog_id == blog_id,
            Bookmark.user_id == profile.id
        ).first()

        if existing:
            db.delete(existing)
            bookmarked = False
        else:
            db.add(Bookmark(blog_id=blog_id, user_id=profile.id))
            bookmarked = True
        db.commit()
    except Exception as e:
        logger.error("Error toggling bookmark: %s", e)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to update bookmark")

    return {"bookmarked": bookmarked}


@router.get("/blogs/{blog_id}/bookmark")
def get_bookmark_status(
    blog_id: int,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    get_approved_blog_or_404(db, blog_id)
    bookmark = db.query(Bookmark).filter(
        Bookmark.blog_id == blog_id,
        Bookmark.user_id == profile.id
    ).first()
    return {"bookmarked": bookmark is not None}


@router.get("/bookmarks")
def get_my_bookmarks(
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Bookmarked blogs that are still approved, newest bookmark first"""
    bookmarks = db.query(Bookmark).join(Blog).filter(
        Bookmark.user_id == profile.id,
        Blog.status == STATUS_APPROVED
    ).order_by(Bookmark.created_at.desc(), Bookmark.id.desc()).all()

    return [serialize_blog(b.blog, include_content=False) for b in bookmarks]
