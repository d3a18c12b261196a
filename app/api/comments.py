import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.config import CHAR_LIMIT_COMMENT
from app.database import get_db
from app.models.comment import Comment
from app.models.profile import Profile
from app.dependencies import get_current_profile
from app.api.blog import get_approved_blog_or_404, serialize_author
from app.services.threads import build_comment_thread, count_thread
from app.services.notifications import send_notification_safely

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["comments"])


class CommentCreate(BaseModel):
    content: str
    parent_id: Optional[int] = None


class CommentUpdate(BaseModel):
    content: str


def serialize_comment(c):
    return {
        "id": c.id,
        "blog_id": c.blog_id,
        "author_id": c.author_id,
        "parent_id": c.parent_id,
        "content": c.content,
        "created_at": c.created_at.isoformat() if c.created_at else None,
        "updated_at": c.updated_at.isoformat() if c.updated_at else None,
        "author": serialize_author(c.author),
    }


def clean_content(content: str) -> str:
    content = (content or "").strip()
    if not content:
        raise HTTPException(status_code=400, detail="Comment content is required")
    if len(content) > CHAR_LIMIT_COMMENT:
        raise HTTPException(
            status_code=400,
            detail=f"Comment is too long (max {CHAR_LIMIT_COMMENT} characters)"
        )
    return content


@router.get("/blogs/{blog_id}/comments")
def get_blog_comments(blog_id: int, db: Session = Depends(get_db)):
    """Threaded comments: roots oldest first, each with its replies"""
    get_approved_blog_or_404(db, blog_id)

    comments = db.query(Comment).filter(
        Comment.blog_id == blog_id
    ).order_by(Comment.created_at.asc(), Comment.id.asc()).all()

    thread = build_comment_thread(serialize_comment(c) for c in comments)
    return {
        "comments": thread,
        "total": count_thread(thread)
    }


@router.post("/blogs/{blog_id}/comments", status_code=status.HTTP_201_CREATED)
def create_comment(
    blog_id: int,
    comment: CommentCreate,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Post a comment, or a reply when parent_id is given"""
    blog = get_approved_blog_or_404(db, blog_id)
    content = clean_content(comment.content)

    if comment.parent_id is not None:
        parent = db.query(Comment).filter(
            Comment.id == comment.parent_id,
            Comment.blog_id == blog_id
        ).first()
        if not parent:
            raise HTTPException(status_code=404, detail="Parent comment not found")

    try:
        new_comment = Comment(
            blog_id=blog_id,
            author_id=profile.id,
            parent_id=comment.parent_id,
            content=content,
        )
        db.add(new_comment)
        db.commit()
        db.refresh(new_comment)
    except Exception as e:
        logger.error("Error creating comment: %s", e)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to post comment")

    # Let the blog author know, unless they are commenting on their own post
    author = blog.author
    if author and author.id != profile.id and author.email:
        send_notification_safely({
            "type": "new_comment",
            "recipientEmail": author.email,
            "recipientName": author.display_name,
            "blogTitle": blog.title,
            "blogSlug": blog.slug,
            "commentContent": content,
        })

    return serialize_comment(new_comment)


@router.put("/comments/{comment_id}")
def update_comment(
    comment_id: int,
    data: CommentUpdate,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment.author_id != profile.id:
        raise HTTPException(status_code=403, detail="Access denied")

    comment.content = clean_content(data.content)
    try:
        db.commit()
        db.refresh(comment)
    except Exception as e:
        logger.error("Error updating comment %s: %s", comment_id, e)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to update comment")

    return serialize_comment(comment)


@router.delete("/comments/{comment_id}")
def delete_comment(
    comment_id: int,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Delete a comment and its replies - author or admin"""
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment.author_id != profile.id and not profile.is_admin:
        raise HTTPException(status_code=403, detail="Access denied")

    try:
        db.delete(comment)
        db.commit()
    except Exception as e:
        logger.error("Error deleting comment %s: %s", comment_id, e)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to delete comment")

    return {"message": "Comment deleted successfully"}
