from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, event, update
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.blog import Blog


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    blog_id = Column(Integer, ForeignKey("blogs.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    parent_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    blog = relationship("Blog", back_populates="comments")
    author = relationship("Profile")
    children = relationship("Comment", cascade="all, delete")


@event.listens_for(Comment, "after_insert")
def _increment_comments_count(mapper, connection, target):
    connection.execute(
        update(Blog.__table__)
        .where(Blog.__table__.c.id == target.blog_id)
        .values(comments_count=Blog.__table__.c.comments_count + 1)
    )


@event.listens_for(Comment, "after_delete")
def _decrement_comments_count(mapper, connection, target):
    connection.execute(
        update(Blog.__table__)
        .where(Blog.__table__.c.id == target.blog_id)
        .values(comments_count=Blog.__table__.c.comments_count - 1)
    )
