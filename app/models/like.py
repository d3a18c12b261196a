from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, event, update
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.blog import Blog


class BlogLike(Base):
    __tablename__ = "likes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    blog_id = Column(Integer, ForeignKey("blogs.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    blog = relationship("Blog", back_populates="likes")

    # Ensure each user can only like a blog once
    __table_args__ = (UniqueConstraint('user_id', 'blog_id', name='uq_blog_user_like'),)


@event.listens_for(BlogLike, "after_insert")
def _increment_likes_count(mapper, connection, target):
    connection.execute(
        update(Blog.__table__)
        .where(Blog.__table__.c.id == target.blog_id)
        .values(likes_count=Blog.__table__.c.likes_count + 1)
    )


@event.listens_for(BlogLike, "after_delete")
def _decrement_likes_count(mapper, connection, target):
    connection.execute(
        update(Blog.__table__)
        .where(Blog.__table__.c.id == target.blog_id)
        .values(likes_count=Blog.__table__.c.likes_count - 1)
    )
