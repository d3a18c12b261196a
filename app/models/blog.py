from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
STATUS_HIDDEN = "hidden"

BLOG_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED, STATUS_HIDDEN)


class Blog(Base):
    __tablename__ = "blogs"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(300), nullable=False, unique=True, index=True)
    content = Column(Text, nullable=False)
    excerpt = Column(Text)
    cover_image_url = Column(String(500))
    status = Column(String(20), nullable=False, default=STATUS_PENDING, index=True)
    tags = Column(JSON, default=list)
    reading_time = Column(Integer, default=0)

    # Denormalized, maintained by the Like/Comment mapper events
    likes_count = Column(Integer, nullable=False, default=0)
    comments_count = Column(Integer, nullable=False, default=0)
    views_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    published_at = Column(DateTime(timezone=True))

    author = relationship("Profile", backref="blogs")
    likes = relationship("BlogLike", back_populates="blog", cascade="all, delete")
    bookmarks = relationship("Bookmark", back_populates="blog", cascade="all, delete")
    comments = relationship("Comment", back_populates="blog", cascade="all, delete")
