from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from app.database import Base

ROLE_BLOGGER = "blogger"
ROLE_ADMIN = "admin"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), unique=True, index=True, nullable=False)  # Google "sub" claim
    email = Column(String(255), index=True, nullable=False)

    username = Column(String(50), unique=True, index=True)
    full_name = Column(String(100))
    avatar_url = Column(String(500))
    bio = Column(Text)
    role = Column(String(20), nullable=False, default=ROLE_BLOGGER)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    @property
    def display_name(self):
        return self.full_name or self.username or "User"
