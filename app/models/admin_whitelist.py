from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.database import Base


class AdminWhitelist(Base):
    __tablename__ = "admin_whitelist"

    email = Column(String(255), primary_key=True)  # Stored lowercase
    created_at = Column(DateTime(timezone=True), server_default=func.now())
