"""Post model with denormalized engagement counters."""
from sqlalchemy import JSON, Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from app.db.session import Base, unix_now


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False, default="")
    media = Column(JSON, nullable=True)  # [{"url": ..., "type": "image" | "video"}, ...]
    # Counters are only written through app.services.counter_service
    likes_count = Column(Integer, nullable=False, default=0)
    comments_count = Column(Integer, nullable=False, default=0)
    reposts_count = Column(Integer, nullable=False, default=0)
    created_at = Column(Integer, default=unix_now, index=True)
    updated_at = Column(Integer, default=unix_now)

    user = relationship("User", back_populates="posts")
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="post", cascade="all, delete-orphan")
    reposts = relationship("Repost", back_populates="post", cascade="all, delete-orphan")
    saved_by = relationship("SavedPost", back_populates="post", cascade="all, delete-orphan")
