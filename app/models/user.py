"""User model. Read-only from the point of view of the feed and interaction services."""
from sqlalchemy import Boolean, Column, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.session import Base, unix_now


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    university_handle = Column(String(100), nullable=True)
    profile_image_url = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    user_type = Column(String(20), nullable=False, default="customer")  # vendor | customer | admin
    is_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(Integer, default=unix_now)
    updated_at = Column(Integer, default=unix_now, onupdate=unix_now)

    # Relationships
    posts = relationship("Post", back_populates="user", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="user", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="user", cascade="all, delete-orphan")
    reposts = relationship("Repost", back_populates="user", cascade="all, delete-orphan")
    saved_posts = relationship("SavedPost", back_populates="user", cascade="all, delete-orphan")
    following = relationship(
        "Follow",
        foreign_keys="Follow.follower_id",
        back_populates="follower",
        cascade="all, delete-orphan",
    )
    followers_rel = relationship(
        "Follow",
        foreign_keys="Follow.following_id",
        back_populates="following",
        cascade="all, delete-orphan",
    )
