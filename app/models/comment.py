"""Comment model. Two levels: top-level comments (parent_id NULL) and their replies."""
from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from app.db.session import Base, unix_now


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    content = Column(Text, nullable=False)
    replies_count = Column(Integer, nullable=False, default=0)  # only meaningful on top-level comments
    created_at = Column(Integer, default=unix_now)

    user = relationship("User", back_populates="comments")
    post = relationship("Post", back_populates="comments")
