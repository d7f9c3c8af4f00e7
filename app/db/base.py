"""SQLAlchemy declarative base and model imports for Alembic."""
from app.db.session import Base  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.post import Post  # noqa: F401
from app.models.comment import Comment  # noqa: F401
from app.models.engagement import Follow, Like, Repost, SavedPost  # noqa: F401

__all__ = ["Base", "User", "Post", "Comment", "Follow", "Like", "Repost", "SavedPost"]
