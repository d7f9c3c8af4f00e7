from app.models.user import User
from app.models.post import Post
from app.models.comment import Comment
from app.models.engagement import Follow, Like, Repost, SavedPost

__all__ = ["User", "Post", "Comment", "Follow", "Like", "Repost", "SavedPost"]
