from app.schemas.user import UserPublic, FollowerStats, FollowResponse
from app.schemas.post import PostCreate, PostUpdate, PostResponse, SavedPostResponse, MediaItem
from app.schemas.comment import CommentCreate, CommentResponse
from app.schemas.repost import RepostToggleResponse
from app.schemas.notification import NotificationEvent, NotificationActor
