from app.models.user_model import User
from app.models.profile_model import Profile
from app.models.category_model import Category
from app.models.tag_model import Tag, post_tags
from app.models.post_model import Post
from app.models.comment_model import Comment
from app.models.like_model import Like
from app.models.schedule_model import Schedule
from app.models.analytics_model import AnalyticsDaily
from app.models.setting_model import Setting
from app.models.waitlist_model import WaitlistEntry

__all__ = [
    "AnalyticsDaily",
    "Category",
    "Comment",
    "Like",
    "Post",
    "Profile",
    "Schedule",
    "Setting",
    "Tag",
    "User",
    "WaitlistEntry",
    "post_tags",
]
