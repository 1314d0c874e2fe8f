from vspress.models.user import SessionUser, UserProfile, UserRole
from vspress.models.article import Article, ArticleForm, CATEGORIES
from vspress.models.comment import Comment
from vspress.models.context import Notification, PressContext

__all__ = [
    "SessionUser",
    "UserProfile",
    "UserRole",
    "Article",
    "ArticleForm",
    "CATEGORIES",
    "Comment",
    "Notification",
    "PressContext",
]
