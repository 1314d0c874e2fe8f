"""
Per-request session context

Every handler and view receives the context explicitly; nothing here is
shared between requests.
"""

from typing import Optional, Literal
from pydantic import BaseModel, Field

from vspress.models.article import Article, ArticleForm, ALL_CATEGORIES
from vspress.models.comment import Comment
from vspress.models.user import SessionUser, UserProfile


class Notification(BaseModel):
    """A transient message shown once on the next rendered page"""

    level: Literal["success", "error"]
    message: str
    # HTTP status the JSON API reports for an error
    status_code: int = 200


class PressContext(BaseModel):
    user: Optional[SessionUser] = None
    profile: Optional[UserProfile] = None

    articles: list[Article] = Field(default_factory=list)
    article: Optional[Article] = None
    comments: list[Comment] = Field(default_factory=list)
    category_filter: str = ALL_CATEGORIES

    form: ArticleForm = Field(default_factory=ArticleForm)
    editing_id: Optional[str] = None
    uploading: bool = False
    comment_text: str = ""

    theme: Literal["light", "dark"] = "light"
    notifications: list[Notification] = Field(default_factory=list)
    redirect_to: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.profile is not None and self.profile.is_admin

    @property
    def errors(self) -> list[Notification]:
        return [n for n in self.notifications if n.level == "error"]

    def notify_success(self, message: str) -> None:
        self.notifications.append(Notification(level="success", message=message))

    def notify_error(self, message: str, status_code: int = 400) -> None:
        self.notifications.append(
            Notification(level="error", message=message, status_code=status_code)
        )

    def reset_form(self) -> None:
        self.form = ArticleForm()
        self.editing_id = None

    def find_article(self, article_id: str) -> Optional[Article]:
        if self.article is not None and self.article.id == article_id:
            return self.article
        for a in self.articles:
            if a.id == article_id:
                return a
        return None
