from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class Comment(BaseModel):
    """
    Comment on an article

    Collection: articles/{articleId}/comments
    """

    id: str
    user_id: str = Field(..., alias="userId")
    user_name: str = Field("", alias="userName")
    text: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


def comments_path(article_id: str) -> str:
    return f"articles/{article_id}/comments"


def firestore_comment_to_model(doc: dict, doc_id: str) -> Comment:
    return Comment.model_validate({**doc, "id": doc_id})


def newest_first(comments: list[Comment]) -> list[Comment]:
    """Order by creation time, newest first; ties broken by id"""
    return sorted(
        comments,
        key=lambda c: (_as_aware(c.created_at) or _OLDEST, c.id),
        reverse=True,
    )


def _as_aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
