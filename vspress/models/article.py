"""
Article model and Firestore conversion helpers
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


CATEGORIES = ["News", "Sports", "Arts", "Opinion",
              "Features", "Events", "Science", "Campus"]
ALL_CATEGORIES = "All"


class Article(BaseModel):
    id: str
    title: str = ""
    excerpt: str = ""
    content: str = ""
    image_url: str = Field("", alias="imageUrl")
    author: str = ""
    author_id: str = Field("", alias="authorId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    category: str = CATEGORIES[0]
    likes: int = 0
    liked_by: list[str] = Field(default_factory=list, alias="likedBy")
    comments_count: int = Field(0, alias="commentsCount")
    featured: bool = False
    views: int = 0

    model_config = ConfigDict(populate_by_name=True)

    def is_liked_by(self, uid: Optional[str]) -> bool:
        return bool(uid) and uid in self.liked_by


class ArticleForm(BaseModel):
    """Pending create/edit form state of the admin panel"""

    title: str = ""
    excerpt: str = ""
    content: str = ""
    category: str = CATEGORIES[0]
    image_url: str = Field("", alias="imageUrl")
    featured: bool = False

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        if v not in CATEGORIES:
            raise ValueError(f"Category must be one of {', '.join(CATEGORIES)}")
        return v

    def missing_text(self) -> bool:
        return not (self.title and self.content)

    def missing_required(self) -> bool:
        return self.missing_text() or not self.image_url

    @classmethod
    def from_article(cls, article: Article) -> "ArticleForm":
        return cls(
            title=article.title,
            excerpt=article.excerpt,
            content=article.content,
            category=article.category if article.category in CATEGORIES else CATEGORIES[0],
            image_url=article.image_url,
            featured=article.featured,
        )


def firestore_article_to_model(doc: dict, doc_id: str) -> Article:
    return Article.model_validate({**doc, "id": doc_id})


def article_form_to_firestore(form: ArticleForm) -> dict:
    return form.model_dump(by_alias=True)


def filter_by_category(articles: list[Article], category: str) -> list[Article]:
    if category == ALL_CATEGORIES:
        return list(articles)
    return [a for a in articles if a.category == category]
