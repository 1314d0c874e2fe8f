"""
Article and comment request/response schemas
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

from vspress.models.article import CATEGORIES


class ArticleCreateSchema(BaseModel):
    title: str = Field(..., max_length=300)
    excerpt: str = ""
    content: str = Field(..., description="Article body, HTML allowed")
    category: str = CATEGORIES[0]
    image_url: str = Field(..., alias="imageUrl")
    featured: bool = False

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Spring Fair",
                "excerpt": "Stalls, music and a bake sale on the front lawn.",
                "content": "<p>This year's fair...</p>",
                "category": "Events",
                "imageUrl": "https://firebasestorage.googleapis.com/v0/b/bucket/o/articles%2F1_fair.jpg?alt=media&token=abc",
                "featured": True,
            }
        }
    )


class ArticleResponse(BaseModel):
    id: str
    title: str
    excerpt: str
    content: str
    image_url: str = Field(..., alias="imageUrl")
    author: str
    author_id: str = Field(..., alias="authorId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    category: str
    likes: int = 0
    liked_by: list[str] = Field(default_factory=list, alias="likedBy")
    comments_count: int = Field(0, alias="commentsCount")
    featured: bool = False
    views: int = 0

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
    )


class ArticleListResponse(BaseModel):
    articles: list[ArticleResponse]
    total: int
    category: str

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
    )


class CommentCreateSchema(BaseModel):
    text: str = Field(..., max_length=2000)


class CommentResponse(BaseModel):
    id: str
    user_id: str = Field(..., alias="userId")
    user_name: str = Field("", alias="userName")
    text: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class LikeResponse(BaseModel):
    liked: bool
    likes: int

    model_config = ConfigDict(populate_by_name=True)


class ImageUploadResponse(BaseModel):
    image_url: str = Field(..., alias="imageUrl")

    model_config = ConfigDict(populate_by_name=True)
