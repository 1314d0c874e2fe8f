"""Articles API routes"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from vspress.api.routes.utils import raise_for_errors
from vspress.config import settings
from vspress.dependencies import (
    get_article_service,
    get_current_context,
    get_optional_context,
    require_admin,
)
from vspress.models.article import ALL_CATEGORIES, ArticleForm, filter_by_category
from vspress.models.context import PressContext
from vspress.schemas.article import (
    ArticleCreateSchema,
    ArticleListResponse,
    ArticleResponse,
    LikeResponse,
)
from vspress.services.article_service import ArticleService


router = APIRouter(prefix="/api/v1/articles", tags=["Articles"])


def _form_from_payload(payload: ArticleCreateSchema) -> ArticleForm:
    try:
        return ArticleForm.model_validate(payload.model_dump())
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        )


@router.get("/", response_model=ArticleListResponse)
async def list_articles(
    category: str = Query(ALL_CATEGORIES),
    limit: int = Query(settings.LIST_ARTICLE_LIMIT, ge=1, le=100),
    ctx: PressContext = Depends(get_optional_context),
    articles: ArticleService = Depends(get_article_service),
):
    """Newest articles first, optionally narrowed to one category"""
    await articles.load_latest(ctx, limit, category)
    raise_for_errors(ctx)

    items = filter_by_category(ctx.articles, ctx.category_filter)
    return ArticleListResponse(
        articles=[ArticleResponse.model_validate(a) for a in items],
        total=len(items),
        category=ctx.category_filter,
    )


@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(
    article_id: str,
    ctx: PressContext = Depends(get_optional_context),
    articles: ArticleService = Depends(get_article_service),
):
    article = await articles.load_article(ctx, article_id)
    raise_for_errors(ctx)
    return ArticleResponse.model_validate(article)


@router.post("/", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    payload: ArticleCreateSchema,
    ctx: PressContext = Depends(require_admin),
    articles: ArticleService = Depends(get_article_service),
):
    ctx.form = _form_from_payload(payload)
    ctx.editing_id = None
    article_id = await articles.save_article(ctx)
    raise_for_errors(ctx)

    article = await articles.fetch_article(article_id)
    return ArticleResponse.model_validate(article)


@router.put("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: str,
    payload: ArticleCreateSchema,
    ctx: PressContext = Depends(require_admin),
    articles: ArticleService = Depends(get_article_service),
):
    if await articles.fetch_article(article_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Article not found"
        )

    ctx.form = _form_from_payload(payload)
    ctx.editing_id = article_id
    await articles.save_article(ctx)
    raise_for_errors(ctx)

    article = await articles.fetch_article(article_id)
    return ArticleResponse.model_validate(article)


@router.delete("/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_article(
    article_id: str,
    ctx: PressContext = Depends(require_admin),
    articles: ArticleService = Depends(get_article_service),
):
    # The DELETE request itself is the confirmation
    await articles.delete_article(ctx, article_id, confirmed=True)
    raise_for_errors(ctx)
    return None


@router.post("/{article_id}/like", response_model=LikeResponse)
async def toggle_like(
    article_id: str,
    ctx: PressContext = Depends(get_current_context),
    articles: ArticleService = Depends(get_article_service),
):
    liked: Optional[bool] = await articles.toggle_like(ctx, article_id)
    raise_for_errors(ctx)

    # Report the stored counter, which includes concurrent likes
    article = await articles.reload_article(ctx, article_id)
    if article is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Article not found"
        )
    return LikeResponse(liked=liked, likes=article.likes)
