"""Article comments API routes"""

from fastapi import APIRouter, Depends, HTTPException, status

from vspress.api.routes.utils import raise_for_errors
from vspress.dependencies import get_comment_service, get_current_context, get_optional_context
from vspress.models.context import PressContext
from vspress.schemas.article import CommentCreateSchema, CommentResponse
from vspress.services.comment_service import CommentService
from vspress.services.firebase_service import CollaboratorError


router = APIRouter(prefix="/api/v1/articles/{article_id}/comments", tags=["Comments"])


@router.get("/", response_model=list[CommentResponse])
async def list_comments(
    article_id: str,
    ctx: PressContext = Depends(get_optional_context),
    comments: CommentService = Depends(get_comment_service),
):
    """Comments of an article, newest first"""
    await comments.load_comments(ctx, article_id)
    raise_for_errors(ctx)
    return [CommentResponse.model_validate(c) for c in ctx.comments]


@router.post("/", response_model=list[CommentResponse], status_code=status.HTTP_201_CREATED)
async def add_comment(
    article_id: str,
    payload: CommentCreateSchema,
    ctx: PressContext = Depends(get_current_context),
    comments: CommentService = Depends(get_comment_service),
):
    """Post a comment; responds with the re-read comment list"""
    comment_id = await comments.add_comment(ctx, article_id, payload.text)
    raise_for_errors(ctx)
    if comment_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Content required"
        )
    return [CommentResponse.model_validate(c) for c in ctx.comments]


@router.delete("/{comment_id}")
async def delete_comment(
    article_id: str,
    comment_id: str,
    ctx: PressContext = Depends(get_current_context),
    comments: CommentService = Depends(get_comment_service),
):
    try:
        comment = await comments.fetch_comment(article_id, comment_id)
    except CollaboratorError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    if comment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found"
        )

    await comments.delete_comment(ctx, article_id, comment)
    raise_for_errors(ctx)
    return {"deleted": True}
