from fastapi import APIRouter, Depends, File, UploadFile, status

from vspress.api.routes.utils import raise_for_errors
from vspress.dependencies import get_article_service, require_admin
from vspress.models.context import PressContext
from vspress.schemas.article import ImageUploadResponse
from vspress.services.article_service import ArticleService

router = APIRouter(prefix="/api/v1/uploads", tags=["Uploads"])


@router.post("/images", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile = File(...),
    ctx: PressContext = Depends(require_admin),
    articles: ArticleService = Depends(get_article_service),
):
    """
    Store an article image in Firebase Storage.
    Images larger than 5MB are rejected.
    """
    content = await file.read()
    url = await articles.upload_image(ctx, file.filename or "image", content, file.content_type)
    raise_for_errors(ctx)
    return ImageUploadResponse(image_url=url)
