"""
Article listing, editing, likes and image uploads
"""

import logging
import time
from typing import Optional

from fastapi import status
from firebase_admin import firestore

from vspress.config import settings
from vspress.models.article import (
    ALL_CATEGORIES,
    Article,
    ArticleForm,
    article_form_to_firestore,
    firestore_article_to_model,
)
from vspress.models.context import PressContext
from vspress.services.firebase_service import (
    CollaboratorError,
    FirebaseService,
    firebase_service,
)


logger = logging.getLogger(__name__)

ARTICLES = "articles"


class ArticleService:
    """Service for article operations"""

    def __init__(self, firebase: Optional[FirebaseService] = None):
        self.firebase = firebase if firebase is not None else firebase_service

    # ============================================
    # READS
    # ============================================

    async def fetch_latest(self, limit: int) -> list[Article]:
        docs = await self.firebase.list_documents(
            ARTICLES, order_by="createdAt", descending=True, limit=limit
        )
        return [firestore_article_to_model(data, doc_id) for doc_id, data in docs]

    async def load_latest(self, ctx: PressContext, limit: int, category: str = ALL_CATEGORIES) -> list[Article]:
        """Load the newest articles into the context"""
        ctx.category_filter = category or ALL_CATEGORIES
        try:
            ctx.articles = await self.fetch_latest(limit)
        except CollaboratorError as e:
            ctx.notify_error(str(e), status_code=status.HTTP_502_BAD_GATEWAY)
        return ctx.articles

    async def load_home(self, ctx: PressContext) -> list[Article]:
        return await self.load_latest(ctx, settings.HOME_ARTICLE_LIMIT)

    async def load_articles(self, ctx: PressContext, category: str = ALL_CATEGORIES) -> list[Article]:
        return await self.load_latest(ctx, settings.LIST_ARTICLE_LIMIT, category)

    async def fetch_article(self, article_id: str) -> Optional[Article]:
        data = await self.firebase.get_document(ARTICLES, article_id)
        if data is None:
            return None
        return firestore_article_to_model(data, article_id)

    async def load_article(self, ctx: PressContext, article_id: str, count_view: bool = True) -> Optional[Article]:
        """
        Open an article. A successful open bumps its view counter.

        Returns:
            The article, or None if it does not exist
        """
        try:
            article = await self.fetch_article(article_id)
            if article is not None and count_view:
                await self.firebase.update_document(
                    ARTICLES, article_id, {"views": firestore.Increment(1)}
                )
        except CollaboratorError as e:
            ctx.notify_error(str(e), status_code=status.HTTP_502_BAD_GATEWAY)
            return None

        ctx.article = article
        if article is None:
            ctx.notify_error("Article not found", status_code=status.HTTP_404_NOT_FOUND)
        return article

    async def reload_article(self, ctx: PressContext, article_id: str) -> Optional[Article]:
        """
        Replace the local copy with the authoritative record. If the read
        fails the optimistic copy stays.
        """
        try:
            article = await self.fetch_article(article_id)
        except CollaboratorError as e:
            logger.warning("Reloading article %s failed: %s", article_id, e)
            return ctx.find_article(article_id)
        if article is None:
            ctx.articles = [a for a in ctx.articles if a.id != article_id]
            if ctx.article is not None and ctx.article.id == article_id:
                ctx.article = None
            return None

        if ctx.article is not None and ctx.article.id == article_id:
            ctx.article = article
        ctx.articles = [article if a.id == article_id else a for a in ctx.articles]
        return article

    # ============================================
    # ADMIN FORM
    # ============================================

    def start_new(self, ctx: PressContext) -> None:
        ctx.form = ArticleForm()
        ctx.editing_id = "new"

    def start_edit(self, ctx: PressContext, article: Article) -> None:
        ctx.form = ArticleForm.from_article(article)
        ctx.editing_id = article.id

    def cancel_edit(self, ctx: PressContext) -> None:
        ctx.reset_form()

    def _require_admin(self, ctx: PressContext) -> bool:
        if not ctx.is_authenticated:
            ctx.notify_error("Login required", status_code=status.HTTP_401_UNAUTHORIZED)
            return False
        if not ctx.is_admin:
            ctx.notify_error("Access denied", status_code=status.HTTP_403_FORBIDDEN)
            return False
        return True

    async def save_article(self, ctx: PressContext) -> Optional[str]:
        """
        Create or update the article held in the form

        ``ctx.editing_id`` selects the record to update; ``None`` or ``"new"``
        creates one.

        Returns:
            The article id, or None when nothing was saved
        """
        if ctx.form.missing_required():
            ctx.notify_error("Fill all fields")
            return None
        if not self._require_admin(ctx):
            return None

        fields = article_form_to_firestore(ctx.form)
        editing_id = ctx.editing_id if ctx.editing_id != "new" else None

        try:
            if editing_id:
                await self.firebase.update_document(
                    ARTICLES, editing_id, {**fields, "updatedAt": firestore.SERVER_TIMESTAMP}
                )
                article_id = editing_id
            else:
                article_id = await self.firebase.create_document(ARTICLES, {
                    **fields,
                    "author": ctx.profile.display_name,
                    "authorId": ctx.user.uid,
                    "createdAt": firestore.SERVER_TIMESTAMP,
                    "likes": 0,
                    "likedBy": [],
                    "commentsCount": 0,
                    "views": 0,
                })
        except CollaboratorError as e:
            ctx.notify_error(str(e), status_code=status.HTTP_502_BAD_GATEWAY)
            return None

        ctx.notify_success("Article updated" if editing_id else "Article created")
        logger.info("Saved article %s", article_id)
        ctx.reset_form()
        ctx.redirect_to = "/admin"
        return article_id

    async def delete_article(self, ctx: PressContext, article_id: str, confirmed: bool) -> bool:
        """Delete an article once the admin has confirmed it"""
        if not confirmed:
            return False
        if not self._require_admin(ctx):
            return False

        try:
            await self.firebase.delete_document(ARTICLES, article_id)
        except CollaboratorError as e:
            ctx.notify_error(str(e), status_code=status.HTTP_502_BAD_GATEWAY)
            return False

        ctx.articles = [a for a in ctx.articles if a.id != article_id]
        if ctx.article is not None and ctx.article.id == article_id:
            ctx.article = None
        ctx.notify_success("Article deleted")
        return True

    # ============================================
    # LIKES
    # ============================================

    async def toggle_like(self, ctx: PressContext, article_id: str) -> Optional[bool]:
        """
        Like or unlike an article as the current user

        The counter and the liking-user set change in one update request.
        The local copy is adjusted optimistically; ``reload_article`` brings
        the authoritative values.

        Returns:
            True if the article is now liked, False if unliked, None on failure
        """
        if not ctx.is_authenticated:
            ctx.notify_error("Login to like", status_code=status.HTTP_401_UNAUTHORIZED)
            return None

        uid = ctx.user.uid
        local = ctx.find_article(article_id)
        try:
            if local is None:
                local = await self.fetch_article(article_id)
                if local is None:
                    ctx.notify_error("Article not found",
                                     status_code=status.HTTP_404_NOT_FOUND)
                    return None

            is_liked = local.is_liked_by(uid)
            await self.firebase.update_document(ARTICLES, article_id, {
                "likes": firestore.Increment(-1 if is_liked else 1),
                "likedBy": (
                    firestore.ArrayRemove([uid]) if is_liked else firestore.ArrayUnion([uid])
                ),
            })
        except CollaboratorError as e:
            ctx.notify_error(str(e), status_code=status.HTTP_502_BAD_GATEWAY)
            return None

        copies = _local_copies(ctx, article_id)
        if not copies:
            ctx.article = local
            copies = [local]
        for copy in copies:
            _apply_like(copy, uid, not is_liked)
        return not is_liked

    # ============================================
    # IMAGES
    # ============================================

    async def upload_image(
        self, ctx: PressContext, filename: str, content: bytes, content_type: Optional[str]
    ) -> Optional[str]:
        """
        Store an article image and put its download URL into the form

        Returns:
            The download URL, or None when the upload was rejected or failed
        """
        if len(content) > settings.MAX_IMAGE_BYTES:
            ctx.notify_error(
                f"Image must be < {settings.MAX_IMAGE_BYTES // (1024 * 1024)}MB",
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            )
            return None
        if content_type and not content_type.startswith("image/"):
            ctx.notify_error("Only image files can be uploaded",
                             status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE)
            return None

        path = f"articles/{int(time.time() * 1000)}_{filename}"
        ctx.uploading = True
        try:
            await self.firebase.upload_blob(path, content, content_type or "application/octet-stream")
            url = await self.firebase.resolve_blob(path)
        except CollaboratorError as e:
            ctx.notify_error(str(e), status_code=status.HTTP_502_BAD_GATEWAY)
            return None
        finally:
            ctx.uploading = False

        ctx.form.image_url = url
        ctx.notify_success("Image uploaded")
        return url


def _local_copies(ctx: PressContext, article_id: str) -> list[Article]:
    copies = []
    for a in [ctx.article, *ctx.articles]:
        if a is not None and a.id == article_id and not any(a is c for c in copies):
            copies.append(a)
    return copies


def _apply_like(article: Article, uid: str, liked: bool) -> None:
    if liked:
        article.likes += 1
        if uid not in article.liked_by:
            article.liked_by.append(uid)
    else:
        article.likes -= 1
        article.liked_by = [u for u in article.liked_by if u != uid]
