"""
Comment service: posting, listing and deleting article comments
"""

import logging
from typing import Optional

from fastapi import status
from firebase_admin import firestore

from vspress.models.comment import (
    Comment,
    comments_path,
    firestore_comment_to_model,
    newest_first,
)
from vspress.models.context import PressContext
from vspress.models.user import SessionUser, UserProfile
from vspress.services.article_service import ARTICLES
from vspress.services.firebase_service import (
    CollaboratorError,
    FirebaseService,
    firebase_service,
)


logger = logging.getLogger(__name__)


def can_delete_comment(
    user: Optional[SessionUser], profile: Optional[UserProfile], comment: Comment
) -> bool:
    """Authors may delete their own comments; admins may delete any"""
    if user is None:
        return False
    return user.uid == comment.user_id or (profile is not None and profile.is_admin)


class CommentService:
    """Service for comment operations"""

    def __init__(self, firebase: Optional[FirebaseService] = None):
        self.firebase = firebase if firebase is not None else firebase_service

    async def fetch_comments(self, article_id: str) -> list[Comment]:
        docs = await self.firebase.list_documents(
            comments_path(article_id), order_by="createdAt", descending=True
        )
        return newest_first(
            [firestore_comment_to_model(data, doc_id) for doc_id, data in docs]
        )

    async def fetch_comment(self, article_id: str, comment_id: str) -> Optional[Comment]:
        data = await self.firebase.get_document(comments_path(article_id), comment_id)
        if data is None:
            return None
        return firestore_comment_to_model(data, comment_id)

    async def _adjust_count(self, article_id: str, delta: int) -> None:
        """
        Keep commentsCount in step. Comments can outlive their article, so a
        failed update is logged rather than reported.
        """
        try:
            await self.firebase.update_document(
                ARTICLES, article_id, {"commentsCount": firestore.Increment(delta)}
            )
        except CollaboratorError as e:
            logger.warning("Could not adjust commentsCount of %s: %s", article_id, e)

    async def load_comments(self, ctx: PressContext, article_id: str) -> list[Comment]:
        try:
            ctx.comments = await self.fetch_comments(article_id)
        except CollaboratorError as e:
            ctx.notify_error(str(e), status_code=status.HTTP_502_BAD_GATEWAY)
        return ctx.comments

    async def add_comment(self, ctx: PressContext, article_id: str, text: str) -> Optional[str]:
        """
        Post a comment and re-read the whole comment list afterwards

        Blank text is ignored without a notification.

        Returns:
            The new comment id, or None if nothing was posted
        """
        if not ctx.is_authenticated:
            ctx.notify_error("Login to comment", status_code=status.HTTP_401_UNAUTHORIZED)
            return None
        if not (text or "").strip():
            return None

        user_name = ctx.profile.display_name if ctx.profile else ""
        try:
            if await self.firebase.get_document(ARTICLES, article_id) is None:
                ctx.notify_error("Article not found", status_code=status.HTTP_404_NOT_FOUND)
                return None
            comment_id = await self.firebase.create_document(comments_path(article_id), {
                "userId": ctx.user.uid,
                "userName": user_name,
                "text": text,
                "createdAt": firestore.SERVER_TIMESTAMP,
            })
        except CollaboratorError as e:
            ctx.notify_error(str(e), status_code=status.HTTP_502_BAD_GATEWAY)
            return None

        # Stored; the counter and the re-read below are best effort
        ctx.comment_text = ""
        await self._adjust_count(article_id, 1)
        try:
            ctx.comments = await self.fetch_comments(article_id)
        except CollaboratorError as e:
            logger.warning("Re-reading comments of %s failed: %s", article_id, e)

        if ctx.article is not None and ctx.article.id == article_id:
            ctx.article.comments_count += 1
        ctx.notify_success("Comment posted!")
        return comment_id

    async def delete_comment(self, ctx: PressContext, article_id: str, comment: Comment) -> bool:
        """Delete a comment if the current user is its author or an admin"""
        if not can_delete_comment(ctx.user, ctx.profile, comment):
            ctx.notify_error(
                "Not authorized",
                status_code=(
                    status.HTTP_403_FORBIDDEN if ctx.is_authenticated
                    else status.HTTP_401_UNAUTHORIZED
                ),
            )
            return False

        try:
            await self.firebase.delete_document(comments_path(article_id), comment.id)
        except CollaboratorError as e:
            ctx.notify_error(str(e), status_code=status.HTTP_502_BAD_GATEWAY)
            return False
        await self._adjust_count(article_id, -1)

        ctx.comments = [c for c in ctx.comments if c.id != comment.id]
        if ctx.article is not None and ctx.article.id == article_id:
            ctx.article.comments_count = max(0, ctx.article.comments_count - 1)
        logger.info("Comment %s on article %s deleted by %s",
                    comment.id, article_id, ctx.user.uid)
        ctx.notify_success("Comment deleted")
        return True
