"""
Server-rendered pages and their form actions
"""

from typing import Optional
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from vspress.config import settings
from vspress.dependencies import (
    get_article_service,
    get_auth_service,
    get_comment_service,
    get_page_context,
)
from vspress.models.article import ALL_CATEGORIES, ArticleForm
from vspress.models.context import PressContext
from vspress.services.article_service import ArticleService
from vspress.services.auth_service import AuthService
from vspress.services.comment_service import CommentService
from vspress.services.firebase_service import CollaboratorError
from vspress.services.theme_service import toggle_theme
from vspress.utils.security import create_flash_token, create_session_token
from vspress.views.router import render_page


router = APIRouter(tags=["Pages"])

ONE_YEAR = 60 * 60 * 24 * 365


def _page(token: str, ctx: PressContext, status_code: int = status.HTTP_200_OK) -> HTMLResponse:
    response = HTMLResponse(render_page(token, ctx), status_code=status_code)
    # Notifications are shown once
    response.delete_cookie(settings.FLASH_COOKIE_NAME)
    return response


def _redirect(ctx: PressContext, default: str = "/") -> RedirectResponse:
    response = RedirectResponse(ctx.redirect_to or default, status_code=status.HTTP_303_SEE_OTHER)
    if ctx.notifications:
        response.set_cookie(
            settings.FLASH_COOKIE_NAME,
            create_flash_token([n.model_dump() for n in ctx.notifications]),
            httponly=True,
            samesite="lax",
        )
    else:
        response.delete_cookie(settings.FLASH_COOKIE_NAME)
    return response


def _start_session(response: RedirectResponse, ctx: PressContext) -> None:
    token = create_session_token(ctx.user.uid, ctx.user.email)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token["access_token"],
        max_age=token["expires_in"],
        httponly=True,
        samesite="lax",
    )


def _local_path(url: Optional[str]) -> str:
    """Path of a same-site URL, or the root when a browser could read it as another host"""
    path = urlparse(url or "").path
    if not path.startswith("/") or path[1:2] in ("/", "\\"):
        return "/"
    return path


# ============================================
# VIEWS
# ============================================


@router.get("/", response_class=HTMLResponse)
@router.get("/home", response_class=HTMLResponse)
async def home_page(
    ctx: PressContext = Depends(get_page_context),
    articles: ArticleService = Depends(get_article_service),
):
    await articles.load_home(ctx)
    return _page("home", ctx)


@router.get("/articles", response_class=HTMLResponse)
async def articles_page(
    category: str = Query(ALL_CATEGORIES),
    ctx: PressContext = Depends(get_page_context),
    articles: ArticleService = Depends(get_article_service),
):
    await articles.load_articles(ctx, category)
    return _page("articles", ctx)


async def _article_page(
    article_id: Optional[str],
    ctx: PressContext,
    articles: ArticleService,
    comments: CommentService,
) -> HTMLResponse:
    if not article_id:
        return _page("article", ctx, status.HTTP_404_NOT_FOUND)
    article = await articles.load_article(ctx, article_id)
    if article is None:
        return _page("article", ctx, status.HTTP_404_NOT_FOUND)
    await comments.load_comments(ctx, article_id)
    return _page("article", ctx)


@router.get("/article", response_class=HTMLResponse)
async def article_page_by_query(
    article_id: Optional[str] = Query(None, alias="id"),
    ctx: PressContext = Depends(get_page_context),
    articles: ArticleService = Depends(get_article_service),
    comments: CommentService = Depends(get_comment_service),
):
    return await _article_page(article_id, ctx, articles, comments)


@router.get("/article/{article_id}", response_class=HTMLResponse)
async def article_page(
    article_id: str,
    ctx: PressContext = Depends(get_page_context),
    articles: ArticleService = Depends(get_article_service),
    comments: CommentService = Depends(get_comment_service),
):
    return await _article_page(article_id, ctx, articles, comments)


@router.get("/admin", response_class=HTMLResponse)
async def admin_page(
    edit: Optional[str] = Query(None),
    ctx: PressContext = Depends(get_page_context),
    articles: ArticleService = Depends(get_article_service),
):
    if not ctx.is_admin:
        return _page("admin", ctx, status.HTTP_403_FORBIDDEN)

    await articles.load_articles(ctx)
    if edit == "new":
        articles.start_new(ctx)
    elif edit:
        article = ctx.find_article(edit)
        if article is None:
            article = await articles.load_article(ctx, edit, count_view=False)
            ctx.article = None
        if article is not None:
            articles.start_edit(ctx, article)
    return _page("admin", ctx)


@router.get("/login", response_class=HTMLResponse)
async def login_page(ctx: PressContext = Depends(get_page_context)):
    return _page("login", ctx)


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(ctx: PressContext = Depends(get_page_context)):
    return _page("signup", ctx)


# ============================================
# ACTIONS
# ============================================


@router.post("/login")
async def login_action(
    email: str = Form(""),
    password: str = Form(""),
    ctx: PressContext = Depends(get_page_context),
    auth: AuthService = Depends(get_auth_service),
):
    if await auth.login(ctx, email, password) is None:
        return _redirect(ctx, "/login")
    response = _redirect(ctx)
    _start_session(response, ctx)
    return response


@router.post("/signup")
async def signup_action(
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    ctx: PressContext = Depends(get_page_context),
    auth: AuthService = Depends(get_auth_service),
):
    if await auth.signup(ctx, email, password, name) is None:
        return _redirect(ctx, "/signup")
    response = _redirect(ctx)
    _start_session(response, ctx)
    return response


@router.post("/logout")
async def logout_action(
    ctx: PressContext = Depends(get_page_context),
    auth: AuthService = Depends(get_auth_service),
):
    await auth.logout(ctx)
    response = _redirect(ctx)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.post("/theme")
async def theme_action(request: Request, ctx: PressContext = Depends(get_page_context)):
    theme = toggle_theme(ctx)
    ctx.redirect_to = _local_path(request.headers.get("referer"))
    response = _redirect(ctx)
    response.set_cookie(settings.THEME_COOKIE_NAME, theme, max_age=ONE_YEAR, samesite="lax")
    return response


@router.post("/article/{article_id}/like")
async def like_action(
    article_id: str,
    ctx: PressContext = Depends(get_page_context),
    articles: ArticleService = Depends(get_article_service),
):
    await articles.toggle_like(ctx, article_id)
    ctx.redirect_to = f"/article/{article_id}"
    return _redirect(ctx)


@router.post("/article/{article_id}/comments")
async def comment_action(
    article_id: str,
    text: str = Form(""),
    ctx: PressContext = Depends(get_page_context),
    comments: CommentService = Depends(get_comment_service),
):
    await comments.add_comment(ctx, article_id, text)
    ctx.redirect_to = f"/article/{article_id}"
    return _redirect(ctx)


@router.post("/article/{article_id}/comments/{comment_id}/delete")
async def delete_comment_action(
    article_id: str,
    comment_id: str,
    ctx: PressContext = Depends(get_page_context),
    comments: CommentService = Depends(get_comment_service),
):
    ctx.redirect_to = f"/article/{article_id}"
    try:
        comment = await comments.fetch_comment(article_id, comment_id)
    except CollaboratorError as e:
        ctx.notify_error(str(e))
        return _redirect(ctx)

    if comment is None:
        ctx.notify_error("Comment not found")
    else:
        await comments.delete_comment(ctx, article_id, comment)
    return _redirect(ctx)


@router.post("/admin/articles")
async def save_article_action(
    editing_id: str = Form("new"),
    title: str = Form(""),
    excerpt: str = Form(""),
    category: str = Form(""),
    content: str = Form(""),
    image_url: str = Form(""),
    featured: bool = Form(False),
    image: Optional[UploadFile] = File(None),
    ctx: PressContext = Depends(get_page_context),
    articles: ArticleService = Depends(get_article_service),
):
    if not ctx.is_admin:
        return _page("admin", ctx, status.HTTP_403_FORBIDDEN)

    ctx.editing_id = editing_id or "new"
    try:
        ctx.form = ArticleForm(
            title=title, excerpt=excerpt, category=category,
            content=content, image_url=image_url, featured=featured,
        )
    except ValidationError:
        ctx.form = ArticleForm(
            title=title, excerpt=excerpt, content=content,
            image_url=image_url, featured=featured,
        )
        ctx.notify_error("Choose a valid category")
        return await _admin_form_error(ctx, articles)

    if ctx.form.missing_text():
        # Nothing is uploaded for a submission that cannot be saved
        ctx.notify_error("Fill all fields")
        return await _admin_form_error(ctx, articles)

    if image is not None and image.filename:
        data = await image.read()
        if await articles.upload_image(ctx, image.filename, data, image.content_type) is None:
            return await _admin_form_error(ctx, articles)

    if await articles.save_article(ctx) is None:
        return await _admin_form_error(ctx, articles)
    return _redirect(ctx, "/admin")


async def _admin_form_error(ctx: PressContext, articles: ArticleService) -> HTMLResponse:
    """Show the admin panel again with the form as submitted"""
    form, editing_id = ctx.form, ctx.editing_id
    await articles.load_articles(ctx)
    ctx.form, ctx.editing_id = form, editing_id
    return _page("admin", ctx, status.HTTP_400_BAD_REQUEST)


@router.post("/admin/articles/{article_id}/delete")
async def delete_article_action(
    article_id: str,
    confirm: str = Form(""),
    ctx: PressContext = Depends(get_page_context),
    articles: ArticleService = Depends(get_article_service),
):
    await articles.delete_article(ctx, article_id, confirmed=confirm == "true")
    return _redirect(ctx, "/admin")


@router.get("/{token}", response_class=HTMLResponse)
async def unknown_page(token: str, ctx: PressContext = Depends(get_page_context)):
    """Any other path renders the shell without a view"""
    return _page(token, ctx, status.HTTP_404_NOT_FOUND)
