"""
View router: maps a route token to one of the six page views
"""

import os
from typing import Callable, Optional

import jinja2

from vspress.config import settings
from vspress.models.article import ALL_CATEGORIES, CATEGORIES, filter_by_category
from vspress.models.context import PressContext
from vspress.utils.text import format_date, initial, reading_time


template_dir = os.path.join(os.path.dirname(__file__), "templates")
jinja_env = jinja2.Environment(loader=jinja2.FileSystemLoader(template_dir),
                               autoescape=True)
jinja_env.filters["format_date"] = format_date
jinja_env.filters["reading_time"] = reading_time
jinja_env.filters["initial"] = initial


def render_str(template: str, **params) -> str:
    t = jinja_env.get_template(template)
    return t.render(params)


def render_home(ctx: PressContext) -> str:
    featured = next((a for a in ctx.articles if a.featured), None)
    return render_str("home.html", ctx=ctx, featured=featured)


def render_articles(ctx: PressContext) -> str:
    return render_str(
        "articles.html",
        ctx=ctx,
        categories=[ALL_CATEGORIES, *CATEGORIES],
        visible=filter_by_category(ctx.articles, ctx.category_filter),
    )


def render_article(ctx: PressContext) -> str:
    if ctx.article is None:
        return ""
    user_id = ctx.user.uid if ctx.user else None
    return render_str(
        "article.html",
        ctx=ctx,
        article=ctx.article,
        liked=ctx.article.is_liked_by(user_id),
        user_id=user_id,
    )


def render_admin(ctx: PressContext) -> str:
    if not ctx.is_admin:
        return render_str("access_denied.html", ctx=ctx)
    return render_str("admin.html", ctx=ctx, categories=CATEGORIES)


def render_login(ctx: PressContext) -> str:
    return render_str("auth.html", ctx=ctx, is_login=True)


def render_signup(ctx: PressContext) -> str:
    return render_str("auth.html", ctx=ctx, is_login=False)


VIEWS: dict[str, Callable[[PressContext], str]] = {
    "home": render_home,
    "articles": render_articles,
    "article": render_article,
    "admin": render_admin,
    "login": render_login,
    "signup": render_signup,
}


def render_view(token: str, ctx: PressContext) -> Optional[str]:
    """Render the view for a token; unknown tokens have no view"""
    view = VIEWS.get(token)
    if view is None:
        return None
    return view(ctx)


def render_page(token: str, ctx: PressContext) -> str:
    """The page shell around whatever the token renders"""
    return render_str(
        "base.html",
        ctx=ctx,
        app_name=settings.APP_NAME,
        main=render_view(token, ctx) or "",
    )
