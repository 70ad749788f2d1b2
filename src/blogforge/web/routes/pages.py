"""Server-rendered public pages and the sitemap."""

from __future__ import annotations

import json
from pathlib import Path

import markdown
from markdown.extensions import Extension
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from blogforge.config import Settings
from blogforge.storage.models import BlogStatus
from blogforge.storage.store import Store
from blogforge.web.deps import get_app_settings, get_store
from blogforge.web.seo import (
    SITE_DESCRIPTION,
    Article,
    article_schema,
    sitemap_entries,
    website_schema,
)

PAGES_DIR = Path(__file__).resolve().parent.parent.parent / "templates" / "pages"

templates = Jinja2Templates(directory=str(PAGES_DIR))

router = APIRouter()


class _NoRawHtml(Extension):
    """Drop python-markdown's raw HTML passthrough so stored text is escaped."""

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block", strict=False)
        md.inlinePatterns.deregister("html", strict=False)


def render_markdown(text: str) -> Markup:
    html = markdown.markdown(text, extensions=["extra", "sane_lists", _NoRawHtml()])
    return Markup(html)


def _json_ld(data: dict) -> Markup:
    # Keep "</script>" out of the inline block
    return Markup(json.dumps(data, ensure_ascii=False).replace("</", "<\\/"))


def _published_articles(store: Store) -> list[Article]:
    articles = [Article.from_post(post) for post in store.list_posts()]
    articles.extend(
        Article.from_blog(blog) for blog in store.list_blogs(BlogStatus.PUBLISHED)
    )
    return articles


@router.get("/", response_class=HTMLResponse)
def index(
    request: Request,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "settings": settings,
            "description": SITE_DESCRIPTION,
            "articles": _published_articles(store),
            "json_ld": _json_ld(website_schema(settings)),
        },
    )


@router.get("/blog/{slug}", response_class=HTMLResponse)
def article_page(
    slug: str,
    request: Request,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    article = None
    post = store.get_post_by_slug(slug)
    if post is not None:
        article = Article.from_post(post)
    else:
        blog = store.get_blog_by_slug(slug)
        if blog is not None and blog.status is BlogStatus.PUBLISHED:
            article = Article.from_blog(blog)

    if article is None:
        return templates.TemplateResponse(
            request, "not_found.html", {"settings": settings}, status_code=404
        )

    return templates.TemplateResponse(
        request,
        "post.html",
        {
            "settings": settings,
            "article": article,
            "body": render_markdown(article.content),
            "json_ld": _json_ld(article_schema(article, settings)),
        },
    )


@router.get("/sitemap.xml")
def sitemap(
    request: Request,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    entries = sitemap_entries(_published_articles(store), settings)
    body = templates.get_template("sitemap.xml").render(entries=entries)
    return Response(content=body, media_type="application/xml")
