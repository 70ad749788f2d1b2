"""Structured data and sitemap entries for the public pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from blogforge.config import Settings
from blogforge.storage.models import Blog, Post

SITE_DESCRIPTION = "Learn to build wealth, manage money, and achieve financial freedom."


@dataclass
class Article:
    """A demo post or a generated blog, flattened for rendering."""

    title: str
    slug: str
    excerpt: str
    content: str
    author: str
    published: str
    tags: list[str] = field(default_factory=list)
    reading_time: int | None = None

    @classmethod
    def from_post(cls, post: Post) -> Article:
        return cls(
            title=post.title,
            slug=post.slug,
            excerpt=post.excerpt,
            content=post.content,
            author=post.author,
            published=post.date,
            tags=list(post.tags or []),
        )

    @classmethod
    def from_blog(cls, blog: Blog, author: str = "Editorial Team") -> Article:
        when = blog.published_at or blog.updated_at or blog.created_at
        return cls(
            title=blog.title,
            slug=blog.slug,
            excerpt=blog.excerpt,
            content=blog.content,
            author=author,
            published=when.date().isoformat(),
            tags=list(blog.keywords or []),
            reading_time=blog.reading_time or None,
        )


def article_url(settings: Settings, slug: str) -> str:
    return f"{settings.site_url.rstrip('/')}/blog/{slug}"


def article_schema(article: Article, settings: Settings) -> dict:
    """schema.org ``Article`` JSON-LD for one page."""
    base = settings.site_url.rstrip("/")
    return {
        "@context": "https://schema.org",
        "@type": "Article",
        "headline": article.title,
        "description": article.excerpt,
        "author": {"@type": "Person", "name": article.author},
        "datePublished": article.published,
        "dateModified": article.published,
        "publisher": {
            "@type": "Organization",
            "name": settings.site_name,
            "logo": {"@type": "ImageObject", "url": f"{base}/logo.png"},
        },
        "mainEntityOfPage": {"@type": "WebPage", "@id": article_url(settings, article.slug)},
        "keywords": ", ".join(article.tags),
    }


def website_schema(settings: Settings) -> dict:
    base = settings.site_url.rstrip("/")
    return {
        "@context": "https://schema.org",
        "@type": "WebSite",
        "name": settings.site_name,
        "description": SITE_DESCRIPTION,
        "url": base,
        "potentialAction": {
            "@type": "SearchAction",
            "target": f"{base}/search?q={{search_term_string}}",
            "query-input": "required name=search_term_string",
        },
    }


@dataclass
class SitemapEntry:
    loc: str
    lastmod: str
    changefreq: str
    priority: float


def sitemap_entries(
    articles: list[Article], settings: Settings, now: datetime | None = None
) -> list[SitemapEntry]:
    """Home page first, then one entry per article."""
    now = now or datetime.now(timezone.utc)
    entries = [
        SitemapEntry(
            loc=settings.site_url.rstrip("/"),
            lastmod=now.date().isoformat(),
            changefreq="daily",
            priority=1.0,
        )
    ]
    for article in articles:
        entries.append(
            SitemapEntry(
                loc=article_url(settings, article.slug),
                lastmod=article.published,
                changefreq="weekly",
                priority=0.8,
            )
        )
    return entries
