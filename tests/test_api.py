"""Tests for the HTTP API and the public pages."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from blogforge.auth.credentials import seed_user
from blogforge.config import DEFAULT_SESSION_SECRET, Settings
from blogforge.errors import ConfigurationError
from blogforge.storage.models import Blog, BlogStatus, GenerationStatus
from blogforge.storage.store import Store
from blogforge.web.app import create_app

EMAIL = "admin@example.com"
PASSWORD = "s3cret-pass"


@pytest.fixture
def client(settings: Settings, store: Store) -> TestClient:
    return TestClient(create_app(settings, store=store))


@pytest.fixture
def signed_in(client: TestClient, store: Store) -> TestClient:
    seed_user(store, EMAIL, PASSWORD, name="Admin")
    resp = client.post(
        "/api/auth/callback/credentials", json={"email": EMAIL, "password": PASSWORD}
    )
    assert resp.status_code == 200
    return client


def test_create_app_refuses_default_secret(settings: Settings, store: Store) -> None:
    with pytest.raises(ConfigurationError):
        create_app(settings.model_copy(update={"session_secret": DEFAULT_SESSION_SECRET}), store)


def test_login_sets_session_cookie(client: TestClient, store: Store) -> None:
    seed_user(store, EMAIL, PASSWORD)

    resp = client.post(
        "/api/auth/callback/credentials", json={"email": EMAIL, "password": PASSWORD}
    )

    assert resp.status_code == 200
    assert resp.json()["email"] == EMAIL
    assert "password_hash" not in resp.json()
    assert "blogforge.session-token" in resp.cookies
    assert client.get("/api/auth/session").json()["user"]["email"] == EMAIL


def test_login_accepts_form_body(client: TestClient, store: Store) -> None:
    seed_user(store, EMAIL, PASSWORD)

    resp = client.post(
        "/api/auth/callback/credentials", data={"email": EMAIL, "password": PASSWORD}
    )

    assert resp.status_code == 200


def test_login_rejects_bad_password(client: TestClient, store: Store) -> None:
    seed_user(store, EMAIL, PASSWORD)

    resp = client.post(
        "/api/auth/callback/credentials", json={"email": EMAIL, "password": "nope"}
    )

    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid email or password"}
    assert client.get("/api/auth/session").json() == {}


def test_signout_clears_session(signed_in: TestClient) -> None:
    signed_in.post("/api/auth/signout")

    assert signed_in.get("/api/auth/session").json() == {}


def test_generate_requires_session(client: TestClient, store: Store) -> None:
    resp = client.post("/api/generate", json={"topic": "Budgeting"})

    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}
    assert store.list_generations() == []


@pytest.mark.parametrize("body", [{}, {"topic": ""}, {"topic": "   "}])
def test_generate_requires_topic(signed_in: TestClient, store: Store, body: dict) -> None:
    resp = signed_in.post("/api/generate", json=body)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Topic is required"}
    assert store.list_generations() == []


def test_generate_rejects_invalid_body(signed_in: TestClient) -> None:
    resp = signed_in.post("/api/generate", json={"topic": "x", "targetLength": -5})

    assert resp.status_code == 400
    assert "error" in resp.json()


def test_generate_queues_pending_job(signed_in: TestClient, store: Store) -> None:
    resp = signed_in.post(
        "/api/generate", json={"topic": "How to Save $10,000", "keywords": ["saving"]}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    job = store.get_generation(body["generationId"])
    assert job.status is GenerationStatus.PENDING
    assert job.request.tone == "professional"
    assert job.request.voice == "expert"
    assert job.request.target_length == 2000
    assert job.request.research_topic is True
    assert job.request.include_images is False
    assert job.request.keywords == ["saving"]
    assert job.request.author_id == store.get_user_by_email(EMAIL).id

    status = signed_in.get("/api/generate/status", params={"id": job.id})
    assert status.status_code == 200
    assert status.json()["status"] == "pending"
    assert status.json()["prompt"] == "How to Save $10,000"


def test_generate_accepts_bearer_token(client: TestClient, store: Store) -> None:
    seed_user(store, EMAIL, PASSWORD)
    token = client.post(
        "/api/auth/callback/credentials", json={"email": EMAIL, "password": PASSWORD}
    ).cookies["blogforge.session-token"]
    client.cookies.clear()

    resp = client.post(
        "/api/generate",
        json={"topic": "Budgeting"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert resp.status_code == 200


def test_status_errors(client: TestClient) -> None:
    missing = client.get("/api/generate/status")
    unknown = client.get("/api/generate/status", params={"id": "nope"})

    assert missing.status_code == 400
    assert missing.json() == {"error": "Generation ID required"}
    assert unknown.status_code == 404
    assert unknown.json() == {"error": "Generation not found"}


def test_blogs_read_api(client: TestClient, store: Store) -> None:
    published = store.create_blog(
        Blog(title="Live", slug="live", status=BlogStatus.PUBLISHED, keywords=["a"])
    )
    store.create_blog(Blog(title="Draft", slug="draft"))

    assert len(client.get("/api/blogs").json()) == 2
    only_published = client.get("/api/blogs", params={"status": "published"}).json()
    assert [b["slug"] for b in only_published] == ["live"]
    assert client.get(f"/api/blogs/{published.id}").json()["wordCount"] == 0
    assert client.get("/api/blogs/slug/live").json()["id"] == published.id
    assert client.get("/api/blogs/missing").status_code == 404
    assert client.get("/api/blogs/slug/missing").json() == {"error": "Blog not found"}


def test_themes(signed_in: TestClient, client: TestClient) -> None:
    created = signed_in.post(
        "/api/themes", json={"name": "Personal Finance", "keywords": ["money"]}
    )
    assert created.status_code == 200
    theme = created.json()
    assert theme["slug"] == "personal-finance"
    assert theme["createdBy"]

    duplicate = signed_in.post("/api/themes", json={"name": "Personal Finance"})
    assert duplicate.status_code == 409

    assert [t["id"] for t in signed_in.get("/api/themes").json()] == [theme["id"]]
    assert signed_in.get(f"/api/themes/{theme['id']}").json()["keywords"] == ["money"]
    assert signed_in.get("/api/themes/missing").status_code == 404


def test_seed_and_posts(client: TestClient) -> None:
    first = client.post("/api/seed").json()
    second = client.post("/api/seed").json()

    assert first["added"] == 10
    assert second["added"] == 0
    posts = client.get("/api/posts").json()
    assert len(posts) == 10
    post = client.get("/api/posts/understanding-compound-interest").json()
    assert post["author"] == "EM38Bot"
    assert client.get("/api/posts/missing").json() == {"error": "Post not found"}


def test_post_page_renders_markdown_and_schema(client: TestClient) -> None:
    client.post("/api/seed")

    resp = client.get("/blog/understanding-compound-interest")

    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "application/ld+json" in resp.text
    assert '"@type": "Article"' in resp.text
    assert "<h2>" in resp.text
    assert "Understanding Compound Interest" in resp.text


def test_published_blog_page_and_drafts_hidden(client: TestClient, store: Store) -> None:
    store.create_blog(
        Blog(title="Live Post", slug="live-post", content="## Hello", status=BlogStatus.PUBLISHED)
    )
    store.create_blog(Blog(title="Hidden", slug="hidden", content="secret"))

    assert "Live Post" in client.get("/blog/live-post").text
    assert client.get("/blog/hidden").status_code == 404
    assert client.get("/blog/nothing-here").status_code == 404


def test_index_and_sitemap(client: TestClient, store: Store) -> None:
    client.post("/api/seed")
    store.create_blog(Blog(title="Live", slug="live", status=BlogStatus.PUBLISHED))

    index = client.get("/")
    sitemap = client.get("/sitemap.xml")

    assert index.status_code == 200
    assert "/blog/understanding-compound-interest" in index.text
    assert sitemap.status_code == 200
    assert sitemap.headers["content-type"].startswith("application/xml")
    assert "<loc>http://localhost:3000</loc>" in sitemap.text
    assert "<loc>http://localhost:3000/blog/live</loc>" in sitemap.text
    assert sitemap.text.count("<url>") == 12


def test_posts_filtered_by_tag(client: TestClient) -> None:
    client.post("/api/seed")

    debt = client.get("/api/posts", params={"tag": "debt"}).json()

    assert [p["slug"] for p in debt] == [
        p["slug"] for p in client.get("/api/posts").json() if "debt" in p["tags"]
    ]
    assert len(debt) == 1
    assert client.get("/api/posts", params={"tag": "unknown"}).json() == []


def test_publish_makes_blog_public(signed_in: TestClient, store: Store) -> None:
    blog = store.create_blog(Blog(title="Fresh Draft", slug="fresh-draft", content="## Hi"))
    assert signed_in.get("/blog/fresh-draft").status_code == 404

    resp = signed_in.patch(f"/api/blogs/{blog.id}", json={"status": "published"})

    assert resp.status_code == 200
    assert resp.json()["status"] == "published"
    assert resp.json()["publishedAt"]
    assert "Fresh Draft" in signed_in.get("/blog/fresh-draft").text
    assert "/blog/fresh-draft" in signed_in.get("/sitemap.xml").text

    back = signed_in.patch(f"/api/blogs/{blog.id}", json={"status": "draft"})
    assert back.json()["publishedAt"] is None
    assert signed_in.get("/blog/fresh-draft").status_code == 404


def test_publish_requires_session(client: TestClient, store: Store) -> None:
    blog = store.create_blog(Blog(title="Draft", slug="draft"))

    resp = client.patch(f"/api/blogs/{blog.id}", json={"status": "published"})

    assert resp.status_code == 401
    assert store.get_blog(blog.id).status is BlogStatus.DRAFT


def test_publish_errors(signed_in: TestClient, store: Store) -> None:
    generating = store.create_blog(
        Blog(title="Half", slug="half", status=BlogStatus.GENERATING)
    )

    missing = signed_in.patch("/api/blogs/missing", json={"status": "published"})
    busy = signed_in.patch(f"/api/blogs/{generating.id}", json={"status": "published"})
    invalid = signed_in.patch(f"/api/blogs/{generating.id}", json={"status": "archived"})

    assert missing.status_code == 404
    assert missing.json() == {"error": "Blog not found"}
    assert busy.status_code == 409
    assert invalid.status_code == 400
    assert store.get_blog(generating.id).status is BlogStatus.GENERATING


def test_article_page_escapes_raw_html(client: TestClient, store: Store) -> None:
    store.create_blog(
        Blog(
            title="Tricky",
            slug="tricky",
            content='## Heading\n\n<script>alert("x")</script>\n\nInline <b onclick="x()">bold</b>',
            status=BlogStatus.PUBLISHED,
        )
    )

    page = client.get("/blog/tricky").text

    assert "<h2>Heading</h2>" in page
    assert '<script>alert("x")' not in page
    assert "&lt;script&gt;" in page
    assert '<b onclick="x()">' not in page
