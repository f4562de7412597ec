"""
Unit tests for the WordPress REST client.

Runs RestWordPressService against httpx.MockTransport; no network access.
"""

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from wordpress_mcp.client import RestWordPressService, WordPressAPIError
from wordpress_mcp.config import ServerConfig
from wordpress_mcp.models import Post, Term, WPError

SITE = "https://blog.example.test"
API = "/wp-json/wp/v2"

TYPES = {
    "post": {"name": "Posts", "rest_base": "posts", "taxonomies": ["category", "post_tag"],
             "viewable": True, "visibility": {"show_ui": True}},
    "page": {"name": "Pages", "rest_base": "pages", "taxonomies": [],
             "viewable": True, "visibility": {"show_ui": True}},
    "wp_block": {"name": "Patterns", "rest_base": "blocks", "taxonomies": [],
                 "viewable": False, "visibility": {"show_ui": False}},
}

TAXONOMIES = {
    "category": {"name": "Categories", "rest_base": "categories", "types": ["post"],
                 "visibility": {"public": True, "show_ui": True}},
    "post_tag": {"name": "Tags", "rest_base": "tags", "types": ["post"],
                 "visibility": {"public": True, "show_ui": True}},
}


def rest_post(post_id: int, post_type: str = "post", **extra: Any) -> Dict[str, Any]:
    data = {
        "id": post_id,
        "type": post_type,
        "slug": f"item-{post_id}",
        "status": "publish",
        "title": {"raw": f"Item {post_id}", "rendered": f"Item {post_id}"},
        "content": {"raw": "<p>Body</p>", "rendered": "<p>Body</p>"},
        "excerpt": {"rendered": "Body"},
        "author": 1,
        "link": f"{SITE}/item-{post_id}/",
    }
    data.update(extra)
    return data


def not_found(code: str = "rest_post_invalid_id", message: str = "Invalid post ID.") -> httpx.Response:
    return httpx.Response(404, json={"code": code, "message": message, "data": {"status": 404}})


class FakeWordPress:
    """Routes requests to canned responses and records them."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[tuple, Any] = {
            ("GET", f"{API}/types"): TYPES,
            ("GET", f"{API}/taxonomies"): TAXONOMIES,
        }

    def on(self, method: str, path: str, response: Any) -> None:
        self.routes[(method, path)] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return not_found("rest_no_route", "No route was found matching the URL and request method.")
        if callable(route):
            return route(request)
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    def last(self, method: str, path: str) -> Optional[httpx.Request]:
        for request in reversed(self.requests):
            if request.method == method and request.url.path == path:
                return request
        return None

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)


@pytest.fixture
def fake():
    return FakeWordPress()


@pytest.fixture
def service(fake):
    config = ServerConfig(wordpress_url=f"{SITE}/", username="editor", application_password="pw")
    client = httpx.Client(transport=httpx.MockTransport(fake.handler))
    with RestWordPressService(config, http_client=client) as svc:
        yield svc


def body(request: httpx.Request) -> Dict[str, Any]:
    return json.loads(request.content)


# ==================== Construction ====================


@pytest.mark.unit
def test_default_client_uses_application_password():
    config = ServerConfig(wordpress_url=SITE, username="editor", application_password="pw", timeout=7)
    service = RestWordPressService(config)
    try:
        assert isinstance(service._http.auth, httpx.BasicAuth)
        assert service._http.timeout.read == 7
        assert service.api_url == f"{SITE}/wp-json/wp/v2"
    finally:
        service.close()


@pytest.mark.unit
def test_trailing_slash_is_stripped(service):
    assert service.site_url == SITE
    assert service.get_edit_post_link(12) == f"{SITE}/wp-admin/post.php?post=12&action=edit"


# ==================== Content ====================


@pytest.mark.unit
def test_get_post_prefers_posts(fake, service):
    fake.on("GET", f"{API}/posts/5", rest_post(5))

    post = service.get_post(5)

    assert isinstance(post, Post)
    assert post.title == "Item 5"
    assert post.content == "<p>Body</p>"
    assert post.excerpt == "Body"
    assert fake.last("GET", f"{API}/posts/5").url.params["context"] == "edit"


@pytest.mark.unit
def test_get_post_falls_through_types(fake, service):
    fake.on("GET", f"{API}/posts/7", not_found())
    fake.on("GET", f"{API}/pages/7", rest_post(7, "page"))

    post = service.get_post(7)

    assert post.type == "page"


@pytest.mark.unit
def test_get_post_missing(service):
    assert service.get_post(404) is None


@pytest.mark.unit
def test_get_post_raises_on_server_error(fake, service):
    fake.on("GET", f"{API}/posts/5", httpx.Response(500, json={"code": "internal", "message": "boom"}))

    with pytest.raises(WordPressAPIError) as exc_info:
        service.get_post(5)
    assert exc_info.value.code == 500
    assert "WordPress server error" in str(exc_info.value)


@pytest.mark.unit
def test_get_posts_query_mapping(fake, service):
    fake.on("GET", f"{API}/pages", [rest_post(2, "page")])

    posts = service.get_posts({
        "post_type": "page",
        "post_status": "any",
        "posts_per_page": 5,
        "paged": 2,
        "orderby": "ID",
        "order": "ASC",
        "s": "about",
        "name": "about-us",
    })

    assert [p.id for p in posts] == [2]
    params = fake.last("GET", f"{API}/pages").url.params
    assert params["status"] == "publish,future,draft,pending,private"
    assert params["per_page"] == "5"
    assert params["page"] == "2"
    assert params["orderby"] == "id"
    assert params["order"] == "asc"
    assert params["search"] == "about"
    assert params["slug"] == "about-us"


@pytest.mark.unit
def test_insert_post_payload(fake, service):
    fake.on("POST", f"{API}/posts", rest_post(11))

    post_id = service.insert_post({
        "post_type": "post",
        "post_title": "New",
        "post_content": "Body",
        "post_status": "draft",
        "post_name": "new",
    })

    assert post_id == 11
    assert body(fake.last("POST", f"{API}/posts")) == {
        "title": "New",
        "content": "Body",
        "status": "draft",
        "slug": "new",
    }


@pytest.mark.unit
def test_insert_post_error_value(fake, service):
    fake.on("POST", f"{API}/posts", httpx.Response(
        403, json={"code": "rest_cannot_create", "message": "Sorry, you are not allowed to create posts."}
    ))

    result = service.insert_post({"post_type": "post", "post_title": "New"})

    assert service.is_error(result)
    assert result.code == "rest_cannot_create"
    assert result.status == 403
    assert result.get_error_message().endswith("Sorry, you are not allowed to create posts.")


@pytest.mark.unit
def test_update_post_looks_up_type(fake, service):
    fake.on("GET", f"{API}/posts/7", not_found())
    fake.on("GET", f"{API}/pages/7", rest_post(7, "page"))
    fake.on("POST", f"{API}/pages/7", rest_post(7, "page"))

    assert service.update_post({"ID": 7, "post_title": "Renamed"}) == 7
    assert body(fake.last("POST", f"{API}/pages/7")) == {"title": "Renamed"}


@pytest.mark.unit
def test_update_missing_post(service):
    result = service.update_post({"ID": 99, "post_title": "x"})
    assert isinstance(result, WPError)
    assert result.code == "invalid_post"


@pytest.mark.unit
def test_delete_post_to_trash(fake, service):
    fake.on("GET", f"{API}/posts/5", rest_post(5))
    fake.on("DELETE", f"{API}/posts/5", rest_post(5, status="trash"))

    post = service.delete_post(5)

    assert post.status == "trash"
    assert fake.last("DELETE", f"{API}/posts/5").url.params["force"] == "false"


@pytest.mark.unit
def test_delete_post_force_returns_previous(fake, service):
    fake.on("GET", f"{API}/posts/5", rest_post(5))
    fake.on("DELETE", f"{API}/posts/5", {"deleted": True, "previous": rest_post(5)})

    post = service.delete_post(5, force_delete=True)

    assert post.id == 5
    assert post.status == "publish"


@pytest.mark.unit
def test_delete_post_failure_returns_none(fake, service):
    fake.on("GET", f"{API}/posts/5", rest_post(5))
    fake.on("DELETE", f"{API}/posts/5", httpx.Response(500, json={}))

    assert service.delete_post(5) is None


@pytest.mark.unit
def test_count_posts_reads_total_header(fake, service):
    def totals(request):
        status = request.url.params["status"]
        return httpx.Response(200, json=[], headers={"X-WP-Total": {"publish": "4", "draft": "2"}.get(status, "0")})

    fake.on("GET", f"{API}/posts", totals)

    assert service.count_posts("post") == {"publish": 4, "draft": 2, "pending": 0, "private": 0, "trash": 0}


@pytest.mark.unit
def test_author_name_fallback(fake, service):
    fake.on("GET", f"{API}/users/1", {"id": 1, "name": "Site Admin"})

    assert service.get_author_name(1) == "Site Admin"
    assert service.get_author_name(2) == ""
    assert service.get_author_name(0) == ""


# ==================== Types and Taxonomies ====================


@pytest.mark.unit
def test_type_registry_is_cached(fake, service):
    assert service.post_type_exists("post")
    assert service.post_type_exists("page")
    assert not service.post_type_exists("product")
    assert fake.count("GET", f"{API}/types") == 1


@pytest.mark.unit
def test_post_type_filters(service):
    assert set(service.get_post_types()) == {"post", "page", "wp_block"}
    assert set(service.get_post_types({"show_ui": True})) == {"post", "page"}
    assert set(service.get_post_types({"public": False})) == {"wp_block"}


@pytest.mark.unit
def test_taxonomy_lookups(service):
    assert service.taxonomy_exists("category")
    assert service.get_taxonomy("missing") is None
    assert service.get_object_taxonomies("post") == ["category", "post_tag"]
    assert service.get_object_taxonomies("unknown") == []


@pytest.mark.unit
def test_get_terms_uses_rest_base(fake, service):
    fake.on("GET", f"{API}/categories", [{"id": 3, "name": "News", "slug": "news", "taxonomy": "category"}])

    terms = service.get_terms({"taxonomy": "category", "number": 20, "offset": 20, "orderby": "term_id", "order": "DESC"})

    assert terms == [Term(id=3, name="News", slug="news", taxonomy="category")]
    params = fake.last("GET", f"{API}/categories").url.params
    assert params["per_page"] == "20"
    assert params["offset"] == "20"
    assert params["orderby"] == "id"
    assert params["order"] == "desc"
    assert params["hide_empty"] == "false"


@pytest.mark.unit
def test_get_term_not_found_is_none(fake, service):
    fake.on("GET", f"{API}/categories/9", not_found("rest_term_invalid", "Term does not exist."))
    assert service.get_term(9, "category") is None


@pytest.mark.unit
def test_get_term_server_error_is_error_value(fake, service):
    fake.on("GET", f"{API}/categories/9", httpx.Response(500, json={"code": "db_error", "message": "down"}))
    assert isinstance(service.get_term(9, "category"), WPError)


@pytest.mark.unit
def test_get_term_by_slug(fake, service):
    fake.on("GET", f"{API}/tags", [{"id": 4, "name": "python", "slug": "python", "taxonomy": "post_tag"}])

    term = service.get_term_by("slug", "python", "post_tag")

    assert term.id == 4
    assert fake.last("GET", f"{API}/tags").url.params["slug"] == "python"


@pytest.mark.unit
def test_insert_term(fake, service):
    fake.on("POST", f"{API}/categories", {"id": 12, "name": "Releases"})

    assert service.insert_term("Releases", "category", {"parent": 3}) == {"term_id": 12, "term_taxonomy_id": 12}
    assert body(fake.last("POST", f"{API}/categories")) == {"name": "Releases", "parent": 3}


@pytest.mark.unit
def test_delete_term(fake, service):
    fake.on("DELETE", f"{API}/categories/3", {"deleted": True, "previous": {"id": 3}})

    assert service.delete_term(3, "category") is True
    assert fake.last("DELETE", f"{API}/categories/3").url.params["force"] == "true"


@pytest.mark.unit
def test_set_object_terms_append(fake, service):
    fake.on("GET", f"{API}/posts/5", rest_post(5, categories=[1, 2]))
    fake.on("POST", f"{API}/posts/5", lambda request: httpx.Response(200, json=rest_post(5, **body(request))))

    assert service.set_object_terms(5, [2, 3], "category", append=True) == [1, 2, 3]
    assert body(fake.last("POST", f"{API}/posts/5")) == {"categories": [1, 2, 3]}


@pytest.mark.unit
def test_set_object_terms_replace(fake, service):
    fake.on("GET", f"{API}/posts/5", rest_post(5, tags=[7]))
    fake.on("POST", f"{API}/posts/5", lambda request: httpx.Response(200, json=rest_post(5, **body(request))))

    assert service.set_object_terms(5, ["8"], "post_tag") == [8]


# ==================== Site ====================


@pytest.mark.unit
def test_site_info(fake, service):
    fake.on("GET", "/wp-json/", {"name": "Example Blog", "description": "Tagline", "url": SITE, "home": SITE})
    fake.on("GET", f"{API}/posts", lambda r: httpx.Response(200, json=[], headers={"X-WP-Total": "3"}))
    fake.on("GET", f"{API}/pages", lambda r: httpx.Response(200, json=[], headers={"X-WP-Total": "1"}))

    info = service.get_site_info()

    assert info["site_name"] == "Example Blog"
    assert info["site_description"] == "Tagline"
    assert info["posts_count"] == 3
    assert info["pages_count"] == 1


@pytest.mark.unit
def test_site_info_unreachable():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    config = ServerConfig(wordpress_url=SITE)
    service = RestWordPressService(config, http_client=httpx.Client(transport=httpx.MockTransport(refuse)))

    with pytest.raises(WordPressAPIError, match="Could not connect to WordPress"):
        service.get_site_info()


# ==================== Helpers ====================


@pytest.mark.unit
def test_trim_words(service):
    text = "<p>one two</p> three four five"
    assert service.trim_words(text, 3) == "one two three…"
    assert service.trim_words(text, 10) == "one two three four five"
    assert service.trim_words("", 3) == ""
