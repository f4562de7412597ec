"""
WordPress content store client.

WordPressService is the interface tools use to reach WordPress. The
concrete RestWordPressService talks to the WordPress REST API
(/wp-json/wp/v2) using an application password.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Optional, Union

import httpx

from .config import ServerConfig
from .error_handling import map_http_error
from .models import Post, Term, WPError

logger = logging.getLogger("wordpress-mcp.client")

POST_STATUSES = ("publish", "future", "draft", "pending", "private")
COUNTED_STATUSES = ("publish", "draft", "pending", "private", "trash")

_TAG_PATTERN = re.compile(r"<[^>]+>")


class WordPressAPIError(Exception):
    """Raised when a read that has no error value in its contract fails."""

    def __init__(self, error: WPError):
        super().__init__(error.message)
        self.error = error
        self.code = error.status or 0


class WordPressService(ABC):
    """Operations the tools need from WordPress.

    Methods that can fail in an expected way return a WPError value instead
    of raising; use is_error() to tell the two apart.
    """

    # Content

    @abstractmethod
    def get_posts(self, args: dict[str, Any]) -> list[Post]:
        """Query posts. Keys: post_type, post_status, posts_per_page, paged,
        orderby, order, author, s, name."""

    @abstractmethod
    def get_post(self, post_id: int) -> Optional[Post]:
        """Get a single post of any type, or None if it does not exist."""

    @abstractmethod
    def insert_post(self, post_data: dict[str, Any]) -> Union[int, WPError]:
        """Create a post and return its ID."""

    @abstractmethod
    def update_post(self, post_data: dict[str, Any]) -> Union[int, WPError]:
        """Update the post identified by post_data['ID'] and return its ID."""

    @abstractmethod
    def delete_post(self, post_id: int, force_delete: bool = False) -> Optional[Post]:
        """Trash or permanently delete a post. Returns None on failure."""

    @abstractmethod
    def get_edit_post_link(self, post_id: int) -> Optional[str]:
        """Admin edit URL for a post."""

    @abstractmethod
    def get_author_name(self, author_id: int) -> str:
        """Display name of a user."""

    @abstractmethod
    def get_post_types(self, args: Optional[dict[str, Any]] = None) -> dict[str, dict[str, Any]]:
        """Registered post types keyed by name, filtered by show_ui/public."""

    @abstractmethod
    def post_type_exists(self, post_type: str) -> bool:
        """Check if a post type is registered."""

    @abstractmethod
    def count_posts(self, post_type: str = "post") -> dict[str, int]:
        """Number of posts of a type for each status."""

    # Taxonomies

    @abstractmethod
    def get_taxonomies(self, args: Optional[dict[str, Any]] = None) -> dict[str, dict[str, Any]]:
        """Registered taxonomies keyed by name, filtered by show_ui/public."""

    @abstractmethod
    def get_taxonomy(self, taxonomy: str) -> Optional[dict[str, Any]]:
        """A single taxonomy, or None if it is not registered."""

    @abstractmethod
    def taxonomy_exists(self, taxonomy: str) -> bool:
        """Check if a taxonomy is registered."""

    @abstractmethod
    def get_object_taxonomies(self, post_type: str) -> list[str]:
        """Names of the taxonomies attached to a post type."""

    @abstractmethod
    def get_terms(self, args: dict[str, Any]) -> Union[list[Term], WPError]:
        """Query terms. Keys: taxonomy, hide_empty, parent, search, number,
        offset, orderby, order."""

    @abstractmethod
    def get_term(self, term_id: int, taxonomy: str) -> Union[Term, None, WPError]:
        """A single term by ID."""

    @abstractmethod
    def get_term_by(self, field: str, value: Any, taxonomy: str) -> Optional[Term]:
        """A single term by 'slug', 'name' or 'id'."""

    @abstractmethod
    def insert_term(self, name: str, taxonomy: str, args: Optional[dict[str, Any]] = None) -> Union[dict[str, int], WPError]:
        """Create a term. Returns {'term_id': ..., 'term_taxonomy_id': ...}."""

    @abstractmethod
    def update_term(self, term_id: int, taxonomy: str, args: Optional[dict[str, Any]] = None) -> Union[dict[str, int], WPError]:
        """Update a term."""

    @abstractmethod
    def delete_term(self, term_id: int, taxonomy: str) -> Union[bool, WPError]:
        """Delete a term permanently."""

    @abstractmethod
    def set_object_terms(self, post_id: int, term_ids: list[Any], taxonomy: str, append: bool = False) -> Union[list[int], WPError]:
        """Assign terms to a post, replacing or appending. Returns term IDs."""

    @abstractmethod
    def get_object_terms(self, post_id: int, taxonomy: str) -> Union[list[Term], WPError]:
        """Terms of one taxonomy assigned to a post."""

    # Site

    @abstractmethod
    def get_site_info(self) -> dict[str, Any]:
        """Site name, URL and content statistics."""

    def is_error(self, value: Any) -> bool:
        """Check if a value is a WordPress error."""
        return isinstance(value, WPError)

    def trim_words(self, text: str, num_words: int = 55, more: str = "…") -> str:
        """Strip tags and cut text to a number of words."""
        words = _TAG_PATTERN.sub(" ", text or "").split()
        if len(words) <= num_words:
            return " ".join(words)
        return " ".join(words[:num_words]) + more


def _matches_filters(obj: dict[str, Any], args: Optional[dict[str, Any]]) -> bool:
    if not args:
        return True
    visibility = obj.get("visibility") or {}
    if "show_ui" in args and bool(visibility.get("show_ui", True)) != bool(args["show_ui"]):
        return False
    if "public" in args:
        public = visibility.get("public", obj.get("viewable", True))
        if bool(public) != bool(args["public"]):
            return False
    return True


_ORDERBY_POSTS = {"ID": "id"}
_ORDERBY_TERMS = {"term_id": "id", "term_order": "name"}

_POST_FIELDS = {
    "post_title": "title",
    "post_content": "content",
    "post_status": "status",
    "post_author": "author",
    "post_excerpt": "excerpt",
    "post_name": "slug",
    "post_parent": "parent",
    "menu_order": "menu_order",
    "comment_status": "comment_status",
    "ping_status": "ping_status",
}


class RestWordPressService(WordPressService):
    """WordPressService backed by the WordPress REST API."""

    def __init__(self, config: ServerConfig, http_client: Optional[httpx.Client] = None):
        """Initialize the REST client.

        Args:
            config: Server configuration with the site URL and credentials
            http_client: Optional preconfigured httpx client (used by tests)
        """
        self.config = config
        self.site_url = config.wordpress_url.rstrip("/")
        self.api_url = f"{self.site_url}/wp-json/wp/v2"

        if http_client is None:
            auth = None
            if config.username and config.application_password:
                auth = (config.username, config.application_password)
            http_client = httpx.Client(auth=auth, timeout=config.timeout)
        self._http = http_client

        self._types: Optional[dict[str, dict[str, Any]]] = None
        self._taxonomies: Optional[dict[str, dict[str, Any]]] = None

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "RestWordPressService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # HTTP plumbing

    def _send(
        self,
        method: str,
        path: str,
        operation: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        url: Optional[str] = None,
    ) -> Union[httpx.Response, WPError]:
        try:
            response = self._http.request(
                method,
                url or f"{self.api_url}{path}",
                params=params,
                json=json,
            )
            response.raise_for_status()
            return response
        except httpx.HTTPError as e:
            error = map_http_error(e, operation)
            logger.debug(f"{method} {path} failed: {error.code} {error.message}")
            return error

    def _get_json(self, path: str, operation: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET that raises WordPressAPIError instead of returning an error value."""
        response = self._send("GET", path, operation, params=params)
        if isinstance(response, WPError):
            raise WordPressAPIError(response)
        return response.json()

    def _type_objects(self) -> dict[str, dict[str, Any]]:
        if self._types is None:
            self._types = self._get_json("/types", "listing content types", {"context": "edit"})
        return self._types

    def _taxonomy_objects(self) -> dict[str, dict[str, Any]]:
        if self._taxonomies is None:
            self._taxonomies = self._get_json("/taxonomies", "listing taxonomies", {"context": "edit"})
        return self._taxonomies

    def _type_base(self, post_type: str) -> str:
        obj = self._type_objects().get(post_type) or {}
        return obj.get("rest_base") or post_type

    def _taxonomy_base(self, taxonomy: str) -> str:
        obj = self._taxonomy_objects().get(taxonomy) or {}
        return obj.get("rest_base") or taxonomy

    def _candidate_types(self) -> list[str]:
        names = list(self._type_objects())
        preferred = [t for t in ("post", "page") if t in names]
        return preferred + [t for t in names if t not in preferred]

    def _find_post(self, post_id: int) -> Optional[dict[str, Any]]:
        """Look a post up by ID across every REST-enabled type."""
        for post_type in self._candidate_types():
            response = self._send(
                "GET",
                f"/{self._type_base(post_type)}/{post_id}",
                f"fetching content {post_id}",
                params={"context": "edit"},
            )
            if isinstance(response, WPError):
                if response.status in (400, 404):
                    continue
                raise WordPressAPIError(response)
            return response.json()
        return None

    # Content

    def get_posts(self, args: dict[str, Any]) -> list[Post]:
        post_type = args.get("post_type", "post")
        status = args.get("post_status", "publish")
        params: dict[str, Any] = {
            "context": "edit",
            "status": ",".join(POST_STATUSES) if status == "any" else status,
            "per_page": args.get("posts_per_page", 10),
            "page": args.get("paged", 1),
            "orderby": _ORDERBY_POSTS.get(args.get("orderby", "date"), args.get("orderby", "date")),
            "order": str(args.get("order", "DESC")).lower(),
        }
        if "author" in args:
            params["author"] = args["author"]
        if args.get("s"):
            params["search"] = args["s"]
        if args.get("name"):
            params["slug"] = args["name"]

        rows = self._get_json(f"/{self._type_base(post_type)}", f"listing {post_type} content", params)
        return [Post.from_rest(row) for row in rows]

    def get_post(self, post_id: int) -> Optional[Post]:
        data = self._find_post(post_id)
        return Post.from_rest(data) if data is not None else None

    def _post_payload(self, post_data: dict[str, Any]) -> dict[str, Any]:
        return {
            rest_key: post_data[key]
            for key, rest_key in _POST_FIELDS.items()
            if key in post_data
        }

    def insert_post(self, post_data: dict[str, Any]) -> Union[int, WPError]:
        post_type = post_data.get("post_type", "post")
        response = self._send(
            "POST",
            f"/{self._type_base(post_type)}",
            f"creating {post_type} content",
            json=self._post_payload(post_data),
        )
        if isinstance(response, WPError):
            return response
        return int(response.json()["id"])

    def update_post(self, post_data: dict[str, Any]) -> Union[int, WPError]:
        post_id = int(post_data["ID"])
        post_type = post_data.get("post_type")
        if post_type is None:
            existing = self._find_post(post_id)
            if existing is None:
                return WPError("invalid_post", f"Invalid post ID {post_id}.", 404)
            post_type = existing.get("type", "post")

        response = self._send(
            "POST",
            f"/{self._type_base(post_type)}/{post_id}",
            f"updating content {post_id}",
            json=self._post_payload(post_data),
        )
        if isinstance(response, WPError):
            return response
        return int(response.json()["id"])

    def delete_post(self, post_id: int, force_delete: bool = False) -> Optional[Post]:
        existing = self._find_post(post_id)
        if existing is None:
            return None

        response = self._send(
            "DELETE",
            f"/{self._type_base(existing.get('type', 'post'))}/{post_id}",
            f"deleting content {post_id}",
            params={"force": "true" if force_delete else "false"},
        )
        if isinstance(response, WPError):
            logger.warning(f"Delete of content {post_id} failed: {response.message}")
            return None

        data = response.json()
        if force_delete:
            data = data.get("previous") or existing
        return Post.from_rest(data)

    def get_edit_post_link(self, post_id: int) -> Optional[str]:
        return f"{self.site_url}/wp-admin/post.php?post={post_id}&action=edit"

    def get_author_name(self, author_id: int) -> str:
        if not author_id:
            return ""
        response = self._send("GET", f"/users/{author_id}", f"fetching user {author_id}")
        if isinstance(response, WPError):
            return ""
        return response.json().get("name", "")

    def get_post_types(self, args: Optional[dict[str, Any]] = None) -> dict[str, dict[str, Any]]:
        return {
            name: obj
            for name, obj in self._type_objects().items()
            if _matches_filters(obj, args)
        }

    def post_type_exists(self, post_type: str) -> bool:
        return post_type in self._type_objects()

    def count_posts(self, post_type: str = "post") -> dict[str, int]:
        counts = {}
        base = self._type_base(post_type)
        for status in COUNTED_STATUSES:
            response = self._send(
                "GET",
                f"/{base}",
                f"counting {status} {post_type} content",
                params={"status": status, "per_page": 1, "_fields": "id"},
            )
            if isinstance(response, WPError):
                counts[status] = 0
            else:
                counts[status] = int(response.headers.get("X-WP-Total", 0))
        return counts

    # Taxonomies

    def get_taxonomies(self, args: Optional[dict[str, Any]] = None) -> dict[str, dict[str, Any]]:
        return {
            name: obj
            for name, obj in self._taxonomy_objects().items()
            if _matches_filters(obj, args)
        }

    def get_taxonomy(self, taxonomy: str) -> Optional[dict[str, Any]]:
        return self._taxonomy_objects().get(taxonomy)

    def taxonomy_exists(self, taxonomy: str) -> bool:
        return taxonomy in self._taxonomy_objects()

    def get_object_taxonomies(self, post_type: str) -> list[str]:
        obj = self._type_objects().get(post_type) or {}
        return list(obj.get("taxonomies") or [])

    def get_terms(self, args: dict[str, Any]) -> Union[list[Term], WPError]:
        taxonomy = args["taxonomy"]
        params: dict[str, Any] = {
            "context": "edit",
            "hide_empty": "true" if args.get("hide_empty") else "false",
            "per_page": args.get("number", 100),
        }
        if "parent" in args:
            params["parent"] = args["parent"]
        if args.get("search"):
            params["search"] = args["search"]
        if "offset" in args:
            params["offset"] = args["offset"]
        if "orderby" in args:
            params["orderby"] = _ORDERBY_TERMS.get(args["orderby"], args["orderby"])
        if "order" in args:
            params["order"] = str(args["order"]).lower()

        response = self._send(
            "GET", f"/{self._taxonomy_base(taxonomy)}", f"listing {taxonomy} terms", params=params
        )
        if isinstance(response, WPError):
            return response
        return [Term.from_rest(row) for row in response.json()]

    def get_term(self, term_id: int, taxonomy: str) -> Union[Term, None, WPError]:
        response = self._send(
            "GET",
            f"/{self._taxonomy_base(taxonomy)}/{term_id}",
            f"fetching term {term_id}",
            params={"context": "edit"},
        )
        if isinstance(response, WPError):
            return None if response.status == 404 else response
        return Term.from_rest(response.json())

    def get_term_by(self, field: str, value: Any, taxonomy: str) -> Optional[Term]:
        if field == "id":
            term = self.get_term(int(value), taxonomy)
            return term if isinstance(term, Term) else None

        params: dict[str, Any] = {"context": "edit", "hide_empty": "false"}
        if field == "slug":
            params["slug"] = value
        else:
            params["search"] = value

        response = self._send(
            "GET", f"/{self._taxonomy_base(taxonomy)}", f"looking up {taxonomy} term", params=params
        )
        if isinstance(response, WPError):
            return None
        for row in response.json():
            term = Term.from_rest(row)
            if field != "name" or term.name == value:
                return term
        return None

    def insert_term(self, name: str, taxonomy: str, args: Optional[dict[str, Any]] = None) -> Union[dict[str, int], WPError]:
        payload = {"name": name, **(args or {})}
        response = self._send(
            "POST", f"/{self._taxonomy_base(taxonomy)}", f"creating {taxonomy} term", json=payload
        )
        if isinstance(response, WPError):
            return response
        term_id = int(response.json()["id"])
        return {"term_id": term_id, "term_taxonomy_id": term_id}

    def update_term(self, term_id: int, taxonomy: str, args: Optional[dict[str, Any]] = None) -> Union[dict[str, int], WPError]:
        response = self._send(
            "POST",
            f"/{self._taxonomy_base(taxonomy)}/{term_id}",
            f"updating term {term_id}",
            json=dict(args or {}),
        )
        if isinstance(response, WPError):
            return response
        return {"term_id": term_id, "term_taxonomy_id": term_id}

    def delete_term(self, term_id: int, taxonomy: str) -> Union[bool, WPError]:
        response = self._send(
            "DELETE",
            f"/{self._taxonomy_base(taxonomy)}/{term_id}",
            f"deleting term {term_id}",
            params={"force": "true"},
        )
        if isinstance(response, WPError):
            return response
        return bool(response.json().get("deleted", True))

    def set_object_terms(self, post_id: int, term_ids: list[Any], taxonomy: str, append: bool = False) -> Union[list[int], WPError]:
        existing = self._find_post(post_id)
        if existing is None:
            return WPError("invalid_post", f"Invalid post ID {post_id}.", 404)

        field_name = self._taxonomy_base(taxonomy)
        ids = [int(t) for t in term_ids]
        if append:
            current = [int(t) for t in existing.get(field_name) or []]
            ids = current + [t for t in ids if t not in current]

        response = self._send(
            "POST",
            f"/{self._type_base(existing.get('type', 'post'))}/{post_id}",
            f"assigning {taxonomy} terms to content {post_id}",
            json={field_name: ids},
        )
        if isinstance(response, WPError):
            return response
        return [int(t) for t in response.json().get(field_name) or ids]

    def get_object_terms(self, post_id: int, taxonomy: str) -> Union[list[Term], WPError]:
        response = self._send(
            "GET",
            f"/{self._taxonomy_base(taxonomy)}",
            f"fetching {taxonomy} terms of content {post_id}",
            params={"post": post_id, "per_page": 100, "context": "edit"},
        )
        if isinstance(response, WPError):
            return response
        return [Term.from_rest(row) for row in response.json()]

    # Site

    def get_site_info(self) -> dict[str, Any]:
        response = self._send("GET", "", "fetching site info", url=f"{self.site_url}/wp-json/")
        if isinstance(response, WPError):
            raise WordPressAPIError(response)
        index = response.json()
        return {
            "site_name": index.get("name", ""),
            "site_description": index.get("description", ""),
            "site_url": index.get("url", self.site_url),
            "home_url": index.get("home", self.site_url),
            "posts_count": self.count_posts("post").get("publish", 0),
            "pages_count": self.count_posts("page").get("publish", 0),
        }
