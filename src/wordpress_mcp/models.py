"""
Value types exchanged with the WordPress content store.
"""

from dataclasses import dataclass
from typing import Any, Optional


def _text(value: Any) -> str:
    """Pick the raw (or rendered) text out of a REST field."""
    if isinstance(value, dict):
        raw = value.get("raw")
        return raw if raw is not None else value.get("rendered", "")
    return value if value is not None else ""


@dataclass
class WPError:
    """An error value reported by WordPress.

    Attributes:
        code: WordPress error code (e.g. 'rest_post_invalid_id')
        message: Human-readable error message
        status: HTTP status code, if the error came from a response
    """
    code: str
    message: str
    status: Optional[int] = None

    def get_error_message(self) -> str:
        return self.message


@dataclass
class Post:
    """A post, page, or custom post type entry."""
    id: int
    title: str = ""
    slug: str = ""
    content: str = ""
    excerpt: str = ""
    status: str = "draft"
    type: str = "post"
    date: str = ""
    modified: str = ""
    author: int = 0
    parent: int = 0
    menu_order: int = 0
    comment_status: str = "open"
    ping_status: str = "open"
    link: str = ""

    @classmethod
    def from_rest(cls, data: dict[str, Any]) -> "Post":
        return cls(
            id=int(data["id"]),
            title=_text(data.get("title")),
            slug=data.get("slug", ""),
            content=_text(data.get("content")),
            excerpt=_text(data.get("excerpt")),
            status=data.get("status", ""),
            type=data.get("type", ""),
            date=data.get("date", ""),
            modified=data.get("modified", ""),
            author=int(data.get("author") or 0),
            parent=int(data.get("parent") or 0),
            menu_order=int(data.get("menu_order") or 0),
            comment_status=data.get("comment_status", ""),
            ping_status=data.get("ping_status", ""),
            link=data.get("link", ""),
        )


@dataclass
class Term:
    """A taxonomy term (category, tag, or custom taxonomy term)."""
    id: int
    name: str
    slug: str = ""
    description: str = ""
    taxonomy: str = ""
    parent: int = 0
    count: int = 0

    @classmethod
    def from_rest(cls, data: dict[str, Any]) -> "Term":
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            slug=data.get("slug", ""),
            description=data.get("description", ""),
            taxonomy=data.get("taxonomy", ""),
            parent=int(data.get("parent") or 0),
            count=int(data.get("count") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "taxonomy": self.taxonomy,
            "parent": self.parent,
            "count": self.count,
        }
