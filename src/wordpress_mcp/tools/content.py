"""
Content tools for the WordPress MCP server.

A single set of tools handles every content type (posts, pages, custom post
types) through a content_type parameter.
"""

from typing import Any
from urllib.parse import urlsplit

from ..error_handling import DomainError, ValidationFailed
from ..models import Post
from ..validation.rules import (
    ARRAY,
    BOOL,
    INT,
    NOT_EMPTY,
    OPTIONAL,
    REQUIRED,
    STRING,
    Max,
    MaxLength,
    Min,
    OneOf,
)
from .base import Tool

# Field name in tool parameters -> field name in WordPress post data
WRITABLE_FIELDS = {
    "title": "post_title",
    "content": "post_content",
    "status": "post_status",
    "author_id": "post_author",
    "excerpt": "post_excerpt",
    "slug": "post_name",
    "parent_id": "post_parent",
    "menu_order": "menu_order",
    "comment_status": "comment_status",
    "ping_status": "ping_status",
}

# URL path fragments that hint at custom content types
URL_TYPE_HINTS = {
    "documentation": ["documentation", "docs", "doc"],
    "docs": ["documentation", "docs", "doc"],
    "products": ["product"],
    "product": ["product"],
    "portfolio": ["portfolio", "project"],
    "services": ["service"],
    "testimonials": ["testimonial"],
    "team": ["team_member", "staff"],
    "events": ["event"],
    "courses": ["course", "lesson"],
}

OPEN_CLOSED = OneOf(("open", "closed"))


def _writable_schema(title_required: bool, statuses: tuple[str, ...]) -> dict[str, tuple]:
    presence = REQUIRED if title_required else OPTIONAL
    return {
        "title": (presence, STRING, NOT_EMPTY, MaxLength(200)),
        "content": (presence, STRING),
        "status": (OPTIONAL, STRING, OneOf(statuses)),
        "author_id": (OPTIONAL, INT, Min(1)),
        "excerpt": (OPTIONAL, STRING),
        "slug": (OPTIONAL, STRING),
        "parent_id": (OPTIONAL, INT, Min(0)),
        "menu_order": (OPTIONAL, INT),
        "comment_status": (OPTIONAL, STRING, OPEN_CLOSED),
        "ping_status": (OPTIONAL, STRING, OPEN_CLOSED),
    }


class ContentTool(Tool):
    """Shared helpers for content tools."""

    def require_type(self, content_type: str) -> None:
        if not self.wp.post_type_exists(content_type):
            raise DomainError(f"Content type '{content_type}' does not exist")

    def require_post(self, content_id: int) -> Post:
        post = self.wp.get_post(content_id)
        if post is None:
            raise DomainError(f"Content with ID {content_id} not found")
        return post

    def format_post(self, post: Post) -> dict[str, Any]:
        """Full representation of a post."""
        return {
            "id": post.id,
            "title": post.title,
            "slug": post.slug,
            "content": post.content,
            "excerpt": post.excerpt,
            "status": post.status,
            "type": post.type,
            "date": post.date,
            "modified": post.modified,
            "author": {
                "id": post.author,
                "name": self.wp.get_author_name(post.author),
            },
            "parent": post.parent,
            "menu_order": post.menu_order,
            "comment_status": post.comment_status,
            "ping_status": post.ping_status,
            "url": post.link,
            "edit_url": self.wp.get_edit_post_link(post.id),
        }

    def find_by_slug(self, slug: str, content_types: list[str]):
        """Return (post, content_type) for the first type holding the slug."""
        for content_type in content_types:
            if not self.wp.post_type_exists(content_type):
                continue
            posts = self.wp.get_posts({
                "name": slug,
                "post_type": content_type,
                "post_status": "any",
                "posts_per_page": 1,
            })
            if posts:
                return posts[0], content_type
        return None, None


class ListContent(ContentTool):
    name = "list_content"
    description = (
        "List content of any type (posts, pages, custom post types). "
        "Supports filtering, sorting, and pagination."
    )
    schema = {
        "content_type": (REQUIRED, STRING, NOT_EMPTY),
        "status": (OPTIONAL, STRING, OneOf(("publish", "draft", "pending", "private", "trash", "any"))),
        "per_page": (OPTIONAL, INT, Min(1), Max(100)),
        "page": (OPTIONAL, INT, Min(1)),
        "orderby": (OPTIONAL, STRING, OneOf(("date", "title", "modified", "author", "ID"))),
        "order": (OPTIONAL, STRING, OneOf(("ASC", "DESC"))),
        "author": (OPTIONAL, INT),
        "search": (OPTIONAL, STRING),
    }

    def run(self, parameters):
        content_type = parameters["content_type"]
        self.require_type(content_type)

        args = {
            "post_type": content_type,
            "post_status": parameters.get("status", "publish"),
            "posts_per_page": parameters.get("per_page", 10),
            "paged": parameters.get("page", 1),
            "orderby": parameters.get("orderby", "date"),
            "order": parameters.get("order", "DESC"),
        }
        if "author" in parameters:
            args["author"] = parameters["author"]
        if parameters.get("search"):
            args["s"] = parameters["search"]

        items = [self._format_item(post) for post in self.wp.get_posts(args)]

        return self.success({
            "content_type": content_type,
            "count": len(items),
            "page": args["paged"],
            "per_page": args["posts_per_page"],
            "items": items,
        })

    def _format_item(self, post: Post) -> dict[str, Any]:
        return {
            "id": post.id,
            "title": post.title,
            "slug": post.slug,
            "status": post.status,
            "type": post.type,
            "date": post.date,
            "modified": post.modified,
            "author": {
                "id": post.author,
                "name": self.wp.get_author_name(post.author),
            },
            "excerpt": self.wp.trim_words(post.content, 20),
            "url": post.link,
            "edit_url": self.wp.get_edit_post_link(post.id),
        }


class GetContent(ContentTool):
    name = "get_content"
    description = (
        "Get a single piece of content by ID, with full details. "
        "Optionally verify the content type."
    )
    schema = {
        "content_id": (REQUIRED, INT, Min(1)),
        "content_type": (OPTIONAL, STRING, NOT_EMPTY),
    }

    def run(self, parameters):
        content_id = parameters["content_id"]
        expected_type = parameters.get("content_type")

        post = self.require_post(content_id)

        if expected_type is not None and post.type != expected_type:
            raise DomainError(
                f"Content with ID {content_id} is of type '{post.type}', not '{expected_type}'"
            )

        return self.success(self.format_post(post))


class CreateContent(ContentTool):
    name = "create_content"
    description = (
        "Create new content of any type (post, page, custom post type). "
        "Supports setting title, content, status, author, and more."
    )
    schema = {
        "content_type": (REQUIRED, STRING, NOT_EMPTY),
        **_writable_schema(True, ("publish", "draft", "pending", "private", "future")),
    }

    def run(self, parameters):
        content_type = parameters["content_type"]
        self.require_type(content_type)

        post_data = {"post_type": content_type, "post_status": "draft"}
        for field, wp_field in WRITABLE_FIELDS.items():
            if field in parameters:
                post_data[wp_field] = parameters[field]

        post_id = self.check(self.wp.insert_post(post_data), "create content")
        post = self.require_post(post_id)

        return self.success(self.format_post_summary(post), "Content created successfully")


class UpdateContent(ContentTool):
    name = "update_content"
    description = (
        "Update existing content by ID. Only the fields provided are changed."
    )
    schema = {
        "content_id": (REQUIRED, INT, Min(1)),
        **_writable_schema(False, ("publish", "draft", "pending", "private", "trash")),
    }

    def run(self, parameters):
        content_id = parameters["content_id"]
        existing = self.require_post(content_id)

        update_data = {"ID": content_id, "post_type": existing.type}
        for field, wp_field in WRITABLE_FIELDS.items():
            if field in parameters:
                update_data[wp_field] = parameters[field]

        self.check(self.wp.update_post(update_data), "update content")
        post = self.require_post(content_id)

        data = self.format_post_summary(post)
        data["modified"] = post.modified
        return self.success(data, "Content updated successfully")


class DeleteContent(ContentTool):
    name = "delete_content"
    description = (
        "Delete content by ID. By default moves to trash - "
        "set force_delete to true for permanent deletion."
    )
    schema = {
        "content_id": (REQUIRED, INT, Min(1)),
        "force_delete": (OPTIONAL, BOOL),
    }
    destructive = True
    operation = "Deleting content"

    def run(self, parameters):
        content_id = parameters["content_id"]
        force_delete = parameters.get("force_delete", False)

        post = self.require_post(content_id)
        deleted_info = {
            "id": post.id,
            "title": post.title,
            "slug": post.slug,
            "type": post.type,
            "previous_status": post.status,
        }

        if self.wp.delete_post(content_id, force_delete) is None:
            raise DomainError(f"Failed to delete content with ID {content_id}")

        deleted_info["permanently_deleted"] = force_delete
        if not force_delete:
            deleted_info["current_status"] = "trash"

        message = "Content permanently deleted" if force_delete else "Content moved to trash"
        return self.success(deleted_info, message)


class DiscoverContentTypes(ContentTool):
    name = "discover_content_types"
    description = (
        "Discover all registered content types (post types) with their "
        "settings, supported features, taxonomies and counts."
    )
    schema = {
        "show_ui": (OPTIONAL, BOOL),
        "public": (OPTIONAL, BOOL),
    }

    def run(self, parameters):
        args = {key: parameters[key] for key in ("show_ui", "public") if key in parameters}

        types = []
        for type_name, type_object in self.wp.get_post_types(args).items():
            counts = self.wp.count_posts(type_name)
            visibility = type_object.get("visibility") or {}
            types.append({
                "name": type_name,
                "label": type_object.get("name", type_name),
                "labels": type_object.get("labels", {}),
                "description": type_object.get("description", ""),
                "public": type_object.get("viewable", True),
                "hierarchical": type_object.get("hierarchical", False),
                "show_ui": visibility.get("show_ui", True),
                "show_in_nav_menus": visibility.get("show_in_nav_menus", True),
                "rest_base": type_object.get("rest_base"),
                "has_archive": type_object.get("has_archive", False),
                "menu_icon": type_object.get("icon"),
                "supports": type_object.get("supports", {}),
                "taxonomies": type_object.get("taxonomies", []),
                "counts": {status: counts.get(status, 0) for status in
                           ("publish", "draft", "pending", "private", "trash")},
            })

        return self.success({
            "content_types": types,
            "count": len(types),
        }, "Content types discovered successfully")


class GetContentBySlug(ContentTool):
    name = "get_content_by_slug"
    description = (
        "Find content by its slug, searching the given content types "
        "(default: post and page)."
    )
    schema = {
        "slug": (REQUIRED, STRING, NOT_EMPTY),
        "content_types": (OPTIONAL, ARRAY),
    }

    def run(self, parameters):
        slug = parameters["slug"]
        content_types = parameters.get("content_types", ["post", "page"])
        if isinstance(content_types, dict):
            content_types = list(content_types.values())
        content_types = list(content_types)
        if not all(isinstance(type_name, str) for type_name in content_types):
            raise ValidationFailed(
                "Content types must be names",
                {"content_types": "Field 'content_types' must contain only strings"},
            )

        post, content_type = self.find_by_slug(slug, content_types)
        if post is None:
            raise DomainError(
                f"No content found with slug '{slug}' in content types: {', '.join(content_types)}"
            )

        return self.success({
            "found": True,
            "content_type": content_type,
            "content": self.format_post(post),
        }, "Content found successfully")


def extract_slug_from_url(url: str) -> str:
    """The last non-empty path segment of a URL."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return ""
    parts = [part for part in path.strip("/").split("/") if part]
    return parts[-1] if parts else ""


def guess_content_types_from_url(url: str) -> list[str]:
    """Content types to search, most likely first, ending with post and page."""
    url_lower = url.lower()
    guesses: list[str] = []
    for pattern, types in URL_TYPE_HINTS.items():
        if pattern in url_lower:
            guesses.extend(types)
    guesses.extend(["post", "page"])
    return list(dict.fromkeys(guesses))


class FindContentByUrl(ContentTool):
    name = "find_content_by_url"
    description = (
        "Finds content by its URL, automatically detecting the content type, "
        "and optionally updates it."
    )
    schema = {
        "url": (REQUIRED, STRING, NOT_EMPTY),
        "update_fields": (OPTIONAL, ARRAY),
    }

    def run(self, parameters):
        url = parameters["url"]
        update_fields = parameters.get("update_fields")

        slug = extract_slug_from_url(url)
        if not slug:
            raise ValidationFailed(
                "Could not extract slug from URL",
                {"url": "Invalid URL format"},
            )

        post, content_type = self.find_by_slug(slug, guess_content_types_from_url(url))
        if post is None:
            raise DomainError(f"No content found with URL: {url}")

        updated = bool(update_fields) and isinstance(update_fields, dict)
        if updated:
            update_data = {"ID": post.id, "post_type": post.type}
            for field in ("title", "content", "status"):
                if field in update_fields:
                    update_data[WRITABLE_FIELDS[field]] = update_fields[field]

            self.check(self.wp.update_post(update_data), "update content")
            post = self.require_post(post.id)

        return self.success({
            "found": True,
            "content_type": content_type,
            "content_id": post.id,
            "original_url": url,
            "updated": updated,
            "content": self.format_post(post),
        }, "Content found and updated" if updated else "Content found successfully")


CONTENT_TOOLS = [
    ListContent,
    GetContent,
    CreateContent,
    UpdateContent,
    DeleteContent,
    DiscoverContentTypes,
    GetContentBySlug,
    FindContentByUrl,
]
