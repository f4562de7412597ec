"""
Taxonomy tools for the WordPress MCP server.

Covers taxonomy discovery, term CRUD and assigning terms to content.
"""

from typing import Any

from ..error_handling import DomainError, ValidationFailed
from ..models import Term
from ..validation.rules import (
    ARRAY,
    BOOL,
    INT,
    NOT_EMPTY,
    OPTIONAL,
    REQUIRED,
    STRING,
    Max,
    Min,
    OneOf,
)
from .base import Tool

TERM_FIELDS = ("slug", "description", "parent")


class TaxonomyTool(Tool):
    """Shared helpers for taxonomy tools."""

    def require_taxonomy(self, taxonomy: str) -> None:
        if not self.wp.taxonomy_exists(taxonomy):
            raise DomainError(f"Taxonomy '{taxonomy}' does not exist")

    def require_term(self, term_id: int, taxonomy: str) -> Term:
        term = self.wp.get_term(term_id, taxonomy)
        if not term or self.wp.is_error(term):
            raise DomainError(f"Term with ID {term_id} not found in taxonomy '{taxonomy}'")
        return term

    def format_taxonomy(self, name: str, taxonomy: dict[str, Any]) -> dict[str, Any]:
        visibility = taxonomy.get("visibility") or {}
        return {
            "name": name,
            "label": taxonomy.get("name", name),
            "labels": taxonomy.get("labels", {}),
            "description": taxonomy.get("description", ""),
            "public": visibility.get("public", True),
            "publicly_queryable": visibility.get("publicly_queryable", True),
            "hierarchical": taxonomy.get("hierarchical", False),
            "show_ui": visibility.get("show_ui", True),
            "show_in_nav_menus": visibility.get("show_in_nav_menus", True),
            "show_tagcloud": visibility.get("show_tagcloud", False),
            "show_in_quick_edit": visibility.get("show_in_quick_edit", True),
            "show_admin_column": visibility.get("show_admin_column", False),
            "rest_base": taxonomy.get("rest_base"),
            "object_types": taxonomy.get("types", []),
            "capabilities": taxonomy.get("capabilities", {}),
        }


class DiscoverTaxonomies(TaxonomyTool):
    name = "discover_taxonomies"
    description = (
        "Discover all registered taxonomies (categories, tags, custom taxonomies) "
        "with their settings and attached content types."
    )
    schema = {
        "show_ui": (OPTIONAL, BOOL),
        "public": (OPTIONAL, BOOL),
    }

    def run(self, parameters):
        args = {key: parameters[key] for key in ("show_ui", "public") if key in parameters}

        taxonomies = [
            self.format_taxonomy(name, taxonomy)
            for name, taxonomy in self.wp.get_taxonomies(args).items()
        ]

        return self.success({
            "taxonomies": taxonomies,
            "count": len(taxonomies),
        }, "Taxonomies discovered successfully")


class GetTaxonomy(TaxonomyTool):
    name = "get_taxonomy"
    description = "Get detailed information about a single taxonomy."
    schema = {
        "taxonomy": (REQUIRED, STRING, NOT_EMPTY),
    }

    def run(self, parameters):
        taxonomy_name = parameters["taxonomy"]

        taxonomy = self.wp.get_taxonomy(taxonomy_name)
        if taxonomy is None:
            raise DomainError(f"Taxonomy '{taxonomy_name}' not found")

        return self.success(
            self.format_taxonomy(taxonomy_name, taxonomy),
            "Taxonomy retrieved successfully",
        )


class ListTerms(TaxonomyTool):
    name = "list_terms"
    description = (
        "List terms of a taxonomy. Supports filtering by parent, search, "
        "sorting, and pagination."
    )
    schema = {
        "taxonomy": (REQUIRED, STRING, NOT_EMPTY),
        "hide_empty": (OPTIONAL, BOOL),
        "parent": (OPTIONAL, INT, Min(0)),
        "search": (OPTIONAL, STRING),
        "per_page": (OPTIONAL, INT, Min(1), Max(100)),
        "page": (OPTIONAL, INT, Min(1)),
        "orderby": (OPTIONAL, STRING, OneOf(("name", "slug", "term_id", "count", "term_order"))),
        "order": (OPTIONAL, STRING, OneOf(("asc", "desc"))),
    }

    def run(self, parameters):
        taxonomy = parameters["taxonomy"]
        self.require_taxonomy(taxonomy)

        args: dict[str, Any] = {
            "taxonomy": taxonomy,
            "hide_empty": parameters.get("hide_empty", False),
        }
        if "parent" in parameters:
            args["parent"] = parameters["parent"]
        if "search" in parameters:
            args["search"] = parameters["search"]
        if "per_page" in parameters:
            args["number"] = parameters["per_page"]
            if "page" in parameters:
                args["offset"] = (parameters["page"] - 1) * args["number"]
        if "orderby" in parameters:
            args["orderby"] = parameters["orderby"]
        if "order" in parameters:
            args["order"] = parameters["order"].upper()

        terms = self.check(self.wp.get_terms(args), "retrieve terms")
        formatted = [term.to_dict() for term in terms]

        return self.success({
            "taxonomy": taxonomy,
            "terms": formatted,
            "count": len(formatted),
            "page": parameters.get("page", 1),
            "per_page": parameters.get("per_page", len(formatted)),
        }, "Terms retrieved successfully")


class GetTerm(TaxonomyTool):
    name = "get_term"
    description = "Get a single term by ID or slug."
    schema = {
        "taxonomy": (REQUIRED, STRING, NOT_EMPTY),
        "term_id": (OPTIONAL, INT, Min(1)),
        "slug": (OPTIONAL, STRING, NOT_EMPTY),
    }

    def run(self, parameters):
        taxonomy = parameters["taxonomy"]
        if "term_id" not in parameters and "slug" not in parameters:
            raise ValidationFailed(
                "Either term_id or slug must be provided",
                {"term_id": "Either term_id or slug is required"},
            )

        self.require_taxonomy(taxonomy)

        if "term_id" in parameters:
            identifier = parameters["term_id"]
            term = self.wp.get_term(identifier, taxonomy)
        else:
            identifier = parameters["slug"]
            term = self.wp.get_term_by("slug", identifier, taxonomy)

        if not term or self.wp.is_error(term):
            raise DomainError(f"Term '{identifier}' not found in taxonomy '{taxonomy}'")

        return self.success(term.to_dict(), "Term retrieved successfully")


class CreateTerm(TaxonomyTool):
    name = "create_term"
    description = "Create a new term in a taxonomy."
    schema = {
        "taxonomy": (REQUIRED, STRING, NOT_EMPTY),
        "name": (REQUIRED, STRING, NOT_EMPTY),
        "slug": (OPTIONAL, STRING),
        "description": (OPTIONAL, STRING),
        "parent": (OPTIONAL, INT, Min(0)),
    }

    def run(self, parameters):
        taxonomy = parameters["taxonomy"]
        self.require_taxonomy(taxonomy)

        args = {key: parameters[key] for key in TERM_FIELDS if key in parameters}

        result = self.check(
            self.wp.insert_term(parameters["name"], taxonomy, args), "create term"
        )
        term = self.require_term(result["term_id"], taxonomy)

        return self.success(term.to_dict(), "Term created successfully")


class UpdateTerm(TaxonomyTool):
    name = "update_term"
    description = "Update an existing term's name, slug, description, or parent."
    schema = {
        "term_id": (REQUIRED, INT, Min(1)),
        "taxonomy": (REQUIRED, STRING, NOT_EMPTY),
        "name": (OPTIONAL, STRING, NOT_EMPTY),
        "slug": (OPTIONAL, STRING),
        "description": (OPTIONAL, STRING),
        "parent": (OPTIONAL, INT, Min(0)),
    }

    def run(self, parameters):
        term_id = parameters["term_id"]
        taxonomy = parameters["taxonomy"]
        self.require_taxonomy(taxonomy)
        self.require_term(term_id, taxonomy)

        args = {key: parameters[key] for key in ("name",) + TERM_FIELDS if key in parameters}

        self.check(self.wp.update_term(term_id, taxonomy, args), "update term")
        term = self.require_term(term_id, taxonomy)

        return self.success(term.to_dict(), "Term updated successfully")


class DeleteTerm(TaxonomyTool):
    name = "delete_term"
    description = "Delete a term from a taxonomy permanently."
    schema = {
        "term_id": (REQUIRED, INT, Min(1)),
        "taxonomy": (REQUIRED, STRING, NOT_EMPTY),
    }
    destructive = True
    operation = "Deleting terms"

    def run(self, parameters):
        term_id = parameters["term_id"]
        taxonomy = parameters["taxonomy"]
        self.require_taxonomy(taxonomy)

        term = self.require_term(term_id, taxonomy)
        term_info = {
            "id": term.id,
            "name": term.name,
            "slug": term.slug,
            "taxonomy": term.taxonomy,
        }

        result = self.wp.delete_term(term_id, taxonomy)
        if result is False:
            raise DomainError("Failed to delete term: Failed to delete term")
        self.check(result, "delete term")

        return self.success(term_info, "Term deleted successfully")


class AssignTermsToContent(TaxonomyTool):
    name = "assign_terms_to_content"
    description = "Assign terms to content. Can replace or append to existing terms."
    schema = {
        "content_id": (REQUIRED, INT, Min(1)),
        "taxonomy": (REQUIRED, STRING, NOT_EMPTY),
        "term_ids": (REQUIRED, ARRAY),
        "append": (OPTIONAL, BOOL),
    }

    def run(self, parameters):
        content_id = parameters["content_id"]
        taxonomy = parameters["taxonomy"]
        term_ids = parameters["term_ids"]
        if isinstance(term_ids, dict):
            term_ids = list(term_ids.values())
        term_ids = list(term_ids)
        append = parameters.get("append", False)

        if self.wp.get_post(content_id) is None:
            raise DomainError(f"Content with ID {content_id} not found")
        self.require_taxonomy(taxonomy)

        assigned = self.check(
            self.wp.set_object_terms(content_id, term_ids, taxonomy, append), "assign terms"
        )

        terms = self.wp.get_object_terms(content_id, taxonomy)
        if self.wp.is_error(terms):
            terms = []

        return self.success({
            "content_id": content_id,
            "taxonomy": taxonomy,
            "assigned_term_ids": assigned,
            "terms": [{"id": t.id, "name": t.name, "slug": t.slug} for t in terms],
            "operation": "appended" if append else "replaced",
        }, "Terms assigned successfully")


class GetContentTerms(TaxonomyTool):
    name = "get_content_terms"
    description = (
        "Get the terms assigned to content, for one taxonomy or for every "
        "taxonomy of its content type."
    )
    schema = {
        "content_id": (REQUIRED, INT, Min(1)),
        "taxonomy": (OPTIONAL, STRING, NOT_EMPTY),
    }

    def run(self, parameters):
        content_id = parameters["content_id"]
        taxonomy = parameters.get("taxonomy")

        post = self.wp.get_post(content_id)
        if post is None:
            raise DomainError(f"Content with ID {content_id} not found")

        result: dict[str, Any] = {
            "content_id": content_id,
            "content_type": post.type,
            "terms": {},
        }

        if taxonomy is not None:
            self.require_taxonomy(taxonomy)
            terms = self.check(self.wp.get_object_terms(content_id, taxonomy), "get terms")
            result["terms"][taxonomy] = [self._format_term(t) for t in terms]
        else:
            for taxonomy_name in self.wp.get_object_taxonomies(post.type):
                terms = self.wp.get_object_terms(content_id, taxonomy_name)
                if not self.wp.is_error(terms) and terms:
                    result["terms"][taxonomy_name] = [self._format_term(t) for t in terms]

        return self.success(result, "Content terms retrieved successfully")

    @staticmethod
    def _format_term(term: Term) -> dict[str, Any]:
        data = term.to_dict()
        data.pop("taxonomy")
        return data


TAXONOMY_TOOLS = [
    DiscoverTaxonomies,
    GetTaxonomy,
    ListTerms,
    GetTerm,
    CreateTerm,
    UpdateTerm,
    DeleteTerm,
    AssignTermsToContent,
    GetContentTerms,
]
