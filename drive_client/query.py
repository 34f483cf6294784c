"""Query string builder for list and filter endpoints."""

from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from .body import UNSET


def _is_omitted(value: Any) -> bool:
    return value is UNSET or value is None or value == ""


def _stringify(value: Any) -> str:
    # bool first: True is also an int
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class QueryBuilder:
    """Fluent builder for URL query parameters.

    UNSET, None and empty strings are never emitted. Keys keep the
    order in which they were first appended; appending a key again
    replaces its value.
    """

    def __init__(self):
        self._params: Dict[str, str] = {}

    def append(self, key: str, value: Any) -> "QueryBuilder":
        """Append any scalar, dispatching on its type."""
        if isinstance(value, bool):
            return self.append_boolean(key, value)
        if isinstance(value, (int, float)):
            return self.append_number(key, value)
        if _is_omitted(value):
            return self
        return self.append_if_defined(key, str(value))

    def append_if_defined(self, key: str, value: Optional[str]) -> "QueryBuilder":
        if not _is_omitted(value):
            self._params[key] = _stringify(value)
        return self

    def append_number(self, key: str, value: Optional[float]) -> "QueryBuilder":
        if value is not UNSET and value is not None:
            self._params[key] = _stringify(value)
        return self

    def append_boolean(self, key: str, value: Optional[bool]) -> "QueryBuilder":
        if value is not UNSET and value is not None:
            self._params[key] = _stringify(bool(value))
        return self

    def append_pagination(self, limit: Optional[int] = None, offset: Optional[int] = None) -> "QueryBuilder":
        return self.append_number("limit", limit).append_number("offset", offset)

    def append_sort(self, sort_by: Optional[str] = None, sort_order: Optional[str] = None) -> "QueryBuilder":
        return self.append_if_defined("sortBy", sort_by).append_if_defined("sortOrder", sort_order)

    def append_file_filters(
        self,
        folder_id: Optional[str] = None,
        include_subfolders: Optional[bool] = None,
        starred: Optional[bool] = None,
        shared: Optional[bool] = None,
        trashed: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> "QueryBuilder":
        return (
            self.append_if_defined("folderId", folder_id)
            .append_boolean("includeSubfolders", include_subfolders)
            .append_boolean("starred", starred)
            .append_boolean("shared", shared)
            .append_boolean("trashed", trashed)
            .append_if_defined("search", search)
        )

    def append_folder_filters(
        self,
        folder_id: Optional[str] = None,
        parent_id: Optional[str] = None,
        starred: Optional[bool] = None,
        shared: Optional[bool] = None,
        trashed: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> "QueryBuilder":
        return (
            self.append_if_defined("folderId", folder_id)
            .append_if_defined("parentId", parent_id)
            .append_boolean("starred", starred)
            .append_boolean("shared", shared)
            .append_boolean("trashed", trashed)
            .append_if_defined("search", search)
        )

    def append_workspace_filters(
        self,
        folder_id: Optional[str] = None,
        parent_id: Optional[str] = None,
        starred: Optional[bool] = None,
        trashed: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> "QueryBuilder":
        return (
            self.append_if_defined("folderId", folder_id)
            .append_if_defined("parentId", parent_id)
            .append_boolean("starred", starred)
            .append_boolean("trashed", trashed)
            .append_if_defined("search", search)
        )

    def build(self) -> str:
        """Return the encoded query string without a leading '?', or ''."""
        return urlencode(list(self._params.items()))

    def build_with_prefix(self) -> str:
        query = self.build()
        return f"?{query}" if query else ""

    def has_params(self) -> bool:
        return bool(self._params)

    def params(self) -> Dict[str, str]:
        return dict(self._params)

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> "QueryBuilder":
        builder = cls()
        for key, value in params.items():
            builder.append(key, value)
        return builder


def build_query_string(params: Mapping[str, Any]) -> str:
    return QueryBuilder.from_mapping(params).build()


def build_query_string_with_prefix(params: Mapping[str, Any]) -> str:
    return QueryBuilder.from_mapping(params).build_with_prefix()
