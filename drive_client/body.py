"""Request body builder for write operations."""

import json
from typing import Any, Dict, Iterable, Mapping, Optional

from .errors import missing_required_field


class _Unset:
    """Marker for an argument the caller did not supply at all."""

    _instance: Optional["_Unset"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class RequestBodyBuilder:
    """Builds JSON request bodies with required, optional and nullable fields.

    ``None`` is a real value here: it is sent as JSON ``null``. Only
    ``UNSET`` means "leave the field out".
    """

    def __init__(self):
        self._body: Dict[str, Any] = {}

    def set_required(self, key: str, value: Any) -> "RequestBodyBuilder":
        """Set a field that must be present.

        Raises:
            DriveError: MISSING_REQUIRED_FIELD if value is UNSET or None
        """
        if value is UNSET or value is None:
            raise missing_required_field(key)
        self._body[key] = value
        return self

    def set_optional(self, key: str, value: Any) -> "RequestBodyBuilder":
        """Set a field unless it is UNSET. False, 0, "" and None are kept."""
        if value is not UNSET:
            self._body[key] = value
        return self

    def set_optional_nullable(self, key: str, value: Any) -> "RequestBodyBuilder":
        """Set a field where an explicit None clears the value server-side."""
        if value is not UNSET:
            self._body[key] = value
        return self

    def set_with_default(self, key: str, value: Any, default: Any) -> "RequestBodyBuilder":
        self._body[key] = default if value is UNSET else value
        return self

    def set_required_many(self, fields: Mapping[str, Any]) -> "RequestBodyBuilder":
        for key, value in fields.items():
            self.set_required(key, value)
        return self

    def set_optional_many(self, fields: Mapping[str, Any]) -> "RequestBodyBuilder":
        for key, value in fields.items():
            self.set_optional(key, value)
        return self

    def set_if(self, condition: bool, key: str, value: Any) -> "RequestBodyBuilder":
        if condition:
            self._body[key] = value
        return self

    def build(self) -> Dict[str, Any]:
        """Return a new dict with the accumulated fields."""
        return dict(self._body)

    def build_json(self) -> str:
        return json.dumps(self._body, separators=(",", ":"))

    def is_empty(self) -> bool:
        return not self._body

    def has_fields(self) -> bool:
        return bool(self._body)

    @classmethod
    def from_mapping(cls, fields: Mapping[str, Any]) -> "RequestBodyBuilder":
        return cls().set_optional_many(fields)

    # Presets for the common write operations

    @classmethod
    def for_folder(
        cls,
        name: Any = UNSET,
        parent_id: Any = UNSET,
        description: Any = UNSET,
        color: Any = UNSET,
        is_starred: Any = UNSET,
        action: Any = UNSET,
        is_trashed: Any = UNSET,
    ) -> "RequestBodyBuilder":
        return (
            cls()
            .set_optional("name", name)
            .set_optional_nullable("parentId", parent_id)
            .set_optional_nullable("description", description)
            .set_optional_nullable("color", color)
            .set_optional("isStarred", is_starred)
            .set_optional("action", action)
            .set_optional("isTrashed", is_trashed)
        )

    @classmethod
    def for_share(
        cls,
        emails: Iterable[str],
        role: Any = UNSET,
        can_share: Any = UNSET,
        message: Any = UNSET,
    ) -> "RequestBodyBuilder":
        if emails is not None and emails is not UNSET:
            emails = list(emails)
        return (
            cls()
            .set_required("emails", emails)
            .set_optional("role", role)
            .set_optional("canShare", can_share)
            .set_optional("message", message)
        )

    @classmethod
    def for_workspace_create(
        cls,
        name: Any,
        storage_allocation: Any,
        description: Any = UNSET,
        icon: Any = UNSET,
        color: Any = UNSET,
    ) -> "RequestBodyBuilder":
        return (
            cls()
            .set_required("name", name)
            .set_required("storageAllocation", storage_allocation)
            .set_optional("description", description)
            .set_optional("icon", icon)
            .set_optional("color", color)
        )

    @classmethod
    def for_move(cls, target_id: Any = UNSET, key: str = "folderId") -> "RequestBodyBuilder":
        """Move body; an omitted target means the root (explicit null)."""
        return cls().set_optional_nullable(key, None if target_id is UNSET else target_id)


def build_request_body(
    required: Mapping[str, Any],
    optional: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Build a body from a map of required fields and a map of optional ones."""
    builder = RequestBodyBuilder().set_required_many(required)
    if optional:
        builder.set_optional_many(optional)
    return builder.build()
