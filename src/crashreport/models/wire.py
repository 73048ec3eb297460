"""Base model for records that travel in the crash report wire format."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, SerializerFunctionWrapHandler, model_serializer
from pydantic.alias_generators import to_camel


def is_empty(value: Any) -> bool:
    """Check whether a serialized value would be omitted from the wire form."""
    if value is None:
        return True
    if isinstance(value, (str, int, float, list, tuple, dict)):
        return not value
    return False


class WireModel(BaseModel):
    """Record serialized with camelCase keys and empty fields omitted."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if not is_empty(value)}

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-compatible wire representation."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: int | None = None) -> str:
        """Serialize to the JSON wire format."""
        return self.model_dump_json(by_alias=True, indent=indent)
