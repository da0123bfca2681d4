"""Base model classes for InferDev domain records.

Domain records are immutable and travel over the wire with camelCase keys,
which is what the recommendation backend speaks. Python code uses the
snake_case field names.
"""

from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Question and option identifiers arrive as numbers or strings.
RecordId = Union[int, str]


class DomainModel(BaseModel):
    """Immutable record with camelCase wire aliases."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
        str_strip_whitespace=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize with camelCase keys for the backend."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def same_id(left: RecordId, right: RecordId) -> bool:
    """Compare identifiers regardless of whether they arrived as int or str."""
    return str(left) == str(right)
