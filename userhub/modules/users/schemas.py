"""
User Resource - Wire Shapes

Pydantic models for request and response bodies. Wire names are camelCase;
snake_case attribute names are accepted on input as well.
"""
import uuid
from typing import Any, Dict, List, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for all wire shapes: camelCase aliases, unknown keys ignored."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @classmethod
    def wire_names(cls) -> List[str]:
        return [info.alias or name for name, info in cls.model_fields.items()]

    @classmethod
    def canonicalize(cls, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Re-key a decoded body onto this model's wire names.

        Keys match case-insensitively against either the wire name or the
        attribute name; unknown keys are dropped.
        """
        lookup = {}
        for name, info in cls.model_fields.items():
            wire = info.alias or name
            lookup[wire.lower()] = wire
            lookup[name.lower()] = wire
        values: Dict[str, Any] = {}
        for key, value in payload.items():
            wire = lookup.get(str(key).lower())
            if wire is not None:
                values[wire] = value
        return values


class UserDto(WireModel):
    """Output representation of a user."""
    id: uuid.UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    login: Optional[str] = None

    @computed_field(alias="fullName")
    @property
    def full_name(self) -> str:
        return f"{self.last_name or ''} {self.first_name or ''}".strip()


class UserPostDto(WireModel):
    """Body of POST /users. `login` is required; presence is checked by the validator."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    login: Optional[str] = None


class UserPutDto(WireModel):
    """Body of PUT /users/{id}, and the shape PATCH documents are applied to."""
    id: Optional[uuid.UUID] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    login: Optional[str] = None


class PatchOperation(BaseModel):
    """One JSON Patch operation."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    op: str
    path: str
    value: Any = None
    from_: Optional[str] = Field(default=None, alias="from")

    @property
    def has_value(self) -> bool:
        return "value" in self.model_fields_set


class PaginationHeader(WireModel):
    """Body of the X-Pagination response header."""
    previous_page_link: Optional[str] = None
    next_page_link: str
    total_count: int
    page_size: int
    current_page: int
    total_pages: int
