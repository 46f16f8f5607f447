"""Tag Schemas."""

from uuid import UUID

from pydantic import Field, field_validator

from devconnect.schemas.common import CamelModel


class TagCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class TagResponse(CamelModel):
    id: UUID
    name: str
