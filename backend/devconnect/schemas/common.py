"""Common Schemas — camelCase base model and shared mutation envelopes.

Invariants:
    - Wire format is camelCase; Python attributes stay snake_case
    - Every mutation response carries success + message

Design Decisions:
    - alias_generator=to_camel + populate_by_name: clients send camelCase, tests and
      internal callers may use either spelling
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for all API schemas."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


class MutationResult(CamelModel):
    success: bool = True
    message: str


class InsertResult(MutationResult):
    inserted_id: str | None = None


class Pagination(CamelModel):
    limit: int
    offset: int
    total: int
