"""Strict schema baselines with forbidden extras by default."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictModel(BaseModel):
    """Neutral strict base for response DTOs, serialized with camelCase keys."""

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class StrictRequestModel(StrictModel):
    """Request DTO base that always forbids unexpected fields."""
