"""Shared pydantic configuration for camelCase JSON payloads."""
from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelInput(BaseModel):
    """Request body accepting camelCase keys (snake_case tolerated)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CamelRead(BaseModel):
    """Response model read from ORM attributes and rendered in camelCase."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )
