"""Shared schema base classes."""

from pydantic import BaseModel, ConfigDict


class ApiModel(BaseModel):
    """Base for API bodies.

    Fields declared with a camelCase ``alias`` are sent and accepted under
    that alias; Python code and ORM objects use the snake_case name.
    """

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class OkResponse(ApiModel):
    ok: bool = True
