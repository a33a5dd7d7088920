"""
Shared schema base.

The JSON API speaks camelCase; Python code uses snake_case attributes.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, ORM attribute loading, unknown fields ignored."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        extra = "ignore"
