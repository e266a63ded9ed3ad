"""
Shared Pydantic base schema.

The mobile client speaks camelCase JSON; responses are serialized with
camelCase aliases and requests accept either spelling.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(CamelModel):
    """Plain confirmation message."""
    message: str
