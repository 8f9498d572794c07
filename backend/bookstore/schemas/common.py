"""Shared schema bases."""
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(CamelModel):
    """Generic message response."""

    message: str


class ErrorResponse(CamelModel):
    """Body of every error response."""

    timestamp: str
    path: str
    status: int
    code: str
    message: str
    details: Any = None
