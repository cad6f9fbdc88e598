"""
Shared schema base and response envelopes.
"""
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel
from typing import Annotated, Generic, List, TypeVar

T = TypeVar("T")

# Amounts are exact decimals in Python and plain JSON numbers on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

CENT = Decimal("0.01")


class CamelModel(BaseModel):
    """Schema base serialized with camelCase keys, accepting either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ListResponse(CamelModel, Generic[T]):
    """Envelope for collection responses."""
    data: List[T]
    count: int


class ItemResponse(CamelModel, Generic[T]):
    """Envelope for single-item responses."""
    data: T
    message: str = ""


class MessageResponse(CamelModel):
    """Envelope for responses that only carry a message."""
    message: str
