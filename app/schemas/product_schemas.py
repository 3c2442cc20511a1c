from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from decimal import Decimal
from uuid import UUID


class ProductPayload(BaseModel):
    """Client-supplied product fields for create and full-replacement update.

    ``id`` and ``user`` are server-managed; any value sent for them is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(max_length=200)
    category: UUID
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    description: Optional[str] = Field(default=None, max_length=2000)
    available: bool = True

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value
