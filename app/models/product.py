from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime, timezone
import uuid
from decimal import Decimal

from app.models.category import CategoryRead
from app.models.user import UserSummary

if TYPE_CHECKING:
    from app.models.category import Category
    from app.models.user import User


class ProductBase(SQLModel):
    name: str = Field(index=True)
    price: Decimal = Field(max_digits=12, decimal_places=2)
    description: Optional[str] = None
    available: bool = Field(default=True)


class Product(ProductBase, table=True):
    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
        nullable=False
    )
    category_id: uuid.UUID = Field(foreign_key="categories.id", nullable=False)
    # Owner is the token subject; a matching users row is optional
    user_id: str = Field(index=True, nullable=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    category: Optional["Category"] = Relationship()
    user: Optional["User"] = Relationship(
        sa_relationship_kwargs={
            "primaryjoin": "Product.user_id == User.id",
            "foreign_keys": "[Product.user_id]",
            "viewonly": True,
        }
    )


class ProductRead(ProductBase):
    """Product with its category and owner references expanded."""

    id: uuid.UUID
    user_id: str
    category: Optional[CategoryRead] = None
    user: Optional[UserSummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
