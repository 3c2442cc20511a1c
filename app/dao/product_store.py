from abc import ABC, abstractmethod
from typing import List, Optional
from app.models.product import ProductRead
from app.schemas.product_schemas import ProductPayload


class ProductStore(ABC):
    """Persistence boundary for products.

    Absent records are reported as ``None``. Any persistence failure is
    raised as :class:`app.core.exceptions.StoreError`.
    """

    @abstractmethod
    async def find_page(self, offset: int = 0, limit: int = 5, sort_key: str = "name") -> List[ProductRead]:
        ...

    @abstractmethod
    async def find_by_id(self, product_id: str) -> Optional[ProductRead]:
        ...

    @abstractmethod
    async def find_by_name_pattern(self, term: str) -> List[ProductRead]:
        """Case-insensitive substring match on name. The term is matched literally."""

    @abstractmethod
    async def insert(self, payload: ProductPayload, owner_id: str) -> ProductRead:
        ...

    @abstractmethod
    async def update_by_id(self, product_id: str, payload: ProductPayload) -> Optional[ProductRead]:
        """Replace every mutable field of the product."""

    @abstractmethod
    async def delete_by_id(self, product_id: str) -> Optional[ProductRead]:
        ...
