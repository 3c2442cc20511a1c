from typing import Any, List, Optional
from app.core.exceptions import NotFoundError, RequestValidationFault, StoreError
from app.core.security import Identity
from app.dao.product_store import ProductStore
from app.models.product import ProductRead
from app.schemas.product_schemas import ProductPayload
from app.services.product_validator import ProductValidator
import structlog

logger = structlog.get_logger()

# Largest OFFSET a 64-bit SQL integer can hold
MAX_OFFSET = 2**63 - 1


class ProductService:
    """Product use cases. Callers must already hold a verified identity."""

    def __init__(
        self,
        store: ProductStore,
        validator: Optional[ProductValidator] = None,
        default_page_limit: int = 5,
        max_page_limit: int = 100,
    ):
        self.store = store
        self.validator = validator or ProductValidator()
        self.default_page_limit = default_page_limit
        self.max_page_limit = max_page_limit

    def _validated(self, body: Any) -> ProductPayload:
        result = self.validator.validate(body)
        if not result.ok:
            raise RequestValidationFault(
                "Product validation failed",
                details=[violation.to_dict() for violation in result.violations],
            )
        return result.payload

    async def list_products(
        self, identity: Identity, offset: Optional[int] = None, limit: Optional[int] = None
    ) -> List[ProductRead]:
        offset = 0 if offset is None else offset
        limit = self.default_page_limit if limit is None else limit
        if offset < 0:
            raise RequestValidationFault("offset must be zero or greater", details=[
                {"field": "offset", "message": "must be zero or greater"}
            ])
        if offset > MAX_OFFSET:
            raise RequestValidationFault("offset is too large", details=[
                {"field": "offset", "message": f"must be at most {MAX_OFFSET}"}
            ])
        if limit < 1:
            raise RequestValidationFault("limit must be at least 1", details=[
                {"field": "limit", "message": "must be at least 1"}
            ])
        limit = min(limit, self.max_page_limit)

        try:
            products = await self.store.find_page(offset=offset, limit=limit, sort_key="name")
        except StoreError:
            logger.error("Error getting products", offset=offset, limit=limit, user_id=identity.subject)
            raise
        logger.info("Retrieved products", count=len(products), offset=offset, limit=limit)
        return products

    async def get_product(self, identity: Identity, product_id: str) -> ProductRead:
        product = await self.store.find_by_id(product_id)
        if product is None:
            logger.warning("Product not found", product_id=product_id)
            raise NotFoundError("Product not found with that ID")
        return product

    async def search_products(self, identity: Identity, term: str) -> List[ProductRead]:
        if not term or not term.strip():
            raise RequestValidationFault("Search term must not be blank", details=[
                {"field": "term", "message": "must not be blank"}
            ])
        products = await self.store.find_by_name_pattern(term)
        logger.info("Searched products by name", term=term, count=len(products))
        return products

    async def create_product(self, identity: Identity, body: Any) -> ProductRead:
        payload = self._validated(body)
        product = await self.store.insert(payload, owner_id=identity.subject)
        logger.info("Product created successfully", product_id=str(product.id), created_by=identity.subject)
        return product

    async def update_product(self, identity: Identity, product_id: str, body: Any) -> ProductRead:
        payload = self._validated(body)
        product = await self.store.update_by_id(product_id, payload)
        if product is None:
            logger.warning("Product not found for update", product_id=product_id)
            raise NotFoundError("Product not found with that ID")
        logger.info("Product updated successfully", product_id=product_id, user_id=identity.subject)
        return product

    async def delete_product(self, identity: Identity, product_id: str) -> ProductRead:
        product = await self.store.delete_by_id(product_id)
        if product is None:
            logger.warning("Product not found for delete", product_id=product_id)
            raise NotFoundError("Product not found with that ID")
        logger.info("Product deleted successfully", product_id=product_id, user_id=identity.subject)
        return product
