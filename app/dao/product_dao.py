from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
from sqlmodel import col, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from app.core.exceptions import StoreError
from app.dao.base_dao import BaseDAO
from app.dao.product_store import ProductStore
from app.models.product import Product, ProductRead
from app.schemas.product_schemas import ProductPayload
import structlog

logger = structlog.get_logger()

SORTABLE_COLUMNS = {
    "name": Product.name,
    "price": Product.price,
    "created_at": Product.created_at,
}


def _parse_id(product_id) -> Optional[UUID]:
    if isinstance(product_id, UUID):
        return product_id
    try:
        return UUID(str(product_id))
    except ValueError:
        return None


def _columns(payload: ProductPayload) -> dict:
    return {
        "name": payload.name,
        "price": payload.price,
        "description": payload.description,
        "available": payload.available,
        "category_id": payload.category,
    }


class ProductDAO(BaseDAO[Product], ProductStore):
    def __init__(self, session_maker: async_sessionmaker):
        super().__init__(Product, session_maker)

    @staticmethod
    def _expanded():
        return select(Product).options(selectinload(Product.user), selectinload(Product.category))

    @staticmethod
    def _to_read(product: Product) -> ProductRead:
        return ProductRead.model_validate(product, from_attributes=True)

    async def _load_expanded(self, db: AsyncSession, product_id: UUID) -> Optional[Product]:
        result = await db.execute(
            self._expanded()
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_page(self, offset: int = 0, limit: int = 5, sort_key: str = "name") -> List[ProductRead]:
        if sort_key not in SORTABLE_COLUMNS:
            raise ValueError(f"Cannot sort products by {sort_key!r}")
        try:
            async with self.session_maker() as db:
                result = await db.execute(
                    self._expanded()
                    .order_by(SORTABLE_COLUMNS[sort_key], Product.id)
                    .offset(offset)
                    .limit(limit)
                )
                return [self._to_read(p) for p in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Error listing products", offset=offset, limit=limit, error=str(e))
            raise StoreError("Could not retrieve products") from e

    async def find_by_id(self, product_id: str) -> Optional[ProductRead]:
        parsed_id = _parse_id(product_id)
        if parsed_id is None:
            return None
        try:
            async with self.session_maker() as db:
                product = await self._load_expanded(db, parsed_id)
                return self._to_read(product) if product else None
        except SQLAlchemyError as e:
            logger.error("Error getting product by id", product_id=str(product_id), error=str(e))
            raise StoreError("Could not retrieve product") from e

    async def find_by_name_pattern(self, term: str) -> List[ProductRead]:
        try:
            async with self.session_maker() as db:
                result = await db.execute(
                    self._expanded()
                    .where(col(Product.name).icontains(term, autoescape=True))
                    .order_by(Product.name, Product.id)
                )
                return [self._to_read(p) for p in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Error searching products by name", term=term, error=str(e))
            raise StoreError("Could not search products") from e

    async def insert(self, payload: ProductPayload, owner_id: str) -> ProductRead:
        data = _columns(payload)
        data["user_id"] = owner_id
        async with self.session_maker() as db:
            product = await self.create(db, obj_in=data)
            try:
                return self._to_read(await self._load_expanded(db, product.id))
            except SQLAlchemyError as e:
                logger.error("Error reloading created product", product_id=str(product.id), error=str(e))
                raise StoreError("Could not retrieve product") from e

    async def update_by_id(self, product_id: str, payload: ProductPayload) -> Optional[ProductRead]:
        parsed_id = _parse_id(product_id)
        if parsed_id is None:
            return None
        async with self.session_maker() as db:
            product = await self.get_by_id(db, parsed_id)
            if product is None:
                return None
            data = _columns(payload)
            data["updated_at"] = datetime.now(timezone.utc)
            product = await self.replace(db, db_obj=product, obj_in=data)
            try:
                return self._to_read(await self._load_expanded(db, product.id))
            except SQLAlchemyError as e:
                logger.error("Error reloading updated product", product_id=str(product_id), error=str(e))
                raise StoreError("Could not retrieve product") from e

    async def delete_by_id(self, product_id: str) -> Optional[ProductRead]:
        parsed_id = _parse_id(product_id)
        if parsed_id is None:
            return None
        async with self.session_maker() as db:
            try:
                product = await self._load_expanded(db, parsed_id)
            except SQLAlchemyError as e:
                logger.error("Error loading product for delete", product_id=str(product_id), error=str(e))
                raise StoreError("Could not retrieve product") from e
            if product is None:
                return None
            deleted = self._to_read(product)
            await self.delete(db, db_obj=product)
            return deleted
