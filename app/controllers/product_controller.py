from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query, Request, status
from app.core.exceptions import RequestValidationFault
from app.core.security import Identity, TokenVerifier
from app.models.product import ProductRead
from app.schemas.product_schemas import ProductPayload
from app.schemas.response_schemas import APIResponse, ErrorResponse
from app.services.product_service import ProductService
import structlog

logger = structlog.get_logger()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}

PRODUCT_BODY = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": ProductPayload.model_json_schema()}},
    }
}


async def _json_body(request: Request) -> Any:
    # Read in the handler so the identity dependency has already run
    try:
        return await request.json()
    except ValueError as e:
        raise RequestValidationFault(
            "Malformed request",
            details=[{"field": "body", "message": "Request body must be valid JSON"}],
        ) from e


def build_product_router(product_service: ProductService, token_verifier: TokenVerifier) -> APIRouter:
    """Product routes bound to the given service and token verifier."""
    router = APIRouter(prefix="/products", tags=["Products"], responses=ERROR_RESPONSES)
    current_identity = Depends(token_verifier.require_identity)

    @router.get("/", response_model=APIResponse[List[ProductRead]])
    async def list_products(
        offset: Optional[int] = Query(default=None),
        limit: Optional[int] = Query(default=None),
        identity: Identity = current_identity,
    ):
        logger.info("Get all products")
        products = await product_service.list_products(identity, offset=offset, limit=limit)
        return APIResponse(payload=products)

    # Declared before /{product_id} so "search" is not taken as an id
    @router.get("/search/{term}", response_model=APIResponse[List[ProductRead]])
    async def search_products(term: str, identity: Identity = current_identity):
        logger.info("Find products by name")
        products = await product_service.search_products(identity, term)
        return APIResponse(payload=products)

    @router.get("/{product_id}", response_model=APIResponse[ProductRead])
    async def get_product(product_id: str, identity: Identity = current_identity):
        logger.info("Get single product")
        product = await product_service.get_product(identity, product_id)
        return APIResponse(payload=product)

    @router.post(
        "/",
        response_model=APIResponse[ProductRead],
        status_code=status.HTTP_201_CREATED,
        openapi_extra=PRODUCT_BODY,
    )
    async def create_product(request: Request, identity: Identity = current_identity):
        logger.info("Post a new product")
        body = await _json_body(request)
        product = await product_service.create_product(identity, body)
        return APIResponse(payload=product)

    @router.put("/{product_id}", response_model=APIResponse[ProductRead], openapi_extra=PRODUCT_BODY)
    async def update_product(product_id: str, request: Request, identity: Identity = current_identity):
        logger.info("Update product")
        body = await _json_body(request)
        product = await product_service.update_product(identity, product_id, body)
        return APIResponse(payload=product)

    @router.delete("/{product_id}", response_model=APIResponse[ProductRead])
    async def delete_product(product_id: str, identity: Identity = current_identity):
        logger.info("Delete product")
        product = await product_service.delete_product(identity, product_id)
        return APIResponse(payload=product)

    return router
