"""Items router for CRUD operations on items.

Items are arbitrary JSON documents. Any JSON value is accepted as a request
body and stored unchanged.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Path, Response, status

from ..dependencies import ItemServiceDep
from ..schemas.item_schemas import ItemResponse

router = APIRouter(
    prefix="/api/items",
    tags=["items"],
    responses={
        400: {"description": "Bad request"},
        404: {"description": "Not found"},
        500: {"description": "Internal server error"},
    },
)

ItemId = Annotated[int, Path(gt=0, description="Item ID")]
ItemBody = Annotated[Any, Body(description="Any JSON value")]


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create item",
    description="Store any JSON document as a new item",
)
async def create_item(
    data: ItemBody,
    item_service: ItemServiceDep,
) -> ItemResponse:
    """Create a new item.

    Example:
        POST /api/items
        {"name": "chair", "legs": 4}

        Response (201):
        {"id": 1, "data": {"name": "chair", "legs": 4}, "created_at": "...", "updated_at": null}
    """
    return await item_service.create_item(data)


@router.get(
    "",
    response_model=list[ItemResponse],
    summary="List items",
    description="Get every item in id order",
)
async def list_items(item_service: ItemServiceDep) -> list[ItemResponse]:
    return await item_service.list_items()


@router.get(
    "/{item_id}",
    response_model=ItemResponse,
    summary="Get item",
)
async def get_item(
    item_id: ItemId,
    item_service: ItemServiceDep,
) -> ItemResponse:
    return await item_service.get_item(item_id)


@router.put(
    "/{item_id}",
    response_model=ItemResponse,
    summary="Replace item",
    description="Replace the whole document stored under an item ID",
)
async def replace_item(
    item_id: ItemId,
    data: ItemBody,
    item_service: ItemServiceDep,
) -> ItemResponse:
    """Replace an item.

    Returns 404 when the item does not exist; PUT never creates.
    """
    return await item_service.replace_item(item_id, data)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete item",
)
async def delete_item(
    item_id: ItemId,
    item_service: ItemServiceDep,
) -> Response:
    await item_service.delete_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
