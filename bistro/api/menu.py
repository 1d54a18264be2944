"""
Menu API router
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from bistro.api.deps import get_catalog_service, require_admin
from bistro.models import FoodType, MenuCategory, User
from bistro.schemas import (
    MenuItemCreate,
    MenuItemEnvelope,
    MenuItemListResponse,
    MenuItemResponse,
    MenuItemUpdate,
    MessageResponse,
)
from bistro.services import CatalogService

router = APIRouter(prefix="/api/menu", tags=["Menu"])


def _list_response(items) -> MenuItemListResponse:
    return MenuItemListResponse(
        count=len(items),
        data=[MenuItemResponse.model_validate(item) for item in items],
    )


@router.get("", response_model=MenuItemListResponse)
async def list_menu_items(
    category: Optional[MenuCategory] = Query(None),
    type: Optional[FoodType] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    service: CatalogService = Depends(get_catalog_service),
) -> MenuItemListResponse:
    """Browse the menu with optional category, type and text filters."""
    items = await service.list_items(category=category, food_type=type, search=search)
    return _list_response(items)


@router.get("/type/{food_type}", response_model=MenuItemListResponse)
async def list_menu_by_type(
    food_type: str,
    service: CatalogService = Depends(get_catalog_service),
) -> MenuItemListResponse:
    """Available items that are veg or non-veg."""
    items = await service.list_by_type(food_type)
    return _list_response(items)


@router.get("/{item_id}", response_model=MenuItemEnvelope)
async def get_menu_item(
    item_id: int,
    service: CatalogService = Depends(get_catalog_service),
) -> MenuItemEnvelope:
    item = await service.get_item(item_id)
    return MenuItemEnvelope(data=MenuItemResponse.model_validate(item))


@router.post("", response_model=MenuItemEnvelope, status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    payload: MenuItemCreate,
    admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
) -> MenuItemEnvelope:
    item = await service.create_item(payload)
    return MenuItemEnvelope(
        message="Menu item created successfully",
        data=MenuItemResponse.model_validate(item),
    )


@router.put("/{item_id}", response_model=MenuItemEnvelope)
async def update_menu_item(
    item_id: int,
    payload: MenuItemUpdate,
    admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
) -> MenuItemEnvelope:
    item = await service.update_item(item_id, payload)
    return MenuItemEnvelope(
        message="Menu item updated successfully",
        data=MenuItemResponse.model_validate(item),
    )


@router.delete("/{item_id}", response_model=MessageResponse)
async def delete_menu_item(
    item_id: int,
    admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
) -> MessageResponse:
    await service.delete_item(item_id)
    return MessageResponse(message="Menu item deleted successfully")


@router.patch("/{item_id}/availability", response_model=MenuItemEnvelope)
async def toggle_menu_item_availability(
    item_id: int,
    admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
) -> MenuItemEnvelope:
    item = await service.toggle_availability(item_id)
    state = "enabled" if item.is_available else "disabled"
    return MenuItemEnvelope(
        message=f"Menu item {state} successfully",
        data=MenuItemResponse.model_validate(item),
    )
