from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query

from shared.core.auth import validate_current_token
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...core.dependencies import get_current_restaurant_id, get_store
from ...schemas.menu.menu_items_schemas import MenuItemCreate, MenuItemDetailOut, MenuItemOut, MenuItemUpdate
from ...services.kitchen_store import KitchenStore
from ...services.menu_item_service import MenuItemService

router = APIRouter(prefix="/api/menu-items", tags=["Menu Items"], dependencies=[Depends(validate_current_token)])


def get_menu_item_service(store: KitchenStore = Depends(get_store)) -> MenuItemService:
    return MenuItemService(store)


@router.get("/", response_model=List[MenuItemOut])
def list_menu_items(
    category: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None),
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    service: MenuItemService = Depends(get_menu_item_service)
):
    return service.list_menu_items(restaurant_id, category, is_active)


@router.get("/categories", response_model=List[str])
def get_categories(
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    service: MenuItemService = Depends(get_menu_item_service)
):
    return service.get_categories(restaurant_id)


@router.get("/{menu_item_id}", response_model=MenuItemDetailOut)
def get_menu_item(
    menu_item_id: UUID,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    service: MenuItemService = Depends(get_menu_item_service)
):
    """Menu item with its recipe, recipe cost and margins."""
    return service.get_menu_item(menu_item_id, restaurant_id)


@router.post("/", status_code=201)
def create_menu_item(
    data: MenuItemCreate,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    service: MenuItemService = Depends(get_menu_item_service)
):
    menu_item = service.create_menu_item(restaurant_id, data)
    return success_response(
        data=menu_item,
        message="Menu item created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/{menu_item_id}")
def update_menu_item(
    menu_item_id: UUID,
    data: MenuItemUpdate,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    service: MenuItemService = Depends(get_menu_item_service)
):
    menu_item = service.update_menu_item(menu_item_id, restaurant_id, data)
    return success_response(
        data=menu_item,
        message="Menu item updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{menu_item_id}")
def delete_menu_item(
    menu_item_id: UUID,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    service: MenuItemService = Depends(get_menu_item_service)
):
    service.delete_menu_item(menu_item_id, restaurant_id)
    return success_response(
        data=None,
        message="Menu item deleted successfully",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )
