import logging
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from shared.core.errors import AppError, NotFoundError, ValidationError
from shared.utils.app_status_code import AppStatusCode
from ..enum.pos_enum import PosSystem
from ..schemas.menu.menu_items_schemas import MenuItemOut
from ..schemas.pos_import.pos_import_schemas import (
    ConnectionStatus,
    ImportOptions,
    ImportResult,
    PosMenuItemRecord,
    PreviewResult,
    SquareLocation,
)
from ..schemas.restaurants.restaurants_schemas import RestaurantOut
from .kitchen_store import KitchenStore
from .menu_reconciliation import apply_import, preview_import
from .pos_adapters.base import PosAdapter
from .pos_adapters.registry import POS_ADAPTERS, get_pos_adapter, resolve_pos_system

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "POS integration not configured for this restaurant"


class StoreMenuItemWriter:
    """Writes reconciliation actions for one restaurant / POS system through the store."""

    def __init__(self, store: KitchenStore, restaurant_id: UUID, pos_system: PosSystem):
        self.store = store
        self.restaurant_id = restaurant_id
        self.pos_system = pos_system

    def create_menu_item(self, fields: Dict[str, Any]) -> MenuItemOut:
        fields = dict(fields, pos_system=self.pos_system.value)
        return self.store.create_menu_item(self.restaurant_id, fields)

    def update_menu_item(self, menu_item_id: UUID, fields: Dict[str, Any]) -> Optional[MenuItemOut]:
        updated = self.store.update_menu_item(menu_item_id, fields)
        if updated is None:
            raise NotFoundError("Menu item not found")
        return updated


class MenuImportService:
    def __init__(self, store: KitchenStore, adapters: Dict[PosSystem, PosAdapter] = None):
        self.store = store
        self.adapters = POS_ADAPTERS if adapters is None else adapters

    def _adapter(self, pos_system: Union[PosSystem, str]) -> PosAdapter:
        return get_pos_adapter(pos_system, self.adapters)

    def _restaurant(self, restaurant_id: UUID) -> RestaurantOut:
        restaurant = self.store.get_restaurant(restaurant_id)
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        return restaurant

    def _configured_restaurant(self, restaurant_id: UUID) -> RestaurantOut:
        restaurant = self._restaurant(restaurant_id)
        if not restaurant.pos_integration_data:
            raise ValidationError(NOT_CONFIGURED, status_code=AppStatusCode.POS_NOT_CONFIGURED)
        return restaurant

    def _fetch(self, restaurant_id: UUID, pos_system: PosSystem):
        adapter = self._adapter(pos_system)
        restaurant = self._configured_restaurant(restaurant_id)

        pos_items: List[PosMenuItemRecord] = adapter.fetch_menu_items(restaurant.pos_integration_data)
        local_items = self.store.get_pos_linked_items(restaurant_id, resolve_pos_system(pos_system).value)
        logger.info("Fetched %d %s menu items for restaurant %s (%d linked locally)",
                    len(pos_items), adapter.vendor, restaurant_id, len(local_items))
        return pos_items, local_items

    def save_credentials(self, restaurant_id: UUID, pos_system: PosSystem, credentials: Dict[str, Any]) -> RestaurantOut:
        self._adapter(pos_system)
        if not credentials:
            raise ValidationError("Credentials are required")

        restaurant = self.store.save_pos_credentials(restaurant_id, resolve_pos_system(pos_system).value, credentials)
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        return restaurant

    def verify_connection(self, restaurant_id: UUID, pos_system: PosSystem) -> ConnectionStatus:
        try:
            adapter = self._adapter(pos_system)
            restaurant = self._restaurant(restaurant_id)
        except AppError as e:
            return ConnectionStatus(connected=False, error=e.message)

        if not restaurant.pos_integration_data:
            return ConnectionStatus(connected=False, error="POS integration not configured")

        connected = adapter.verify_connection(restaurant.pos_integration_data)
        return ConnectionStatus(connected=connected, pos_system=resolve_pos_system(pos_system))

    def preview(self, restaurant_id: UUID, pos_system: PosSystem) -> PreviewResult:
        pos_items, local_items = self._fetch(restaurant_id, pos_system)
        return preview_import(pos_items, local_items)

    def import_menu(self, restaurant_id: UUID, pos_system: PosSystem,
                    options: Optional[ImportOptions] = None) -> ImportResult:
        options = options or ImportOptions()
        pos_items, local_items = self._fetch(restaurant_id, pos_system)

        writer = StoreMenuItemWriter(self.store, restaurant_id, resolve_pos_system(pos_system))
        return apply_import(pos_items, local_items, options, writer)

    def get_square_locations(self, access_token: str) -> List[SquareLocation]:
        return self._adapter(PosSystem.square).get_locations(access_token)
