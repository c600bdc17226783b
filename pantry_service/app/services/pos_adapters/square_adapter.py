import logging
from typing import Any, Dict, List

from shared.core.config import settings
from shared.core.errors import UpstreamError, ValidationError
from ...schemas.pos_import.pos_import_schemas import PosMenuItemRecord, SquareLocation
from .base import PosAdapter

logger = logging.getLogger(__name__)

# category id present but absent from the catalog search
UNMAPPED_CATEGORY = "Needs Category Mapping"


class SquareAdapter(PosAdapter):
    vendor = "Square"
    required_credentials = ("accessToken", "locationId")

    def _headers(self, access_token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
            "Square-Version": settings.SQUARE_API_VERSION,
        }

    def error_message(self, response):
        try:
            errors = response.json().get("errors") or []
        except (ValueError, AttributeError):
            errors = []
        if errors and errors[0].get("detail"):
            return errors[0]["detail"]
        return super().error_message(response)

    def fetch_menu_items(self, credentials):
        credentials = self.check_credentials(credentials)

        body = self.request(
            "POST",
            f"{settings.square_base_url}/v2/catalog/search",
            headers=self._headers(credentials["accessToken"]),
            json={
                "object_types": ["ITEM"],
                "query": {
                    "enabled_location_ids_filter": {
                        "location_ids": [credentials["locationId"]],
                    },
                },
            },
        )

        items = self.parse_items((body or {}).get("objects") or [])
        if any(item.pos_data.get("category_id") for item in items):
            category_names = self.fetch_categories(credentials)
            for item in items:
                category_id = item.pos_data.get("category_id")
                if category_id and category_id in category_names:
                    item.category = category_names[category_id]
        return items

    @staticmethod
    def parse_items(objects: List[Dict[str, Any]]) -> List[PosMenuItemRecord]:
        items: List[PosMenuItemRecord] = []
        for obj in objects:
            item_data = obj.get("item_data")
            if obj.get("type") != "ITEM" or not item_data or not obj.get("id"):
                continue

            variations = item_data.get("variations") or []
            price = 0.0
            if variations:
                price_money = (variations[0].get("item_variation_data") or {}).get("price_money")
                if price_money:
                    price = (price_money.get("amount") or 0) / 100

            category_id = item_data.get("category_id")
            items.append(PosMenuItemRecord(
                external_id=obj.get("id"),
                name=item_data.get("name") or "",
                description=item_data.get("description") or "",
                category=UNMAPPED_CATEGORY if category_id else "Uncategorized",
                price=price,
                is_active=not item_data.get("is_deleted") and item_data.get("available_online") is not False,
                pos_data={
                    "category_id": category_id,
                    "variations": [
                        {
                            "id": v.get("id"),
                            "name": (v.get("item_variation_data") or {}).get("name"),
                            "price": (((v.get("item_variation_data") or {}).get("price_money") or {}).get("amount") or 0) / 100,
                        }
                        for v in variations
                    ],
                    "image_ids": item_data.get("image_ids"),
                    "modifier_list_info": item_data.get("modifier_list_info"),
                },
            ))
        return items

    def fetch_categories(self, credentials: Dict[str, Any]) -> Dict[str, str]:
        """Category id -> name. A failed lookup leaves categories unmapped."""
        try:
            body = self.request(
                "POST",
                f"{settings.square_base_url}/v2/catalog/search",
                action="fetch Square categories",
                headers=self._headers(credentials["accessToken"]),
                json={"object_types": ["CATEGORY"]},
            )
        except UpstreamError as e:
            logger.warning("Square category lookup failed, categories left unmapped: %s", e.message)
            return {}

        return {
            obj["id"]: obj["category_data"].get("name")
            for obj in (body or {}).get("objects") or []
            if obj.get("type") == "CATEGORY" and (obj.get("category_data") or {}).get("name")
        }

    def get_locations(self, access_token: str) -> List[SquareLocation]:
        if not access_token:
            raise ValidationError("Access token is required")

        body = self.request(
            "GET",
            f"{settings.square_base_url}/v2/locations",
            action="fetch Square locations",
            headers=self._headers(access_token),
        )
        return [
            SquareLocation(
                id=location.get("id"),
                name=location.get("name"),
                address=location.get("address"),
                status=location.get("status"),
            )
            for location in (body or {}).get("locations") or []
        ]

    def verify_connection(self, credentials):
        credentials = credentials or {}
        response = self.probe(
            "GET",
            f"{settings.square_base_url}/v2/locations",
            headers=self._headers(credentials.get("accessToken")),
        )
        if response is None or response.status_code != 200:
            return False
        try:
            return len(response.json().get("locations") or []) > 0
        except ValueError:
            return False
