from typing import Any, Dict, List

from shared.core.config import settings
from ...schemas.pos_import.pos_import_schemas import PosMenuItemRecord
from .base import PosAdapter, cents_to_amount


class CloverAdapter(PosAdapter):
    vendor = "Clover"
    required_credentials = ("accessToken", "merchantId")

    def _headers(self, access_token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    def fetch_menu_items(self, credentials):
        credentials = self.check_credentials(credentials)

        body = self.request(
            "GET",
            f"{settings.CLOVER_API_URL}/v3/merchants/{credentials['merchantId']}/items",
            headers=self._headers(credentials["accessToken"]),
            params={"expand": "categories"},
        )
        return self.parse_items((body or {}).get("elements") or [])

    @staticmethod
    def parse_items(elements: List[Dict[str, Any]]) -> List[PosMenuItemRecord]:
        items: List[PosMenuItemRecord] = []
        for item in elements:
            if not item.get("id") or item.get("hidden") or item.get("available") is False:
                continue

            categories = (item.get("categories") or {}).get("elements") or []
            items.append(PosMenuItemRecord(
                external_id=item.get("id"),
                name=item.get("name") or "",
                # Clover keeps the short description in "code"
                description=item.get("code") or "",
                category=categories[0].get("name") if categories else "Uncategorized",
                price=cents_to_amount(item.get("price")),
                is_active=True,
                pos_data={
                    "sku": item.get("sku"),
                    "code": item.get("code"),
                    "price_type": item.get("priceType"),
                    "default_tax_rates": item.get("defaultTaxRates"),
                    "unit_name": item.get("unitName"),
                    "categories": [{"id": c.get("id"), "name": c.get("name")} for c in categories],
                    "modifier_groups": item.get("modifierGroups"),
                },
            ))
        return items

    def verify_connection(self, credentials):
        credentials = credentials or {}
        merchant_id = credentials.get("merchantId")
        response = self.probe(
            "GET",
            f"{settings.CLOVER_API_URL}/v3/merchants/{merchant_id}",
            headers={"Authorization": f"Bearer {credentials.get('accessToken')}"},
        )
        if response is None or response.status_code != 200:
            return False
        try:
            return response.json().get("id") == merchant_id
        except ValueError:
            return False
