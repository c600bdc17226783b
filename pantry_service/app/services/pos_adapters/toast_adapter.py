import logging
from typing import Any, Dict, List

from shared.core.config import settings
from shared.core.errors import AppError, UpstreamError, ValidationError
from ...schemas.pos_import.pos_import_schemas import PosMenuItemRecord
from .base import PosAdapter, cents_to_amount

logger = logging.getLogger(__name__)

VISIBLE_STATES = ("VISIBLE", "ALWAYS")


class ToastAdapter(PosAdapter):
    vendor = "Toast"
    required_credentials = ("restaurantGuid", "accessToken")

    def _base_url(self, credentials: Dict[str, Any]) -> str:
        return credentials.get("apiUrl") or settings.TOAST_API_URL

    def _headers(self, credentials: Dict[str, Any]) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {credentials.get('accessToken')}",
            "Toast-Restaurant-External-ID": credentials.get("restaurantGuid") or "",
            "Content-Type": "application/json",
        }

    def with_access_token(self, credentials: Dict[str, Any]) -> Dict[str, Any]:
        """Machine-client credentials (clientId / clientSecret) are exchanged for a bearer token."""
        credentials = credentials or {}
        if credentials.get("accessToken") or not (credentials.get("clientId") and credentials.get("clientSecret")):
            return credentials
        return dict(credentials, accessToken=self.get_access_token(credentials))

    def fetch_menu_items(self, credentials):
        credentials = self.check_credentials(self.with_access_token(credentials))
        guid = credentials["restaurantGuid"]

        menus = self.request(
            "GET",
            f"{self._base_url(credentials)}/restaurants/v1/restaurants/{guid}/menus",
            headers=self._headers(credentials),
        )
        return self.parse_menus(menus)

    @staticmethod
    def parse_menus(menus: Any) -> List[PosMenuItemRecord]:
        """Flatten menus > groups > items, keeping visible items only."""
        items: List[PosMenuItemRecord] = []
        if not isinstance(menus, list):
            return items

        for menu in menus:
            for group in menu.get("groups") or []:
                for item in group.get("items") or []:
                    visibility = item.get("visibility")
                    if visibility not in VISIBLE_STATES or not item.get("guid"):
                        continue
                    items.append(PosMenuItemRecord(
                        external_id=item.get("guid"),
                        name=item.get("name") or "",
                        description=item.get("description") or "",
                        category=group.get("name") or "Uncategorized",
                        price=cents_to_amount(item.get("price")),
                        is_active=True,
                        pos_data={
                            "sku": item.get("sku"),
                            "plu": item.get("plu"),
                            "visibility": visibility,
                            "group_guid": group.get("guid"),
                            "group_name": group.get("name"),
                        },
                    ))
        return items

    def get_access_token(self, credentials: Dict[str, Any]) -> str:
        """Machine-client login; returns a bearer token for the menu API."""
        credentials = credentials or {}
        client_id = credentials.get("clientId")
        client_secret = credentials.get("clientSecret")
        guid = credentials.get("restaurantGuid")
        if not client_id or not client_secret or not guid:
            raise ValidationError("Toast OAuth credentials incomplete")

        body = self.request(
            "POST",
            f"{settings.TOAST_AUTH_URL}/authentication/v1/authentication/login",
            action="authenticate with Toast",
            json={
                "clientId": client_id,
                "clientSecret": client_secret,
                "userAccessType": "TOAST_MACHINE_CLIENT",
            },
            headers={
                "Content-Type": "application/json",
                "Toast-Restaurant-External-ID": guid,
            },
        )
        token = (body or {}).get("token") or {}
        if not token.get("accessToken"):
            raise UpstreamError("Failed to authenticate with Toast: no access token returned", vendor=self.vendor)
        return token["accessToken"]

    def verify_connection(self, credentials):
        try:
            credentials = self.with_access_token(credentials)
        except AppError as e:
            logger.warning("Toast login failed during verification: %s", e.message)
            return False
        guid = credentials.get("restaurantGuid")
        response = self.probe(
            "GET",
            f"{self._base_url(credentials)}/restaurants/v1/restaurants/{guid}",
            headers=self._headers(credentials),
        )
        if response is None:
            return False
        if response.status_code != 200:
            logger.warning("Toast connection verification returned %s", response.status_code)
        return response.status_code == 200
