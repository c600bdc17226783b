import logging
from typing import Any, Dict, List, Optional

import requests

from shared.core.config import settings
from shared.core.errors import UpstreamError, ValidationError
from ...schemas.pos_import.pos_import_schemas import PosMenuItemRecord

logger = logging.getLogger(__name__)


def cents_to_amount(cents: Any) -> float:
    return cents / 100 if cents else 0.0


class PosAdapter:
    """
    Common plumbing for the POS vendor clients.

    Subclasses turn a vendor menu payload into ``PosMenuItemRecord`` rows.
    HTTP failures surface as ``UpstreamError``; verification never raises.
    """
    vendor: str = "POS"
    required_credentials: tuple = ()

    def fetch_menu_items(self, credentials: Dict[str, Any]) -> List[PosMenuItemRecord]:
        raise NotImplementedError

    def verify_connection(self, credentials: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def check_credentials(self, credentials: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        credentials = credentials or {}
        missing = [key for key in self.required_credentials if not credentials.get(key)]
        if missing:
            raise ValidationError(
                f"{self.vendor} credentials incomplete: {' and '.join(self.required_credentials)} required")
        return credentials

    def error_message(self, response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return body["message"]
        return response.reason or response.text

    def request(self, method: str, url: str, action: Optional[str] = None, **kwargs) -> Any:
        action = action or f"fetch {self.vendor} menu"
        kwargs.setdefault("timeout", settings.POS_HTTP_TIMEOUT)

        try:
            response = requests.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error("%s request to %s failed: %s", self.vendor, url, e)
            raise UpstreamError(f"Failed to {action}: {e}", vendor=self.vendor)

        if response.status_code >= 400:
            message = self.error_message(response)
            logger.error("%s API error (%s) on %s: %s", self.vendor, response.status_code, url, message)
            raise UpstreamError(
                f"{self.vendor} API error ({response.status_code}): {message}",
                vendor=self.vendor,
                upstream_status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"Failed to {action}: invalid response body ({e})", vendor=self.vendor)

    def probe(self, method: str, url: str, **kwargs) -> Optional[requests.Response]:
        """Single request for connection checks; returns None instead of raising."""
        kwargs.setdefault("timeout", settings.POS_HTTP_TIMEOUT)
        try:
            return requests.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.warning("%s connection verification failed: %s", self.vendor, e)
            return None
