import pytest
import requests

from pantry_service.app.enum.pos_enum import PosSystem
from pantry_service.app.services.pos_adapters.clover_adapter import CloverAdapter
from pantry_service.app.services.pos_adapters.registry import POS_ADAPTERS, get_pos_adapter
from pantry_service.app.services.pos_adapters.square_adapter import SquareAdapter
from pantry_service.app.services.pos_adapters.toast_adapter import ToastAdapter
from shared.core.errors import UpstreamError, ValidationError


class FakeResponse:
    def __init__(self, status_code=200, body=None, reason="OK"):
        self.status_code = status_code
        self._body = body
        self.reason = reason
        self.text = ""

    def json(self):
        if self._body is None:
            raise ValueError("no body")
        return self._body


@pytest.fixture
def http(monkeypatch):
    """Queue of canned responses served in order; records every request made."""

    class FakeHttp:
        def __init__(self):
            self.responses = []
            self.calls = []

        def __call__(self, method, url, **kwargs):
            self.calls.append((method, url, kwargs))
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response

    fake = FakeHttp()
    monkeypatch.setattr(requests, "request", fake)
    return fake


TOAST_CREDS = {"restaurantGuid": "rest-guid", "accessToken": "tok"}


def test_toast_flattens_visible_items(http):
    http.responses.append(FakeResponse(body=[
        {"groups": [
            {"guid": "g1", "name": "Burgers", "items": [
                {"guid": "t1", "name": "Classic", "price": 1250, "visibility": "VISIBLE"},
                {"guid": "t2", "name": "Secret", "price": 999, "visibility": "HIDDEN"},
            ]},
            {"guid": "g2", "name": None, "items": [
                {"guid": "t3", "name": "Water", "visibility": "ALWAYS"},
            ]},
        ]},
    ]))

    items = ToastAdapter().fetch_menu_items(TOAST_CREDS)

    assert [i.external_id for i in items] == ["t1", "t3"]
    assert items[0].price == 12.5
    assert items[0].category == "Burgers"
    assert items[1].category == "Uncategorized"
    assert items[1].price == 0
    method, url, kwargs = http.calls[0]
    assert method == "GET"
    assert url.endswith("/restaurants/v1/restaurants/rest-guid/menus")
    assert kwargs["headers"]["Toast-Restaurant-External-ID"] == "rest-guid"


def test_toast_requires_credentials(http):
    with pytest.raises(ValidationError) as exc:
        ToastAdapter().fetch_menu_items({"restaurantGuid": "rest-guid"})
    assert exc.value.message == "Toast credentials incomplete: restaurantGuid and accessToken required"
    assert http.calls == []


def test_http_error_becomes_upstream_error(http):
    http.responses.append(FakeResponse(status_code=401, body={"message": "Unauthorized token"}))

    with pytest.raises(UpstreamError) as exc:
        ToastAdapter().fetch_menu_items(TOAST_CREDS)
    assert exc.value.message == "Toast API error (401): Unauthorized token"
    assert exc.value.upstream_status == 401


def test_transport_error_becomes_upstream_error(http):
    http.responses.append(requests.ConnectionError("connection refused"))

    with pytest.raises(UpstreamError) as exc:
        CloverAdapter().fetch_menu_items({"accessToken": "tok", "merchantId": "M1"})
    assert exc.value.message == "Failed to fetch Clover menu: connection refused"


def test_toast_access_token(http):
    http.responses.append(FakeResponse(body={"token": {"accessToken": "machine-token"}}))

    token = ToastAdapter().get_access_token(
        {"clientId": "id", "clientSecret": "secret", "restaurantGuid": "rest-guid"})

    assert token == "machine-token"
    _, url, kwargs = http.calls[0]
    assert url.endswith("/authentication/v1/authentication/login")
    assert kwargs["json"]["userAccessType"] == "TOAST_MACHINE_CLIENT"


def test_square_maps_categories_and_prices(http):
    http.responses.append(FakeResponse(body={"objects": [
        {"type": "ITEM", "id": "s1", "item_data": {
            "name": "Latte", "category_id": "c1",
            "variations": [{"id": "v1", "item_variation_data": {"name": "Small", "price_money": {"amount": 450}}}],
        }},
        {"type": "ITEM", "id": "s2", "item_data": {"name": "Muffin", "available_online": False}},
        {"type": "ITEM", "id": "s3", "item_data": {"name": "Gone", "is_deleted": True, "category_id": "c9"}},
    ]}))
    http.responses.append(FakeResponse(body={"objects": [
        {"type": "CATEGORY", "id": "c1", "category_data": {"name": "Coffee"}},
    ]}))

    items = SquareAdapter().fetch_menu_items({"accessToken": "tok", "locationId": "L1"})

    latte, muffin, gone = items
    assert latte.category == "Coffee"
    assert latte.price == 4.5
    assert latte.is_active is True
    assert muffin.category == "Uncategorized"
    assert muffin.is_active is False
    assert gone.is_active is False
    assert gone.category == "Needs Category Mapping"
    search = http.calls[0][2]["json"]
    assert search["query"]["enabled_location_ids_filter"]["location_ids"] == ["L1"]


def test_square_error_detail(http):
    http.responses.append(FakeResponse(status_code=400, body={"errors": [{"detail": "Bad location"}]}))

    with pytest.raises(UpstreamError) as exc:
        SquareAdapter().fetch_menu_items({"accessToken": "tok", "locationId": "L1"})
    assert exc.value.message == "Square API error (400): Bad location"


def test_square_locations(http):
    http.responses.append(FakeResponse(body={"locations": [{"id": "L1", "name": "Main St", "status": "ACTIVE"}]}))

    locations = SquareAdapter().get_locations("tok")

    assert [(l.id, l.name) for l in locations] == [("L1", "Main St")]


def test_clover_filters_hidden_items(http):
    http.responses.append(FakeResponse(body={"elements": [
        {"id": "c1", "name": "Pizza", "price": 1800, "code": "PZ",
         "categories": {"elements": [{"id": "k1", "name": "Mains"}]}},
        {"id": "c2", "name": "Staff Meal", "price": 0, "hidden": True},
        {"id": "c3", "name": "Seasonal", "price": 500, "available": False},
    ]}))

    items = CloverAdapter().fetch_menu_items({"accessToken": "tok", "merchantId": "M1"})

    assert len(items) == 1
    assert items[0].name == "Pizza"
    assert items[0].category == "Mains"
    assert items[0].price == 18.0
    assert items[0].description == "PZ"
    assert http.calls[0][2]["params"] == {"expand": "categories"}


def test_verify_connection_never_raises(http):
    http.responses.append(requests.Timeout("timed out"))
    http.responses.append(FakeResponse(body={"id": "M1"}))
    http.responses.append(FakeResponse(body={"id": "OTHER"}))
    http.responses.append(FakeResponse(body={"locations": []}))

    clover = CloverAdapter()
    creds = {"accessToken": "tok", "merchantId": "M1"}
    assert clover.verify_connection(creds) is False
    assert clover.verify_connection(creds) is True
    assert clover.verify_connection(creds) is False
    assert SquareAdapter().verify_connection({"accessToken": "tok"}) is False


def test_registry_lookup():
    assert isinstance(get_pos_adapter("Toast"), ToastAdapter)
    assert get_pos_adapter(PosSystem.square) is POS_ADAPTERS[PosSystem.square]
    with pytest.raises(ValidationError):
        get_pos_adapter("lightspeed")


def test_square_nameless_category_stays_unmapped(http):
    http.responses.append(FakeResponse(body={"objects": [
        {"type": "ITEM", "id": "s1", "item_data": {"name": "Scone", "category_id": "c2"}},
    ]}))
    http.responses.append(FakeResponse(body={"objects": [
        {"type": "CATEGORY", "id": "c2", "category_data": {}},
    ]}))

    items = SquareAdapter().fetch_menu_items({"accessToken": "tok", "locationId": "L1"})

    assert items[0].category == "Needs Category Mapping"


def test_toast_machine_client_logs_in_before_fetching(http):
    http.responses.append(FakeResponse(body={"token": {"accessToken": "machine-token"}}))
    http.responses.append(FakeResponse(body=[
        {"groups": [{"guid": "g1", "name": "Mains", "items": [
            {"guid": "t1", "name": "Steak", "price": 2900, "visibility": "VISIBLE"},
        ]}]},
    ]))

    items = ToastAdapter().fetch_menu_items(
        {"clientId": "id", "clientSecret": "secret", "restaurantGuid": "rest-guid"})

    assert [i.name for i in items] == ["Steak"]
    login, menus = http.calls
    assert login[1].endswith("/authentication/v1/authentication/login")
    assert menus[2]["headers"]["Authorization"] == "Bearer machine-token"


def test_toast_failed_login_fails_verification(http):
    http.responses.append(FakeResponse(status_code=401, body={"message": "bad client"}))

    creds = {"clientId": "id", "clientSecret": "wrong", "restaurantGuid": "rest-guid"}
    assert ToastAdapter().verify_connection(creds) is False
    assert len(http.calls) == 1
