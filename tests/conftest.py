import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret"

import time
import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.core.config import settings
from shared.core.database import Base, get_db
from pantry_service.app.main import app
from pantry_service.app.models.inventory.restaurant_inventory import RestaurantInventory
from pantry_service.app.models.menu.ingredient_library import IngredientLibrary
from pantry_service.app.models.menu.menu_items import MenuItem
from pantry_service.app.models.restaurants.restaurants import Restaurant
from pantry_service.app.schemas.menu.menu_items_schemas import MenuItemOut
from pantry_service.app.schemas.menu.recipes_schemas import InventoryRecordOut, RecipeLineOut
from pantry_service.app.schemas.pos_import.pos_import_schemas import PosMenuItemRecord
from pantry_service.app.schemas.restaurants.restaurants_schemas import RestaurantOut


class FakeKitchenStore:
    """In-memory KitchenStore used by the service tests."""

    def __init__(self):
        self.restaurants = {}
        self.menu_items = {}
        self.recipe_lines = {}
        self.inventory = {}
        self.ingredient_names = {}
        self.fail_on_names = set()
        self.writes = []

    # restaurants
    def add_restaurant(self, pos_integration_data=None, pos_system=None):
        restaurant = RestaurantOut(
            id=uuid.uuid4(), business_id=uuid.uuid4(), name="Test Kitchen",
            pos_system=pos_system, pos_integration_data=pos_integration_data)
        self.restaurants[restaurant.id] = restaurant
        return restaurant

    def get_restaurant(self, restaurant_id):
        return self.restaurants.get(restaurant_id)

    def get_restaurant_by_business(self, business_id):
        return next((r for r in self.restaurants.values() if r.business_id == business_id), None)

    def save_pos_credentials(self, restaurant_id, pos_system, credentials):
        restaurant = self.restaurants.get(restaurant_id)
        if not restaurant:
            return None
        restaurant = restaurant.model_copy(update={"pos_system": pos_system, "pos_integration_data": credentials})
        self.restaurants[restaurant_id] = restaurant
        return restaurant

    # menu items
    def list_menu_items(self, restaurant_id, category=None, is_active=None):
        wanted = True if is_active is None else is_active
        items = [
            i for i in self.menu_items.values()
            if i.restaurant_id == restaurant_id and i.is_active == wanted
            and (not category or i.category == category)
        ]
        return sorted(items, key=lambda i: i.name)

    def get_menu_item(self, menu_item_id):
        return self.menu_items.get(menu_item_id)

    def get_pos_linked_items(self, restaurant_id, pos_system):
        return [
            i for i in self.menu_items.values()
            if i.restaurant_id == restaurant_id and i.pos_system == pos_system and i.external_pos_id
        ]

    def create_menu_item(self, restaurant_id, fields):
        if fields.get("name") in self.fail_on_names:
            raise RuntimeError(f"insert failed for {fields['name']}")
        item = MenuItemOut(id=uuid.uuid4(), restaurant_id=restaurant_id, **fields)
        self.menu_items[item.id] = item
        self.writes.append(("create", item.id, fields))
        return item

    def update_menu_item(self, menu_item_id, fields):
        item = self.menu_items.get(menu_item_id)
        if not item:
            return None
        if item.name in self.fail_on_names or fields.get("name") in self.fail_on_names:
            raise RuntimeError(f"update failed for {item.name}")
        item = item.model_copy(update=fields)
        self.menu_items[menu_item_id] = item
        self.writes.append(("update", menu_item_id, fields))
        return item

    def get_menu_categories(self, restaurant_id):
        return sorted({i.category for i in self.list_menu_items(restaurant_id) if i.category})

    # recipes
    def _line(self, menu_item_id, line, line_id=None):
        return RecipeLineOut(
            id=line_id or uuid.uuid4(),
            menu_item_id=menu_item_id,
            ingredient_id=line.ingredient_id,
            ingredient_name=self.ingredient_names.get(line.ingredient_id, "Unknown"),
            quantity=line.quantity,
            unit=line.unit,
            prep_loss_factor=line.prep_loss_factor or 0,
        )

    def get_recipe_lines(self, menu_item_id):
        return [l for l in self.recipe_lines.values() if l.menu_item_id == menu_item_id]

    def find_recipe_line(self, menu_item_id, ingredient_id):
        return next((l for l in self.get_recipe_lines(menu_item_id) if l.ingredient_id == ingredient_id), None)

    def get_recipe_line(self, recipe_ingredient_id):
        return self.recipe_lines.get(recipe_ingredient_id)

    def replace_recipe(self, menu_item_id, lines):
        for line in self.get_recipe_lines(menu_item_id):
            del self.recipe_lines[line.id]
        for line in lines:
            self.add_recipe_line(menu_item_id, line)
        return self.get_recipe_lines(menu_item_id)

    def add_recipe_line(self, menu_item_id, line):
        out = self._line(menu_item_id, line)
        self.recipe_lines[out.id] = out
        return out

    def update_recipe_line(self, recipe_ingredient_id, fields):
        line = self.recipe_lines.get(recipe_ingredient_id)
        if not line:
            return None
        line = line.model_copy(update=fields)
        self.recipe_lines[recipe_ingredient_id] = line
        return line

    def delete_recipe_line(self, recipe_ingredient_id):
        return self.recipe_lines.pop(recipe_ingredient_id, None) is not None

    # inventory
    def add_inventory(self, restaurant_id, ingredient_id, quantity, cost_per_unit, minimum_quantity=0):
        self.inventory[(restaurant_id, ingredient_id)] = InventoryRecordOut(
            ingredient_id=ingredient_id, quantity=quantity,
            minimum_quantity=minimum_quantity, cost_per_unit=cost_per_unit)

    def get_inventory_records(self, restaurant_id, ingredient_ids=None):
        wanted = None if ingredient_ids is None else set(ingredient_ids)
        return [
            record for (rid, iid), record in self.inventory.items()
            if rid == restaurant_id and (wanted is None or iid in wanted)
        ]


@pytest.fixture
def store():
    return FakeKitchenStore()


@pytest.fixture
def restaurant(store):
    return store.add_restaurant()


@pytest.fixture
def make_local_item():
    restaurant_id = uuid.uuid4()

    def _make(external_id, name, category="Entrees", price=10.0, is_active=True, pos_system="toast"):
        return MenuItemOut(
            id=uuid.uuid4(), restaurant_id=restaurant_id, name=name, category=category,
            price=price, pos_system=pos_system, external_pos_id=external_id, is_active=is_active)
    return _make


@pytest.fixture
def make_pos_item():
    def _make(external_id, name, category="Entrees", price=10.0, is_active=True):
        return PosMenuItemRecord(
            external_id=external_id, name=name, category=category, price=price, is_active=is_active)
    return _make


# --- database / HTTP fixtures ---

@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_restaurant(db_session):
    restaurant = Restaurant(business_id=uuid.uuid4(), name="Test Kitchen")
    db_session.add(restaurant)
    db_session.commit()
    db_session.refresh(restaurant)
    return restaurant


@pytest.fixture
def seed(db_session, db_restaurant):
    """Helpers that insert catalog, inventory and menu rows for ``db_restaurant``."""

    class Seeder:
        def ingredient(self, name, category="produce", unit="lbs"):
            ingredient = IngredientLibrary(name=name, category=category, unit=unit)
            db_session.add(ingredient)
            db_session.commit()
            return ingredient

        def inventory(self, ingredient, quantity, cost_per_unit, minimum_quantity=0, expiration_date=None,
                      restaurant=None):
            record = RestaurantInventory(
                restaurant_id=(restaurant or db_restaurant).id,
                ingredient_id=ingredient.id,
                quantity=Decimal(str(quantity)),
                minimum_quantity=Decimal(str(minimum_quantity)),
                cost_per_unit=Decimal(str(cost_per_unit)),
                unit=ingredient.unit,
                expiration_date=expiration_date,
            )
            db_session.add(record)
            db_session.commit()
            return record

        def menu_item(self, name, category="Entrees", price=10, is_active=True, restaurant=None,
                      pos_system=None, external_pos_id=None):
            item = MenuItem(
                restaurant_id=(restaurant or db_restaurant).id,
                name=name,
                category=category,
                price=Decimal(str(price)),
                is_active=is_active,
                pos_system=pos_system,
                external_pos_id=external_pos_id,
            )
            db_session.add(item)
            db_session.commit()
            db_session.refresh(item)
            return item

        def restaurant(self, name="Other Kitchen"):
            other = Restaurant(business_id=uuid.uuid4(), name=name)
            db_session.add(other)
            db_session.commit()
            db_session.refresh(other)
            return other

    return Seeder()


def make_token(business_id, expires_in=3600):
    payload = {
        "user_id": "user-1",
        "business_id": str(business_id),
        "name": "Chef",
        "role": "manager",
        "exp": int(time.time()) + expires_in,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def client(db_session):
    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(db_restaurant):
    return {"Authorization": f"Bearer {make_token(db_restaurant.business_id)}"}


@pytest.fixture
def token_factory():
    return make_token
