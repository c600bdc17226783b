import uuid

import pytest

from pantry_service.app.schemas.menu.menu_items_schemas import MenuItemCreate
from pantry_service.app.schemas.menu.recipes_schemas import RecipeIngredientIn
from pantry_service.app.services.menu_item_service import MenuItemService
from pantry_service.app.services.recipe_service import RecipeService
from shared.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError


@pytest.fixture
def burger(store, restaurant):
    return MenuItemService(store).create_menu_item(
        restaurant.id, MenuItemCreate(name="Burger", category="Entrees", price=12))


@pytest.fixture
def beef_id(store, restaurant):
    ingredient_id = uuid.uuid4()
    store.ingredient_names[ingredient_id] = "Ground Beef"
    store.add_inventory(restaurant.id, ingredient_id, quantity=10, cost_per_unit=0.5)
    return ingredient_id


def ingredient(ingredient_id=None, quantity=8.0, unit="oz", prep_loss_factor=0):
    return RecipeIngredientIn(
        ingredient_id=ingredient_id or uuid.uuid4(), quantity=quantity, unit=unit,
        prep_loss_factor=prep_loss_factor)


def test_save_recipe_replaces_existing_lines(store, burger, beef_id):
    service = RecipeService(store)
    service.save_recipe(burger.id, [ingredient(beef_id), ingredient()])
    saved = service.save_recipe(burger.id, [ingredient(beef_id, quantity=6)])

    recipe = service.get_recipe(burger.id)
    assert recipe.ingredient_count == 1
    assert saved[0].quantity == 6


@pytest.mark.parametrize("bad_line, message", [
    (RecipeIngredientIn(quantity=1, unit="oz"), "ingredient_id"),
    (RecipeIngredientIn(ingredient_id=uuid.uuid4(), quantity=0, unit="oz"), "quantity"),
    (RecipeIngredientIn(ingredient_id=uuid.uuid4(), quantity=1, unit=""), "unit"),
    (RecipeIngredientIn(ingredient_id=uuid.uuid4(), quantity=1, unit="oz", prep_loss_factor=120), "Prep loss"),
])
def test_save_recipe_rejects_invalid_lines(store, burger, bad_line, message):
    with pytest.raises(ValidationError) as exc:
        RecipeService(store).save_recipe(burger.id, [bad_line])
    assert message in exc.value.message


def test_save_recipe_requires_ingredients(store, burger):
    with pytest.raises(ValidationError):
        RecipeService(store).save_recipe(burger.id, [])


def test_save_recipe_rejects_duplicate_ingredient(store, burger, beef_id):
    with pytest.raises(ConflictError):
        RecipeService(store).save_recipe(burger.id, [ingredient(beef_id), ingredient(beef_id)])


def test_add_ingredient_twice_conflicts(store, burger, beef_id):
    service = RecipeService(store)
    service.add_ingredient(burger.id, ingredient(beef_id))

    with pytest.raises(ConflictError) as exc:
        service.add_ingredient(burger.id, ingredient(beef_id))
    assert exc.value.message == "Ingredient already exists in this recipe"


def test_update_ingredient_validates_and_applies(store, burger, beef_id):
    service = RecipeService(store)
    line = service.add_ingredient(burger.id, ingredient(beef_id))

    updated = service.update_ingredient(line.id, {"quantity": 5, "prep_loss_factor": 10})
    assert updated.quantity == 5
    assert updated.prep_loss_factor == 10

    with pytest.raises(ValidationError):
        service.update_ingredient(line.id, {"quantity": -1})
    with pytest.raises(ValidationError):
        service.update_ingredient(line.id, {"unit": "  "})
    with pytest.raises(NotFoundError):
        service.update_ingredient(uuid.uuid4(), {"quantity": 1})


def test_remove_missing_ingredient(store):
    with pytest.raises(NotFoundError):
        RecipeService(store).remove_ingredient(uuid.uuid4())


def test_compute_recipe_cost_uses_inventory(store, restaurant, burger, beef_id):
    service = RecipeService(store)
    service.add_ingredient(burger.id, ingredient(beef_id, quantity=8, prep_loss_factor=5))

    breakdown = service.compute_recipe_cost(burger.id, restaurant.id)

    assert breakdown.total_cost == pytest.approx(4.2)
    assert breakdown.food_cost_percent == pytest.approx(35.0)
    assert breakdown.gross_profit == pytest.approx(7.8)


def test_compute_recipe_cost_for_other_restaurant(store, burger):
    with pytest.raises(NotFoundError):
        RecipeService(store).compute_recipe_cost(burger.id, uuid.uuid4())


def test_validate_recipe(store, restaurant, burger, beef_id):
    service = RecipeService(store)

    empty = service.validate_recipe(burger.id, restaurant.id)
    assert empty.is_valid is False
    assert empty.has_recipe is False
    assert empty.errors == ["No recipe defined"]

    cheese_id = uuid.uuid4()
    store.ingredient_names[cheese_id] = "Cheddar"
    bun_id = uuid.uuid4()
    store.ingredient_names[bun_id] = "Bun"
    store.add_inventory(restaurant.id, bun_id, quantity=0, cost_per_unit=0.3)
    service.save_recipe(burger.id, [ingredient(beef_id), ingredient(cheese_id), ingredient(bun_id, unit="each")])

    result = service.validate_recipe(burger.id, restaurant.id)
    assert result.is_valid is False
    assert result.has_recipe is True
    assert result.all_in_stock is False
    assert result.errors == ["Cheddar does not exist in inventory"]
    assert result.warnings == ["Bun is out of stock"]


def test_calculate_ingredient_deductions(store, burger, beef_id):
    service = RecipeService(store)

    with pytest.raises(ValidationError):
        service.calculate_ingredient_deductions(burger.id, 0)
    with pytest.raises(NotFoundError) as exc:
        service.calculate_ingredient_deductions(burger.id, 2)
    assert exc.value.message == "No recipe found for this menu item"

    service.add_ingredient(burger.id, ingredient(beef_id, quantity=4, prep_loss_factor=25))
    result = service.calculate_ingredient_deductions(burger.id, 2)
    assert result.deductions[0].quantity == 10
    assert result.quantity_sold == 2


def test_menu_item_service_create_requires_name_and_category(store, restaurant):
    with pytest.raises(ValidationError):
        MenuItemService(store).create_menu_item(restaurant.id, MenuItemCreate(name="Soup"))


def test_menu_item_detail_includes_costs(store, restaurant, burger, beef_id):
    RecipeService(store).add_ingredient(burger.id, ingredient(beef_id, quantity=8))

    detail = MenuItemService(store).get_menu_item(burger.id, restaurant.id)

    assert detail.recipe_cost == 4.0
    assert detail.gross_profit == 8.0
    assert detail.recipe[0].ingredient_name == "Ground Beef"


def test_menu_item_ownership(store, restaurant, burger):
    service = MenuItemService(store)
    with pytest.raises(ForbiddenError):
        service.get_menu_item(burger.id, uuid.uuid4())
    with pytest.raises(NotFoundError):
        service.get_menu_item(uuid.uuid4(), restaurant.id)


def test_soft_delete_hides_item_from_listing(store, restaurant, burger):
    service = MenuItemService(store)
    service.delete_menu_item(burger.id, restaurant.id)

    assert service.list_menu_items(restaurant.id) == []
    assert [i.name for i in service.list_menu_items(restaurant.id, is_active=False)] == ["Burger"]
    assert store.get_menu_item(burger.id) is not None
