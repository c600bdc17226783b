# app/crud/recipes_crud.py
from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload
from ...models.menu.recipe_ingredients import RecipeIngredient
from ...schemas.menu.recipes_schemas import RecipeIngredientIn


def get_recipe_ingredients(db: Session, menu_item_id: UUID) -> List[RecipeIngredient]:
    return db.query(RecipeIngredient).options(
        joinedload(RecipeIngredient.ingredient)
    ).filter(
        RecipeIngredient.menu_item_id == menu_item_id
    ).order_by(RecipeIngredient.created_at.asc()).all()


def get_recipe_ingredient_by_id(db: Session, recipe_ingredient_id: UUID) -> Optional[RecipeIngredient]:
    return db.query(RecipeIngredient).filter(RecipeIngredient.id == recipe_ingredient_id).first()


def get_recipe_ingredient_by_ingredient(db: Session, menu_item_id: UUID, ingredient_id: UUID) -> Optional[RecipeIngredient]:
    return db.query(RecipeIngredient).filter(
        RecipeIngredient.menu_item_id == menu_item_id,
        RecipeIngredient.ingredient_id == ingredient_id
    ).first()


def _new_recipe_ingredient(menu_item_id: UUID, line: RecipeIngredientIn) -> RecipeIngredient:
    return RecipeIngredient(
        menu_item_id=menu_item_id,
        ingredient_id=line.ingredient_id,
        quantity=line.quantity,
        unit=line.unit,
        prep_loss_factor=line.prep_loss_factor or 0
    )


def replace_recipe(db: Session, menu_item_id: UUID, lines: List[RecipeIngredientIn]) -> List[RecipeIngredient]:
    # delete + insert in one transaction so a failed insert keeps the old recipe
    try:
        db.query(RecipeIngredient).filter(
            RecipeIngredient.menu_item_id == menu_item_id
        ).delete(synchronize_session=False)
        db.add_all([_new_recipe_ingredient(menu_item_id, line) for line in lines])
        db.commit()
    except Exception:
        db.rollback()
        raise
    return get_recipe_ingredients(db, menu_item_id)


def add_recipe_ingredient(db: Session, menu_item_id: UUID, line: RecipeIngredientIn) -> RecipeIngredient:
    db_line = _new_recipe_ingredient(menu_item_id, line)
    db.add(db_line)
    db.commit()
    db.refresh(db_line)
    return db_line


def update_recipe_ingredient(db: Session, recipe_ingredient_id: UUID, data: Dict[str, Any]) -> Optional[RecipeIngredient]:
    db_line = get_recipe_ingredient_by_id(db, recipe_ingredient_id)
    if not db_line:
        return None

    for k, v in data.items():
        setattr(db_line, k, v)

    db.commit()
    db.refresh(db_line)
    return db_line


def delete_recipe_ingredient(db: Session, recipe_ingredient_id: UUID) -> bool:
    db_line = get_recipe_ingredient_by_id(db, recipe_ingredient_id)
    if not db_line:
        return False

    db.delete(db_line)
    db.commit()
    return True


def get_recipes_for_menu_items(db: Session, menu_item_ids: List[UUID]) -> List[RecipeIngredient]:
    if not menu_item_ids:
        return []
    return db.query(RecipeIngredient).options(
        joinedload(RecipeIngredient.ingredient)
    ).filter(RecipeIngredient.menu_item_id.in_(menu_item_ids)).all()
