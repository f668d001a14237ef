"""Recipes CRUD API router.

Endpoints:
- GET /api/recipes - List the user's recipes with cooking stats
- POST /api/recipes - Create recipe with ingredients and steps
- GET /api/recipes/{id} - Get recipe, scaled to ?servings=
- DELETE /api/recipes/{id} - Delete recipe (owner only)
- GET /api/recipes/{id}/steps - Cooking-mode steps
- GET /api/recipes/{id}/logs - The user's cooking logs for a recipe
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, selectinload

from .. import schemas
from ..deps import get_db, parse_positive_id, require_user_id
from ..errors import AuthorizationDenied, NotFound
from ..models import CookingLog, Recipe, RecipeIngredient, RecipeStep
from ..services import stats

router = APIRouter()
logger = logging.getLogger("cooklog.recipes")


def _get_recipe(db: Session, raw_id: str) -> Recipe:
    recipe_id = parse_positive_id(raw_id, "recipe_id")
    recipe = db.get(Recipe, recipe_id)
    if not recipe:
        raise NotFound("Recipe does not exist.")
    return recipe


def _latest_log_out(log: Optional[CookingLog]) -> Optional[schemas.LatestLogOut]:
    return schemas.LatestLogOut.model_validate(log) if log else None


@router.get("/recipes", response_model=schemas.RecipeListResponse)
def list_recipes(user_id: int = Depends(require_user_id), db: Session = Depends(get_db)):
    recipes = (
        db.query(Recipe)
        .options(selectinload(Recipe.cooking_logs))
        .filter(Recipe.user_id == user_id)
        .order_by(Recipe.created_at.desc(), Recipe.recipe_id.desc())
        .all()
    )
    statuses = [s for (s,) in db.query(CookingLog.status).filter(CookingLog.user_id == user_id).all()]

    data = [
        schemas.RecipeListItemOut(
            recipe_id=r.recipe_id,
            title=r.title,
            thumbnail_url=r.thumbnail_url,
            difficulty=r.difficulty,
            servings=r.servings,
            created_at=r.created_at,
            latest_log=_latest_log_out(stats.latest_log(r.cooking_logs)),
        )
        for r in recipes
    ]
    return {
        "success": True,
        "stats": {
            "total_cooking_count": len(statuses),
            "overall_success_rate": stats.success_rate(statuses),
        },
        "data": data,
    }


@router.post(
    "/recipes",
    response_model=schemas.MessageDataResponse[schemas.RecipeCreatedOut],
    status_code=status.HTTP_201_CREATED,
)
def create_recipe(
    recipe_in: schemas.RecipeCreate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Recipe, ingredients and steps are written in one transaction."""
    recipe = Recipe(
        user_id=user_id,
        title=recipe_in.title,
        servings=recipe_in.servings,
        difficulty=recipe_in.difficulty,
        source_url=recipe_in.source_url,
        thumbnail_url=recipe_in.thumbnail_url,
    )
    recipe.ingredients = [
        RecipeIngredient(name=ing.name, amount=ing.amount, unit=ing.unit)
        for ing in recipe_in.ingredients
    ]
    recipe.steps = [
        RecipeStep(
            step_order=step.step_order,
            instruction=step.instruction,
            timer_seconds=step.timer_seconds,
            step_image_url=step.step_image_url,
        )
        for step in recipe_in.steps
    ]
    db.add(recipe)
    db.commit()
    db.refresh(recipe)

    logger.info("User %s created recipe %s", user_id, recipe.recipe_id)
    return {
        "success": True,
        "message": "Recipe saved.",
        "data": schemas.RecipeCreatedOut.model_validate(recipe),
    }


@router.get("/recipes/{recipe_id}", response_model=schemas.DataResponse[schemas.RecipeDetailOut])
def get_recipe(
    recipe_id: str,
    servings: Optional[int] = Query(None),
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    recipe = _get_recipe(db, recipe_id)
    base, target = stats.resolve_servings(recipe.servings, servings)

    ingredients = [
        schemas.ScaledIngredientOut(
            ri_id=ing.ri_id,
            name=ing.name,
            amount=stats.scale_amount(ing.amount, base, target),
            unit=ing.unit,
        )
        for ing in recipe.ingredients
    ]
    data = schemas.RecipeDetailOut(
        recipe_id=recipe.recipe_id,
        title=recipe.title,
        source_url=recipe.source_url,
        thumbnail_url=recipe.thumbnail_url,
        difficulty=recipe.difficulty,
        base_servings=base,
        requested_servings=target,
        created_at=recipe.created_at,
        latest_log=_latest_log_out(stats.latest_log(recipe.cooking_logs, user_id=user_id)),
        ingredients=ingredients,
        steps=[schemas.RecipeStepOut.model_validate(s) for s in recipe.steps],
    )
    return {"success": True, "data": data}


@router.delete("/recipes/{recipe_id}", response_model=schemas.MessageResponse)
def delete_recipe(
    recipe_id: str,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    recipe = _get_recipe(db, recipe_id)
    if recipe.user_id != user_id:
        raise AuthorizationDenied("You do not have permission to delete this recipe.")

    db.delete(recipe)
    db.commit()
    return {"success": True, "message": "Recipe deleted."}


@router.get("/recipes/{recipe_id}/steps", response_model=schemas.DataResponse[list[schemas.CookingStepOut]])
def get_recipe_steps(
    recipe_id: str,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    recipe = _get_recipe(db, recipe_id)
    return {"success": True, "data": [schemas.CookingStepOut.model_validate(s) for s in recipe.steps]}


@router.get("/recipes/{recipe_id}/logs", response_model=schemas.DataResponse[list[schemas.RecipeLogOut]])
def get_recipe_logs(
    recipe_id: str,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    recipe = _get_recipe(db, recipe_id)
    logs = (
        db.query(CookingLog)
        .filter(CookingLog.recipe_id == recipe.recipe_id, CookingLog.user_id == user_id)
        .order_by(CookingLog.cooked_at.desc(), CookingLog.log_id.desc())
        .all()
    )
    return {"success": True, "data": [schemas.RecipeLogOut.model_validate(log) for log in logs]}
