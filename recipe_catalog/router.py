import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from . import crud, schemas
from .config import Settings, get_settings
from .database import get_db


logger = logging.getLogger(__name__)

PLACEHOLDER_USER = {"email": "user@example.com", "name": "Example User"}


overview_router = APIRouter(tags=["API"])

user_router = APIRouter(
    prefix="/api/user",
    tags=["User"]
)

recipe_router = APIRouter(
    prefix="/api/recipe",
    tags=["Recipes"]
)


def parse_ids(value: Optional[str], name: str) -> List[int]:
    """Turn a comma separated query value like ``"1,3"`` into ids."""
    if not value:
        return []
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{name} must be a comma separated list of ids",
        )


@overview_router.get("/api")
async def api_overview(settings: Settings = Depends(get_settings)):
    """Map of the API's URL templates."""
    logger.info("Route invoked: GET /api")
    base = settings.base_url.rstrip("/")
    return {
        "create_user_url": f"{base}/api/user/create/",
        "current_user_url": f"{base}/api/user/me/",
        "user_token_url": f"{base}/api/user/token/",
        "recipes_url": f"{base}/api/recipe/recipes/{{?ingredients,tags}}",
        "recipe_url": f"{base}/api/recipe/recipes/{{id}}/",
        "recipe_image_url": f"{base}/api/recipe/recipes/{{id}}/upload-image/",
        "ingredients_url": f"{base}/api/recipe/ingredients/{{?assigned_only}}",
        "ingredient_url": f"{base}/api/recipe/ingredients/{{id}}/",
        "tags_url": f"{base}/api/recipe/tags/{{?assigned_only}}",
        "tag_url": f"{base}/api/recipe/tags/{{id}}/",
    }


@user_router.post("/create/", response_model=schemas.UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(user: schemas.UserCreate, db: AsyncSession = Depends(get_db)):
    """Create a user. The password is stored but never returned."""
    logger.info("Route invoked: POST /api/user/create/")
    return await crud.create_user(db, user)


@user_router.get("/me/", response_model=schemas.UserOut)
async def get_current_user():
    """Fixed placeholder identity; there is no session to look up."""
    logger.info("Route invoked: GET /api/user/me/")
    return schemas.UserOut(**PLACEHOLDER_USER)


@user_router.put("/me/", response_model=schemas.UserOut)
async def replace_current_user(user: schemas.UserUpdate):
    logger.info("Route invoked: PUT /api/user/me/")
    return schemas.UserOut(email=user.email, name=user.name)


@user_router.patch("/me/", response_model=schemas.UserOut)
async def update_current_user(user: schemas.UserPatch):
    """Merge the given fields onto the placeholder identity. Nothing is stored."""
    logger.info("Route invoked: PATCH /api/user/me/")
    merged = dict(PLACEHOLDER_USER)
    merged.update(user.changes())
    return schemas.UserOut(**merged)


@user_router.post("/token/", response_model=schemas.AuthToken)
async def create_token(credentials: schemas.AuthToken):
    """Echo the credentials back. Not a real token."""
    logger.info("Route invoked: POST /api/user/token/")
    return credentials


@recipe_router.get("/recipes/", response_model=List[schemas.RecipeOut])
async def list_recipes(
    ingredients: Optional[str] = Query(None, description="Comma separated ingredient ids"),
    tags: Optional[str] = Query(None, description="Comma separated tag ids"),
    db: AsyncSession = Depends(get_db),
):
    logger.info("Route invoked: GET /api/recipe/recipes/")
    return await crud.get_recipes(
        db,
        ingredient_ids=parse_ids(ingredients, "ingredients"),
        tag_ids=parse_ids(tags, "tags"),
    )


@recipe_router.post("/recipes/", response_model=schemas.RecipeOut, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    recipe: schemas.RecipeCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create a recipe.

    Ingredients and tags in the body are echoed in the response; they are only
    linked to the new recipe when ``persist_recipe_associations`` is enabled.
    """
    logger.info("Route invoked: POST /api/recipe/recipes/")
    return await crud.create_recipe(
        db, recipe, persist_associations=settings.persist_recipe_associations
    )


@recipe_router.get("/ingredients/", response_model=List[schemas.IngredientOut])
async def list_ingredients(
    assigned_only: bool = Query(False, description="Only ingredients used by a recipe"),
    db: AsyncSession = Depends(get_db),
):
    logger.info("Route invoked: GET /api/recipe/ingredients/")
    return await crud.get_ingredients(db, assigned_only=assigned_only)


@recipe_router.get("/tags/", response_model=List[schemas.TagOut])
async def list_tags(
    assigned_only: bool = Query(False, description="Only tags used by a recipe"),
    db: AsyncSession = Depends(get_db),
):
    logger.info("Route invoked: GET /api/recipe/tags/")
    return await crud.get_tags(db, assigned_only=assigned_only)
