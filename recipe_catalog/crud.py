"""Data access for the recipe catalog.

Every function takes the session it works on. Aggregate reads are assembled
from one query for the recipe rows plus one query per recipe for its
ingredients and one for its tags, with no transaction spanning them.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from . import models, schemas


logger = logging.getLogger(__name__)


class RecipeNotFound(Exception):
    pass


async def get_ingredients_for_recipe(db: AsyncSession, recipe_id: int) -> List[schemas.RecipeIngredientOut]:
    query = (
        select(
            models.Ingredient.id,
            models.Ingredient.name,
            models.RecipeIngredient.amount,
            models.RecipeIngredient.unit,
        )
        .join(models.RecipeIngredient, models.Ingredient.id == models.RecipeIngredient.ingredient_id)
        .where(models.RecipeIngredient.recipe_id == recipe_id)
    )
    result = await db.execute(query)
    return [
        schemas.RecipeIngredientOut(id=row.id, name=row.name, amount=row.amount, unit=row.unit)
        for row in result.all()
    ]


async def get_tags_for_recipe(db: AsyncSession, recipe_id: int) -> List[schemas.TagOut]:
    query = (
        select(models.Tag.id, models.Tag.name)
        .join(models.recipe_tags, models.Tag.id == models.recipe_tags.c.tag_id)
        .where(models.recipe_tags.c.recipe_id == recipe_id)
    )
    result = await db.execute(query)
    return [schemas.TagOut(id=row.id, name=row.name) for row in result.all()]


async def _recipe_out(db: AsyncSession, recipe: models.Recipe) -> schemas.RecipeOut:
    return schemas.RecipeOut(
        id=recipe.id,
        title=recipe.title,
        time_minutes=recipe.time_minutes,
        price=recipe.price,
        link=recipe.link or "",
        description=recipe.description or "",
        ingredients=await get_ingredients_for_recipe(db, recipe.id),
        tags=await get_tags_for_recipe(db, recipe.id),
    )


async def get_recipe(db: AsyncSession, recipe_id: int) -> schemas.RecipeOut:
    """Fetch one recipe with its ingredients and tags.

    Raises RecipeNotFound when no recipe row has this id.
    """
    recipe = await db.get(models.Recipe, recipe_id)
    if recipe is None:
        raise RecipeNotFound(recipe_id)
    return await _recipe_out(db, recipe)


def _filter_recipes(query, ingredient_ids: Optional[Sequence[int]], tag_ids: Optional[Sequence[int]]):
    if ingredient_ids:
        query = query.where(
            models.Recipe.id.in_(
                select(models.RecipeIngredient.recipe_id).where(
                    models.RecipeIngredient.ingredient_id.in_(ingredient_ids)
                )
            )
        )
    if tag_ids:
        query = query.where(
            models.Recipe.id.in_(
                select(models.recipe_tags.c.recipe_id).where(models.recipe_tags.c.tag_id.in_(tag_ids))
            )
        )
    return query


async def get_recipes_simple(db: AsyncSession) -> List[schemas.RecipeSimpleOut]:
    """Every recipe without description or ingredients, for list pages."""
    result = await db.execute(select(models.Recipe))
    recipes = []
    for recipe in result.scalars().all():
        recipes.append(
            schemas.RecipeSimpleOut(
                id=recipe.id,
                title=recipe.title,
                time_minutes=recipe.time_minutes,
                price=recipe.price,
                link=recipe.link or "",
                tags=await get_tags_for_recipe(db, recipe.id),
            )
        )
    return recipes


async def get_recipes(
    db: AsyncSession,
    ingredient_ids: Optional[Sequence[int]] = None,
    tag_ids: Optional[Sequence[int]] = None,
) -> List[schemas.RecipeOut]:
    """Every recipe with all fields.

    With ``ingredient_ids`` only recipes linked to at least one of them are
    returned; ``tag_ids`` narrows the same way, and the two combine with AND.
    """
    query = _filter_recipes(select(models.Recipe), ingredient_ids, tag_ids)
    result = await db.execute(query)
    return [await _recipe_out(db, recipe) for recipe in result.scalars().all()]


async def create_recipe(
    db: AsyncSession,
    recipe: schemas.RecipeCreate,
    persist_associations: bool = False,
) -> schemas.RecipeOut:
    """Insert a recipe row.

    The ingredient and tag lists of the request are always returned as sent.
    They are written to the link tables only with ``persist_associations``.
    """
    new_recipe = models.Recipe(
        title=recipe.title,
        time_minutes=recipe.time_minutes,
        price=recipe.price,
        link=recipe.link,
        description=recipe.description,
    )
    db.add(new_recipe)
    await db.flush()

    if persist_associations:
        db.add_all(
            models.RecipeIngredient(
                recipe_id=new_recipe.id,
                ingredient_id=ingredient.id,
                amount=ingredient.amount,
                unit=ingredient.unit,
            )
            for ingredient in recipe.ingredients
        )
        if recipe.tags:
            await db.execute(
                insert(models.recipe_tags),
                [{"recipe_id": new_recipe.id, "tag_id": tag.id} for tag in recipe.tags],
            )

    recipe_id = new_recipe.id
    await db.commit()
    logger.info("Created recipe %s (%r)", recipe_id, recipe.title)

    return schemas.RecipeOut(id=recipe_id, **recipe.model_dump())


async def get_ingredients(db: AsyncSession, assigned_only: bool = False) -> List[schemas.IngredientOut]:
    query = select(models.Ingredient)
    if assigned_only:
        query = query.where(
            models.Ingredient.id.in_(select(models.RecipeIngredient.ingredient_id))
        )
    result = await db.execute(query)
    return [schemas.IngredientOut.model_validate(i) for i in result.scalars().all()]


async def get_tags(db: AsyncSession, assigned_only: bool = False) -> List[schemas.TagOut]:
    query = select(models.Tag)
    if assigned_only:
        query = query.where(models.Tag.id.in_(select(models.recipe_tags.c.tag_id)))
    result = await db.execute(query)
    return [schemas.TagOut.model_validate(t) for t in result.scalars().all()]


async def create_user(db: AsyncSession, user: schemas.UserCreate) -> schemas.UserOut:
    """Insert a user. A taken email surfaces as the store's IntegrityError."""
    db_user = models.User(email=user.email, password=user.password, name=user.name)
    db.add(db_user)
    await db.commit()
    return schemas.UserOut(email=user.email, name=user.name)


async def count_rows(db: AsyncSession, table) -> int:
    result = await db.execute(select(func.count()).select_from(table))
    return result.scalar_one()
