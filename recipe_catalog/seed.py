"""Schema bootstrap and sample data.

Seeding runs only while the recipes table is empty. Each insert is its own
transaction; a failing insert is logged and skipped. A half-finished seed from
an earlier run is not detected.
"""

import logging

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from . import models
from .crud import count_rows
from .database import create_tables, make_session_maker


logger = logging.getLogger(__name__)


INGREDIENTS = [
    "Spaghetti", "Eggs", "Pancetta", "Parmesan Cheese", "Black Pepper", "Salt",
    "Chicken Breast", "Breadcrumbs", "Mozzarella Cheese", "Tomato Sauce", "Olive Oil",
    "Garlic", "Penne Pasta", "Bell Peppers", "Zucchini", "Cherry Tomatoes", "Basil",
    "Butter", "Flour", "Salmon Fillet", "Lemon", "Dill",
]

TAGS = ["Italian", "Quick", "Dinner", "Vegetarian", "Healthy", "Seafood"]

RECIPES = [
    {
        "title": "Spaghetti Carbonara",
        "time_minutes": 25,
        "price": "12.50",
        "link": "http://example.com/carbonara",
        "description": (
            "Step 1: Bring a large pot of salted water to boil and cook 400g spaghetti according to package directions.\n\n"
            "Step 2: While pasta cooks, cut 200g pancetta into small cubes and fry in a large pan over medium heat until crispy (about 5 minutes).\n\n"
            "Step 3: In a bowl, whisk together 4 large eggs, 100g grated Parmesan cheese, and plenty of black pepper.\n\n"
            "Step 4: When pasta is ready, reserve 1 cup of pasta water, then drain the pasta.\n\n"
            "Step 5: Remove the pan with pancetta from heat. Add the hot pasta to the pan and toss.\n\n"
            "Step 6: Pour the egg mixture over the pasta and toss quickly. The heat from the pasta will cook the eggs. Add pasta water bit by bit if needed to create a creamy sauce.\n\n"
            "Step 7: Serve immediately with extra Parmesan cheese and black pepper."
        ),
        "ingredients": [
            ("Spaghetti", "400", "g"),
            ("Eggs", "4", "large"),
            ("Pancetta", "200", "g"),
            ("Parmesan Cheese", "100", "g"),
            ("Black Pepper", "1", "tsp"),
            ("Salt", "1", "tsp"),
        ],
        "tags": ["Italian", "Dinner"],
    },
    {
        "title": "Chicken Parmesan",
        "time_minutes": 50,
        "price": "18.00",
        "link": "http://example.com/chicken-parm",
        "description": (
            "Step 1: Preheat oven to 200C (400F).\n\n"
            "Step 2: Place 2 chicken breasts between plastic wrap and pound to 2cm thickness.\n\n"
            "Step 3: Set up breading station: flour in one plate, 2 beaten eggs in another, and 150g breadcrumbs mixed with 50g Parmesan in a third.\n\n"
            "Step 4: Season chicken with salt and pepper, then coat in flour, dip in egg, and press into breadcrumb mixture.\n\n"
            "Step 5: Heat 3 tablespoons olive oil in a large oven-safe skillet over medium-high heat. Fry chicken until golden brown, about 4 minutes per side.\n\n"
            "Step 6: Pour 300ml tomato sauce over the chicken, then top each breast with 100g sliced mozzarella.\n\n"
            "Step 7: Transfer skillet to oven and bake for 15-20 minutes until cheese is melted and bubbly.\n\n"
            "Step 8: Garnish with fresh basil and serve with pasta or salad."
        ),
        "ingredients": [
            ("Chicken Breast", "2", "pieces"),
            ("Breadcrumbs", "150", "g"),
            ("Mozzarella Cheese", "100", "g"),
            ("Tomato Sauce", "300", "ml"),
            ("Olive Oil", "3", "tbsp"),
            ("Parmesan Cheese", "50", "g"),
            ("Eggs", "2", "large"),
        ],
        "tags": ["Italian", "Dinner"],
    },
    {
        "title": "Pasta Primavera",
        "time_minutes": 30,
        "price": "10.00",
        "link": "http://example.com/primavera",
        "description": (
            "Step 1: Cook 350g penne pasta in salted boiling water according to package directions. Reserve 1 cup pasta water before draining.\n\n"
            "Step 2: While pasta cooks, chop 1 red bell pepper, 1 zucchini into bite-sized pieces, and halve 200g cherry tomatoes.\n\n"
            "Step 3: Heat 3 tablespoons olive oil in a large pan over medium-high heat. Add 3 minced garlic cloves and cook for 30 seconds.\n\n"
            "Step 4: Add bell peppers and zucchini to the pan. Cook for 5-7 minutes until vegetables are tender.\n\n"
            "Step 5: Add cherry tomatoes and cook for another 2-3 minutes until they start to soften.\n\n"
            "Step 6: Add the drained pasta to the pan with vegetables. Toss everything together, adding pasta water as needed to create a light sauce.\n\n"
            "Step 7: Season with salt and black pepper. Remove from heat and stir in fresh basil leaves.\n\n"
            "Step 8: Serve hot with grated Parmesan cheese on top."
        ),
        "ingredients": [
            ("Penne Pasta", "350", "g"),
            ("Bell Peppers", "1", "piece"),
            ("Zucchini", "1", "piece"),
            ("Cherry Tomatoes", "200", "g"),
            ("Garlic", "3", "cloves"),
            ("Olive Oil", "3", "tbsp"),
            ("Basil", "15", "leaves"),
            ("Parmesan Cheese", "50", "g"),
        ],
        "tags": ["Italian", "Quick", "Vegetarian", "Healthy"],
    },
    {
        "title": "Garlic Butter Salmon",
        "time_minutes": 20,
        "price": "22.00",
        "link": "http://example.com/salmon",
        "description": (
            "Step 1: Pat 4 salmon fillets (150g each) dry with paper towels and season both sides with salt and pepper.\n\n"
            "Step 2: Heat 2 tablespoons olive oil in a large skillet over medium-high heat.\n\n"
            "Step 3: Place salmon fillets skin-side up in the pan. Cook for 4-5 minutes until golden brown.\n\n"
            "Step 4: Flip the salmon and cook for another 3-4 minutes.\n\n"
            "Step 5: Reduce heat to medium and add 3 tablespoons butter, 4 minced garlic cloves, and juice of 1 lemon to the pan.\n\n"
            "Step 6: Spoon the garlic butter sauce over the salmon repeatedly for 1-2 minutes.\n\n"
            "Step 7: Remove from heat and sprinkle with fresh dill.\n\n"
            "Step 8: Serve immediately with the pan sauce, accompanied by rice or vegetables."
        ),
        "ingredients": [
            ("Salmon Fillet", "4", "fillets"),
            ("Butter", "3", "tbsp"),
            ("Garlic", "4", "cloves"),
            ("Lemon", "1", "piece"),
            ("Dill", "2", "tbsp"),
            ("Olive Oil", "2", "tbsp"),
        ],
        "tags": ["Quick", "Dinner", "Healthy", "Seafood"],
    },
]


async def _insert(engine: AsyncEngine, statement, what: str):
    """Run one insert in its own transaction; return the new primary key or None."""
    try:
        async with engine.begin() as conn:
            result = await conn.execute(statement)
    except SQLAlchemyError as e:
        logger.warning("Failed to insert %s: %s", what, e)
        return None
    if result.inserted_primary_key:
        return result.inserted_primary_key[0]
    return None


async def seed_database(engine: AsyncEngine) -> None:
    logger.info("Seeding database with sample data...")

    ingredient_ids = {}
    for name in INGREDIENTS:
        ingredient_ids[name] = await _insert(
            engine, insert(models.Ingredient).values(name=name), f"ingredient {name}"
        )

    tag_ids = {}
    for name in TAGS:
        tag_ids[name] = await _insert(engine, insert(models.Tag).values(name=name), f"tag {name}")

    for recipe in RECIPES:
        recipe_id = await _insert(
            engine,
            insert(models.Recipe).values(
                title=recipe["title"],
                time_minutes=recipe["time_minutes"],
                price=recipe["price"],
                link=recipe["link"],
                description=recipe["description"],
            ),
            f"recipe {recipe['title']}",
        )
        if recipe_id is None:
            continue

        for name, amount, unit in recipe["ingredients"]:
            if ingredient_ids.get(name) is None:
                logger.warning("Skipping ingredient %s for recipe %s: not seeded", name, recipe["title"])
                continue
            await _insert(
                engine,
                insert(models.RecipeIngredient).values(
                    recipe_id=recipe_id,
                    ingredient_id=ingredient_ids[name],
                    amount=amount,
                    unit=unit,
                ),
                f"ingredient {name} for recipe {recipe['title']}",
            )
        for name in recipe["tags"]:
            if tag_ids.get(name) is None:
                logger.warning("Skipping tag %s for recipe %s: not seeded", name, recipe["title"])
                continue
            await _insert(
                engine,
                insert(models.recipe_tags).values(recipe_id=recipe_id, tag_id=tag_ids[name]),
                f"tag {name} for recipe {recipe['title']}",
            )

    logger.info("Seeding finished")


async def init_db(engine: AsyncEngine) -> None:
    """Create missing tables, then seed when there are no recipes."""
    await create_tables(engine)
    async with make_session_maker(engine)() as session:
        count = await count_rows(session, models.Recipe)
    if count == 0:
        await seed_database(engine)
