from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from .database import Base


recipe_tags = Table(
    "recipe_tags",
    Base.metadata,
    Column("recipe_id", Integer, ForeignKey("recipes.id")),
    Column("tag_id", Integer, ForeignKey("tags.id")),
)


class RecipeIngredient(Base):
    """Link between a recipe and an ingredient; amount and unit belong to the link."""

    __tablename__ = "recipe_ingredients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"))
    recipe = relationship("Recipe", back_populates="recipe_ingredients")
    ingredient_id = Column(Integer, ForeignKey("ingredients.id"))
    ingredient = relationship("Ingredient")
    amount = Column(Text)
    unit = Column(Text)


class Recipe(Base):
    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    time_minutes = Column(Integer, nullable=False)
    price = Column(Text, nullable=False)
    link = Column(Text)
    description = Column(Text)
    image = Column(Text)

    recipe_ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        lazy="select",
    )

    tags = relationship(
        "Tag",
        secondary=recipe_tags,
        back_populates="recipes",
        lazy="select",
    )


class Ingredient(Base):
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)

    recipes = relationship(
        "Recipe",
        secondary=recipe_tags,
        back_populates="tags",
        lazy="select",
    )


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(254), unique=True, nullable=False)
    password = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
