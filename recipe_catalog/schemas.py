from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional


class TagOut(BaseModel):
    id: int = 0
    name: str = Field("", examples=["Italian"])

    model_config = ConfigDict(from_attributes=True)


class IngredientOut(BaseModel):
    id: int = 0
    name: str = Field("", examples=["Spaghetti"])

    model_config = ConfigDict(from_attributes=True)


class RecipeIngredientOut(IngredientOut):
    amount: Optional[str] = Field(None, examples=["400"])
    unit: Optional[str] = Field(None, examples=["g"])


class RecipeBase(BaseModel):
    title: str = Field("", examples=["Spaghetti Carbonara"])
    time_minutes: int = Field(0, examples=[25])
    price: str = Field("", examples=["12.50"])
    link: str = Field("", examples=["http://example.com/carbonara"])


class RecipeSimpleOut(RecipeBase):
    """List projection: no description, no ingredients."""

    id: int
    tags: List[TagOut] = []


class RecipeCreate(RecipeBase):
    description: str = Field("", examples=["Step 1: Boil the pasta."])
    ingredients: List[RecipeIngredientOut] = []
    tags: List[TagOut] = []


class RecipeOut(RecipeCreate):
    id: int


class UserBase(BaseModel):
    email: str = Field("", examples=["user@example.com"])
    name: str = Field("", examples=["Example User"])


class UserCreate(UserBase):
    password: str = Field("", examples=["secret"])


class UserUpdate(UserBase):
    password: Optional[str] = None


class UserPatch(BaseModel):
    """Partial update. Values that are not strings are ignored."""

    email: Optional[Any] = None
    name: Optional[Any] = None

    def changes(self) -> dict:
        return {key: value for key, value in self.model_dump().items() if isinstance(value, str)}


class UserOut(UserBase):
    model_config = ConfigDict(from_attributes=True)


class AuthToken(BaseModel):
    email: str = ""
    password: str = ""
