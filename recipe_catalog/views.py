import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from . import crud
from .database import get_db


logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

router = APIRouter(tags=["Pages"])


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, db: AsyncSession = Depends(get_db)):
    logger.info("Route invoked: GET /")
    recipes = await crud.get_recipes_simple(db)
    return templates.TemplateResponse(request, "home.html", {"recipes": recipes})


@router.get("/recipes/{recipe_id}/", response_class=HTMLResponse)
async def recipe_detail(
    request: Request,
    recipe_id: int,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Route invoked: GET /recipes/%s/", recipe_id)
    try:
        recipe = await crud.get_recipe(db, recipe_id)
    except crud.RecipeNotFound:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return templates.TemplateResponse(request, "recipe_detail.html", {"recipe": recipe})
