import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from jinja2 import TemplateError
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse
from starlette.staticfiles import StaticFiles

from .config import get_settings
from .database import engine
from .router import overview_router, recipe_router, user_router
from .seed import init_db
from .views import router as views_router


STATIC_DIR = Path(__file__).resolve().parent / "static"

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db(engine)
    yield
    await engine.dispose()


app = FastAPI(
    title="Recipe Catalog API",
    description="Recipes with their ingredients and tags, as HTML pages and JSON",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


@app.exception_handler(TemplateError)
async def template_exception_handler(request: Request, exc: TemplateError):
    logger.exception("Template failure on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error"},
    )


app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.include_router(views_router)
app.include_router(overview_router)
app.include_router(user_router)
app.include_router(recipe_router)
