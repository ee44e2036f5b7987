from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from commandforge.api import cards_router, health_router
from commandforge.config import settings
from commandforge.services.catalog_client import CatalogClient


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open one catalog client for the whole process."""
    async with CatalogClient() as catalog:
        app.state.catalog = catalog
        yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("commandforge"),
    debug=settings.debug,
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)
