from fastapi import Request

from commandforge.services.catalog_client import CatalogClient


def get_catalog(request: Request) -> CatalogClient:
    """The process-wide catalog client opened by the app lifespan."""
    catalog: CatalogClient = request.app.state.catalog
    return catalog
