"""Route registration — mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from quote_server.routes.forms import router as forms_router
from quote_server.routes.pricing import router as pricing_router
from quote_server.routes.reference import router as reference_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(forms_router, prefix=API_PREFIX)
    app.include_router(pricing_router, prefix=API_PREFIX)
    app.include_router(reference_router, prefix=API_PREFIX)
