"""FastAPI app for quote forms and price estimates.

``create_app()`` wires up:
  - a lifespan hook that loads the industry templates and builds the
    stateless evaluators shared by every request
  - CORS for the browser quote portal
  - the exception handlers from ``quote_server.errors``
  - ``/health`` plus the ``/api/v1`` routers

``cli()`` backs the ``quote-server`` console script.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quote_rulesets.estimate import EstimateAggregator
from quote_rulesets.form import FormEvaluator
from quote_rulesets.pricing import PriceRuleEngine
from quote_rulesets.templates import TemplateStore
from quote_rulesets.validation import ConfigurationError

from quote_server.config import ServerSettings, load_settings
from quote_server.errors import (
    configuration_error_handler,
    generic_error_handler,
    key_error_handler,
    value_error_handler,
)
from quote_server.routes import register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Startup
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load templates and evaluators onto ``app.state``.

    A broken template aborts startup with ``ConfigurationError``.
    """
    template_dir = app.state.settings.template_dir
    store = TemplateStore(template_dir=template_dir)
    store.load()

    form_evaluator = FormEvaluator()
    engine = PriceRuleEngine()

    app.state.store = store
    app.state.form_evaluator = form_evaluator
    app.state.engine = engine
    app.state.aggregator = EstimateAggregator(form_evaluator, engine)
    logger.info("Quote server ready with %d template(s)", len(store.templates))

    yield

    logger.info("Quote server stopped")


def _install_error_handlers(app: FastAPI) -> None:
    # ConfigurationError subclasses ValueError; the closer match is used.
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(KeyError, key_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(settings: ServerSettings | None = None) -> FastAPI:
    settings = settings or load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Quote Estimate API",
        description="Conditional quote forms and rule-based price estimates",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_error_handlers(app)

    @app.get("/health")
    async def health() -> dict:
        store: TemplateStore | None = getattr(app.state, "store", None)
        if store is None:
            return {"status": "starting"}
        return {"status": "ok", "templates": len(store.templates)}

    register_routes(app)
    return app


# ------------------------------------------------------------------
# Console script
# ------------------------------------------------------------------

def cli() -> None:
    """Run the server with uvicorn using ``SERVER_*`` settings."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "quote_server.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
