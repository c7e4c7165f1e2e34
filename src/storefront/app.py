"""Storefront FastAPI application.

Serves the cart and checkout workflow to the browser front end. The remote
store adapter is chosen by STORE_ADAPTER (see ``storefront.config``).

Usage:
    uvicorn storefront.app:app --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ValidationError

from storefront.api import cart_router, checkout_router
from storefront.api.registry import reset_registry
from storefront.config import load_settings
from storefront.store import close_store
from storefront.utils.logging import add_context, clear_context, configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging()
    logger.info("Storefront API starting", store_adapter=load_settings().store_adapter)
    yield
    reset_registry()
    await close_store()
    logger.info("Storefront API stopped")


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------
async def validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"errors": exc.messages})


async def invalid_operation_handler(_request: Request, exc: InvalidOperationError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": exc.messages})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(InvalidOperationError, invalid_operation_handler)


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        description="Cart quantity controls and checkout wizard",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Bind the buyer and route to every log line emitted while serving the request."""
        clear_context()
        add_context(method=request.method, path=request.url.path)
        user_id = request.headers.get("x-user-id")
        if user_id:
            add_context(user_id=user_id)
        try:
            return await call_next(request)
        finally:
            clear_context()

    app.include_router(cart_router)
    app.include_router(checkout_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "store_adapter": load_settings().store_adapter})

    return app


app = create_app()
