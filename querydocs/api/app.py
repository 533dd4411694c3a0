"""FastAPI application factory for the development backend.

Serves the chat service contract under /api from an in-memory store, so the
client and UI can run without the production service.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from querydocs.api.routes import chat_router, pdf_router
from querydocs.api.store import ChatStore
from querydocs.models.schemas import StatusResponse

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log startup and shutdown of the development backend."""
    logger.info("Starting QueryDocs development backend...")
    yield
    logger.info("Shutting down QueryDocs development backend...")


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    body = StatusResponse(message=str(exc.detail), success=False)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = "; ".join(str(error.get("msg", error)) for error in exc.errors())
    body = StatusResponse(message=f"Invalid request: {errors}", success=False)
    return JSONResponse(status_code=422, content=body.model_dump())


def create_app(store: ChatStore | None = None) -> FastAPI:
    """Create and configure the development backend.

    Args:
        store: Optional store to serve. A fresh empty one is used if omitted.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="QueryDocs Development API",
        description=(
            "In-memory implementation of the QueryDocs chat service: chats, "
            "message history, PDF upload and question answering."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.store = store or ChatStore()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(HTTPException, _http_error)
    application.add_exception_handler(RequestValidationError, _validation_error)

    application.include_router(chat_router, prefix=API_PREFIX)
    application.include_router(pdf_router, prefix=API_PREFIX)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "querydocs-dev-api"}

    return application


app = create_app()
