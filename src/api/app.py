"""FastAPI application factory"""

import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from src.api.error import ClientError, client_error_handler
from src.api.routes import payment_links, public, transactions

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    """
    Build the API application

    Args:
        config: ApplicationConfig-like object

    Returns:
        Configured FastAPI app with all routers mounted under API_PREFIX
    """
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(config, "AUTO_CREATE_SCHEMA", False):
            from src.adapter.database import create_schema
            from src.depends import engine

            await create_schema(engine)
            logger.info("Database schema ready")
        yield

        from src.depends import close_authorization_gateway

        await close_authorization_gateway()

    app = FastAPI(
        title="Payment Link Service",
        description="Capped, time-limited payment links redeemed through card authorization",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.ENABLE_LOGGING_MIDDLEWARE:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            start = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)"
            )
            return response

    app.add_exception_handler(ClientError, client_error_handler)

    prefix = config.API_PREFIX or ""
    app.include_router(payment_links.router, prefix=prefix)
    app.include_router(public.router, prefix=prefix)
    app.include_router(transactions.router, prefix=prefix)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
