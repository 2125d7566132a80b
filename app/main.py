"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Builds the service context and registers routes
- Runs the Telegram poller and tears down timers (startup/shutdown)
- No business logic should be written here
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import time

from app.core.config import Settings, settings as default_settings, validate_settings
from app.core.context import build_context
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.services.telegram_poller import TelegramPoller
from app.services.telegram_service import TelegramService
from app.api import log_code, pages, webhook

logger = get_logger(__name__)

SLOW_REQUEST_SECONDS = 5.0


def create_app(settings: Optional[Settings] = None, telegram: Optional[TelegramService] = None) -> FastAPI:
    """
    Builds the application.

    Args:
        settings: Configuration (defaults to environment settings)
        telegram: Telegram client (defaults to an httpx-backed TelegramService)
    """
    settings = settings or default_settings
    context = build_context(settings, telegram)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.
        Handles startup and shutdown events.
        """
        logger.info("🚀 Starting code relay...")

        try:
            validate_settings(settings)
            logger.info("✅ Configuration validated")
        except Exception as e:
            logger.critical(f"Failed to start application: {str(e)}")
            raise

        poller = None
        if settings.TELEGRAM_MODE == "polling":
            poller = TelegramPoller(context)
            poller.start()
        else:
            logger.info("Telegram webhook mode: waiting for updates on /api/telegram/webhook")

        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info("🎉 Bot + API online")

        yield  # Application runs here

        logger.info("🛑 Shutting down code relay...")

        try:
            if poller is not None:
                await poller.stop()

            cancelled = await context.shutdown_timers()
            logger.info(f"✅ Cancelled {cancelled} pending timer(s)")

            await context.telegram.close()
            logger.info("👋 Shut down successfully")

        except Exception as e:
            logger.error(f"Error during shutdown: {str(e)}", exc_info=True)

    app = FastAPI(
        title="Code Relay",
        description="Relays website verification codes to a Telegram reviewer",
        version="1.0.0",
        lifespan=lifespan,
        debug=settings.DEBUG,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.settings = settings
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to all responses."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        if process_time > SLOW_REQUEST_SECONDS:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} ({process_time:.2f}s)"
            )

        return response

    add_exception_handlers(app)

    app.include_router(log_code.router, prefix="/api", tags=["Submissions"])
    app.include_router(webhook.router, prefix="/api", tags=["Webhook"])
    app.include_router(pages.router)

    return app


# Initialize logging first
setup_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=default_settings.PORT,
        reload=default_settings.is_development,
        log_level=default_settings.LOG_LEVEL.lower()
    )
