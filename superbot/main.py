"""
SUPER Bot FastAPI Application

This is the main FastAPI application entry point.
It builds the services, sets up middleware, and includes all routes.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .analytics import capture_event
from .config import Settings, get_settings
from .middleware.session import SessionMiddleware
from .middleware.timing import TimingMiddleware
from .services import BedrockService, ChatService, LexService
from .web.routes import router as web_router

APP_VERSION = "0.1.0"
BASE_DIR = Path(__file__).parent

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None,
               bedrock_service: Optional[BedrockService] = None,
               lex_service: Optional[LexService] = None) -> FastAPI:
    """
    Build the application

    Services default to ones built from settings; tests pass their own.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    app = FastAPI(
        title="SUPER Bot API",
        version=APP_VERSION,
        description="Chat assistant backed by Bedrock with optional Lex intent recognition"
    )

    bedrock_service = bedrock_service or BedrockService(settings)
    lex_service = lex_service or LexService(settings)
    app.state.settings = settings
    app.state.chat_service = ChatService(settings, bedrock_service, lex_service)

    # Session middleware first so timing (outermost) wraps it
    app.add_middleware(SessionMiddleware)
    app.add_middleware(TimingMiddleware)

    app.mount("/static", StaticFiles(directory=BASE_DIR / "web" / "static"), name="static")
    app.include_router(web_router)

    @app.get("/health")
    def health_check():
        """Health check endpoint for monitoring"""
        return {"status": "healthy", "service": "superbot-api"}

    @app.on_event("startup")
    async def startup_event():
        mode = "live" if bedrock_service.is_configured() else "demo"
        logger.info(f"SUPER Bot starting in {mode} mode (Lex {'on' if lex_service.is_configured() else 'off'})")
        capture_event("server_start", {
            "app_version": APP_VERSION,
            "environment": settings.environment,
            "inference_mode": mode,
        })

    return app


app = create_app()
