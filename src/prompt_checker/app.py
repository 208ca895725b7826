"""FastAPI application factory."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware

from prompt_checker.api.routes import prompts
from prompt_checker.core.config import Settings, configure_logging
from prompt_checker.core.vocabulary import load_vocabulary
from prompt_checker.services.prompt_check.checker import PromptChecker

logger = structlog.get_logger()


def build_prompt_checker(settings: Settings) -> PromptChecker:
    """Create the shared checker from configured vocabulary and probe settings."""
    return PromptChecker(
        vocabulary=load_vocabulary(settings),
        proxy_url=settings.proxy_url,
        probe_timeout=settings.probe_timeout_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Handles startup tasks:
    - Load settings and configure logging
    - Load the parameter registry and banned terms (fails fast if unreadable)
    - Store the shared PromptChecker on app.state
    """
    settings = Settings()  # type: ignore[call-arg]
    configure_logging(settings)

    app.state.settings = settings
    app.state.prompt_checker = build_prompt_checker(settings)

    logger.info(
        "application.startup",
        app_env=settings.app_env,
        probe_enabled=bool(settings.proxy_url),
    )

    yield

    logger.info("application.shutdown")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = Settings()  # type: ignore[call-arg]

    app = FastAPI(
        title="Prompt Checker API",
        description="Image-generation prompt validation",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(prompts.router)  # Prompts router has prefix="/api/prompts" in definition

    @app.get("/health")
    async def health_check(request: Request, response: Response):
        """Health check endpoint.

        Returns:
            200: {"status": "healthy", "params": N, "banned_terms": M}
            503: {"status": "unhealthy", ...} if the checker was not initialized
        """
        checker = getattr(request.app.state, "prompt_checker", None)
        if checker is None:
            logger.error("health_check.failed", reason="prompt_checker_not_initialized")
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
            return {"status": "unhealthy", "error": "prompt checker not initialized"}

        return {
            "status": "healthy",
            "params": len(checker.vocabulary.params),
            "banned_terms": len(checker.vocabulary.banned_terms),
        }

    return app


# Create app instance for uvicorn
app = create_app()
