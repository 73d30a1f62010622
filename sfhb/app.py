import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from sfhb.core.config import Settings, get_settings
from sfhb.routers import articles as articles_router
from sfhb.services.article_service import ArticleService

logger = logging.getLogger(__name__)

BANNER = "sfhb api v.0.1"
CORS_METHODS = ["POST", "GET", "OPTIONS", "PUT", "DELETE"]
CORS_HEADERS = [
    "Accept",
    "Content-Type",
    "Content-Length",
    "Accept-Encoding",
    "X-Session-Token",
    "X-CSRF-Token",
    "Authorization",
]


def create_app(settings: Settings | None = None, article_service: ArticleService | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``uvicorn sfhb.app:create_app --factory``)."""
    settings = settings or get_settings()
    app = FastAPI(title="SFHB Article API")

    if settings.cors_enabled:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_allow_origins),
            allow_methods=CORS_METHODS,
            allow_headers=CORS_HEADERS,
        )

    if article_service is None:
        article_service = ArticleService(
            settings.data_file,
            token_secret=settings.token,
            refresh_on_read=settings.refresh_on_read,
        )
    app.state.settings = settings
    app.state.article_service = article_service

    @app.get("/", response_class=PlainTextResponse)
    def home():
        return BANNER

    app.include_router(articles_router.router)

    logger.info(
        "Serving articles from %s (refresh_on_read=%s, env=%s)",
        article_service.data_file,
        article_service.refresh_on_read,
        settings.app_env,
    )
    if not settings.auth_enabled:
        logger.warning("Authentication is disabled! Please set TOKEN environment variable to enable.")
    return app
