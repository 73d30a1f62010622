"""Run the API with uvicorn: ``python -m sfhb``."""
from __future__ import annotations

import logging

import uvicorn

from sfhb.app import create_app
from sfhb.core.config import get_settings
from sfhb.core.log_config import setup_logging
from sfhb.services.article_service import StorageUnavailableError

logger = logging.getLogger("sfhb")


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    app = create_app(settings)
    try:
        count = app.state.article_service.reload()
    except StorageUnavailableError as exc:
        logger.error("Cannot start: %s (%s)", exc, exc.__cause__)
        raise SystemExit(1)
    logger.info("Loaded %d article(s)", count)

    options = {}
    if settings.tls_enabled:
        options.update(ssl_certfile=settings.tls_certfile, ssl_keyfile=settings.tls_keyfile)
    logger.info("Serving under %s:%d (tls=%s)", settings.host, settings.port, settings.tls_enabled)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None, **options)


if __name__ == "__main__":
    main()
