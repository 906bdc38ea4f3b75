"""Run the API with uvicorn: `python -m newsdesk`."""
import logging

import uvicorn

from newsdesk.app import create_app
from newsdesk.core.config import get_settings

logger = logging.getLogger("newsdesk")


def main() -> None:
    settings = get_settings()
    app = create_app(settings)
    logger.info("API server running on port %s", settings.port)
    logger.info("Allowed origins: %s", ", ".join(settings.allowed_origins))
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
