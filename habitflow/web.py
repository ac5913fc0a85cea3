from __future__ import annotations

import uvicorn

from habitflow.api import create_app
from habitflow.config import settings
from habitflow.logging_config import setup_logging


def main() -> None:
    logger = setup_logging()
    logger.info("Starting HabitFlow API on http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
