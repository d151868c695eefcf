"""Entrypoint: python -m garagesale_chat"""
from __future__ import annotations

import uvicorn

from garagesale_chat.config import settings
from garagesale_chat.logs import setup_logging


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "garagesale_chat.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
