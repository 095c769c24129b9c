"""
Run the API with uvicorn: ``python -m fieldreports``.
"""

from __future__ import annotations

import logging

import uvicorn

from fieldreports.config import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    uvicorn.run(
        "fieldreports.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
