"""``python -m pg_rag`` — serve the API with uvicorn."""

from __future__ import annotations

import uvicorn

from pg_rag.config import get_settings
from pg_rag.logging_config import setup_logging


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(
        "pg_rag.serving.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
