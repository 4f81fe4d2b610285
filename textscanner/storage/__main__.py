"""Run the file-storing service: ``python -m textscanner.storage``."""

import uvicorn

from textscanner.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "textscanner.storage.main:app",
        host=settings.host,
        port=settings.storage_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
