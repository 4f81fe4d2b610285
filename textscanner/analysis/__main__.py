"""Run the file-analysis service: ``python -m textscanner.analysis``."""

import uvicorn

from textscanner.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "textscanner.analysis.main:app",
        host=settings.host,
        port=settings.analysis_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
