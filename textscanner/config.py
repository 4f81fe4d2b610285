"""Configuration from environment."""

from pathlib import Path
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings shared by the storage and analysis services."""

    model_config = SettingsConfigDict(env_prefix="TEXTSCANNER_", extra="ignore")

    # Storage service
    upload_dir: Path = Path("uploads")
    metadata_backend: Literal["json", "sqlite"] = "json"
    # Empty = <upload_dir>/textscanner.db
    db_path: Optional[Path] = None
    max_upload_bytes: int = 10 * 1024 * 1024
    # Comma-separated string so pydantic-settings does not try to JSON-decode it
    allowed_extensions: str = ".txt"

    # Analysis service -> storage service
    storage_service_url: str = "http://file-storing-service:8001"
    storage_timeout_seconds: float = 30.0

    # Word cloud renderer
    wordcloud_base_url: str = "https://quickchart.io/wordcloud"
    wordcloud_max_words: int = 60
    wordcloud_min_word_length: int = 4

    # Server
    host: str = "0.0.0.0"
    storage_port: int = 8001
    analysis_port: int = 8002

    # Logging (empty log_file = stderr only; level DEBUG|INFO|WARNING|ERROR)
    log_level: str = "INFO"
    log_file: str = ""

    @property
    def allowed_extensions_list(self) -> List[str]:
        """Lower-cased extensions with a leading dot."""
        out = []
        for ext in self.allowed_extensions.split(","):
            ext = ext.strip().lower()
            if ext:
                out.append(ext if ext.startswith(".") else f".{ext}")
        return out or [".txt"]

    @property
    def metadata_file(self) -> Path:
        return self.upload_dir / "metadata.json"

    @property
    def database_path(self) -> Path:
        return self.db_path or self.upload_dir / "textscanner.db"


def get_settings() -> Settings:
    """Return application settings."""
    return Settings()
