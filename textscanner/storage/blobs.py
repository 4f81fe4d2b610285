"""Uploaded file bodies on disk, one ``<file_id>.txt`` per upload under the upload dir."""

import asyncio
import logging
from pathlib import Path

from textscanner.core.validation import validate_file_id

log = logging.getLogger(__name__)


class BlobStore:
    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir

    def init(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def stored_name(self, file_id: str) -> str:
        """File name for an id. Only UUIDs are accepted, so no traversal is possible."""
        return f"{validate_file_id(file_id)}.txt"

    def path_for(self, file_id: str) -> Path:
        return self.base_dir / self.stored_name(file_id)

    async def write(self, file_id: str, body: bytes) -> Path:
        target = self.path_for(file_id)
        await asyncio.to_thread(target.write_bytes, body)
        log.debug("wrote blob %s size=%d", target, len(body))
        return target

    async def delete(self, file_id: str) -> bool:
        """Remove the blob. Returns False if it was already gone."""
        target = self.path_for(file_id)
        try:
            await asyncio.to_thread(target.unlink)
        except FileNotFoundError:
            log.warning("Blob already missing: %s", target)
            return False
        return True
