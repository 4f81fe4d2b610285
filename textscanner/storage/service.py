"""File storage: blobs on disk plus the content identity index."""

import logging
import uuid
from pathlib import Path
from typing import List, Optional, Tuple

from textscanner.config import Settings
from textscanner.core.errors import NotFoundError
from textscanner.core.identity import ContentIdentityIndex, FileRecord, MetadataStore
from textscanner.core.statistics import calculate_statistics
from textscanner.core.text import decode_text
from textscanner.core.validation import validate_file_id, validate_upload
from textscanner.storage.blobs import BlobStore
from textscanner.storage.metadata import create_metadata_store
from textscanner.storage.models import FileInfo, FileListResponse, FileUploadResponse, StatsData

log = logging.getLogger(__name__)


class FileService:
    """Upload, list, fetch and delete text files. Constructed once per app and shared by requests."""

    def __init__(
        self,
        settings: Settings,
        store: Optional[MetadataStore] = None,
        blobs: Optional[BlobStore] = None,
    ) -> None:
        self.settings = settings
        self.store = store if store is not None else create_metadata_store(settings)
        self.blobs = blobs if blobs is not None else BlobStore(settings.upload_dir)
        self.index = ContentIdentityIndex(store=self.store)

    async def start(self) -> None:
        self.blobs.init()
        await self.store.init()
        await self.index.load()
        log.info("FileService started upload_dir=%s files=%d", self.settings.upload_dir, len(self.index))

    async def stop(self) -> None:
        await self.store.close()

    async def upload(
        self,
        filename: Optional[str],
        body: bytes,
        content_type: str = "text/plain",
    ) -> FileUploadResponse:
        """Validate, store and register an upload. Byte-identical uploads are flagged as duplicates."""
        name = validate_upload(
            filename,
            len(body),
            self.settings.max_upload_bytes,
            self.settings.allowed_extensions_list,
        )
        file_id = str(uuid.uuid4())
        await self.blobs.write(file_id, body)
        try:
            record = await self.index.register(
                body,
                file_id=file_id,
                original_name=name,
                stored_name=self.blobs.stored_name(file_id),
                content_type=content_type,
            )
        except BaseException:
            await self.blobs.delete(file_id)
            raise
        stats = calculate_statistics(decode_text(body))
        log.info(
            "upload_file id=%s name=%s size=%d duplicate_of=%s",
            record.id, name, record.size, record.duplicate_of,
        )
        return FileUploadResponse(
            file_id=record.id,
            filename=name,
            size=record.size,
            duplicate=record.is_duplicate,
            duplicate_of=record.duplicate_of,
            stats=StatsData(paragraphs=stats.paragraphs, words=stats.words, chars=stats.chars),
        )

    def list_files(self) -> FileListResponse:
        files: List[FileInfo] = [
            FileInfo(
                id=r.id,
                filename=r.original_name,
                size=r.size,
                upload_date=r.uploaded_at,
                duplicate=r.is_duplicate,
            )
            for r in self.index.records()
        ]
        log.info("list_files count=%d", len(files))
        return FileListResponse(files=files)

    def get_metadata(self, file_id: str) -> FileRecord:
        return self.index.get(validate_file_id(file_id))

    def locate(self, file_id: str) -> Tuple[Path, FileRecord]:
        """Blob path and record. NotFoundError if either the record or the blob is missing."""
        record = self.get_metadata(file_id)
        target = self.blobs.path_for(record.id)
        if not target.is_file():
            log.warning("Blob missing on disk: %s", target)
            raise NotFoundError(f"File not found on disk: {record.id}", file_id=record.id)
        return target, record

    async def delete(self, file_id: str) -> FileRecord:
        """Remove record then blob. Duplicates of a removed canonical file keep their duplicate_of."""
        file_id = validate_file_id(file_id)
        record = await self.index.remove(file_id)
        await self.blobs.delete(file_id)
        log.info("delete_file id=%s", file_id)
        return record
