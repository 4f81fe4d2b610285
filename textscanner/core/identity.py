"""Content identity: SHA-256 digests of uploaded bytes and the digest -> canonical id index."""

import asyncio
import hashlib
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict

from textscanner.core.errors import ComputationError, InvalidInputError, NotFoundError

log = logging.getLogger(__name__)


class FileRecord(BaseModel):
    """Metadata of one uploaded file. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    content_hash: str  # SHA-256 hex
    original_name: str = ""
    stored_name: str = ""
    content_type: str = "text/plain"
    size: int
    uploaded_at: datetime
    duplicate_of: Optional[str] = None

    @property
    def is_duplicate(self) -> bool:
        return self.duplicate_of is not None


class HashIndex(Protocol):
    """digest -> canonical file id."""

    def get(self, digest: str) -> Optional[str]: ...

    def set(self, digest: str, file_id: str) -> None: ...

    def remove(self, digest: str) -> None: ...


class InMemoryHashIndex:
    """Dict-backed HashIndex. Callers serialize mutations (ContentIdentityIndex holds the lock)."""

    def __init__(self) -> None:
        self._by_hash: Dict[str, str] = {}

    def get(self, digest: str) -> Optional[str]:
        return self._by_hash.get(digest)

    def set(self, digest: str, file_id: str) -> None:
        self._by_hash[digest] = file_id

    def remove(self, digest: str) -> None:
        self._by_hash.pop(digest, None)

    def __len__(self) -> int:
        return len(self._by_hash)


class MetadataStore(Protocol):
    """Durable id -> FileRecord storage, always written as a full snapshot."""

    async def init(self) -> None: ...

    async def close(self) -> None: ...

    async def load(self) -> Dict[str, FileRecord]: ...

    async def save(self, records: Dict[str, FileRecord]) -> None: ...


def compute_hash(body: bytes) -> str:
    """SHA-256 hex digest of file body."""
    return hashlib.sha256(body).hexdigest()


class ContentIdentityIndex:
    """
    Assigns file ids and detects byte-exact duplicates.

    The first record registered for a digest is canonical; later records with the
    same digest get their own id and point at it through ``duplicate_of``. All
    mutations and the metadata snapshot write happen under one lock, and memory is
    only updated after the snapshot succeeds, so a failed or cancelled call leaves
    the index as it was. A cancelled call still holds the lock until its in-flight
    save finishes and the previous snapshot is written back over it.

    Removing a canonical record frees its digest: the next upload of the same bytes
    becomes canonical again, while older duplicates keep pointing at the removed id.
    """

    def __init__(
        self,
        store: Optional[MetadataStore] = None,
        hash_index: Optional[HashIndex] = None,
    ) -> None:
        self._store = store
        self._hashes: HashIndex = hash_index if hash_index is not None else InMemoryHashIndex()
        self._records: Dict[str, FileRecord] = {}
        self._lock = asyncio.Lock()

    async def load(self) -> int:
        """Load records from the store and rebuild the digest index. Returns record count."""
        if self._store is None:
            return 0
        loaded = await self._store.load()
        async with self._lock:
            self._records = dict(loaded)
            for record in sorted(loaded.values(), key=lambda r: r.uploaded_at):
                if record.duplicate_of is None and self._hashes.get(record.content_hash) is None:
                    self._hashes.set(record.content_hash, record.id)
        log.info("Loaded %d file records", len(loaded))
        return len(loaded)

    async def register(
        self,
        content: bytes,
        *,
        file_id: Optional[str] = None,
        original_name: str = "",
        stored_name: str = "",
        content_type: str = "text/plain",
    ) -> FileRecord:
        """
        Hash ``content`` and record it under a fresh id (or ``file_id`` when given).

        Registering an id that already exists returns its record unchanged.
        """
        if not content:
            raise InvalidInputError("Content must not be empty")
        try:
            digest = compute_hash(content)
        except Exception as e:
            raise ComputationError(str(e), operation="hash", file_id=file_id) from e

        async with self._lock:
            if file_id is not None and file_id in self._records:
                return self._records[file_id]
            new_id = file_id or str(uuid.uuid4())
            canonical = self._hashes.get(digest)
            duplicate_of = canonical if canonical is not None and canonical != new_id else None
            record = FileRecord(
                id=new_id,
                content_hash=digest,
                original_name=original_name,
                stored_name=stored_name,
                content_type=content_type,
                size=len(content),
                uploaded_at=datetime.now(timezone.utc),
                duplicate_of=duplicate_of,
            )
            records = dict(self._records)
            records[new_id] = record
            await self._persist(records, file_id=new_id)
            self._records = records
            if duplicate_of is None:
                self._hashes.set(digest, new_id)

        log.info("register id=%s hash=%s duplicate_of=%s", new_id, digest[:12], duplicate_of)
        return record

    async def remove(self, file_id: str, missing_ok: bool = False) -> Optional[FileRecord]:
        """Drop a record; frees its digest only if it was the canonical one."""
        async with self._lock:
            record = self._records.get(file_id)
            if record is None:
                if missing_ok:
                    return None
                raise NotFoundError(f"File not found: {file_id}", file_id=file_id)
            records = dict(self._records)
            del records[file_id]
            await self._persist(records, file_id=file_id)
            self._records = records
            if self._hashes.get(record.content_hash) == file_id:
                self._hashes.remove(record.content_hash)
        log.info("remove id=%s was_canonical=%s", file_id, record.duplicate_of is None)
        return record

    def get(self, file_id: str) -> FileRecord:
        record = self._records.get(file_id)
        if record is None:
            raise NotFoundError(f"File not found: {file_id}", file_id=file_id)
        return record

    def records(self) -> List[FileRecord]:
        """All records, oldest first."""
        return sorted(self._records.values(), key=lambda r: r.uploaded_at)

    def canonical_id(self, digest: str) -> Optional[str]:
        return self._hashes.get(digest)

    def __contains__(self, file_id: object) -> bool:
        return file_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    async def _persist(self, records: Dict[str, FileRecord], file_id: Optional[str]) -> None:
        if self._store is None:
            return
        # A store may write from a worker thread that cancellation cannot stop
        save = asyncio.ensure_future(self._store.save(records))
        try:
            await asyncio.shield(save)
        except asyncio.CancelledError:
            restore = asyncio.ensure_future(self._restore_after(save))
            while not restore.done():
                try:
                    await asyncio.shield(restore)
                except asyncio.CancelledError:
                    continue
            raise
        except Exception as e:
            log.exception("Saving metadata failed")
            raise ComputationError(str(e), operation="save metadata", file_id=file_id) from e

    async def _restore_after(self, save: "asyncio.Future[None]") -> None:
        """Wait for an abandoned save, then write the committed snapshot back over it."""
        try:
            await save
        except Exception:
            log.warning("Abandoned metadata save failed; store keeps the previous snapshot")
            return
        try:
            await self._store.save(self._records)
        except Exception:
            log.exception("Could not restore metadata snapshot after a cancelled change")
        else:
            log.info("Cancelled change rolled back in store (%d records)", len(self._records))
