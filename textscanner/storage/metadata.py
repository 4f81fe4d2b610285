"""Metadata persistence: a JSON snapshot file or a SQLite table, both rewritten on every mutation."""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import delete, select

from textscanner.config import Settings
from textscanner.core.errors import ComputationError
from textscanner.core.identity import FileRecord, MetadataStore
from textscanner.db.session import create_engine_for, create_session_factory, init_db, session_scope
from textscanner.storage.models import FileRecordRow

log = logging.getLogger(__name__)

_RECORDS = TypeAdapter(Dict[str, FileRecord])


class JsonMetadataStore:
    """id -> FileRecord in one JSON file. Each write goes to its own temp file that then replaces the original."""

    def __init__(self, path: Path) -> None:
        self.path = path

    async def init(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    async def load(self) -> Dict[str, FileRecord]:
        if not self.path.exists():
            log.info("Metadata file not found: %s (starting empty)", self.path)
            return {}
        raw = await asyncio.to_thread(self.path.read_bytes)
        try:
            return _RECORDS.validate_json(raw)
        except ValidationError as e:
            raise ComputationError(f"corrupt metadata file {self.path}: {e}", operation="load metadata") from e

    async def save(self, records: Dict[str, FileRecord]) -> None:
        payload = json.dumps(_RECORDS.dump_python(records, mode="json"), indent=2, ensure_ascii=False)
        await asyncio.to_thread(self._write, payload)
        log.debug("Saved %d records to %s", len(records), self.path)

    def _write(self, payload: str) -> None:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f"{self.path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp.write(payload)
        try:
            os.replace(tmp.name, self.path)
        except OSError:
            os.unlink(tmp.name)
            raise

    async def close(self) -> None:
        pass


class SqlMetadataStore:
    """id -> FileRecord in the ``file_records`` table. Each save replaces all rows in one transaction."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._engine = create_engine_for(db_path)
        self._sessions = create_session_factory(self._engine)

    async def init(self) -> None:
        await init_db(self._engine)

    async def load(self) -> Dict[str, FileRecord]:
        async with session_scope(self._sessions) as session:
            result = await session.execute(select(FileRecordRow))
            rows = result.scalars().all()
        return {row.id: row.to_record() for row in rows}

    async def save(self, records: Dict[str, FileRecord]) -> None:
        async with session_scope(self._sessions) as session:
            await session.execute(delete(FileRecordRow))
            session.add_all([FileRecordRow.from_record(r) for r in records.values()])
        log.debug("Saved %d records to %s", len(records), self.db_path)

    async def close(self) -> None:
        await self._engine.dispose()


def create_metadata_store(settings: Settings) -> MetadataStore:
    """Pick the metadata backend from settings."""
    if settings.metadata_backend == "sqlite":
        log.info("Metadata backend: sqlite (%s)", settings.database_path)
        return SqlMetadataStore(settings.database_path)
    log.info("Metadata backend: json (%s)", settings.metadata_file)
    return JsonMetadataStore(settings.metadata_file)
