"""Analysis of stored files: duplicate check, statistics, comparison and word clouds."""

import asyncio
import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from textscanner.analysis.client import StorageClient
from textscanner.config import Settings
from textscanner.core.errors import ComputationError, InvalidInputError, TextScannerError
from textscanner.core.identity import ContentIdentityIndex
from textscanner.core.similarity import ComparisonResult, compare_texts
from textscanner.core.statistics import TextStatistics, calculate_statistics
from textscanner.core.text import decode_text
from textscanner.core.validation import validate_file_id
from textscanner.core.wordcloud import build_word_cloud_url

log = logging.getLogger(__name__)


@contextmanager
def _computing(operation: str, file_id: Optional[str] = None) -> Iterator[None]:
    """Wrap unexpected failures in ComputationError with the operation and file id."""
    try:
        yield
    except TextScannerError:
        raise
    except Exception as e:
        log.exception("%s failed for file %s", operation, file_id)
        raise ComputationError(str(e), operation=operation, file_id=file_id) from e


class AnalysisService:
    """
    Works on file ids; content always comes from the storage service.

    Keeps a memory-only duplicate index keyed by the storage file id and a
    statistics cache. Neither survives a restart.
    """

    def __init__(self, settings: Settings, client: Optional[StorageClient] = None) -> None:
        self.settings = settings
        self.client = client or StorageClient(
            settings.storage_service_url,
            timeout=settings.storage_timeout_seconds,
        )
        self.duplicates = ContentIdentityIndex()
        self._stats: Dict[str, TextStatistics] = {}

    async def fetch_text(self, file_id: str) -> str:
        body = await self.client.get_content(file_id)
        return decode_text(body)

    async def analyze(self, file_id: Optional[str]) -> dict:
        """Duplicate check first; statistics only for files whose content was not seen before."""
        if not file_id:
            raise InvalidInputError("file_id is required")
        file_id = validate_file_id(file_id)
        body = await self.client.get_content(file_id)
        if body:
            record = await self.duplicates.register(body, file_id=file_id)
            if record.duplicate_of is not None:
                log.info("analyze id=%s duplicate_of=%s", file_id, record.duplicate_of)
                return {"duplicate_of": record.duplicate_of}
        with _computing("statistics", file_id):
            stats = calculate_statistics(decode_text(body))
        self._stats[file_id] = stats
        log.info("analyze id=%s paragraphs=%d words=%d", file_id, stats.paragraphs, stats.words)
        return {
            "file_id": file_id,
            "paragraphs": stats.paragraphs,
            "words": stats.words,
            "chars": stats.chars,
        }

    async def statistics(self, file_id: str) -> TextStatistics:
        """Cached statistics, computed from storage on a miss."""
        file_id = validate_file_id(file_id)
        cached = self._stats.get(file_id)
        if cached is not None:
            return cached
        text = await self.fetch_text(file_id)
        with _computing("statistics", file_id):
            stats = calculate_statistics(text)
        self._stats[file_id] = stats
        return stats

    def text_statistics(self, text: Optional[str]) -> TextStatistics:
        return calculate_statistics(text)

    async def compare_files(
        self,
        file_id: Optional[str],
        other_file_id: Optional[str],
    ) -> ComparisonResult:
        """Fetch both files concurrently and compare their word sets."""
        if not file_id or not other_file_id:
            raise InvalidInputError("Both file_id and other_file_id are required")
        file_id = validate_file_id(file_id)
        other_file_id = validate_file_id(other_file_id)
        fetches = [
            asyncio.ensure_future(self.fetch_text(file_id)),
            asyncio.ensure_future(self.fetch_text(other_file_id)),
        ]
        try:
            text_a, text_b = await asyncio.gather(*fetches)
        except BaseException:
            # First failure wins; the other fetch is cancelled and its outcome collected
            for fetch in fetches:
                fetch.cancel()
            await asyncio.gather(*fetches, return_exceptions=True)
            raise
        with _computing("compare", file_id):
            result = compare_texts(text_a, text_b)
        log.info(
            "compare %s %s identical=%s similarity=%.3f",
            file_id, other_file_id, result.identical, result.similarity,
        )
        return result

    def compare_texts(self, text: Optional[str], other_text: Optional[str]) -> ComparisonResult:
        return compare_texts(text, other_text)

    async def word_cloud(self, file_id: str) -> str:
        file_id = validate_file_id(file_id)
        text = await self.fetch_text(file_id)
        with _computing("word cloud", file_id):
            return build_word_cloud_url(
                text,
                base_url=self.settings.wordcloud_base_url,
                max_words=self.settings.wordcloud_max_words,
                min_length=self.settings.wordcloud_min_word_length,
            )

    async def forget(self, file_id: str) -> bool:
        """Drop a file from the duplicate index and statistics cache. Returns False if unknown."""
        file_id = validate_file_id(file_id)
        removed = await self.duplicates.remove(file_id, missing_ok=True)
        cached = self._stats.pop(file_id, None)
        log.info("forget id=%s indexed=%s cached=%s", file_id, removed is not None, cached is not None)
        return removed is not None or cached is not None
