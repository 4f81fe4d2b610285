"""Both services wired together in one event loop: the analysis client talks to the storage app over ASGI."""

import httpx
import pytest

from textscanner.analysis.client import StorageClient
from textscanner.analysis.service import AnalysisService
from textscanner.config import Settings
from textscanner.core.errors import NotFoundError
from textscanner.storage.main import create_app as create_storage_app
from textscanner.storage.service import FileService


@pytest.mark.asyncio
async def test_upload_analyze_compare_delete(settings: Settings) -> None:
    storage_app = create_storage_app(settings)
    # ASGITransport does not run lifespan, so start the service here
    file_service = FileService(settings)
    await file_service.start()
    storage_app.state.file_service = file_service
    transport = httpx.ASGITransport(app=storage_app)
    analysis = AnalysisService(settings, client=StorageClient("http://storage", transport=transport))

    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://storage") as http:
            async def upload(body: bytes, name: str) -> dict:
                r = await http.post("/files", params={"filename": name}, content=body)
                assert r.status_code == 201
                return r.json()

            essay = "Cats purr.\n\nDogs bark loudly.".encode("utf-8")
            first = await upload(essay, "essay.txt")
            copy = await upload(essay, "essay-copy.txt")
            other = await upload(b"Dogs bark. Birds sing.", "other.txt")
            assert copy["duplicate_of"] == first["file_id"]

            analyzed = await analysis.analyze(first["file_id"])
            assert analyzed == {"file_id": first["file_id"], "paragraphs": 2, "words": 5, "chars": 29}
            assert await analysis.analyze(copy["file_id"]) == {"duplicate_of": first["file_id"]}

            same = await analysis.compare_files(first["file_id"], copy["file_id"])
            assert same.identical is True
            assert same.similarity == 1.0
            # {cats, purr, dogs, bark, loudly} vs {dogs, bark, birds, sing}
            partial = await analysis.compare_files(first["file_id"], other["file_id"])
            assert partial.identical is False
            assert partial.similarity == 0.286

            url = await analysis.word_cloud(other["file_id"])
            assert "dogs%3A1" in url

            r = await http.delete(f"/files/{first['file_id']}")
            assert r.status_code == 200
            assert await analysis.forget(first["file_id"]) is True
            with pytest.raises(NotFoundError):
                await analysis.analyze(first["file_id"])

            # The copy keeps pointing at the deleted file; a new upload is canonical in both services
            assert await analysis.analyze(copy["file_id"]) == {"duplicate_of": first["file_id"]}
            fresh = await upload(essay, "essay-again.txt")
            assert fresh["duplicate"] is False
            result = await analysis.analyze(fresh["file_id"])
            assert result["file_id"] == fresh["file_id"]
    finally:
        await file_service.stop()
