"""File API routes: upload, list, download, metadata, delete."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import FileResponse

from textscanner.core.identity import FileRecord
from textscanner.storage.models import FileDeleteResponse, FileListResponse, FileUploadResponse
from textscanner.storage.service import FileService

router = APIRouter(prefix="/files", tags=["files"])
log = logging.getLogger(__name__)


def get_file_service(request: Request) -> FileService:
    """FastAPI dependency: the FileService created at startup."""
    return request.app.state.file_service


def _content_type(request: Request) -> str:
    """Media type of the upload body without parameters; defaults to text/plain."""
    raw = request.headers.get("content-type") or ""
    return raw.split(";", 1)[0].strip() or "text/plain"


@router.post("", response_model=FileUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    request: Request,
    service: Annotated[FileService, Depends(get_file_service)],
    filename: Optional[str] = None,
) -> FileUploadResponse:
    """
    Upload a file. Query param: filename (must end in an allowed extension). Body: raw file bytes.
    Byte-identical uploads get their own id and report the canonical id in duplicate_of.
    """
    body = await request.body()
    log.info("upload_file request filename=%r size=%d", filename, len(body))
    return await service.upload(filename, body, content_type=_content_type(request))


@router.get("", response_model=FileListResponse)
async def list_files(service: Annotated[FileService, Depends(get_file_service)]) -> FileListResponse:
    """List all stored files, oldest first."""
    return service.list_files()


@router.get("/{file_id}")
async def download_file(
    file_id: str,
    service: Annotated[FileService, Depends(get_file_service)],
) -> FileResponse:
    """Raw file content."""
    target, record = service.locate(file_id)
    log.info("download_file id=%s", record.id)
    return FileResponse(
        path=target,
        filename=record.original_name or target.name,
        media_type="text/plain; charset=utf-8",
    )


@router.get("/{file_id}/metadata", response_model=FileRecord)
async def file_metadata(
    file_id: str,
    service: Annotated[FileService, Depends(get_file_service)],
) -> FileRecord:
    """Stored record including content hash and duplicate_of."""
    return service.get_metadata(file_id)


@router.delete("/{file_id}", response_model=FileDeleteResponse)
async def delete_file(
    file_id: str,
    service: Annotated[FileService, Depends(get_file_service)],
) -> FileDeleteResponse:
    """Delete a file and its record."""
    record = await service.delete(file_id)
    return FileDeleteResponse(message="File deleted", file_id=record.id)
