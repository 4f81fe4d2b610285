"""Analysis API routes: analyze, stats, compare, word cloud, cache."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from textscanner.analysis.models import (
    AnalyzeRequest,
    AnalyzeResponse,
    CacheDeleteResponse,
    CloudResponse,
    CompareRequest,
    CompareResponse,
    StatsResponse,
    TextCompareRequest,
    TextStatisticsRequest,
)
from textscanner.analysis.service import AnalysisService
from textscanner.core.similarity import ComparisonResult

router = APIRouter(tags=["analysis"])
log = logging.getLogger(__name__)


def get_analysis_service(request: Request) -> AnalysisService:
    """FastAPI dependency: the AnalysisService created at startup."""
    return request.app.state.analysis_service


def _compare_response(result: ComparisonResult) -> CompareResponse:
    return CompareResponse(identical=result.identical, jaccard_similarity=result.similarity)


@router.post("/analyze", response_model=AnalyzeResponse, response_model_exclude_none=True)
async def analyze_file(
    body: AnalyzeRequest,
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
) -> AnalyzeResponse:
    """Statistics for a new file, or duplicate_of when its content was already analyzed."""
    return AnalyzeResponse(**await service.analyze(body.file_id))


@router.get("/stats/{file_id}", response_model=StatsResponse)
async def get_stats(
    file_id: str,
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
) -> StatsResponse:
    stats = await service.statistics(file_id)
    return StatsResponse(file_id=file_id, **stats.as_dict())


@router.post("/statistics/text", response_model=StatsResponse, response_model_exclude_none=True)
async def text_stats(
    body: TextStatisticsRequest,
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
) -> StatsResponse:
    """Statistics of raw text in the request body."""
    return StatsResponse(**service.text_statistics(body.text).as_dict())


@router.post("/compare", response_model=CompareResponse)
async def compare_files(
    body: CompareRequest,
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
) -> CompareResponse:
    """Jaccard similarity of two stored files."""
    return _compare_response(await service.compare_files(body.file_id, body.other_file_id))


@router.post("/compare/text", response_model=CompareResponse)
async def compare_text(
    body: TextCompareRequest,
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
) -> CompareResponse:
    """Jaccard similarity of two texts in the request body."""
    return _compare_response(service.compare_texts(body.text, body.other_text))


@router.get("/cloud/{file_id}", response_model=CloudResponse)
async def get_word_cloud(
    file_id: str,
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
) -> CloudResponse:
    """URL of a rendered word cloud for the file."""
    url = await service.word_cloud(file_id)
    return CloudResponse(file_id=file_id, word_cloud_url=url)


@router.delete("/cache/{file_id}", response_model=CacheDeleteResponse)
async def remove_from_cache(
    file_id: str,
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
) -> CacheDeleteResponse:
    """Forget a deleted file so its content can become canonical again."""
    removed = await service.forget(file_id)
    message = "File removed from cache" if removed else "File was not cached"
    return CacheDeleteResponse(message=message, file_id=file_id)
