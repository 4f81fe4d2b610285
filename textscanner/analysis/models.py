"""Request and response schemas for the analysis service.

Request fields are optional so a missing value is reported as invalid input (400)
by the service rather than as a schema error.
"""

from typing import Optional

from pydantic import BaseModel


class AnalyzeRequest(BaseModel):
    file_id: Optional[str] = None


class AnalyzeResponse(BaseModel):
    """Either ``duplicate_of`` alone, or the file id with its statistics."""

    file_id: Optional[str] = None
    duplicate_of: Optional[str] = None
    paragraphs: Optional[int] = None
    words: Optional[int] = None
    chars: Optional[int] = None


class StatsResponse(BaseModel):
    file_id: Optional[str] = None
    paragraphs: int
    words: int
    chars: int
    chars_no_spaces: int


class CompareRequest(BaseModel):
    file_id: Optional[str] = None
    other_file_id: Optional[str] = None


class TextCompareRequest(BaseModel):
    text: Optional[str] = None
    other_text: Optional[str] = None


class TextStatisticsRequest(BaseModel):
    text: Optional[str] = None


class CompareResponse(BaseModel):
    identical: bool
    jaccard_similarity: float


class CloudResponse(BaseModel):
    file_id: str
    word_cloud_url: str


class CacheDeleteResponse(BaseModel):
    message: str
    file_id: str
