"""Pydantic schemas for the transportable metadata document."""

from typing import List, Optional

from pydantic import BaseModel, Field


class SegmentDocument(BaseModel):
    """One segment: object name plus base64 key (and nonce when independent)."""
    id: str
    key: str
    nonce: Optional[str] = None


class MetadataDocument(BaseModel):
    """Everything needed, together with the ciphertext objects, to rebuild a file."""
    file_len: int = Field(ge=0)
    segment_len: int = Field(gt=0)
    segments: List[SegmentDocument]
