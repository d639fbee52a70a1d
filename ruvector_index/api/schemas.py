"""
Request/response models for the index HTTP API.
"""

from pydantic import BaseModel, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime


class InsertRequest(BaseModel):
    text: str
    metadata: Optional[Dict[str, Any]] = None

    @field_validator('text')
    @classmethod
    def text_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('text cannot be empty')
        return v

class InsertResponse(BaseModel):
    id: str

class BatchInsertRequest(BaseModel):
    texts: List[str]
    metadata: Optional[List[Optional[Dict[str, Any]]]] = None

    @field_validator('texts')
    @classmethod
    def texts_must_not_be_empty(cls, v):
        if not v:
            raise ValueError('texts cannot be empty')
        if any(not t.strip() for t in v):
            raise ValueError('texts cannot contain empty strings')
        return v

class BatchInsertResponse(BaseModel):
    ids: List[str]

class SearchRequest(BaseModel):
    query: str
    k: int = 5
    filters: Optional[Dict[str, Any]] = None

    @field_validator('k')
    @classmethod
    def k_must_be_positive(cls, v):
        if v < 1:
            raise ValueError('k must be >= 1')
        return v

class SearchHit(BaseModel):
    id: str
    text: str
    score: float
    metadata: Optional[Dict[str, Any]] = None

class SearchResponse(BaseModel):
    results: List[SearchHit]

class VectorResponse(BaseModel):
    id: str
    text: str
    vector: List[float]

class DeleteResponse(BaseModel):
    deleted: bool

class ClearResponse(BaseModel):
    cleared: bool

class RagRequest(BaseModel):
    query: str
    top_k: Optional[int] = None

    @field_validator('top_k')
    @classmethod
    def top_k_must_be_positive(cls, v):
        if v is not None and v < 1:
            raise ValueError('top_k must be >= 1')
        return v

class RagResponse(BaseModel):
    contexts: List[str]
    prompt: str

class HealthResponse(BaseModel):
    status: str
    version: str
    index_name: str
    size: int
    dimension: int
    distance: str
    store: str

class ErrorResponse(BaseModel):
    error_type: str
    message: str
    timestamp: datetime = None
    details: Optional[Dict[str, Any]] = None

    def __init__(self, **data):
        super().__init__(timestamp=datetime.now(), **data)
