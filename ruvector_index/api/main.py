"""
HTTP API over a single semantic index.

The index is not internally synchronized, and FastAPI runs sync endpoints in
a worker threadpool, so every index call goes through _index_lock.
"""

import threading
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .schemas import (
    BatchInsertRequest,
    BatchInsertResponse,
    ClearResponse,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    InsertRequest,
    InsertResponse,
    RagRequest,
    RagResponse,
    SearchHit,
    SearchRequest,
    SearchResponse,
    VectorResponse,
)
from ..core.config import (
    VERSION,
    debug_enabled,
    get_default_config,
    get_embedding_provider,
    get_index_name,
)
from ..core.errors import (
    DimensionMismatch,
    EmbeddingError,
    IndexCreationError,
    InvalidConfiguration,
    RuVectorError,
    StoreError,
)
from ..util.logging import logger
from ..vector.rag import RagPipeline
from ..vector.semantic_index import RuVectorEmbeddings, match_metadata

app = FastAPI(
    title="RuVector Index API",
    version=VERSION,
    description="Semantic vector index with retrieval-augmented generation helpers",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)

_index_lock = threading.Lock()
_index: Optional[RuVectorEmbeddings] = None


def get_index() -> RuVectorEmbeddings:
    """Lazily build the process-wide index from environment configuration."""
    global _index
    with _index_lock:
        if _index is None:
            _index = RuVectorEmbeddings.create(
                get_index_name(),
                get_embedding_provider(),
                get_default_config()
            )
        return _index


def reset_index() -> None:
    """Drop the process-wide index so the next request rebuilds it."""
    global _index
    with _index_lock:
        _index = None


_STATUS_CODES = {
    DimensionMismatch: 400,
    InvalidConfiguration: 400,
    EmbeddingError: 502,
    StoreError: 500,
    IndexCreationError: 500,
}


@app.exception_handler(RuVectorError)
async def ruvector_error_handler(request: Request, exc: RuVectorError):
    status_code = 500
    for error_type, code in _STATUS_CODES.items():
        if isinstance(exc, error_type):
            status_code = code
            break

    details = None
    if isinstance(exc, DimensionMismatch):
        details = {"expected": exc.expected, "actual": exc.actual}

    logger.log_operation(f"api.{request.url.path}", "failed", {
        "error_type": type(exc).__name__,
        "message": str(exc)
    })
    body = ErrorResponse(error_type=type(exc).__name__, message=str(exc), details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint(index: RuVectorEmbeddings = Depends(get_index)):
    """Report index size and configuration."""
    with _index_lock:
        stats = index.stats()

    return HealthResponse(
        status="healthy",
        version=VERSION,
        index_name=stats["name"],
        size=stats["size"],
        dimension=stats["dimension"],
        distance=stats["distance"],
        store=stats["store"]
    )


@app.post("/index/insert", response_model=InsertResponse)
def insert_endpoint(request: InsertRequest, index: RuVectorEmbeddings = Depends(get_index)):
    """Embed and insert one text."""
    with _index_lock:
        vector_id = index.insert(request.text, request.metadata)
    return InsertResponse(id=vector_id)


@app.post("/index/documents", response_model=BatchInsertResponse)
def insert_documents_endpoint(request: BatchInsertRequest, index: RuVectorEmbeddings = Depends(get_index)):
    """Embed and insert a batch of texts."""
    with _index_lock:
        ids = index.insert_batch(request.texts, request.metadata)
    return BatchInsertResponse(ids=ids)


@app.post("/index/search", response_model=SearchResponse)
def search_endpoint(request: SearchRequest, index: RuVectorEmbeddings = Depends(get_index)):
    """Semantic search; with filters, only hits whose metadata matches every filter value."""
    with _index_lock:
        if request.filters:
            results = index.search_filtered(request.query, request.k, match_metadata(request.filters))
        else:
            results = index.search(request.query, request.k)

    return SearchResponse(results=[SearchHit(**r.to_dict()) for r in results])


@app.get("/index/vectors/{vector_id}", response_model=VectorResponse)
def get_vector_endpoint(vector_id: str, index: RuVectorEmbeddings = Depends(get_index)):
    """Fetch the text and vector stored under an id."""
    with _index_lock:
        found = index.get(vector_id)

    if found is None:
        raise HTTPException(status_code=404, detail=f"Vector not found: {vector_id}")

    text, vector = found
    return VectorResponse(id=vector_id, text=text, vector=[float(x) for x in vector])


@app.delete("/index/vectors/{vector_id}", response_model=DeleteResponse)
def delete_vector_endpoint(vector_id: str, index: RuVectorEmbeddings = Depends(get_index)):
    """Delete one vector. Deleting an unknown id reports deleted=false."""
    with _index_lock:
        deleted = index.delete(vector_id)
    return DeleteResponse(deleted=deleted)


@app.delete("/index", response_model=ClearResponse)
def clear_index_endpoint(index: RuVectorEmbeddings = Depends(get_index)):
    """Remove every vector from the index."""
    with _index_lock:
        index.clear()
    return ClearResponse(cleared=True)


@app.post("/rag/context", response_model=RagResponse)
def rag_context_endpoint(request: RagRequest, index: RuVectorEmbeddings = Depends(get_index)):
    """Retrieve context for a query and assemble the prompt."""
    pipeline = RagPipeline(index, request.top_k)
    with _index_lock:
        contexts = pipeline.retrieve(request.query)

    return RagResponse(contexts=contexts, prompt=RagPipeline.build_prompt(request.query, contexts))
