"""
Query Routes

Retrieval-augmented question answering over the installed index.
"""

from fastapi import APIRouter, Depends, status
from typing import Annotated

from .models import QueryRequest
from ..rag.models import QueryResult
from .dependencies import get_coordinator
from ..rag.coordinator import IndexCoordinator

router = APIRouter(tags=["query"])


@router.post(
    "/query",
    response_model=QueryResult,
    summary="Ask a question about the ingested data",
    status_code=status.HTTP_200_OK,
)
async def ask_question(
    req: QueryRequest,
    coordinator: Annotated[IndexCoordinator, Depends(get_coordinator)],
) -> QueryResult:
    """
    Retrieve the most relevant rows and answer strictly from them.

    Returns 409 (not_indexed) before the first successful ingestion.
    """
    return await coordinator.query(req.query)
