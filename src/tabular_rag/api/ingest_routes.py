"""
Ingestion Routes

This module exposes endpoints for:
- Building (or fully rebuilding) the index from a folder of tabular files
- Reading the current index status

A rebuild never mutates the installed index; the new one replaces it only
once it has been built successfully.
"""

from fastapi import APIRouter, Depends, status
from typing import Annotated

from .models import IngestRequest
from ..rag.models import AppStatus, IngestResult
from .dependencies import get_coordinator
from ..rag.coordinator import IndexCoordinator

router = APIRouter(tags=["ingestion"])


@router.post(
    "/ingest",
    response_model=IngestResult,
    summary="Ingest a folder of CSV / Excel files and rebuild the index",
    status_code=status.HTTP_200_OK,
)
async def ingest(
    req: IngestRequest,
    coordinator: Annotated[IndexCoordinator, Depends(get_coordinator)],
) -> IngestResult:
    """
    Load every supported file in `folder_path` and install a new index.

    Input, parse and embedding failures are rendered by the global
    pipeline error handler and leave the previous index in place.
    """
    return await coordinator.ingest(req.folder_path)


@router.get(
    "/status",
    response_model=AppStatus,
    summary="Current index status",
)
async def get_status(
    coordinator: Annotated[IndexCoordinator, Depends(get_coordinator)],
) -> AppStatus:
    return coordinator.status()
