"""
Coordinator Result Models

Records produced by the index coordinator for ingestion runs, queries,
and status reads. The HTTP layer returns them unchanged.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict


class IngestResult(BaseModel):
    """
    Outcome of an ingestion run.

    `files_processed` counts distinct logical sources; every workbook
    sheet is its own source.
    """
    success: bool
    documents_ingested: int = Field(..., ge=0)
    files_processed: int = Field(..., ge=0)
    message: str

    model_config = ConfigDict(extra="forbid")


class AppStatus(BaseModel):
    """
    Read-only view of the installed index and model selection.
    """
    is_indexed: bool
    document_count: int = Field(..., ge=0)
    data_folder: Optional[str] = None
    selected_model: str

    model_config = ConfigDict(extra="forbid")


class QueryResult(BaseModel):
    """
    Answer plus one citation per retrieved row, in retrieval order.
    """
    answer: str
    sources: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")
