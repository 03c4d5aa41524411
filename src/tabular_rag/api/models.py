"""
API Models

This module defines the Pydantic request models accepted by the ingestion,
query, and model-selection endpoints, plus the generic mutation result.

Response bodies are the domain records from `rag.models` and
`llm.models`, returned as-is.

Design Goals
------------
- Strong typing
- Unknown fields rejected
- Clear schema documentation
"""

from __future__ import annotations

from typing import Literal
from pydantic import BaseModel, Field, ConfigDict


# ---------------------------------------------------------------------
# Generic
# ---------------------------------------------------------------------

class OperationResult(BaseModel):
    """
    Standardized mutation operation result.
    """
    status: Literal["updated"]

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------

class IngestRequest(BaseModel):
    """
    Request to (re)build the index from a folder of tabular files.
    """
    folder_path: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")


class QueryRequest(BaseModel):
    """
    Question to answer from the indexed rows.
    """
    query: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")


class ModelSelectRequest(BaseModel):
    model_name: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")
