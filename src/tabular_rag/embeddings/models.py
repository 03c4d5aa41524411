"""
Embedding Data Models

This module defines the record stored for each row in the vector index.

Each instance corresponds to ONE embedding vector and ONE normalized row.
"""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, Field, ConfigDict

from ..ingestion.models import NormalizedDocument


class IndexedDocument(BaseModel):
    """
    A normalized row together with its embedding vector.

    Created once per row at build time and never modified afterwards.
    """

    document: NormalizedDocument

    embedding: Tuple[float, ...] = Field(
        ...,
        min_length=1,
        description="Raw (un-normalized) embedding returned by the service.",
    )

    model_config = ConfigDict(
        extra="forbid",          # Prevent schema injection
        frozen=True,            # Make instances immutable once created
    )
