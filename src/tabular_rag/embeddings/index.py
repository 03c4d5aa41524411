"""
FAISS Vector Index

This module implements the immutable, in-memory vector index built over one
ingestion run's documents.

Key Properties
--------------
- Built in one all-or-nothing bulk operation
- Never mutated after construction; a rebuild produces a new instance
- Carries the Embedder it was built with, so queries are always embedded
  in the same space as the documents
- Cosine similarity via inner product over L2-normalized vectors
- Deterministic ranking: ties are ordered by insertion position
"""

from __future__ import annotations

import logging
from typing import List, Protocol, Sequence, Tuple

import faiss
import numpy as np

from .models import IndexedDocument
from ..core.errors import (
    EmbeddingServiceError,
    EmptyBatchError,
    SearchServiceError,
    ServiceError,
    ServiceProtocolError,
)
from ..ingestion.models import NormalizedDocument

logger = logging.getLogger("tabular_rag.index")


class TextEmbedder(Protocol):
    """Anything that can embed text the way Embedder does."""

    model: str

    async def embed(self, texts: Sequence[str]) -> List[List[float]]:
        ...


# ---------------------------------------------------------------------
# Vector Index
# ---------------------------------------------------------------------

class VectorIndex:
    """
    Read-only nearest-neighbour index over IndexedDocuments.

    Instances are created with `await VectorIndex.build(...)`. Searching is
    safe from any number of concurrent tasks because nothing is mutated.
    """

    def __init__(
        self,
        documents: Tuple[IndexedDocument, ...],
        faiss_index: faiss.Index,
        embedder: TextEmbedder,
    ) -> None:
        self._documents = documents
        self._index = faiss_index
        self._embedder = embedder

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    async def build(
        cls,
        documents: Sequence[NormalizedDocument],
        embedder: TextEmbedder,
    ) -> "VectorIndex":
        """
        Embed every document and build a new index.

        Raises
        ------
        EmptyBatchError
            If `documents` is empty.
        EmbeddingServiceError
            If the embedding service fails or returns unusable vectors.
        """
        if not documents:
            raise EmptyBatchError("No documents to embed")

        try:
            embeddings = await embedder.embed([doc.content for doc in documents])
            if len(embeddings) != len(documents):
                raise ServiceProtocolError(
                    "Embedding count does not match document count."
                )
            if len({len(emb) for emb in embeddings}) != 1 or not embeddings[0]:
                raise ServiceProtocolError(
                    "Embedding vectors must be non-empty and share one dimension."
                )
        except ServiceError as exc:
            logger.error(
                "Index build failed for %d documents (%s)",
                len(documents),
                type(exc).__name__,
            )
            raise EmbeddingServiceError(
                f"Failed to build embeddings with {embedder.model}", exc
            ) from exc

        vectors = np.asarray(embeddings, dtype="float32")
        faiss.normalize_L2(vectors)

        index = faiss.IndexFlatIP(vectors.shape[1])
        index.add(vectors)

        indexed = tuple(
            IndexedDocument(document=doc, embedding=tuple(emb))
            for doc, emb in zip(documents, embeddings)
        )

        logger.info(
            "Built vector index: %d documents, dim=%d, model=%s",
            len(indexed),
            vectors.shape[1],
            embedder.model,
        )
        return cls(indexed, index, embedder)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def embedding_model(self) -> str:
        return self._embedder.model

    @property
    def dimension(self) -> int:
        return self._index.d

    @property
    def documents(self) -> Tuple[IndexedDocument, ...]:
        return self._documents

    def __len__(self) -> int:
        return len(self._documents)

    async def search(self, query: str, k: int) -> List[NormalizedDocument]:
        """
        Return up to `k` documents most similar to `query`, best first.

        Raises
        ------
        ValueError
            If `k` is negative.
        SearchServiceError
            If the query cannot be embedded.
        """
        if k < 0:
            raise ValueError("k must be non-negative")

        limit = min(k, len(self._documents))
        if limit == 0:
            return []

        try:
            embeddings = await self._embedder.embed([query])
            if len(embeddings) != 1 or len(embeddings[0]) != self.dimension:
                raise ServiceProtocolError(
                    "Query embedding does not match the index dimensionality."
                )
        except ServiceError as exc:
            logger.error("Query embedding failed (%s)", type(exc).__name__)
            raise SearchServiceError("Failed to search vector index", exc) from exc

        q = np.asarray(embeddings, dtype="float32")
        faiss.normalize_L2(q)

        scores, idxs = self._index.search(q, limit)

        hits = [
            (float(score), int(idx))
            for score, idx in zip(scores[0], idxs[0])
            if int(idx) != -1
        ]
        hits.sort(key=lambda hit: (-hit[0], hit[1]))

        return [self._documents[idx].document for _, idx in hits]
