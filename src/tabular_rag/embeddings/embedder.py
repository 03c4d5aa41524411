"""
Embedding Client

This module implements the embedding client used for both index builds and
query-time search. It talks to the Ollama `/api/embed` endpoint and is
responsible for:

- Batching of text inputs
- Network and transport error isolation
- Strict response validation (count and dimensionality)

The class is stateless and safe to reuse across requests. The model name it
carries is the embedding space an index built with it lives in.
"""

from __future__ import annotations

from typing import List, Sequence, Optional
import logging

import httpx

from ..config import settings
from ..core.errors import ServiceProtocolError
from ..core.http import request_json
from ..llm.schemas import EmbedResponse

logger = logging.getLogger("tabular_rag.embedder")


class Embedder:
    """
    Asynchronous embedding generator for batches of text.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        batch_size: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize an Embedder.

        Parameters
        ----------
        model : Optional[str]
            Embedding model name. Defaults to settings.embedding_model.

        base_url : Optional[str]
            Ollama host. Defaults to settings.ollama_host.

        timeout : Optional[float]
            HTTP timeout for each request.

        batch_size : Optional[int]
            Maximum number of texts per request.

        transport : Optional[httpx.AsyncBaseTransport]
            Custom transport, used by tests.
        """
        self.model = model or settings.embedding_model
        self.base_url = (base_url or settings.ollama_host).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self.batch_size = batch_size or settings.embedding_batch_size
        self._transport = transport

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def embed(self, texts: Sequence[str]) -> List[List[float]]:
        """
        Generate embeddings for a sequence of input texts.

        Returns
        -------
        List[List[float]]
            One vector per input text, in input order.

        Raises
        ------
        ServiceError
            If any batch fails or a response is malformed. No partial
            result is ever returned.
        """
        if not texts:
            return []

        url = f"{self.base_url}/api/embed"
        all_embeddings: List[List[float]] = []

        for start in range(0, len(texts), self.batch_size):
            batch = list(texts[start : start + self.batch_size])

            reply = await request_json(
                "POST",
                url,
                EmbedResponse,
                payload={"model": self.model, "input": batch},
                timeout=self.timeout,
                transport=self._transport,
            )

            if len(reply.embeddings) != len(batch):
                raise ServiceProtocolError(
                    f"Embedding count mismatch: sent {len(batch)} texts, "
                    f"received {len(reply.embeddings)} vectors."
                )

            all_embeddings.extend(reply.embeddings)
            logger.debug(
                "Embedded batch %d-%d with %s",
                start,
                start + len(batch),
                self.model,
            )

        self._validate_dimensions(all_embeddings)
        return all_embeddings

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_dimensions(embeddings: List[List[float]]) -> None:
        dim = len(embeddings[0])
        if dim == 0:
            raise ServiceProtocolError("Embedding vectors must be non-empty.")

        for index, emb in enumerate(embeddings):
            if len(emb) != dim:
                raise ServiceProtocolError(
                    f"Inconsistent embedding dimensionality at index {index}."
                )
