"""
Index Lifecycle Coordinator

Owns the one installed vector index and the metadata describing it.

State Model
-----------
- Empty : no snapshot installed; queries fail with NotIndexedError
- Ready : an IndexSnapshot (index + source folder + document count) is
          installed

Consistency
-----------
The snapshot is a single immutable value replaced wholesale under a lock.
Readers grab the current reference once and work from it, so they observe
either the fully-old or the fully-new snapshot. Index builds run outside
the lock: queries issued during a rebuild keep being served from the
previous snapshot, and a failed build leaves it untouched.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from threading import RLock
from typing import Callable, List, Optional

from .responder import ChatBackend, respond
from .models import AppStatus, IngestResult, QueryResult
from ..config import settings
from ..core.errors import NotIndexedError
from ..embeddings.index import TextEmbedder, VectorIndex
from ..ingestion.loader import count_sources, load_documents
from ..ingestion.models import NormalizedDocument

logger = logging.getLogger("tabular_rag.coordinator")


@dataclass(frozen=True)
class IndexSnapshot:
    """Everything a reader needs, published as one unit."""

    index: VectorIndex
    source_folder: str
    document_count: int


class IndexCoordinator:
    """
    Coordinates ingestion, querying, and chat model selection.
    """

    def __init__(
        self,
        embedder: TextEmbedder,
        llm: ChatBackend,
        selected_model: Optional[str] = None,
        top_k: Optional[int] = None,
        loader: Callable[[str], List[NormalizedDocument]] = load_documents,
    ) -> None:
        self._embedder = embedder
        self._llm = llm
        self._loader = loader
        self._top_k = top_k or settings.top_k

        self._snapshot: Optional[IndexSnapshot] = None
        self._selected_model = selected_model or settings.default_chat_model

        self._lock = RLock()

    # ------------------------------------------------------------------
    # Read-side
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Optional[IndexSnapshot]:
        with self._lock:
            return self._snapshot

    @property
    def selected_model(self) -> str:
        with self._lock:
            return self._selected_model

    def status(self) -> AppStatus:
        snapshot = self.snapshot
        return AppStatus(
            is_indexed=snapshot is not None,
            document_count=snapshot.document_count if snapshot else 0,
            data_folder=snapshot.source_folder if snapshot else None,
            selected_model=self.selected_model,
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _install(self, snapshot: Optional[IndexSnapshot]) -> None:
        with self._lock:
            self._snapshot = snapshot

        if snapshot is None:
            logger.info("Index cleared")
        else:
            logger.info(
                "Installed index: %d documents from %s",
                snapshot.document_count,
                snapshot.source_folder,
            )

    async def ingest(self, folder_path: str) -> IngestResult:
        """
        Load `folder_path`, build a fresh index, and install it.

        A folder with no usable rows is not an error: the coordinator
        returns to Empty and reports success=False.

        Raises
        ------
        InputError, ParseError
            From the loader; the current snapshot is left untouched.
        EmbeddingServiceError
            If the build fails; the current snapshot is left untouched.
        """
        documents = await asyncio.to_thread(self._loader, folder_path)

        if not documents:
            self._install(None)
            return IngestResult(
                success=False,
                documents_ingested=0,
                files_processed=0,
                message="No supported files found or all files were empty",
            )

        files_processed = count_sources(documents)
        index = await VectorIndex.build(documents, self._embedder)

        self._install(
            IndexSnapshot(
                index=index,
                source_folder=folder_path,
                document_count=len(index),
            )
        )

        return IngestResult(
            success=True,
            documents_ingested=len(index),
            files_processed=files_processed,
            message=(
                f"Successfully indexed {len(index)} rows "
                f"from {files_processed} source(s)"
            ),
        )

    async def query(self, text: str) -> QueryResult:
        """
        Answer a question from the installed index.

        Raises
        ------
        NotIndexedError
            If nothing has been ingested yet.
        SearchServiceError, GenerationServiceError
            If a service call fails.
        """
        snapshot = self.snapshot
        if snapshot is None:
            raise NotIndexedError()

        retrieved = await snapshot.index.search(text, self._top_k)
        answer, sources = await respond(
            text,
            retrieved,
            self.selected_model,
            self._llm,
        )
        return QueryResult(answer=answer, sources=sources)

    def select_model(self, model_name: str) -> None:
        with self._lock:
            self._selected_model = model_name
        logger.info("Selected chat model: %s", model_name)
