from functools import lru_cache

from ..config import settings
from ..llm.client import OllamaClient
from ..embeddings.embedder import Embedder
from ..rag.coordinator import IndexCoordinator


@lru_cache
def get_llm_client() -> OllamaClient:
    return OllamaClient()


@lru_cache
def get_embedder() -> Embedder:
    return Embedder()


# One coordinator per process: it owns the installed index
@lru_cache
def get_coordinator() -> IndexCoordinator:
    return IndexCoordinator(
        embedder=get_embedder(),
        llm=get_llm_client(),
        selected_model=settings.default_chat_model,
        top_k=settings.top_k,
    )


def get_embedding_model_name() -> str:
    return settings.embedding_model
