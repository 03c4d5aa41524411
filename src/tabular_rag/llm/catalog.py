"""
Model Catalog

Discovery of chat-capable Ollama models and a health probe for the
service as a whole.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from .client import OllamaClient
from .schemas import TagModel
from .models import ChatModel, ServiceHealth
from ..core.errors import ServiceError, ServiceStatusError, ServiceUnavailableError

logger = logging.getLogger("tabular_rag.catalog")


# Embedding-only models are useless for answering questions
EMBEDDING_MODEL_MARKERS = (
    "nomic-embed-text",
    "all-minilm",
    "mxbai-embed-large",
    "bge-m3",
    "bge-large",
    "snowflake-arctic-embed",
    "paraphrase-multilingual",
    "granite-embedding",
    "embeddinggemma",
    "qwen3-embedding",
)


def is_embedding_model(name: str) -> bool:
    lowered = name.lower()
    return any(marker in lowered for marker in EMBEDDING_MODEL_MARKERS)


def filter_chat_models(models: Iterable[TagModel]) -> List[TagModel]:
    return [m for m in models if not is_embedding_model(m.name)]


async def list_chat_models(client: OllamaClient) -> List[ChatModel]:
    """
    List installed models suitable for free-form answering.

    Raises
    ------
    ServiceError
        If the model list cannot be fetched.
    """
    models = await client.list_models()
    return [
        ChatModel(name=m.name, size=m.size, modified_at=m.modified_at)
        for m in filter_chat_models(models)
    ]


async def check_service_health(
    client: OllamaClient,
    embedding_model: str,
) -> ServiceHealth:
    """
    Probe the Ollama server. Never raises for service failures.
    """
    try:
        models = await client.list_models()
    except ServiceUnavailableError:
        return ServiceHealth(
            is_running=False,
            has_embedding_model=False,
            chat_models_count=0,
            message="Ollama is not running. Start it with: ollama serve",
        )
    except ServiceStatusError as exc:
        return ServiceHealth(
            is_running=False,
            has_embedding_model=False,
            chat_models_count=0,
            message=f"Ollama returned error: {exc.http_status}",
        )
    except ServiceError as exc:
        logger.warning("Health probe got an unreadable model list: %s", exc)
        return ServiceHealth(
            is_running=True,
            has_embedding_model=False,
            chat_models_count=0,
            message=f"Ollama responded unexpectedly: {exc}",
        )

    has_embedding_model = any(embedding_model in m.name for m in models)
    chat_models_count = len(filter_chat_models(models))

    if has_embedding_model:
        message = "Ollama is ready"
    else:
        message = (
            f"Ollama is running but {embedding_model} is not installed. "
            f"Run: ollama pull {embedding_model}"
        )

    return ServiceHealth(
        is_running=True,
        has_embedding_model=has_embedding_model,
        chat_models_count=chat_models_count,
        message=message,
    )
