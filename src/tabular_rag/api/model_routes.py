"""
Model Routes

Chat model discovery and selection. Embedding-only models installed on the
Ollama server are never offered for answering.
"""

from fastapi import APIRouter, Depends
from typing import Annotated, List

from .models import ModelSelectRequest, OperationResult
from ..llm.models import ChatModel
from .dependencies import get_coordinator, get_llm_client
from ..llm.catalog import list_chat_models
from ..llm.client import OllamaClient
from ..rag.coordinator import IndexCoordinator

router = APIRouter(prefix="/models", tags=["models"])


@router.get(
    "",
    response_model=List[ChatModel],
    summary="List chat-capable models",
)
async def list_available_models(
    llm: Annotated[OllamaClient, Depends(get_llm_client)],
) -> List[ChatModel]:
    return await list_chat_models(llm)


@router.put(
    "/selected",
    response_model=OperationResult,
    summary="Select the chat model used for answers",
)
async def set_chat_model(
    req: ModelSelectRequest,
    coordinator: Annotated[IndexCoordinator, Depends(get_coordinator)],
) -> OperationResult:
    coordinator.select_model(req.model_name)
    return OperationResult(status="updated")
