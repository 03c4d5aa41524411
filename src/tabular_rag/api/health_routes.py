from typing import Annotated

from fastapi import APIRouter, Depends

from .dependencies import get_embedding_model_name, get_llm_client
from ..llm.models import ServiceHealth
from ..llm.catalog import check_service_health
from ..llm.client import OllamaClient

router = APIRouter(tags=["health"])


@router.get("/health", response_model=ServiceHealth)
async def health(
    llm: Annotated[OllamaClient, Depends(get_llm_client)],
    embedding_model: Annotated[str, Depends(get_embedding_model_name)],
) -> ServiceHealth:
    return await check_service_health(llm, embedding_model)
