"""
Ollama Response Schemas

Typed views of the Ollama REST payloads this service consumes. Unknown
fields are ignored; missing required fields fail validation.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EmbedResponse(BaseModel):
    """POST /api/embed"""

    embeddings: List[List[float]]

    model_config = ConfigDict(extra="ignore")


class ChatMessage(BaseModel):
    role: str
    content: str

    model_config = ConfigDict(extra="ignore")


class ChatCompletion(BaseModel):
    """POST /api/chat with stream=false"""

    message: ChatMessage

    model_config = ConfigDict(extra="ignore")


class ModelDetails(BaseModel):
    family: Optional[str] = None
    parameter_size: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class TagModel(BaseModel):
    name: str
    size: int = Field(..., ge=0)
    modified_at: str
    details: Optional[ModelDetails] = None

    model_config = ConfigDict(extra="ignore")


class TagsResponse(BaseModel):
    """GET /api/tags"""

    models: List[TagModel]

    model_config = ConfigDict(extra="ignore")
