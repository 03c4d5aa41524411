"""
Model Catalog Records

What the catalog reports about the Ollama server: the chat models it can
offer and whether the service is ready.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, ConfigDict


class ChatModel(BaseModel):
    """
    A chat-capable model installed on the Ollama server.
    """
    name: str
    size: int = Field(..., ge=0)
    modified_at: str

    model_config = ConfigDict(extra="forbid")


class ServiceHealth(BaseModel):
    """
    Reachability of the Ollama server and readiness of its models.
    """
    is_running: bool
    has_embedding_model: bool
    chat_models_count: int = Field(..., ge=0)
    message: str

    model_config = ConfigDict(extra="forbid")
