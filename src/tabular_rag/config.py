from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ollama serves both the embedding and the chat models
    ollama_host: str = Field(
        default="http://localhost:11434",
        validation_alias="OLLAMA_HOST",
    )

    embedding_model: str = "nomic-embed-text"
    default_chat_model: str = "llama3"

    top_k: int = Field(default=5, ge=1)
    embedding_batch_size: int = Field(default=64, ge=1)
    request_timeout: float = 120.0

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

settings = Settings()
