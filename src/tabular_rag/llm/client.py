from typing import List, Optional

import httpx

from ..config import settings
from ..core.http import request_json
from .schemas import ChatCompletion, TagModel, TagsResponse


class OllamaClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.ollama_host).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self._transport = transport

    async def chat(
        self,
        model: str,
        system_prompt: str,
        prompt: str,
        temperature: Optional[float] = None,
    ) -> str:
        """
        Run a single non-streaming chat turn and return the answer text.
        """
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "stream": False,
        }
        if temperature is not None:
            payload["options"] = {"temperature": temperature}

        completion = await request_json(
            "POST",
            f"{self.base_url}/api/chat",
            ChatCompletion,
            payload=payload,
            timeout=self.timeout,
            transport=self._transport,
        )
        return completion.message.content

    async def list_models(self) -> List[TagModel]:
        """
        Return every model installed on the Ollama server.
        """
        tags = await request_json(
            "GET",
            f"{self.base_url}/api/tags",
            TagsResponse,
            timeout=self.timeout,
            transport=self._transport,
        )
        return tags.models
