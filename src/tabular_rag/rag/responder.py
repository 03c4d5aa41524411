"""
Grounded Responder

Turns retrieved rows into a constrained generation request and a citation
list aligned one-to-one with those rows.
"""

from __future__ import annotations

import logging
from typing import List, Protocol, Sequence, Tuple

from ..core.errors import GenerationServiceError, ServiceError
from ..ingestion.models import NormalizedDocument
from ..prompts import ANALYST_SYSTEM_PROMPT, NO_RELEVANT_INFORMATION, QUESTION_TEMPLATE

logger = logging.getLogger("tabular_rag.responder")


class ChatBackend(Protocol):
    async def chat(self, model: str, system_prompt: str, prompt: str) -> str:
        ...


def build_context(documents: Sequence[NormalizedDocument]) -> str:
    """Concatenate row contents in order, separated by a blank line."""
    return "\n\n".join(doc.content for doc in documents)


def build_citations(documents: Sequence[NormalizedDocument]) -> List[str]:
    """One "<source_file>, Row <n>" entry per document, in order."""
    return [doc.citation for doc in documents]


def build_prompt(question: str, documents: Sequence[NormalizedDocument]) -> str:
    return QUESTION_TEMPLATE.format(
        context=build_context(documents),
        question=question,
    )


async def respond(
    query: str,
    retrieved: Sequence[NormalizedDocument],
    model: str,
    llm: ChatBackend,
) -> Tuple[str, List[str]]:
    """
    Answer `query` strictly from `retrieved`.

    Returns
    -------
    (answer, citations)
        `citations[i]` attributes `retrieved[i]`.

    Raises
    ------
    GenerationServiceError
        If the chat model cannot be reached or errors.
    """
    if not retrieved:
        return NO_RELEVANT_INFORMATION, []

    citations = build_citations(retrieved)
    prompt = build_prompt(query, retrieved)

    try:
        answer = await llm.chat(model, ANALYST_SYSTEM_PROMPT, prompt)
    except ServiceError as exc:
        logger.error(
            "Generation with %s failed (%s)",
            model,
            type(exc).__name__,
        )
        raise GenerationServiceError(
            f"Failed to generate response from {model}", exc
        ) from exc

    return answer, citations
