import pytest

from tabular_rag.core.errors import GenerationServiceError, ServiceStatusError
from tabular_rag.prompts import (
    ANALYST_SYSTEM_PROMPT,
    DATA_BLOCK_BEGIN,
    DATA_BLOCK_END,
    NO_RELEVANT_INFORMATION,
)
from tabular_rag.rag.responder import build_citations, build_context, respond

from conftest import make_doc


@pytest.fixture
def retrieved():
    return [
        make_doc(4, "From a.csv, Row 5: Name: Ann", "a.csv", 5),
        make_doc(9, "From book.xlsx [Sheet: People], Row 2: Name: Bob", "book.xlsx (People)", 2),
        make_doc(1, "From a.csv, Row 2: Name: Ann", "a.csv", 2),
    ]


@pytest.mark.asyncio
async def test_empty_retrieval_short_circuits(llm):
    answer, citations = await respond("who?", [], "llama3", llm)

    assert answer == NO_RELEVANT_INFORMATION
    assert citations == []
    assert llm.calls == []


@pytest.mark.asyncio
async def test_citations_align_with_retrieved_order(llm, retrieved):
    answer, citations = await respond("who?", retrieved, "llama3", llm)

    assert answer == llm.answer
    assert citations == [
        "a.csv, Row 5",
        "book.xlsx (People), Row 2",
        "a.csv, Row 2",
    ]


@pytest.mark.asyncio
async def test_prompt_structure(llm, retrieved):
    await respond("Who is on the team?", retrieved, "mistral", llm)

    model, system_prompt, prompt = llm.calls[0]
    assert model == "mistral"
    assert system_prompt == ANALYST_SYSTEM_PROMPT
    assert "NEVER make up information" in system_prompt

    begin = prompt.index(DATA_BLOCK_BEGIN)
    end = prompt.index(DATA_BLOCK_END)
    question = prompt.index("Question: Who is on the team?")
    assert begin < end < question
    assert prompt[begin + len(DATA_BLOCK_BEGIN) + 1 : end - 1] == build_context(retrieved)
    assert "Answer ONLY based on the data provided above" in prompt[question:]


def test_context_joins_with_blank_lines(retrieved):
    context = build_context(retrieved)

    assert context.split("\n\n") == [d.content for d in retrieved]
    assert len(build_citations(retrieved)) == len(retrieved)


@pytest.mark.asyncio
async def test_prompt_tolerates_braces_in_rows(llm):
    docs = [make_doc(0, "From x.csv, Row 1: Json: {\"a\": 1}", "x.csv", 1)]

    await respond("{question}", docs, "llama3", llm)

    prompt = llm.calls[0][2]
    assert "{\"a\": 1}" in prompt
    assert "Question: {question}" in prompt


@pytest.mark.asyncio
async def test_generation_failure_surfaces(llm, retrieved):
    llm.error = ServiceStatusError("model 'nope' not found", http_status=404)

    with pytest.raises(GenerationServiceError) as excinfo:
        await respond("who?", retrieved, "nope", llm)

    assert excinfo.value.reason == "http_status"
    assert "not found" in str(excinfo.value)
