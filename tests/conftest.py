import asyncio
from pathlib import Path
from typing import List, Optional, Sequence

import pytest

from tabular_rag.ingestion.models import NormalizedDocument

# Each vocabulary word is one embedding dimension; the last dimension is a
# constant so no vector is ever all zeros.
VOCAB = ("apple", "banana", "cherry", "durian", "alice", "bob")


def vectorize(text: str) -> List[float]:
    lowered = text.lower()
    return [float(lowered.count(word)) for word in VOCAB] + [1.0]


class FakeEmbedder:
    """
    Keyword-count embedder.

    When `gate` is set, calls with more than one text (index builds) wait
    for it; single-text calls (queries) are never held back.
    """

    def __init__(self, model: str = "fake-embed") -> None:
        self.model = model
        self.calls: List[List[str]] = []
        self.error: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None
        self.output: Optional[List[List[float]]] = None

    async def embed(self, texts: Sequence[str]) -> List[List[float]]:
        self.calls.append(list(texts))
        if self.gate is not None and len(texts) > 1:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if self.output is not None:
            return self.output
        return [vectorize(t) for t in texts]


class FakeLLM:
    def __init__(self, answer: str = "The data says so.") -> None:
        self.answer = answer
        self.calls: List[tuple] = []
        self.error: Optional[Exception] = None

    async def chat(self, model: str, system_prompt: str, prompt: str) -> str:
        self.calls.append((model, system_prompt, prompt))
        if self.error is not None:
            raise self.error
        return self.answer


def make_doc(
    doc_id: int,
    content: str,
    source_file: str = "data.csv",
    row_number: Optional[int] = None,
) -> NormalizedDocument:
    return NormalizedDocument(
        id=str(doc_id),
        content=content,
        source_file=source_file,
        row_number=row_number if row_number is not None else doc_id + 1,
    )


def write_file(folder: Path, name: str, content) -> Path:
    path = folder / name
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def fruit_folder(tmp_path):
    folder = tmp_path / "fruit"
    folder.mkdir()
    write_file(
        folder,
        "fruit.csv",
        "Fruit,Colour\napple,red\nbanana,yellow\ncherry,dark red\n",
    )
    return folder


@pytest.fixture
def people_folder(tmp_path):
    folder = tmp_path / "people"
    folder.mkdir()
    write_file(
        folder,
        "people.csv",
        "Name,Role\nalice,engineer\nbob,designer\n",
    )
    return folder
