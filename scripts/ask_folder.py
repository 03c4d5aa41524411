import argparse
import asyncio
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from tabular_rag.core.errors import TabularRagError
from tabular_rag.embeddings.embedder import Embedder
from tabular_rag.llm.client import OllamaClient
from tabular_rag.rag.coordinator import IndexCoordinator


async def main(folder: str, question: str, model: str | None) -> int:
    coordinator = IndexCoordinator(embedder=Embedder(), llm=OllamaClient())
    if model:
        coordinator.select_model(model)

    print(f"Ingesting {folder} (this may take time)...")
    try:
        result = await coordinator.ingest(folder)
    except TabularRagError as exc:
        print(f"Ingestion failed: {exc}")
        return 1

    print(result.message)
    if not result.success:
        return 1

    print(f"Asking {coordinator.selected_model}: {question}")
    try:
        answer = await coordinator.query(question)
    except TabularRagError as exc:
        print(f"Query failed: {exc}")
        return 1

    print()
    print(answer.answer)
    if answer.sources:
        print()
        print("Sources:")
        for source in answer.sources:
            print(f"  - {source}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Ask one question about a folder of CSV / Excel files.")
    parser.add_argument("folder")
    parser.add_argument("question")
    parser.add_argument("--model", default=None, help="Chat model (defaults to DEFAULT_CHAT_MODEL)")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.folder, args.question, args.model)))
