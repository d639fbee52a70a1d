"""
Retrieval-augmented generation helper over a semantic index.
"""

from typing import List, Optional, Sequence

from ..core.config import get_rag_top_k
from .semantic_index import RuVectorEmbeddings
from .types import VectorId


class RagPipeline:
    """Retrieves top-k texts for a query and assembles them into a prompt.

    All validation and errors come from the wrapped index.
    """

    def __init__(self, index: RuVectorEmbeddings, top_k: Optional[int] = None):
        self._index = index
        self.top_k = top_k if top_k is not None else get_rag_top_k()

    @property
    def index(self) -> RuVectorEmbeddings:
        return self._index

    def retrieve(self, query: str) -> List[str]:
        """Texts of the top-k search results, best first."""
        return [result.text for result in self._index.search(query, self.top_k)]

    def format_context(self, query: str) -> str:
        """Render retrieved texts as a numbered context block followed by the question."""
        return self.build_prompt(query, self.retrieve(query))

    @staticmethod
    def build_prompt(query: str, contexts: Sequence[str]) -> str:
        lines = ["Context:"]
        for i, context in enumerate(contexts, start=1):
            lines.append(f"[{i}] {context}")
        return "\n".join(lines) + f"\n\nQuestion: {query}"

    def add_documents(self, documents: Sequence[str]) -> List[VectorId]:
        """Add documents to the index."""
        return self._index.insert_batch(documents)
