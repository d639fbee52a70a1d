"""
Build an in-memory index from text files and print a RAG prompt for a query.
Each non-blank line of each file is indexed as one document.
"""

import argparse
import os
import sys
from pathlib import Path

from .core.config import get_embedding_provider, get_default_config, get_rag_top_k
from .core.errors import RuVectorError
from .vector.rag import RagPipeline
from .vector.semantic_index import RuVectorEmbeddings


def read_documents(paths):
    """Collect non-blank lines from each file, in order."""
    documents = []
    for path in paths:
        with open(path, 'r', encoding='utf-8') as f:
            documents.extend(line.strip() for line in f if line.strip())
    return documents


def main(argv=None):
    parser = argparse.ArgumentParser(description='Retrieve context for a query from text files')
    parser.add_argument('files', nargs='+', type=Path,
                        help='Text files, one document per line')
    parser.add_argument('--query', '-q', required=True,
                        help='Question to retrieve context for')
    parser.add_argument('--top-k', '-k', type=int, default=None,
                        help='Number of context passages (default: RAG_TOP_K)')
    parser.add_argument('--provider', choices=['hash', 'sentence_transformer'], default=None,
                        help='Embedding provider (default: EMBED_PROVIDER)')
    args = parser.parse_args(argv)

    if args.provider:
        os.environ['EMBED_PROVIDER'] = args.provider

    missing = [str(p) for p in args.files if not p.is_file()]
    if missing:
        print(f"ERROR: File(s) not found: {', '.join(missing)}", file=sys.stderr)
        return 1

    documents = read_documents(args.files)
    if not documents:
        print("ERROR: No documents found in input files", file=sys.stderr)
        return 1

    try:
        index = RuVectorEmbeddings.create("cli", get_embedding_provider(), get_default_config())
        pipeline = RagPipeline(index, args.top_k if args.top_k is not None else get_rag_top_k())
        pipeline.add_documents(documents)
        print(pipeline.format_context(args.query))
    except RuVectorError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
