"""
Core functionality for Completion Batcher.

Architecture:
    generation/ - Batched remote inference
      ├── chunking/   - Order-preserving chunking
      ├── retry/      - Retrying call executor
      ├── types/      - Completion, TokenUsage, GenerationResult
      ├── transport/  - OpenAI completions transport
      └── engine/     - OpenAICompletions batch generation engine

    chains/     - Pipeline stages
      ├── base/            - BaseChain, registry, load_chain
      ├── prompt/          - PromptTemplate
      ├── llm_chain/       - LLMChain
      └── stuff_documents/ - StuffDocumentsChain

    utils/      - Shared utilities and infrastructure
    documents   - Document type
    errors      - Error taxonomy
"""

from . import errors
from . import documents
from . import generation
from . import chains
from . import utils

from .generation.engine import OpenAICompletions
from .chains.llm_chain import LLMChain
from .chains.prompt import PromptTemplate
from .chains.stuff_documents import StuffDocumentsChain
from .chains.base import load_chain
from .documents import Document

__all__ = [
    'errors',
    'documents',
    'generation',
    'chains',
    'utils',
    'OpenAICompletions',
    'LLMChain',
    'PromptTemplate',
    'StuffDocumentsChain',
    'load_chain',
    'Document',
]
