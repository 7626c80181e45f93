"""
Batched completion generation for Completion Batcher.

Submodules:
    chunking:  Order-preserving fixed-size chunking
    retry:     Retrying call executor with exponential backoff
    types:     Completion, TokenUsage and GenerationResult data types
    transport: Transports carrying batch requests to the provider
    engine:    OpenAICompletions, the batch generation engine

Example Usage:
    import completion_batcher as cb

    llm = cb.generation.engine.OpenAICompletions(
        client_config=cb.utils.clients.ClientConfig.from_env(),
        batch_size=20,
        n=2,
    )
    result = llm.generate(["Tell me a joke.", "Tell me a poem."])
    result.generations   # [[Completion, Completion], [Completion, Completion]]
    result.token_usage   # TokenUsage summed over all batches
"""

from . import chunking
from . import retry
from . import types
from . import transport
from . import engine

__all__ = [
    'chunking',   # cb.generation.chunking.*
    'retry',      # cb.generation.retry.*
    'types',      # cb.generation.types.*
    'transport',  # cb.generation.transport.*
    'engine',     # cb.generation.engine.*
]
