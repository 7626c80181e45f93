"""
Pipeline chains for Completion Batcher.

Submodules:
    base:            BaseChain, chain registry and file loading
    prompt:          PromptTemplate
    llm_chain:       LLMChain (prompt + completion model)
    stuff_documents: StuffDocumentsChain (documents -> single context)

Example Usage:
    import completion_batcher as cb

    chain = cb.chains.base.load_chain('./stuff_chain.yaml', client_config=config)
    outputs = chain.run({'input_documents': docs, 'question': 'Why?'})
"""

from . import base
from . import prompt
from . import llm_chain
from . import stuff_documents

__all__ = [
    'base',             # cb.chains.base.*
    'prompt',           # cb.chains.prompt.*
    'llm_chain',        # cb.chains.llm_chain.*
    'stuff_documents',  # cb.chains.stuff_documents.*
]
