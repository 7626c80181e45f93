"""
Completion Batcher - Batched OpenAI completions and document stuffing chains

A toolkit for sending large lists of prompts to an OpenAI completion model
in bounded batches, with retries and per-prompt result reassembly, plus a
document stuffing chain that feeds merged documents to an inner chain and
can be saved to and loaded from JSON or YAML files.

Package Structure:
    generation: Chunking, retries, transport and the batch generation engine
    chains:     BaseChain, PromptTemplate, LLMChain, StuffDocumentsChain
    utils:      Client configuration, config resolution, data sources
    errors:     Error taxonomy

Example Usage:

    Batch Generation:
        import completion_batcher as cb

        llm = cb.OpenAICompletions(
            client_config=cb.utils.clients.ClientConfig(api_key="sk-..."),
            batch_size=20,
            n=1,
        )
        result = llm.generate(prompts)

    Document Stuffing:
        prompt = cb.PromptTemplate("Summarize:\\n{context}")
        chain = cb.StuffDocumentsChain(llm_chain=cb.LLMChain(llm=llm, prompt=prompt))
        chain.run({"input_documents": [cb.Document("A"), cb.Document("B")]})
        chain.save("./stuff_chain.yaml")

    CLI Usage:
        $ cbatch generate prompts.jsonl -o completions.jsonl --batch-size 20
        $ cbatch stuff stuff_chain.yaml documents.jsonl -o output.json

Environment Setup:
    The library never reads credentials implicitly; pass a ClientConfig
    (ClientConfig.from_env() reads OPENAI_API_KEY, or AZURE_OPENAI_API_KEY +
    AZURE_OPENAI_ENDPOINT). The CLI loads .env / .env.local files first.
"""

__version__ = "0.1.0"

from . import core
generation = core.generation
chains = core.chains
utils = core.utils
errors = core.errors
OpenAICompletions = core.OpenAICompletions
LLMChain = core.LLMChain
PromptTemplate = core.PromptTemplate
StuffDocumentsChain = core.StuffDocumentsChain
Document = core.Document
load_chain = core.load_chain

__all__ = [
    '__version__',
    'generation',           # cb.generation.*
    'chains',               # cb.chains.*
    'utils',                # cb.utils.*
    'errors',               # cb.errors.*
    'OpenAICompletions',    # cb.OpenAICompletions()
    'LLMChain',             # cb.LLMChain()
    'PromptTemplate',       # cb.PromptTemplate()
    'StuffDocumentsChain',  # cb.StuffDocumentsChain()
    'Document',             # cb.Document()
    'load_chain',           # cb.load_chain()
]

# Clean up namespace
del core
