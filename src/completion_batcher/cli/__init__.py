"""
Command-line interface for Completion Batcher.

Commands:
    generate:    Send the prompts of a file to an OpenAI completion model in
                 batches and write the completions as JSONL
    stuff:       Run a saved document stuffing chain over a documents file
    show-config: Print a saved chain with every file reference resolved

Environment Requirements:
    - OPENAI_API_KEY (for OpenAI API)
    - AZURE_OPENAI_API_KEY + AZURE_OPENAI_ENDPOINT (for Azure OpenAI)

Example Workflow:
    $ cbatch generate prompts.jsonl -o completions.jsonl --batch-size 20 -n 2
    $ cbatch show-config ./chains/stuff_chain.yaml
    $ cbatch stuff ./chains/stuff_chain.yaml documents.jsonl -i question="Why?"
"""

from .cli import cli

__all__ = [
    'cli',  # Main CLI interface (Click command group)
]
