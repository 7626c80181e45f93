"""
Shared utilities for Completion Batcher.

Submodules:
    clients:            API client configuration and creation (OpenAI, Azure OpenAI)
    config_resolution:  Inline or file-referenced sub-configuration resolution
    datasource:         Reading prompts and documents from JSONL, CSV or Parquet
    misc:               JSON/YAML helpers and path utilities (internal)
    environment:        .env loading for the CLI (internal)

Example Usage:
    import completion_batcher as cb

    config = cb.utils.clients.ClientConfig.from_env()
    prompts = cb.utils.datasource.read_prompts('./prompts.jsonl')
    inner = cb.utils.config_resolution.resolve_config_from_file('llm_chain', data)
"""

from . import clients
from . import config_resolution
from . import datasource

__all__ = [
    'clients',            # cb.utils.clients.*
    'config_resolution',  # cb.utils.config_resolution.*
    'datasource',         # cb.utils.datasource.*
]

# Internal modules not exported:
# - misc (JSON/YAML and path helpers)
# - environment (CLI environment setup)
