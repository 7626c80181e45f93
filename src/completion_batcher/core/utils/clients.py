# -*- coding: utf-8 -*-

import os
import openai
import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import InvalidArgumentError

DEFAULT_AZURE_API_VERSION = "2025-03-01-preview"


@dataclass(frozen=True)
class ClientConfig:
    """
    Explicit connection settings for the OpenAI (or Azure OpenAI) client.

    Nothing is read from the environment unless `from_env` is called.
    """
    api_key: Optional[str] = None
    organization: Optional[str] = None
    base_url: Optional[str] = None
    timeout: Optional[float] = None
    azure: bool = False
    azure_endpoint: Optional[str] = None
    api_version: str = DEFAULT_AZURE_API_VERSION

    @classmethod
    def from_env(cls, azure: bool = False, **overrides) -> "ClientConfig":
        """
        Build a configuration from the usual environment variables.

        Args:
            azure (bool): Read AZURE_OPENAI_API_KEY and AZURE_OPENAI_ENDPOINT
                instead of OPENAI_API_KEY.
            **overrides: Fields that take precedence over the environment.
        """
        if azure:
            values = {
                'api_key': os.getenv('AZURE_OPENAI_API_KEY'),
                'azure_endpoint': os.getenv('AZURE_OPENAI_ENDPOINT'),
                'azure': True,
            }
        else:
            values = {
                'api_key': os.getenv('OPENAI_API_KEY'),
                'organization': os.getenv('OPENAI_ORGANIZATION'),
            }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def create_openai_client(config: ClientConfig):
    """
    Create an OpenAI client for API calls.

    Args:
        config (ClientConfig): Connection settings. Azure settings are
            delegated to `create_azure_openai_client`.
    """
    if config.azure:
        return create_azure_openai_client(config)
    if config.api_key is None:
        raise InvalidArgumentError("No OpenAI API key provided in the client configuration.")

    # Retries are handled by call_with_retry, not by the SDK
    client_kwargs = {'api_key': config.api_key, 'max_retries': 0}
    if config.organization is not None:
        client_kwargs['organization'] = config.organization
    if config.base_url is not None:
        client_kwargs['base_url'] = config.base_url
    if config.timeout is not None:
        client_kwargs['timeout'] = config.timeout

    client = openai.OpenAI(**client_kwargs)
    logging.info("OpenAI client created successfully.")
    return client


def create_azure_openai_client(config: ClientConfig):
    """
    Create an Azure OpenAI client for API calls.

    Args:
        config (ClientConfig): Connection settings with api_key and azure_endpoint.
    """
    if config.api_key is None:
        raise InvalidArgumentError("No Azure OpenAI API key provided in the client configuration.")
    if config.azure_endpoint is None:
        raise InvalidArgumentError("No Azure OpenAI endpoint provided in the client configuration.")

    client_kwargs = {
        'api_key': config.api_key,
        'api_version': config.api_version,
        'azure_endpoint': config.azure_endpoint,
        'max_retries': 0,
    }
    if config.timeout is not None:
        client_kwargs['timeout'] = config.timeout

    client = openai.AzureOpenAI(**client_kwargs)
    logging.info("Azure OpenAI client created successfully.")
    return client
