# -*- coding: utf-8 -*-

"""
Transports that carry one batch request to the remote completion provider.
"""

import logging
from typing import Protocol, runtime_checkable

import openai

from .types import Completion, CompletionResponse, TokenUsage
from ..utils.clients import ClientConfig, create_openai_client


@runtime_checkable
class CompletionTransport(Protocol):
    """Anything able to turn a request mapping into a CompletionResponse."""

    def create_completion(self, request: dict) -> CompletionResponse:
        ...


class OpenAICompletionTransport:
    """Sends requests to the OpenAI `/completions` endpoint."""

    def __init__(self, client: openai.OpenAI | openai.AzureOpenAI):
        self.client = client

    @classmethod
    def from_config(cls, config: ClientConfig) -> "OpenAICompletionTransport":
        return cls(create_openai_client(config))

    def create_completion(self, request: dict) -> CompletionResponse:
        # The SDK sends explicit None values as JSON null
        params = {k: v for k, v in request.items() if v is not None}
        logging.debug(f"Requesting {len(params.get('prompt', []))} prompt(s) from model {params.get('model')}")
        response = self.client.completions.create(**params)
        return _convert_response(response)


def _convert_response(response) -> CompletionResponse:
    choices = []
    for choice in response.choices:
        logprobs = choice.logprobs
        if logprobs is not None and hasattr(logprobs, 'model_dump'):
            logprobs = logprobs.model_dump()
        choices.append(Completion(
            text=choice.text or "",
            finish_reason=choice.finish_reason,
            logprobs=logprobs,
        ))

    usage = response.usage
    if usage is not None and hasattr(usage, 'model_dump'):
        usage = usage.model_dump()
    return CompletionResponse(choices=choices, usage=TokenUsage.from_dict(usage))
