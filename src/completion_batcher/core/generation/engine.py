# -*- coding: utf-8 -*-
"""
Batched completion generation against the OpenAI completions endpoint.

Prompts are split into batches of `batch_size`, each batch is sent in one
request (retried with exponential backoff on failure) and the flat list of
returned completions is regrouped into `n` completions per prompt.
"""

import time
import logging
from typing import Dict, List, Optional, Sequence, Tuple, Type

from tqdm.auto import tqdm

from .chunking import chunk_list
from .retry import (DEFAULT_MAX_ATTEMPTS, DEFAULT_MAX_DELAY,
                    DEFAULT_STARTING_DELAY, RetryPolicy, call_with_retry)
from .transport import CompletionTransport, OpenAICompletionTransport
from .types import CompletionResponse, GenerationResult, TokenUsage
from ..errors import (ConfigConflictError, ConfigResolutionError,
                      DeadlineExceededError, InvalidArgumentError,
                      UnexpectedResponseError)
from ..utils.clients import ClientConfig


DEFAULT_MODEL_NAME = "text-davinci-003"
DEFAULT_BATCH_SIZE = 20


def _check_positive_int(name, value):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(f"{name} must be a positive integer, got {value!r}.")


class OpenAICompletions:
    """
    Wrapper around OpenAI completion models that generates in batches.

    Any parameter accepted by the completions endpoint but not exposed here
    can be passed through `model_kwargs`.

    Example:
        llm = OpenAICompletions(client_config=ClientConfig.from_env(), n=2)
        result = llm.generate(["Tell me a joke.", "Tell me a poem."])
        result.generations[1]  # two completions for the second prompt
    """

    _SERIALIZABLE_FIELDS = (
        'model_name', 'temperature', 'max_tokens', 'top_p',
        'frequency_penalty', 'presence_penalty', 'n', 'best_of',
        'logit_bias', 'stop', 'model_kwargs', 'batch_size', 'max_retries',
        'starting_delay', 'max_delay',
    )

    def __init__(
        self,
        model_name: str = DEFAULT_MODEL_NAME,
        temperature: float = 0.7,
        max_tokens: int = 256,
        top_p: float = 1,
        frequency_penalty: float = 0,
        presence_penalty: float = 0,
        n: int = 1,
        best_of: int = 1,
        logit_bias: Optional[Dict[str, float]] = None,
        stop: Optional[List[str]] = None,
        model_kwargs: Optional[dict] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_retries: int = DEFAULT_MAX_ATTEMPTS,
        starting_delay: float = DEFAULT_STARTING_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
        transport: Optional[CompletionTransport] = None,
        client_config: Optional[ClientConfig] = None,
        show_progress: bool = False,
    ):
        _check_positive_int("batch_size", batch_size)
        _check_positive_int("n", n)
        _check_positive_int("best_of", best_of)
        if best_of > 1 and best_of < n:
            raise InvalidArgumentError(f"best_of ({best_of}) must not be smaller than n ({n}).")

        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.top_p = top_p
        self.frequency_penalty = frequency_penalty
        self.presence_penalty = presence_penalty
        self.n = n
        self.best_of = best_of
        self.logit_bias = logit_bias
        self.stop = list(stop) if stop is not None else None
        self.model_kwargs = dict(model_kwargs or {})
        self.batch_size = batch_size

        self.retry_policy = RetryPolicy(
            starting_delay=starting_delay,
            max_delay=max_delay,
            max_attempts=max_retries,
        )
        self.retry_on = retry_on

        self.client_config = client_config
        self._transport = transport
        self.show_progress = show_progress

    @property
    def max_retries(self) -> int:
        return self.retry_policy.max_attempts

    @property
    def starting_delay(self) -> float:
        return self.retry_policy.starting_delay

    @property
    def max_delay(self) -> float:
        return self.retry_policy.max_delay

    @property
    def llm_type(self) -> str:
        return "openai"

    @property
    def transport(self) -> CompletionTransport:
        """The transport in use, built from `client_config` on first access."""
        if self._transport is None:
            if self.client_config is None:
                raise InvalidArgumentError(
                    "No transport or client configuration given to OpenAICompletions.")
            self._transport = OpenAICompletionTransport.from_config(self.client_config)
        return self._transport

    def invocation_params(self) -> dict:
        """
        Parameters sent with every request, before the prompts.

        `best_of` is sent only above 1. The endpoint rejects `best_of < n`.
        """
        params = {
            "model": self.model_name,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "top_p": self.top_p,
            "frequency_penalty": self.frequency_penalty,
            "presence_penalty": self.presence_penalty,
            "n": self.n,
            "logit_bias": self.logit_bias,
            "stop": self.stop,
        }
        if self.best_of > 1:
            params["best_of"] = self.best_of
        params.update(self.model_kwargs)
        return params

    def identifying_params(self) -> dict:
        """Model name and request parameters, as logged by `generate`."""
        return {"model_name": self.model_name, **self.invocation_params()}

    def generate(
            self,
            prompts: Sequence[str],
            stop: Optional[List[str]] = None,
            timeout: Optional[float] = None
        ) -> GenerationResult:
        """
        Generate `n` completions for each prompt.

        Args:
            prompts (list[str]): Prompts to complete, in order.
            stop (list[str], optional): Stop sequences for this call. Must not
                be combined with stop sequences configured on the instance.
            timeout (float, optional): Overall time budget in seconds, shared
                by all batches and their retries. A retry whose backoff wait
                would end past the budget is not made.

        Returns:
            GenerationResult: One group of `n` completions per prompt, in
                prompt order, and the token usage summed over all batches.

        Raises:
            ConfigConflictError: If both `stop` and the configured stop
                sequences are non-empty. Raised before any request is made.
            RetryExhaustedError: If a batch keeps failing. Results of batches
                that already succeeded are discarded.
            DeadlineExceededError: If `timeout` elapses before a batch starts.
        """
        if self.stop and stop:
            raise ConfigConflictError("Stop sequences found in both the call arguments and the default parameters.")

        prompts = list(prompts)
        params = self.invocation_params()
        params["stop"] = stop if stop is not None else params["stop"]

        sub_prompts = chunk_list(prompts, self.batch_size)
        deadline = None if timeout is None else time.monotonic() + timeout

        logging.info(f"Generating completions for {len(prompts)} prompts in {len(sub_prompts)} batches "
                     f"(batch_size={self.batch_size}, n={self.n})...")
        logging.debug(f"Request parameters: {self.identifying_params()}")

        choices = []
        token_usage = TokenUsage()
        for i, batch in enumerate(tqdm(sub_prompts, desc="Generating batches", disable=not self.show_progress)):
            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise DeadlineExceededError(
                        f"Time budget of {timeout}s exhausted before batch {i + 1}/{len(sub_prompts)}.")

            response = self.completion_with_retry({**params, "prompt": batch}, timeout=remaining)

            expected = len(batch) * self.n
            if len(response.choices) != expected:
                raise UnexpectedResponseError(
                    f"Batch {i + 1} returned {len(response.choices)} completions, expected {expected}.")

            choices.extend(response.choices)
            token_usage = token_usage + response.usage
            logging.debug(f"Batch {i + 1}/{len(sub_prompts)} done ({len(batch)} prompts)")

        generations = chunk_list(choices, self.n)
        logging.info(f"Generation complete. Token usage: {token_usage.to_dict()}")
        return GenerationResult(generations=generations, token_usage=token_usage)

    def call(self, prompt: str, stop: Optional[List[str]] = None) -> str:
        """Text of the first completion for a single prompt."""
        result = self.generate([prompt], stop=stop)
        return result.generations[0][0].text

    def completion_with_retry(self, request: dict, timeout: Optional[float] = None) -> CompletionResponse:
        """Send one batch request, retrying per the configured retry policy."""
        transport = self.transport
        return call_with_retry(
            lambda: transport.create_completion(request),
            policy=self.retry_policy,
            retry_on=self.retry_on,
            timeout=timeout,
        )

    def serialize(self) -> dict:
        data = {"_type": self.llm_type}
        for name in self._SERIALIZABLE_FIELDS:
            value = getattr(self, name)
            if isinstance(value, (list, dict)):
                value = type(value)(value)
            data[name] = value
        return data

    @classmethod
    def deserialize(
            cls,
            data: dict,
            transport: Optional[CompletionTransport] = None,
            client_config: Optional[ClientConfig] = None,
            loader=None
        ) -> "OpenAICompletions":
        """
        Rebuild an instance from `serialize()` output.

        Credentials are never serialized, so the transport or client
        configuration has to be supplied again.
        """
        data = dict(data)
        llm_type = data.pop("_type", "openai")
        if llm_type != "openai":
            raise ConfigResolutionError(f"Cannot load LLM of type '{llm_type}' as OpenAICompletions.")
        unknown = set(data) - set(cls._SERIALIZABLE_FIELDS)
        if unknown:
            raise ConfigResolutionError(f"Unknown OpenAICompletions field(s): {sorted(unknown)}")
        try:
            return cls(**data, transport=transport, client_config=client_config)
        except InvalidArgumentError as e:
            raise ConfigResolutionError(f"Invalid OpenAICompletions configuration: {e}") from e


LLM_TYPE_TO_CLASS = {
    "openai": OpenAICompletions,
}


def load_llm_from_config(config: dict, **kwargs):
    """Build an LLM from its serialized configuration, dispatching on `_type`."""
    if not isinstance(config, dict) or "_type" not in config:
        raise ConfigResolutionError("LLM configuration must be a mapping with a '_type' key.")
    llm_type = config["_type"]
    if llm_type not in LLM_TYPE_TO_CLASS:
        raise ConfigResolutionError(f"Loading '{llm_type}' LLM not supported.")
    return LLM_TYPE_TO_CLASS[llm_type].deserialize(config, **kwargs)
