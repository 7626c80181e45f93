from __future__ import annotations

from typing import Any, Callable

import pytest

from completion_batcher.core.chains.base import BaseChain, register_chain
from completion_batcher.core.generation.types import Completion, CompletionResponse, TokenUsage


class FakeTransport:
    """Answers every prompt with `n` completions named '<prompt>#<i>'."""

    def __init__(
        self,
        fail_times: int = 0,
        usage: Callable[[list[str]], dict | None] | None = None,
        error: type[Exception] = ConnectionError,
    ) -> None:
        self.fail_times = fail_times
        self.usage = usage or (lambda prompts: {
            "prompt_tokens": len(prompts),
            "completion_tokens": 2 * len(prompts),
            "total_tokens": 3 * len(prompts),
        })
        self.error = error
        self.requests: list[dict[str, Any]] = []
        self.calls = 0

    def create_completion(self, request: dict[str, Any]) -> CompletionResponse:
        self.calls += 1
        self.requests.append(request)
        if self.calls <= self.fail_times:
            raise self.error(f"transient failure {self.calls}")
        n = request.get("n", 1)
        choices = [
            Completion(text=f"{prompt}#{i}", finish_reason="stop")
            for prompt in request["prompt"]
            for i in range(n)
        ]
        return CompletionResponse(choices=choices, usage=TokenUsage.from_dict(self.usage(request["prompt"])))


@register_chain("recording_chain")
class RecordingChain(BaseChain):
    """Inner chain double that records its inputs and returns a fixed output."""

    def __init__(self, output: dict[str, Any] | None = None, label: str = "default") -> None:
        self.output = output if output is not None else {"text": "inner result"}
        self.label = label
        self.received: list[dict[str, Any]] = []

    @property
    def input_keys(self) -> list[str]:
        return []

    @property
    def output_keys(self) -> list[str]:
        return list(self.output)

    def _call(self, inputs: dict[str, Any]) -> dict[str, Any]:
        self.received.append(inputs)
        return self.output

    def _chain_type(self) -> str:
        return "recording_chain"

    def serialize(self) -> dict:
        return {"_type": "recording_chain", "output": self.output, "label": self.label}

    @classmethod
    def deserialize(cls, data: dict, **kwargs) -> "RecordingChain":
        return cls(output=data["output"], label=data["label"])


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def fast_retry() -> dict[str, float]:
    """Engine kwargs that make retries sleep for zero seconds."""
    return {"starting_delay": 0, "max_delay": 0}
