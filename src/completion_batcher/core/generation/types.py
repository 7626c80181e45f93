# -*- coding: utf-8 -*-

"""
Data types exchanged between the generation engine and its transport.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Completion:
    """One generated text for a prompt."""
    text: str
    finish_reason: Optional[str] = None
    logprobs: Optional[Any] = None

    @property
    def generation_info(self) -> Dict[str, Any]:
        return {"finish_reason": self.finish_reason, "logprobs": self.logprobs}

    def to_dict(self) -> dict:
        return {"text": self.text, **self.generation_info}


def _add_counters(a: Optional[int], b: Optional[int]) -> Optional[int]:
    if a is None:
        return b
    if b is None:
        return a
    return a + b


@dataclass(frozen=True)
class TokenUsage:
    """
    Token counters reported by the remote provider.

    A counter is None until some response reports it. Adding two usages
    sums the counters, treating None as "not reported" rather than zero.
    """
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        if not isinstance(other, TokenUsage):
            return NotImplemented
        return TokenUsage(
            prompt_tokens=_add_counters(self.prompt_tokens, other.prompt_tokens),
            completion_tokens=_add_counters(self.completion_tokens, other.completion_tokens),
            total_tokens=_add_counters(self.total_tokens, other.total_tokens),
        )

    @classmethod
    def from_dict(cls, usage: Optional[dict]) -> "TokenUsage":
        """Build a TokenUsage from a provider `usage` mapping (or None)."""
        usage = usage or {}
        return cls(
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            total_tokens=usage.get("total_tokens"),
        )

    def to_dict(self) -> dict:
        """Only the counters that were reported."""
        counters = {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
        }
        return {k: v for k, v in counters.items() if v is not None}


@dataclass
class CompletionResponse:
    """What the transport returns for one batch request."""
    choices: List[Completion]
    usage: TokenUsage = field(default_factory=TokenUsage)


@dataclass
class GenerationResult:
    """
    Output of a generate call.

    Attributes:
        generations (list[list[Completion]]): One list of completions per
            prompt, in the order the prompts were given.
        token_usage (TokenUsage): Usage summed over every batch.
    """
    generations: List[List[Completion]]
    token_usage: TokenUsage = field(default_factory=TokenUsage)

    @property
    def llm_output(self) -> dict:
        return {"token_usage": self.token_usage.to_dict()}

    def to_dict(self) -> dict:
        return {
            "generations": [[c.to_dict() for c in group] for group in self.generations],
            "llm_output": self.llm_output,
        }
