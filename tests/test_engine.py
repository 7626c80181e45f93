from __future__ import annotations

import time

import pytest

from conftest import FakeTransport

from completion_batcher.core.errors import (ConfigConflictError, DeadlineExceededError,
                                            InvalidArgumentError, RetryExhaustedError,
                                            UnexpectedResponseError)
from completion_batcher.core.generation.engine import OpenAICompletions, load_llm_from_config
from completion_batcher.core.generation.types import TokenUsage


@pytest.mark.parametrize("num_prompts, batch_size, n", [
    (1, 20, 1),
    (5, 2, 1),
    (5, 2, 3),
    (7, 3, 2),
    (6, 6, 4),
    (3, 10, 2),
])
def test_groups_align_with_prompts_regardless_of_batching(num_prompts, batch_size, n, fast_retry) -> None:
    transport = FakeTransport()
    llm = OpenAICompletions(batch_size=batch_size, n=n, transport=transport, **fast_retry)
    prompts = [f"p{i}" for i in range(num_prompts)]

    result = llm.generate(prompts)

    assert len(result.generations) == num_prompts
    for prompt, group in zip(prompts, result.generations):
        assert [c.text for c in group] == [f"{prompt}#{i}" for i in range(n)]
    assert len(transport.requests) == -(-num_prompts // batch_size)


def test_each_batch_request_carries_params_and_its_prompts(transport: FakeTransport) -> None:
    llm = OpenAICompletions(
        model_name="my-model", temperature=0.1, batch_size=2,
        logit_bias={"50256": -100}, model_kwargs={"echo": True},
        transport=transport,
    )
    llm.generate(["a", "b", "c"])

    assert [r["prompt"] for r in transport.requests] == [["a", "b"], ["c"]]
    request = transport.requests[0]
    assert request["model"] == "my-model"
    assert request["temperature"] == 0.1
    assert request["logit_bias"] == {"50256": -100}
    assert request["echo"] is True
    assert request["n"] == 1


def test_usage_is_summed_over_batches(transport: FakeTransport) -> None:
    llm = OpenAICompletions(batch_size=2, transport=transport)
    result = llm.generate(["a", "b", "c", "d", "e"])
    assert result.token_usage == TokenUsage(prompt_tokens=5, completion_tokens=10, total_tokens=15)
    assert result.llm_output == {"token_usage": {"prompt_tokens": 5, "completion_tokens": 10, "total_tokens": 15}}


def test_usage_counter_missing_in_some_batches() -> None:
    reports = iter([{"prompt_tokens": 3}, None, {"prompt_tokens": 4, "total_tokens": 9}])
    transport = FakeTransport(usage=lambda prompts: next(reports))
    llm = OpenAICompletions(batch_size=1, transport=transport)
    result = llm.generate(["a", "b", "c"])
    assert result.token_usage == TokenUsage(prompt_tokens=7, completion_tokens=None, total_tokens=9)


def test_stop_conflict_fails_before_any_request(transport: FakeTransport) -> None:
    llm = OpenAICompletions(stop=["\n"], transport=transport)
    with pytest.raises(ConfigConflictError):
        llm.generate(["a"], stop=["END"])
    assert transport.calls == 0


def test_stop_override_used_when_no_default(transport: FakeTransport) -> None:
    llm = OpenAICompletions(transport=transport)
    llm.generate(["a"], stop=["END"])
    assert transport.requests[0]["stop"] == ["END"]


def test_default_stop_used_without_override(transport: FakeTransport) -> None:
    llm = OpenAICompletions(stop=["\n"], transport=transport)
    llm.generate(["a"])
    assert transport.requests[0]["stop"] == ["\n"]


def test_transient_failures_are_invisible_to_caller(fast_retry) -> None:
    flaky = FakeTransport(fail_times=2)
    steady = FakeTransport()
    flaky_result = OpenAICompletions(transport=flaky, **fast_retry).generate(["a", "b"])
    steady_result = OpenAICompletions(transport=steady, **fast_retry).generate(["a", "b"])

    assert flaky_result == steady_result
    assert flaky.calls == 3
    assert flaky.requests[0] == flaky.requests[2]


def test_failed_batch_aborts_the_whole_call(fast_retry) -> None:
    class _FailsOnSecondBatch(FakeTransport):
        def create_completion(self, request):
            if request["prompt"] == ["c"]:
                self.calls += 1
                raise ConnectionError("down")
            return super().create_completion(request)

    transport = _FailsOnSecondBatch()
    llm = OpenAICompletions(batch_size=2, max_retries=4, transport=transport, **fast_retry)
    with pytest.raises(RetryExhaustedError) as exc_info:
        llm.generate(["a", "b", "c"])
    assert exc_info.value.attempts == 4
    assert isinstance(exc_info.value.last_exception, ConnectionError)


def test_always_failing_transport_is_called_max_retries_times(fast_retry) -> None:
    transport = FakeTransport(fail_times=100)
    llm = OpenAICompletions(max_retries=6, transport=transport, **fast_retry)
    with pytest.raises(RetryExhaustedError):
        llm.generate(["a"])
    assert transport.calls == 6


def test_non_retryable_errors_short_circuit(fast_retry) -> None:
    transport = FakeTransport(fail_times=100, error=TypeError)
    llm = OpenAICompletions(retry_on=(ConnectionError,), transport=transport, **fast_retry)
    with pytest.raises(TypeError):
        llm.generate(["a"])
    assert transport.calls == 1


def test_wrong_number_of_completions_is_reported(transport: FakeTransport) -> None:
    llm = OpenAICompletions(n=2, transport=transport)
    llm.model_kwargs = {"n": 1}  # provider returns one completion per prompt
    with pytest.raises(UnexpectedResponseError):
        llm.generate(["a", "b"])


def test_exhausted_time_budget(transport: FakeTransport) -> None:
    llm = OpenAICompletions(transport=transport)
    with pytest.raises(DeadlineExceededError):
        llm.generate(["a"], timeout=0)
    assert transport.calls == 0


def test_empty_prompt_list_makes_no_requests(transport: FakeTransport) -> None:
    result = OpenAICompletions(transport=transport).generate([])
    assert result.generations == []
    assert result.token_usage == TokenUsage()
    assert transport.calls == 0


def test_call_returns_first_completion_text(transport: FakeTransport) -> None:
    assert OpenAICompletions(n=3, transport=transport).call("hello") == "hello#0"


@pytest.mark.parametrize("kwargs", [{"batch_size": 0}, {"n": 0}, {"max_retries": 0}, {"batch_size": -3}])
def test_invalid_configuration_rejected_at_construction(kwargs: dict) -> None:
    with pytest.raises(InvalidArgumentError):
        OpenAICompletions(**kwargs)


def test_missing_transport_and_client_config() -> None:
    with pytest.raises(InvalidArgumentError):
        OpenAICompletions().generate(["a"])


def test_defaults() -> None:
    llm = OpenAICompletions()
    assert llm.batch_size == 20
    assert llm.n == 1
    assert llm.max_retries == 6
    assert (llm.starting_delay, llm.max_delay) == (4, 10)


def test_serialize_round_trip(transport: FakeTransport) -> None:
    llm = OpenAICompletions(model_name="m", n=2, batch_size=5, stop=["x"], logit_bias={"1": 2})
    data = llm.serialize()
    assert data["_type"] == "openai"

    rebuilt = load_llm_from_config(data, transport=transport)
    assert isinstance(rebuilt, OpenAICompletions)
    assert rebuilt.serialize() == data
    assert rebuilt.transport is transport


def test_retries_respect_time_budget() -> None:
    transport = FakeTransport(fail_times=100)
    llm = OpenAICompletions(starting_delay=1.5, max_delay=1.5, transport=transport)

    start = time.monotonic()
    with pytest.raises(RetryExhaustedError):
        llm.generate(["a"], timeout=0.2)
    assert time.monotonic() - start < 0.5
    assert transport.calls < 6


def test_best_of_is_left_out_of_requests_by_default(transport: FakeTransport) -> None:
    OpenAICompletions(n=2, transport=transport).generate(["a"])
    request = transport.requests[0]
    assert request["n"] == 2
    assert "best_of" not in request


def test_best_of_is_sent_when_set(transport: FakeTransport) -> None:
    OpenAICompletions(n=2, best_of=3, transport=transport).generate(["a"])
    assert transport.requests[0]["best_of"] == 3


def test_best_of_smaller_than_n_is_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        OpenAICompletions(n=3, best_of=2)


def test_identifying_params_name_the_model_and_request(caplog: pytest.LogCaptureFixture,
                                                       transport: FakeTransport) -> None:
    llm = OpenAICompletions(model_name="m", temperature=0.2, transport=transport)
    params = llm.identifying_params()
    assert params["model_name"] == "m"
    assert params["model"] == "m"
    assert params["temperature"] == 0.2
    assert "best_of" not in params

    with caplog.at_level("DEBUG"):
        llm.generate(["a"])
    assert f"Request parameters: {params}" in caplog.text
