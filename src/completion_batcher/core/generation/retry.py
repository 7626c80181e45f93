# -*- coding: utf-8 -*-
"""
Retry logic for remote completion calls.

A call is re-invoked from scratch on every attempt, waiting an exponentially
growing, jittered delay between attempts. When the attempt budget runs out
the last failure is wrapped in a RetryExhaustedError.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Type, TypeVar

from tenacity import (RetryError, Retrying, retry_if_exception_type,
                      stop_after_attempt, stop_before_delay,
                      wait_random_exponential)

from ..errors import InvalidArgumentError, RetryExhaustedError

T = TypeVar("T")

DEFAULT_STARTING_DELAY = 4
DEFAULT_MAX_DELAY = 10
DEFAULT_MAX_ATTEMPTS = 6


@dataclass(frozen=True)
class RetryPolicy:
    """
    Configuration for the retrying call executor.

    Attributes:
        starting_delay (float): Upper bound of the first backoff delay, in seconds.
        max_delay (float): Upper bound of any backoff delay, in seconds.
        max_attempts (int): Total number of attempts, the first call included.
    """
    starting_delay: float = DEFAULT_STARTING_DELAY
    max_delay: float = DEFAULT_MAX_DELAY
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def __post_init__(self):
        self._check_arguments()

    def _check_arguments(self):
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int) \
                or self.max_attempts < 1:
            raise InvalidArgumentError(
                f"max_attempts must be a positive integer, got {self.max_attempts!r}.")
        if self.starting_delay < 0 or self.max_delay < 0:
            raise InvalidArgumentError("Backoff delays must not be negative.")
        if self.max_delay < self.starting_delay:
            raise InvalidArgumentError(
                f"max_delay ({self.max_delay}) must not be smaller than "
                f"starting_delay ({self.starting_delay}).")


def backoff_delay(attempt: int, policy: RetryPolicy) -> float:
    """
    Upper bound of the jittered delay slept after the given failed attempt.

    The actual delay is drawn uniformly between zero and this bound.
    """
    if attempt < 1:
        raise InvalidArgumentError(f"Attempt numbers start at 1, got {attempt}.")
    return min(policy.max_delay, policy.starting_delay * 2 ** (attempt - 1))


def _log_retry(retry_state):
    exc = retry_state.outcome.exception()
    logging.warning(
        f"Attempt {retry_state.attempt_number} failed with "
        f"{type(exc).__name__}: {exc}. Retrying in {retry_state.next_action.sleep:.2f}s..."
    )


def call_with_retry(
        fn: Callable[[], T],
        policy: Optional[RetryPolicy] = None,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
        timeout: Optional[float] = None,
        sleep: Optional[Callable[[float], None]] = None
    ) -> T:
    """
    Invoke a zero-argument callable, retrying failures with exponential backoff.

    Args:
        fn (callable): The remote call. Re-invoked in full on every attempt.
        policy (RetryPolicy): Delays and attempt budget. Defaults to RetryPolicy().
        retry_on (tuple): Exception types that trigger a retry. Anything else
            propagates immediately. Defaults to every Exception.
        timeout (float, optional): Time budget in seconds, counted from the
            first attempt. No retry is made whose backoff wait would end
            past it.
        sleep (callable, optional): Function used to wait between attempts.

    Returns:
        The result of the first successful attempt.

    Raises:
        RetryExhaustedError: If no attempt succeeded within the budget.
    """
    policy = policy or RetryPolicy()

    stop = stop_after_attempt(policy.max_attempts)
    if timeout is not None:
        stop = stop | stop_before_delay(timeout)

    retrying_kwargs = dict(
        stop=stop,
        wait=wait_random_exponential(multiplier=policy.starting_delay, max=policy.max_delay),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_retry,
        reraise=False,
    )
    if sleep is not None:
        retrying_kwargs['sleep'] = sleep

    try:
        return Retrying(**retrying_kwargs)(fn)
    except RetryError as e:
        last_attempt = e.last_attempt
        last_exception = last_attempt.exception()
        logging.error(f"Giving up after {last_attempt.attempt_number} attempt(s): {last_exception}")
        raise RetryExhaustedError(last_attempt.attempt_number, last_exception) from last_exception
