# -*- coding: utf-8 -*-

"""
Error types raised by Completion Batcher.

All errors derive from CompletionBatcherError so callers can catch the
whole family at once. Where a built-in exception already describes the
condition (ValueError, KeyError) the error also derives from it.
"""


class CompletionBatcherError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgumentError(CompletionBatcherError, ValueError):
    """A static configuration value or call argument is not acceptable."""


class ConfigConflictError(CompletionBatcherError, ValueError):
    """Two configuration sources were supplied for the same setting."""


class RetryExhaustedError(CompletionBatcherError):
    """
    Every retry attempt of a remote call failed.

    Attributes:
        attempts (int): Number of attempts that were made.
        last_exception (BaseException): The failure of the final attempt.
    """

    def __init__(self, attempts, last_exception):
        self.attempts = attempts
        self.last_exception = last_exception
        super().__init__(
            f"Remote call failed after {attempts} attempt(s): "
            f"{type(last_exception).__name__}: {last_exception}"
        )


class DeadlineExceededError(CompletionBatcherError):
    """The time budget given to a generate call ran out."""


class UnexpectedResponseError(CompletionBatcherError):
    """A batch response does not hold `n` completions for each of its prompts."""


class MissingInputError(CompletionBatcherError, KeyError):
    """A required key is absent from the inputs of a chain or template."""

    def __init__(self, key, message=None):
        self.key = key
        self.message = message or f"Input key '{key}' not found."
        super().__init__(self.message)

    def __str__(self):
        return self.message


class ConfigResolutionError(CompletionBatcherError, ValueError):
    """A serialized configuration could not be resolved or reconstructed."""
