"""
Error taxonomy and result values for the content intelligence pipeline.

Low-level components (normalizer, schema validation, generation client)
raise the exceptions defined here. The pipeline service catches them at its
boundary and hands them back to callers wrapped in a Result, so every call
site decides explicitly whether to handle or re-surface a failure.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class PipelineError(Exception):
    """Base class for every failure the pipeline reports to a caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class IngestionError(PipelineError):
    """Raised when an input file cannot be read or decoded."""

    def __init__(self, file_name: str, reason: str):
        super().__init__(f"Could not read file '{file_name}': {reason}")
        self.file_name = file_name
        self.reason = reason


class ValidationError(PipelineError):
    """Raised when a request is missing required data.

    Always raised before any generation call is attempted.
    """
    pass


class GenerationFailure(PipelineError):
    """Raised when the generation backend cannot produce a usable result."""
    pass


class EmptyResponseError(GenerationFailure):
    """Raised when the backend returns no text at all."""

    def __init__(self, message: str = "No response from AI. Please try again."):
        super().__init__(message)


class MalformedOutputError(GenerationFailure):
    """Raised when backend text does not parse or violates the output schema."""

    def __init__(self, message: str, violations: Optional[list[str]] = None):
        super().__init__(message)
        self.violations = violations or []


class TransportFailure(GenerationFailure):
    """Raised when the backend is unreachable or rejects the request."""
    pass


class StoreError(PipelineError):
    """Raised when a stored blob cannot be decoded."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Stored data under '{key}' is unreadable: {reason}")
        self.key = key
        self.reason = reason


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a fallible pipeline operation.

    Exactly one of ``value`` or ``error`` is meaningful: ``error`` is None
    on success.
    """
    value: Optional[T] = None
    error: Optional[PipelineError] = None

    @property
    def ok(self) -> bool:
        """True when the operation succeeded."""
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: PipelineError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """
        Return the success value or re-raise the stored error.

        Raises:
            PipelineError: The failure this result carries.
        """
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
