"""Error taxonomy for the photo evaluation pipeline."""

from enum import Enum


class EvaluationError(Exception):
    """Base class for errors raised by pipeline stages."""


class MissingInputError(EvaluationError):
    """No image payload was supplied."""


class InvalidImageError(EvaluationError):
    """Image payload could not be decoded or exceeds the size limit."""


class UpstreamError(EvaluationError):
    """Model invocation failed: unreachable, timed out, rejected or empty."""


class ModelOutputError(EvaluationError):
    """Model text could not be turned into a valid judgment."""


class ParseError(ModelOutputError):
    """Model text is not parseable JSON after fence stripping."""


class SchemaError(ModelOutputError):
    """Parsed model output has missing fields or out-of-range values."""


class TierHitStoreError(Exception):
    """The tier hit store could not complete an operation."""


class NotFoundWarning(Warning):
    """Tier label has no record in the hit store. Non-fatal."""


class EvaluationState(str, Enum):
    RECEIVED = "received"
    INVOKING = "invoking"
    VALIDATING = "validating"
    AGGREGATING = "aggregating"
    COUNTING = "counting"
    COMPLETED = "completed"


class FailureKind(str, Enum):
    MISSING_INPUT = "missing_input"
    INVALID_INPUT = "invalid_input"
    UPSTREAM_ERROR = "upstream_error"
    INVALID_MODEL_OUTPUT = "invalid_model_output"


class EvaluationFailed(Exception):
    """Terminal ``Failed(kind)`` state of one evaluation request."""

    def __init__(self, kind: FailureKind, state: EvaluationState, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.state = state
        self.message = message

    def __repr__(self) -> str:
        return f"EvaluationFailed(kind={self.kind.value}, state={self.state.value}, message={self.message!r})"
