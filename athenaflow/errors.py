"""
Exceptions raised by athenaflow.

Errors reported by the Athena service itself (botocore ClientError and
BotoCoreError) are never wrapped; they reach the caller unchanged.
"""

from typing import Optional


class AthenaFlowError(Exception):
    """Base class for errors raised by athenaflow."""


class InvalidExecutionIdError(AthenaFlowError, ValueError):
    """Raised when a required query execution id is missing or empty."""

    def __init__(self, message: str = 'Invalid QueryExecutionId'):
        super().__init__(message)


class QueryFailedError(AthenaFlowError):
    """
    Raised by wait_for_query when an execution ends in FAILED or CANCELLED.

    Attributes:
        execution_id: Athena QueryExecutionId
        state: Final state reported by Athena
        reason: StateChangeReason from the status payload, if any
    """

    def __init__(self, execution_id: str, state: str, reason: Optional[str] = None):
        self.execution_id = execution_id
        self.state = state
        self.reason = reason
        message = f"Query {execution_id} finished with state {state}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class QueryTimeoutError(AthenaFlowError, TimeoutError):
    """Raised when polling an execution exceeds the caller's deadline."""

    def __init__(self, execution_id: str, timeout_seconds: float):
        self.execution_id = execution_id
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Query {execution_id} still running after {timeout_seconds} seconds"
        )
