"""Exception hierarchy for Dgraph connection and transaction failures.

Hierarchy:
    DgloadError (base)
    +-- ConfigError            no endpoints configured
    +-- DialError              endpoint unreachable at dial time
    +-- TransactionFailure     alter/mutate gave up
        +-- ReconnectFailure       pool rebuild after a dead transport failed
        +-- ExhaustedFailure       retryable error persisted past the retry cap
        +-- UnclassifiedFailure    error not known to be transient
"""

from __future__ import annotations


class DgloadError(Exception):
    """Base exception for dgload."""


class ConfigError(DgloadError):
    """Connection configuration is unusable."""


class DialError(DgloadError):
    """One or more Dgraph alpha endpoints could not be dialed.

    Attributes:
        endpoints: Endpoints that were not reachable
    """

    def __init__(self, endpoints: list[str], reason: str | None = None):
        self.endpoints = list(endpoints)
        self.reason = reason
        msg = f"unable to connect to dgraph alpha servers at {self.endpoints}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class TransactionFailure(DgloadError):
    """A schema alter or mutation failed for good.

    Attributes:
        operation: Human-readable name of the failed operation
    """

    def __init__(self, message: str, *, operation: str = ""):
        self.operation = operation
        super().__init__(message)


class ReconnectFailure(TransactionFailure):
    """Rebuilding the connection pool after a transport error failed."""


class ExhaustedFailure(TransactionFailure):
    """A retryable error was still occurring when the retry cap was reached.

    Attributes:
        retries: Number of retries performed
        attempts: Total number of attempts, including the first one
        last_error: Error raised by the final attempt
    """

    def __init__(self, operation: str, retries: int, last_error: BaseException):
        self.retries = retries
        self.attempts = retries + 1
        self.last_error = last_error
        super().__init__(
            f"unable to perform dgraph {operation} in {self.attempts} attempts "
            f"({retries} retries): {last_error}",
            operation=operation,
        )


class UnclassifiedFailure(TransactionFailure):
    """An error that is not known to be transient; its text is kept verbatim."""

    def __init__(self, operation: str, error: BaseException):
        self.error = error
        super().__init__(str(error), operation=operation)
