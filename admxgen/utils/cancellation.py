"""
Cooperative cancellation for one top-level invocation.

A single token is created per run and threaded explicitly through every
async step. Setting it is safe from signal handlers and worker threads;
work observes it at its own checkpoints and unwinds with
OperationCancelledError.
"""
import threading


class OperationCancelledError(Exception):
    """Raised when a cancellation token has been triggered."""

    def __init__(self, message: str = "The operation was cancelled."):
        super().__init__(message)


class CancellationToken:
    """A settable, thread-safe cancellation flag."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


def ensure_token(token: "CancellationToken | None") -> CancellationToken:
    """Return the given token, or a fresh one that is never cancelled."""
    return token if token is not None else CancellationToken()
