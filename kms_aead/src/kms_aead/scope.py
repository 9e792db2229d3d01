"""Explicit cancellation and deadline scopes for remote calls."""
from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from .exceptions import CallCancelled, DeadlineExceeded

Clock = Callable[[], float]


class CallScope:
    """Cancellation token threaded through every remote KMS call.

    A scope is done once :meth:`cancel` has been called, once its deadline
    (a ``clock()`` timestamp) has passed, or once its parent is done. Child
    scopes never outlive the deadline of their parent.
    """

    __slots__ = ("_parent", "_deadline", "_clock", "_cancelled", "_reason")

    def __init__(
        self,
        *,
        deadline: Optional[float] = None,
        parent: Optional["CallScope"] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._parent = parent
        self._clock: Clock = clock or (parent._clock if parent is not None else time.monotonic)
        if parent is not None and parent._deadline is not None:
            deadline = parent._deadline if deadline is None else min(deadline, parent._deadline)
        self._deadline = deadline
        self._cancelled = threading.Event()
        self._reason = "call scope cancelled"

    @classmethod
    def background(cls) -> "CallScope":
        """Return a scope that is never cancelled and has no deadline."""
        return cls()

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def child(self) -> "CallScope":
        return CallScope(parent=self)

    def with_deadline(self, deadline: float) -> "CallScope":
        return CallScope(deadline=deadline, parent=self)

    def with_timeout(self, seconds: float) -> "CallScope":
        if seconds <= 0:
            raise ValueError("timeout must be positive")
        return CallScope(deadline=self._clock() + seconds, parent=self)

    def cancel(self, reason: Optional[str] = None) -> None:
        if reason:
            self._reason = reason
        self._cancelled.set()

    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    @property
    def cancelled(self) -> bool:
        return self.error() is not None

    def error(self) -> Optional[CallCancelled]:
        """Return the error describing why the scope is done, or ``None``."""
        if self._parent is not None:
            inherited = self._parent.error()
            if inherited is not None:
                return inherited
        if self._cancelled.is_set():
            return CallCancelled(self._reason)
        if self._deadline is not None and self._clock() >= self._deadline:
            return DeadlineExceeded("call scope deadline exceeded")
        return None

    def raise_if_done(self) -> None:
        err = self.error()
        if err is not None:
            raise err

    def __repr__(self) -> str:
        return f"CallScope(deadline={self._deadline!r}, cancelled={self._cancelled.is_set()})"


__all__ = ["CallScope"]
