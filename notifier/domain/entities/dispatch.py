"""Value objects exchanged while dispatching notifications."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Recipient:
    """A resolved member of a broadcast audience."""

    id: int
    email: str
    name: str
    role: str
    phone: str | None = None


@dataclass(frozen=True)
class RenderedContent:
    """Channel specific content produced by the template resolver."""

    subject: str
    body: str


@dataclass(frozen=True)
class SendResult:
    """Outcome reported by a channel sender."""

    success: bool
    error: str | None = None
    retryable: bool = False

    @classmethod
    def ok(cls) -> "SendResult":
        return cls(success=True)

    @classmethod
    def failed(cls, error: str, *, retryable: bool = False) -> "SendResult":
        return cls(success=False, error=error, retryable=retryable)


@dataclass(frozen=True)
class DispatchResult:
    """Aggregate outcome of a broadcast returned to the caller."""

    success: bool
    total_targeted: int
    success_count: int
    failure_count: int


__all__ = ["DispatchResult", "Recipient", "RenderedContent", "SendResult"]
