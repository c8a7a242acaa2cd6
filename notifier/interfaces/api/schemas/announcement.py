"""Pydantic models for announcement broadcasts."""

from __future__ import annotations

from pydantic import BaseModel, Field


class BroadcastRequest(BaseModel):
    """Who triggers a broadcast and which roles should receive it."""

    author_id: int = Field(..., gt=0)
    target_roles: list[str] | None = Field(
        default=None,
        description="Explicit roles; the announcement type decides when omitted",
    )
    is_global: bool = Field(default=False, description="Send to every verified user")


class DispatchResultRead(BaseModel):
    """Aggregate outcome of a broadcast."""

    success: bool
    total_targeted: int
    success_count: int
    failure_count: int


__all__ = ["BroadcastRequest", "DispatchResultRead"]
