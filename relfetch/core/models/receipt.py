"""
Receipt model — the outcome of one filesystem or shell step.

Adapters return receipts instead of raising; the installer decides
which failed receipts abort the install.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Receipt(BaseModel):
    """What one mkdir/mv/chmod/rmdir (or raw command) did."""

    adapter: str
    action_id: str
    ok: bool = True
    output: str = ""
    error: str | None = None
    duration_ms: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return not self.ok

    def summary(self) -> str:
        """One-line log form, e.g. ``shell/mv ok (12ms)``."""
        state = "ok" if self.ok else f"failed: {self.error}"
        return f"{self.adapter}/{self.action_id} {state} ({self.duration_ms}ms)"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, ok=True, output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, ok=False, error=error, **kwargs)
