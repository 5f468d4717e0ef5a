"""Per-source fetch lifecycle state.

A :class:`FetchCycle` is an immutable value; every transition returns a new
instance. Results are only applied when they carry the cycle's current
generation, which is how superseded requests are ignored.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from pypowerdash.sync.requests import RequestDescriptor


class FetchStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class FetchCycle(BaseModel):
    """State of one source's most recent request.

    Parameters
    ----------
    request : RequestDescriptor or None
        Request issued for the current generation; ``None`` before the
        first fetch.
    status : FetchStatus
        ``idle`` only before the first fetch.
    data : tuple
        Last successfully applied collection. Kept while a newer request
        is loading or after it fails.
    error_message : str or None
        Message of the current generation's failure, if any.
    generation : int
        Incremented on every issued request and on invalidation.
    """

    model_config = ConfigDict(frozen=True)

    request: RequestDescriptor | None = None
    status: FetchStatus = FetchStatus.IDLE
    data: tuple[Any, ...] = ()
    error_message: str | None = None
    generation: int = 0

    @property
    def is_loading(self) -> bool:
        return self.status == FetchStatus.LOADING

    def accepts(self, generation: int) -> bool:
        return generation == self.generation and self.status == FetchStatus.LOADING

    def begin(self, request: RequestDescriptor) -> FetchCycle:
        return self.model_copy(
            update={
                "request": request,
                "status": FetchStatus.LOADING,
                "error_message": None,
                "generation": self.generation + 1,
            }
        )

    def succeed(self, generation: int, data: tuple[Any, ...]) -> FetchCycle:
        if not self.accepts(generation):
            return self
        return self.model_copy(update={"status": FetchStatus.SUCCESS, "data": tuple(data)})

    def fail(self, generation: int, message: str) -> FetchCycle:
        if not self.accepts(generation):
            return self
        return self.model_copy(update={"status": FetchStatus.ERROR, "error_message": message})

    def invalidate(self) -> FetchCycle:
        """Orphan the pending request; a cycle left without one is not loading."""
        update: dict[str, Any] = {"generation": self.generation + 1}
        if self.status == FetchStatus.LOADING:
            update["status"] = FetchStatus.IDLE
        return self.model_copy(update=update)
