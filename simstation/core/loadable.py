"""LoadableValue — lifecycle of one asynchronous request as seen by a UI.

A slot starts ``IDLE``, becomes ``LOADING`` while its work is awaited and
ends ``LOADED``, ``FAILED`` or ``CANCELLED``.  ``load_into`` drives that
lifecycle for an attribute on any object and re-raises failures so the
caller still decides what to do with them.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Awaitable, Generic, TypeVar

T = TypeVar("T")


class LoadState(Enum):
    IDLE = auto()
    LOADING = auto()
    LOADED = auto()
    FAILED = auto()
    CANCELLED = auto()


@dataclass(frozen=True)
class LoadableValue(Generic[T]):
    state: LoadState = LoadState.IDLE
    value: T | None = None
    error: BaseException | None = None
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def loading(cls) -> "LoadableValue[T]":
        return cls(state=LoadState.LOADING)

    @classmethod
    def loaded(cls, value: T) -> "LoadableValue[T]":
        return cls(state=LoadState.LOADED, value=value)

    @classmethod
    def failed(cls, error: BaseException) -> "LoadableValue[T]":
        return cls(state=LoadState.FAILED, error=error)

    @classmethod
    def cancelled(cls) -> "LoadableValue[T]":
        return cls(state=LoadState.CANCELLED)

    @property
    def is_loaded(self) -> bool:
        return self.state is LoadState.LOADED

    @property
    def is_failed(self) -> bool:
        return self.state is LoadState.FAILED


async def load_into(target: Any, attr: str, work: Awaitable[T]) -> T:
    """Await *work*, recording its progress in ``target.<attr>``.

    Exceptions (including cancellation) are recorded and re-raised.
    """
    setattr(target, attr, LoadableValue.loading())
    try:
        value = await work
    except asyncio.CancelledError:
        setattr(target, attr, LoadableValue.cancelled())
        raise
    except Exception as exc:
        setattr(target, attr, LoadableValue.failed(exc))
        raise
    setattr(target, attr, LoadableValue.loaded(value))
    return value
