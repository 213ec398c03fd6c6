"""Synchronous multicast event streams.

Handlers run on the emitting task in subscription order. A failing handler is
logged and does not stop delivery to the others.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Subscription(Generic[T]):
    """Handle returned by ``Subject.subscribe``."""

    subject: Subject[T]
    handler: Callable[[T], None]
    active: bool = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self.subject._remove(self)


@dataclass(eq=False)
class Subject(Generic[T]):
    """A stream of values pushed to every active subscriber."""

    name: str = "stream"
    _subs: list[Subscription[T]] = field(default_factory=list)
    _completed: bool = False

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def observer_count(self) -> int:
        return len(self._subs)

    def subscribe(self, handler: Callable[[T], None]) -> Subscription[T]:
        sub = Subscription(self, handler)
        if self._completed:
            sub.active = False
        else:
            self._subs.append(sub)
        return sub

    def emit(self, value: T) -> None:
        if self._completed:
            return
        # Snapshot so handlers can unsubscribe while being called
        for sub in list(self._subs):
            if not sub.active:
                continue
            try:
                sub.handler(value)
            except Exception:
                logger.exception("Handler failed on %s", self.name)

    def complete(self) -> None:
        self._completed = True
        for sub in self._subs:
            sub.active = False
        self._subs.clear()

    def _remove(self, sub: Subscription[T]) -> None:
        with contextlib.suppress(ValueError):
            self._subs.remove(sub)
