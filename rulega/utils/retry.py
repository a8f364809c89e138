"""Bounded retry helper for stochastic uniqueness searches."""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

T = TypeVar("T")


def attempt(fn: Callable[[], Optional[T]], max_tries: int) -> Optional[T]:
    """Call ``fn`` until it returns something other than None.

    ``fn`` is always called at least once. Gives up after ``max_tries``
    consecutive None results and returns None; the caller decides whether
    that means "accept fewer items" or "fail".
    """
    for _ in range(max(1, int(max_tries))):
        result = fn()
        if result is not None:
            return result
    return None


__all__ = ["attempt"]
