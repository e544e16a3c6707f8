"""Asynchronous child enumeration.

ChildStream walks a parent's children by index, one GetChildAtIndex call
at a time. Failures are yielded as items instead of ending the stream, so
a consumer sees successes and failures interleaved in index order.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional, Tuple, Type, TYPE_CHECKING

from ..errors import CallError
from .node import NodeIdentity

if TYPE_CHECKING:
    from .accessible import Accessible


@dataclass(frozen=True)
class ChildResult:
    """Outcome of enumerating one child index.

    Exactly one of three shapes:
        ok with child       the index resolved to a handle
        ok without child    the remote reported the null object
        failed              error holds the call's exception
    """
    index: int
    child: Optional["Accessible"] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def missing(self) -> bool:
        return self.error is None and self.child is None

    def unwrap(self) -> Optional["Accessible"]:
        """Return the child, raising the stored error for a failed result."""
        if self.error is not None:
            raise self.error
        return self.child


def _consume_outcome(task: "asyncio.Future") -> None:
    # Mark an abandoned call's exception as retrieved so nothing is reported for it
    if not task.cancelled():
        task.exception()


class ChildStream:
    """Single-use async iterator over a parent's children.

    At most one remote call is outstanding at any time, issued for the
    current index only when the consumer asks for the next item. The
    call survives cancellation of the consumer: the next __anext__
    resumes waiting on it instead of issuing another request.

    With retry=False a failed index is yielded as a failed ChildResult
    and enumeration moves on to the next index. With retry=True the
    failed result is still yielded but the index is not advanced, so the
    next step calls the same index again. There is no retry cap: an index
    that always fails stalls the stream on that index indefinitely.

    An index answered with the registry's null object yields a successful
    ChildResult whose child is None, as child_at_index() returns None.
    This differs from Accessible.children(), which hands the null object
    back as an ordinary handle.

    The total is fixed at construction and never re-queried.
    """

    def __init__(
        self,
        parent: "Accessible",
        total: int,
        retry: bool = False,
        tolerate: Tuple[Type[BaseException], ...] = (CallError,)
    ):
        """Bind a stream to a parent.

        Args:
            parent: Handle whose children are enumerated
            total: Child count, normally from parent.child_count()
            retry: Re-issue the call for a failed index instead of advancing
            tolerate: Exception types yielded as failed items; anything
                else propagates out of __anext__
        """
        self._parent = parent
        self._total = total
        self._retry = retry
        self._tolerate = tolerate
        self._current = 0
        self._pending: Optional[asyncio.Future] = None
        self._closed = False
        self._running = False

    @property
    def parent(self) -> "Accessible":
        return self._parent

    @property
    def current(self) -> int:
        return self._current

    @property
    def total(self) -> int:
        return self._total

    @property
    def retry(self) -> bool:
        return self._retry

    @property
    def exhausted(self) -> bool:
        return self._closed or self._current >= self._total

    def size_hint(self) -> Tuple[int, Optional[int]]:
        """Bounds on the number of items still to come.

        Returns:
            (lower, upper); upper is None when retry is enabled since a
            failing index may be yielded any number of times
        """
        if self._closed:
            return (0, 0)
        remaining = max(self._total - self._current, 0)
        return (remaining, None if self._retry else remaining)

    def __length_hint__(self) -> int:
        return self.size_hint()[0]

    def _issue(self, index: int) -> asyncio.Future:
        task = asyncio.ensure_future(self._parent._child_identity_at(index))
        task.add_done_callback(_consume_outcome)
        return task

    def __aiter__(self) -> "ChildStream":
        return self

    async def __anext__(self) -> ChildResult:
        if self._running:
            raise RuntimeError("ChildStream.__anext__() is already running")
        self._running = True
        try:
            return await self._step()
        finally:
            self._running = False

    async def _step(self) -> ChildResult:
        if self.exhausted:
            raise StopAsyncIteration

        index = self._current
        if self._pending is None:
            self._pending = self._issue(index)
        pending = self._pending

        try:
            identity: NodeIdentity = await asyncio.shield(pending)
        except asyncio.CancelledError:
            if pending.cancelled():
                self._pending = None
            if self._closed:
                raise StopAsyncIteration from None
            raise
        except self._tolerate as error:
            self._pending = None
            if not self._retry:
                self._current += 1
            return ChildResult(index, error=error)
        except BaseException:
            self._pending = None
            raise

        self._pending = None
        self._current += 1
        if identity.is_null():
            return ChildResult(index)
        return ChildResult(index, child=self._parent._derive(identity))

    async def aclose(self) -> None:
        """Stop the stream and discard any outstanding call.

        The outstanding call is cancelled locally; nothing is sent to the
        remote object and no error is reported for it.
        """
        self._closed = True
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()

    async def __aenter__(self) -> "ChildStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def __repr__(self) -> str:
        return (f"ChildStream({self._parent!r}, current={self._current}, "
                f"total={self._total}, retry={self._retry})")
