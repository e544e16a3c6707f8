"""Remote call channel abstraction.

A channel issues named remote calls against a NodeIdentity. Many
Accessible handles share one channel instance; the channel owns the
transport and nothing in the core ever copies or mutates it.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence, Tuple

from ..config import PROPERTIES_INTERFACE
from ..errors import ChannelClosedError, MalformedReplyError
from .node import NodeIdentity


class CallChannel(ABC):
    """Abstract base class for remote call channels.

    Subclasses implement call() for a concrete transport. Everything the
    core needs (property reads included) is expressed in terms of it.
    """

    def __init__(self):
        self._closed = False
        self.calls_issued = 0
        self.calls_failed = 0

    @abstractmethod
    async def call(
        self,
        identity: NodeIdentity,
        interface: str,
        member: str,
        args: Sequence[Any] = (),
        signature: str = "",
        *,
        timeout: float
    ) -> Tuple[Any, ...]:
        """Invoke one remote method and wait for its reply.

        Args:
            identity: Object to call
            interface: Interface the member belongs to
            member: Method name
            args: Positional arguments
            signature: Type signature of args (D-Bus notation)
            timeout: Deadline for this call in seconds

        Returns:
            The reply body as a tuple

        Raises:
            CallError: On timeout, transport failure or remote error
        """
        pass

    async def get_property(
        self,
        identity: NodeIdentity,
        interface: str,
        name: str,
        *,
        timeout: float
    ) -> Any:
        """Read one property through org.freedesktop.DBus.Properties.Get.

        Returns:
            The unwrapped property value
        """
        reply = await self.call(
            identity, PROPERTIES_INTERFACE, "Get", (interface, name), "ss",
            timeout=timeout,
        )
        if len(reply) != 1:
            raise MalformedReplyError(
                f"Get({interface}.{name}) returned {len(reply)} values",
                member="Get",
            )
        return reply[0]

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self, member: str) -> None:
        if self._closed:
            raise ChannelClosedError(f"channel closed, cannot call {member}", member=member)

    async def get_stats(self) -> dict:
        """Get channel statistics.

        Returns:
            Dictionary with call counters
        """
        return {
            'calls_issued': self.calls_issued,
            'calls_failed': self.calls_failed,
            'closed': self._closed,
        }

    async def close(self):
        """Release the transport.

        Override if the channel holds resources; call super().close().
        """
        self._closed = True

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
