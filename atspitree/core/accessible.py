"""Handle to one remote accessibility object.

An Accessible pairs a NodeIdentity with a per-call timeout and a shared
CallChannel. Every accessor is a single remote call: no retries, no
caching, errors propagate untouched.
"""

from typing import Any, List, Optional, Tuple

from ..config import ACCESSIBLE_INTERFACE, TEXT_INTERFACE, DEFAULT_TIMEOUT
from ..errors import MalformedReplyError
from .channel import CallChannel
from .children import ChildStream
from .node import NodeIdentity


def _single(reply: Tuple[Any, ...], member: str) -> Any:
    if len(reply) != 1:
        raise MalformedReplyError(f"{member} returned {len(reply)} values", member=member)
    return reply[0]


def _as_identity(value: Any, member: str) -> NodeIdentity:
    if (not isinstance(value, (tuple, list)) or len(value) != 2
            or not all(isinstance(part, str) for part in value)):
        raise MalformedReplyError(
            f"{member} returned {value!r}, expected (endpoint, path)", member=member
        )
    return NodeIdentity(value[0], value[1])


class Accessible:
    """A remote object in the accessibility tree.

    The channel is shared with every handle derived from this one; the
    identity and timeout belong to this handle and are copied into the
    children it produces.

    Example:
        root = Accessible("org.a11y.atspi.Registry",
                          "/org/a11y/atspi/accessible/root", channel)
        count = await root.child_count()
        async for result in root.iter_children(count):
            print(await result.unwrap().name())
    """

    def __init__(
        self,
        endpoint: str,
        path: str,
        channel: CallChannel,
        timeout: float = DEFAULT_TIMEOUT
    ):
        self._identity = NodeIdentity(endpoint, path)
        self._channel = channel
        self._timeout = timeout

    @classmethod
    def with_timeout(cls, endpoint: str, path: str, channel: CallChannel,
                     timeout: float) -> "Accessible":
        """Create a handle with an explicit per-call deadline."""
        return cls(endpoint, path, channel, timeout)

    @classmethod
    def from_identity(cls, identity: NodeIdentity, channel: CallChannel,
                      timeout: float = DEFAULT_TIMEOUT) -> "Accessible":
        return cls(identity.endpoint, identity.path, channel, timeout)

    @property
    def identity(self) -> NodeIdentity:
        return self._identity

    @property
    def endpoint(self) -> str:
        return self._identity.endpoint

    @property
    def path(self) -> str:
        return self._identity.path

    @property
    def channel(self) -> CallChannel:
        return self._channel

    @property
    def timeout(self) -> float:
        return self._timeout

    def _derive(self, identity: NodeIdentity) -> "Accessible":
        """Build a handle for a related object on the same channel and timeout."""
        return Accessible(identity.endpoint, identity.path, self._channel, self._timeout)

    async def _call(self, interface: str, member: str, args=(), signature: str = ""):
        return await self._channel.call(
            self._identity, interface, member, args, signature, timeout=self._timeout
        )

    async def _property(self, interface: str, name: str) -> Any:
        return await self._channel.get_property(
            self._identity, interface, name, timeout=self._timeout
        )

    # Accessible interface

    async def index_in_parent(self) -> int:
        reply = await self._call(ACCESSIBLE_INTERFACE, "GetIndexInParent")
        return _single(reply, "GetIndexInParent")

    async def child_count(self) -> int:
        return await self._property(ACCESSIBLE_INTERFACE, "ChildCount")

    async def name(self) -> str:
        return await self._property(ACCESSIBLE_INTERFACE, "Name")

    async def description(self) -> str:
        return await self._property(ACCESSIBLE_INTERFACE, "Description")

    async def localized_role_name(self) -> str:
        reply = await self._call(ACCESSIBLE_INTERFACE, "GetLocalizedRoleName")
        return _single(reply, "GetLocalizedRoleName")

    async def _child_identity_at(self, index: int) -> NodeIdentity:
        reply = await self._call(ACCESSIBLE_INTERFACE, "GetChildAtIndex", (index,), "i")
        return _as_identity(_single(reply, "GetChildAtIndex"), "GetChildAtIndex")

    async def child_at_index(self, index: int) -> Optional["Accessible"]:
        """Get the child at index.

        Returns:
            The child handle, or None when the remote answers with the
            registry's null object
        """
        identity = await self._child_identity_at(index)
        if identity.is_null():
            return None
        return self._derive(identity)

    async def children(self) -> List["Accessible"]:
        """Get every child with one GetChildren call.

        Unlike child_at_index(), entries equal to the null object are not
        filtered out; they come back as ordinary handles.
        """
        reply = await self._call(ACCESSIBLE_INTERFACE, "GetChildren")
        entries = _single(reply, "GetChildren")
        if not isinstance(entries, (tuple, list)):
            raise MalformedReplyError(
                f"GetChildren returned {entries!r}, expected an array", member="GetChildren"
            )
        return [self._derive(_as_identity(entry, "GetChildren")) for entry in entries]

    # Text interface

    async def character_count(self) -> int:
        return await self._property(TEXT_INTERFACE, "CharacterCount")

    async def get_text(self, start: int, end: int) -> str:
        reply = await self._call(TEXT_INTERFACE, "GetText", (start, end), "ii")
        return _single(reply, "GetText")

    async def text(self) -> str:
        """Get the full text: CharacterCount, then GetText(0, count)."""
        count = await self.character_count()
        return await self.get_text(0, count)

    # Child enumeration

    def iter_children(self, total: int, retry: bool = False) -> ChildStream:
        """Enumerate children one remote call at a time.

        Args:
            total: Number of children, normally from child_count()
            retry: Re-issue the call for an index that failed instead of
                moving past it

        Returns:
            A single-use ChildStream bound to this handle
        """
        return ChildStream(self, total, retry=retry)

    async def stream_children(self, retry: bool = False) -> ChildStream:
        """Query child_count() once and bind a ChildStream to it."""
        return self.iter_children(await self.child_count(), retry=retry)

    def __repr__(self) -> str:
        return f"Accessible({self.endpoint!r}, {self.path!r}, timeout={self._timeout})"
