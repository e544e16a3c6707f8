"""Test fixtures for atspitree consumers.

FakeCallChannel serves an in-memory accessibility tree through the same
CallChannel interface a real bus connection uses, with knobs for the
situations that are hard to reproduce on a live desktop: failing calls,
slow replies, stale child counts and null children.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import ACCESSIBLE_INTERFACE, TEXT_INTERFACE, PROPERTIES_INTERFACE, DEFAULT_TIMEOUT
from ..core.accessible import Accessible
from ..core.channel import CallChannel
from ..core.node import NodeIdentity, NULL_CHILD
from ..errors import CallError, CallTimeoutError

UNKNOWN_METHOD = "org.freedesktop.DBus.Error.UnknownMethod"
UNKNOWN_OBJECT = "org.freedesktop.DBus.Error.UnknownObject"


@dataclass
class FakeNode:
    """One object in the fake tree."""
    name: str = ""
    description: str = ""
    role: str = "unknown"
    text: str = ""
    children: List[NodeIdentity] = field(default_factory=list)
    child_count: Optional[int] = None  # Overrides len(children) when set


@dataclass
class CallRecord:
    """One call seen by FakeCallChannel."""
    identity: NodeIdentity
    interface: str
    member: str
    args: Tuple[Any, ...]
    timeout: float


@dataclass
class _FailureRule:
    identity: NodeIdentity
    member: str
    index: Optional[int]
    remaining: Optional[int]
    error: Optional[BaseException]


class FakeCallChannel(CallChannel):
    """In-memory CallChannel for tests.

    Members are matched by their logical name: property reads are logged
    and matched as the property name ('ChildCount', 'Name', ...), not as
    'Get'.

    Example:
        channel = FakeCallChannel()
        root = channel.add("app", "/root", name="root", children=[
            channel.add("app", "/a", name="a"),
            NULL_CHILD,
        ])
        channel.fail(root, "GetChildAtIndex", index=0, times=1)
        accessible = channel.accessible(root)
    """

    def __init__(self, delay: float = 0.0):
        """
        Args:
            delay: Seconds every call waits before answering
        """
        super().__init__()
        self.delay = delay
        self.nodes: Dict[NodeIdentity, FakeNode] = {}
        self.log: List[CallRecord] = []
        self._rules: List[_FailureRule] = []

    # Tree construction

    def add(self, endpoint: str, path: str, **attrs) -> NodeIdentity:
        """Register an object and return its identity.

        Keyword arguments are FakeNode fields.
        """
        identity = NodeIdentity(endpoint, path)
        self.nodes[identity] = FakeNode(**attrs)
        return identity

    def accessible(self, identity: NodeIdentity, timeout: float = DEFAULT_TIMEOUT) -> Accessible:
        return Accessible.from_identity(identity, self, timeout)

    def fail(
        self,
        identity: NodeIdentity,
        member: str,
        index: Optional[int] = None,
        times: Optional[int] = None,
        error: Optional[BaseException] = None
    ) -> None:
        """Make matching calls fail.

        Args:
            identity: Object whose calls fail
            member: Logical member name ('GetChildAtIndex', 'Name', ...)
            index: For GetChildAtIndex, only this index fails
            times: Fail this many times, then answer normally (None: always)
            error: Exception to raise (default: a CallError)
        """
        self._rules.append(_FailureRule(identity, member, index, times, error))

    def calls(self, member: Optional[str] = None) -> List[CallRecord]:
        """Logged calls, optionally only those for one member."""
        if member is None:
            return list(self.log)
        return [record for record in self.log if record.member == member]

    # CallChannel

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
        self._check_open(member)
        args = tuple(args)
        logical = member
        if interface == PROPERTIES_INTERFACE and member == "Get":
            logical = args[1]
        self.log.append(CallRecord(identity, interface, logical, args, timeout))
        self.calls_issued += 1

        try:
            if self.delay:
                if self.delay > timeout:
                    await asyncio.sleep(timeout)
                    raise CallTimeoutError(f"{logical} timed out", member=logical)
                await asyncio.sleep(self.delay)
            self._check_open(member)
            self._maybe_fail(identity, logical, args)
            return self._answer(identity, interface, member, args)
        except CallError:
            self.calls_failed += 1
            raise

    def _maybe_fail(self, identity: NodeIdentity, member: str, args: Tuple[Any, ...]) -> None:
        for rule in self._rules:
            if rule.identity != identity or rule.member != member:
                continue
            if rule.index is not None and (not args or args[0] != rule.index):
                continue
            if rule.remaining is not None:
                if rule.remaining <= 0:
                    continue
                rule.remaining -= 1
            raise rule.error or CallError(f"{member} failed on {identity}", member=member)

    def _node(self, identity: NodeIdentity, member: str) -> FakeNode:
        node = self.nodes.get(identity)
        if node is None:
            raise CallError(f"no object at {identity}", member=member, error_name=UNKNOWN_OBJECT)
        return node

    def _index_in_parent(self, identity: NodeIdentity) -> int:
        for node in self.nodes.values():
            if identity in node.children:
                return node.children.index(identity)
        return -1

    def _answer(self, identity: NodeIdentity, interface: str, member: str,
                args: Tuple[Any, ...]) -> Tuple[Any, ...]:
        node = self._node(identity, member)

        if interface == PROPERTIES_INTERFACE and member == "Get":
            prop_interface, name = args
            properties = {
                (ACCESSIBLE_INTERFACE, "ChildCount"):
                    len(node.children) if node.child_count is None else node.child_count,
                (ACCESSIBLE_INTERFACE, "Name"): node.name,
                (ACCESSIBLE_INTERFACE, "Description"): node.description,
                (TEXT_INTERFACE, "CharacterCount"): len(node.text),
            }
            if (prop_interface, name) not in properties:
                raise CallError(f"no property {prop_interface}.{name}", member=name)
            return (properties[(prop_interface, name)],)

        if interface == ACCESSIBLE_INTERFACE:
            if member == "GetChildAtIndex":
                index = args[0]
                if 0 <= index < len(node.children):
                    return (tuple(node.children[index]),)
                return (tuple(NULL_CHILD),)
            if member == "GetChildren":
                return ([tuple(child) for child in node.children],)
            if member == "GetIndexInParent":
                return (self._index_in_parent(identity),)
            if member == "GetLocalizedRoleName":
                return (node.role,)

        if interface == TEXT_INTERFACE and member == "GetText":
            start, end = args
            return (node.text[start:end],)

        raise CallError(f"unknown method {interface}.{member}", member=member,
                        error_name=UNKNOWN_METHOD)
