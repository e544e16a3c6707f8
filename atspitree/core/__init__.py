"""Core abstractions: identities, the call channel, handles and child streams."""

from .node import NodeIdentity, NULL_CHILD
from .channel import CallChannel
from .accessible import Accessible
from .children import ChildStream, ChildResult

__all__ = [
    # Identity
    'NodeIdentity',
    'NULL_CHILD',
    # Channel
    'CallChannel',
    # Handles
    'Accessible',
    # Enumeration
    'ChildStream',
    'ChildResult',
]
