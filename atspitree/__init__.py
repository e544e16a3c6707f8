"""atspitree - Async client for the AT-SPI accessibility tree.

Each node of the tree is a remote object addressed by (endpoint, path).
atspitree wraps those objects in Accessible handles that share one call
channel, enumerates children one remote call at a time, and builds
text/role snapshots and tree walks on top.

    from atspitree import Accessible
    from atspitree.channels.gio import GioCallChannel

    channel = GioCallChannel.for_address(address)
    root = Accessible("org.a11y.atspi.Registry",
                      "/org/a11y/atspi/accessible/root", channel)
    async for result in await root.stream_children():
        ...
"""

__version__ = "0.1.0"

from .config import (
    DEFAULT_TIMEOUT,
    REGISTRY_BUS_NAME,
    NULL_PATH,
    DepthConfig,
    WalkStrategy,
)
from .errors import (
    CallError,
    CallTimeoutError,
    ChannelClosedError,
    MalformedReplyError,
)
from .core import (
    NodeIdentity,
    NULL_CHILD,
    CallChannel,
    Accessible,
    ChildStream,
    ChildResult,
)
from .snapshot import Snapshot, snapshot, text_and_role
from .error_policies import (
    ErrorPolicy,
    FailFastPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
    ThresholdPolicy,
)
from .traverser import (
    AccessibleTreeWalker,
    BreadthFirstWalker,
    DepthFirstWalker,
    iter_present_children,
)
from .api import (
    create_walker,
    collect_children,
    walk_tree,
    snapshot_tree,
)

__all__ = [
    "__version__",
    # Configuration
    "DEFAULT_TIMEOUT",
    "REGISTRY_BUS_NAME",
    "NULL_PATH",
    "DepthConfig",
    "WalkStrategy",
    # Errors
    "CallError",
    "CallTimeoutError",
    "ChannelClosedError",
    "MalformedReplyError",
    # Core
    "NodeIdentity",
    "NULL_CHILD",
    "CallChannel",
    "Accessible",
    "ChildStream",
    "ChildResult",
    # Snapshots
    "Snapshot",
    "snapshot",
    "text_and_role",
    # Error policies
    "ErrorPolicy",
    "FailFastPolicy",
    "ContinueOnErrorsPolicy",
    "CollectErrorsPolicy",
    "ThresholdPolicy",
    # Walking
    "AccessibleTreeWalker",
    "BreadthFirstWalker",
    "DepthFirstWalker",
    "iter_present_children",
    # High-level API
    "create_walker",
    "collect_children",
    "walk_tree",
    "snapshot_tree",
]
