"""High-level async API for atspitree.

Simple functions for the common operations: collecting a node's
children, walking a subtree, and taking text/role snapshots.
"""

from typing import AsyncIterator, List, Optional, Tuple, Union

from .config import DepthConfig, WalkStrategy
from .core.accessible import Accessible
from .error_policies import ErrorPolicy
from .snapshot import Snapshot, snapshot
from .traverser import (
    AccessibleTreeWalker,
    BreadthFirstWalker,
    DepthFirstWalker,
    iter_present_children,
)


def create_walker(
    strategy: Union[str, WalkStrategy] = 'bfs',
    depth_config: Optional[DepthConfig] = None,
    policy: Optional[ErrorPolicy] = None
) -> AccessibleTreeWalker:
    """Create a walker for the given strategy.

    Args:
        strategy: 'bfs', 'dfs' or 'dfs_post' (or a WalkStrategy)

    Raises:
        ValueError: Unknown strategy
    """
    try:
        strategy = WalkStrategy(strategy)
    except ValueError:
        raise ValueError(f"Unknown strategy: {strategy}") from None

    if strategy is WalkStrategy.BREADTH_FIRST:
        return BreadthFirstWalker(depth_config, policy)
    if strategy is WalkStrategy.DEPTH_FIRST_PRE:
        return DepthFirstWalker(depth_config, policy, pre_order=True)
    return DepthFirstWalker(depth_config, policy, pre_order=False)


async def collect_children(
    parent: Accessible,
    retry: bool = False,
    policy: Optional[ErrorPolicy] = None
) -> List[Accessible]:
    """Collect the existing children of parent, in index order.

    Queries child_count() once, then enumerates with a ChildStream.
    Failed indices are handed to the policy (default: fail fast).

    Note: with retry=True and a policy that does not raise, an index
    that keeps failing keeps this coroutine busy forever.
    """
    return [child async for child in iter_present_children(parent, policy, retry=retry)]


async def walk_tree(
    root: Accessible,
    strategy: Union[str, WalkStrategy] = 'bfs',
    max_depth: Optional[int] = None,
    policy: Optional[ErrorPolicy] = None
) -> AsyncIterator[Tuple[Accessible, int]]:
    """Walk the accessibility tree under root.

    Args:
        root: Starting node
        strategy: Walk strategy ('bfs', 'dfs' or 'dfs_post')
        max_depth: Maximum depth to walk
        policy: Error policy for failed child lookups

    Yields:
        (accessible, depth) tuples in walk order

    Example:
        >>> async for node, depth in walk_tree(root, max_depth=2):
        ...     print("  " * depth + await node.name())
    """
    walker = create_walker(strategy, policy=policy)
    async for item in walker.walk(root, max_depth):
        yield item


async def snapshot_tree(
    root: Accessible,
    strategy: Union[str, WalkStrategy] = 'bfs',
    max_depth: Optional[int] = None,
    policy: Optional[ErrorPolicy] = None
) -> AsyncIterator[Tuple[Accessible, Snapshot]]:
    """Take a Snapshot of every node reached by a walk.

    Walk failures go to the policy; a failing snapshot raises as usual.

    Yields:
        (accessible, snapshot) tuples in walk order
    """
    async for node, _depth in walk_tree(root, strategy, max_depth, policy):
        yield node, await snapshot(node)
