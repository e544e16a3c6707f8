"""Accessibility tree walking strategies.

Walkers query each visited node's child count once and drain a
ChildStream for it. Failures are routed to an ErrorPolicy; null children
are skipped. All walkers yield (accessible, depth) tuples as they go.
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import replace
from typing import AsyncIterator, Optional, Set, Tuple

from .config import DepthConfig
from .core.accessible import Accessible
from .core.node import NodeIdentity
from .error_policies import ErrorPolicy, FailFastPolicy
from .errors import CallError


async def iter_present_children(
    parent: Accessible,
    policy: Optional[ErrorPolicy] = None,
    retry: bool = False
) -> AsyncIterator[Accessible]:
    """Stream the children of parent that actually exist.

    Failed indices go to the policy (FailFastPolicy re-raises them);
    indices answered with the null object are skipped.

    Args:
        parent: Node whose children are enumerated
        policy: Error policy for failed calls
        retry: Passed through to the ChildStream

    Yields:
        Child handles in index order
    """
    policy = policy or FailFastPolicy()
    try:
        total = await parent.child_count()
    except CallError as e:
        total = await policy.handle(e, 'child_count', parent) or 0

    async with parent.iter_children(total, retry=retry) as stream:
        async for result in stream:
            if not result.ok:
                await policy.handle(result.error, 'child_at_index', parent, result.index)
                continue
            if result.child is not None:
                yield result.child


class AccessibleTreeWalker(ABC):
    """Abstract base class for accessibility tree walkers."""

    def __init__(
        self,
        depth_config: Optional[DepthConfig] = None,
        policy: Optional[ErrorPolicy] = None
    ):
        """Initialize walker.

        Args:
            depth_config: Configuration for depth-based filtering
            policy: Error policy for failed child lookups (default: fail fast)
        """
        self.depth_config = depth_config or DepthConfig()
        self.policy = policy or FailFastPolicy()

    @abstractmethod
    async def walk(
        self,
        root: Accessible,
        max_depth: Optional[int] = None
    ) -> AsyncIterator[Tuple[Accessible, int]]:
        """Walk the tree starting from root.

        Args:
            root: Starting node (depth 0)
            max_depth: Maximum depth to walk (overrides config)

        Yields:
            (accessible, depth) tuples in walk order
        """
        pass

    def config_for(self, max_depth: Optional[int] = None) -> DepthConfig:
        """Depth config for one walk; the walker's own config is never modified."""
        if max_depth is None:
            return self.depth_config
        return replace(self.depth_config, max_depth=max_depth)

    def children_of(self, node: Accessible) -> AsyncIterator[Accessible]:
        return iter_present_children(node, self.policy)


class BreadthFirstWalker(AccessibleTreeWalker):
    """Breadth-first (level-order) walk."""

    async def walk(
        self,
        root: Accessible,
        max_depth: Optional[int] = None
    ) -> AsyncIterator[Tuple[Accessible, int]]:
        config = self.config_for(max_depth)

        queue = deque([(root, 0)])
        visited: Set[NodeIdentity] = set()

        while queue:
            node, depth = queue.popleft()

            # Applications sometimes report an ancestor among the children
            if node.identity in visited:
                continue
            visited.add(node.identity)

            if config.should_yield(depth):
                yield node, depth

            if config.should_explore(depth):
                async for child in self.children_of(node):
                    queue.append((child, depth + 1))


class DepthFirstWalker(AccessibleTreeWalker):
    """Depth-first walk.

    Only one ChildStream per level of the current branch is open at a
    time, and each of them has at most one call outstanding.
    """

    def __init__(
        self,
        depth_config: Optional[DepthConfig] = None,
        policy: Optional[ErrorPolicy] = None,
        pre_order: bool = True
    ):
        """Initialize depth-first walker.

        Args:
            depth_config: Configuration for depth-based filtering
            policy: Error policy for failed child lookups
            pre_order: If True, yield parent before children (pre-order).
                      If False, yield children before parent (post-order).
        """
        super().__init__(depth_config, policy)
        self.pre_order = pre_order

    async def walk(
        self,
        root: Accessible,
        max_depth: Optional[int] = None
    ) -> AsyncIterator[Tuple[Accessible, int]]:
        config = self.config_for(max_depth)

        visited: Set[NodeIdentity] = set()

        async def dfs(node: Accessible, depth: int) -> AsyncIterator[Tuple[Accessible, int]]:
            if node.identity in visited:
                return
            visited.add(node.identity)

            if self.pre_order and config.should_yield(depth):
                yield node, depth

            if config.should_explore(depth):
                async for child in self.children_of(node):
                    async for item in dfs(child, depth + 1):
                        yield item

            if not self.pre_order and config.should_yield(depth):
                yield node, depth

        async for item in dfs(root, 0):
            yield item
