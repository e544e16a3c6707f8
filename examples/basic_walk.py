#!/usr/bin/env python3
"""
Basic walk of the desktop accessibility tree.

This example demonstrates:
- Connecting a GioCallChannel to the accessibility bus
- Walking the tree with per-child failures recorded instead of fatal
- Printing names and roles with indentation

Usage:
    python examples/basic_walk.py ADDRESS [MAX_DEPTH]

ADDRESS is the accessibility bus address, e.g. the output of
`busctl --user call org.a11y.Bus /org/a11y/bus org.a11y.Bus GetAddress`.
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from atspitree import Accessible, ContinueOnErrorsPolicy, walk_tree
from atspitree.channels.gio import GioCallChannel


async def main():
    """Print the accessibility tree under the registry root."""
    if len(sys.argv) < 2:
        print(__doc__)
        return 2
    address = sys.argv[1]
    max_depth = int(sys.argv[2]) if len(sys.argv) > 2 else 3

    policy = ContinueOnErrorsPolicy(verbose=True)
    async with GioCallChannel.for_address(address) as channel:
        root = Accessible("org.a11y.atspi.Registry", "/org/a11y/atspi/accessible/root", channel)

        count = 0
        async for node, depth in walk_tree(root, strategy="dfs", max_depth=max_depth, policy=policy):
            count += 1
            name = await node.name()
            role = await node.localized_role_name()
            print(f"{'  ' * depth}{role}: {name!r}")

    stats = policy.get_statistics()
    print(f"\nWalk Summary:")
    print(f"  Nodes: {count:,}")
    print(f"  Errors: {stats['total_errors']} ({stats['timeouts']} timeouts)")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
