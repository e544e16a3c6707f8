"""Composite (text, role) view of a node and its children."""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, List, Sequence, Tuple

from .core.accessible import Accessible


@dataclass(frozen=True)
class Snapshot:
    """Text and localized role of a node plus those of its children.

    children is in child-index order.
    """
    text: str
    role: str
    children: List[Tuple[str, str]] = field(default_factory=list)


async def _gather_all(awaitables: Sequence[Awaitable]) -> list:
    """Run awaitables concurrently; on the first failure cancel the rest and raise."""
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def text_and_role(node: Accessible) -> Tuple[str, str]:
    """Fetch a node's full text and localized role name concurrently."""
    text, role = await _gather_all([node.text(), node.localized_role_name()])
    return text, role


async def snapshot(parent: Accessible) -> Snapshot:
    """Build a Snapshot of parent.

    The parent's text, role and child list are fetched concurrently, then
    every child's (text, role) concurrently. Any failing call fails the
    whole snapshot; no partial result is produced.

    Raises:
        CallError: The first failure among the inner calls
    """
    (text, role), children = await _gather_all([
        text_and_role(parent),
        parent.children(),
    ])
    child_pairs = await _gather_all([text_and_role(child) for child in children])
    return Snapshot(text=text, role=role, children=list(child_pairs))
