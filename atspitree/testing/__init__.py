"""Testing utilities for atspitree consumers."""

from .fixtures import FakeCallChannel, FakeNode, CallRecord

__all__ = ['FakeCallChannel', 'FakeNode', 'CallRecord']
