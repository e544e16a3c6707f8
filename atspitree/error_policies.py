"""
Error handling policies for atspitree.

Tree walks and child collection see per-child failures as items rather
than exceptions. A policy decides what happens to each one: stop the
walk, or record it and carry on.
"""

from abc import ABC, abstractmethod
from typing import Any, List
import sys

from .errors import CallTimeoutError


def _describe(node: Any) -> Any:
    identity = getattr(node, 'identity', None)
    if identity is not None:
        return str(identity)
    return str(node) if node is not None else None


def _default_for(method_name: str) -> Any:
    # Defaults that let a walk continue past the failure
    if method_name in ('children', 'collect_children'):
        return []
    if method_name == 'child_count':
        return 0
    return None


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.
    """

    @abstractmethod
    async def handle(self, error: Exception, method_name: str, node: Any, *args, **kwargs) -> Any:
        """
        Handle an error raised by a remote call.

        Args:
            error: The exception from the failed call
            method_name: Name of the operation that failed (e.g., 'child_at_index')
            node: The Accessible being processed when the error occurred
            *args: Additional positional arguments of the failed operation,
                such as the child index

        Returns:
            A default value that allows the walk to continue,
            or re-raises the exception to stop it.
        """
        pass


class FailFastPolicy(ErrorPolicy):
    """
    Policy that immediately re-raises any error, stopping the walk.

    This is the default behavior.
    """

    async def handle(self, error: Exception, method_name: str, node: Any, *args, **kwargs) -> Any:
        """Re-raise the error immediately."""
        raise error


class _RecordingPolicy(ErrorPolicy):
    """Shared bookkeeping for policies that record errors and continue."""

    def __init__(self):
        self.errors: List[dict] = []

    def _record(self, error: Exception, method_name: str, node: Any, *args) -> dict:
        record = {
            'node': _describe(node),
            'method': method_name,
            'args': args,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
        }
        self.errors.append(record)
        return record

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        timeouts = sum(1 for e in self.errors if isinstance(e['error'], CallTimeoutError))
        return {
            'total_errors': len(self.errors),
            'timeouts': timeouts,
            'other_errors': len(self.errors) - timeouts,
            'errors': self.errors,
        }


class ContinueOnErrorsPolicy(_RecordingPolicy):
    """
    Policy that records errors, warns on stderr and continues.

    Useful when a partial view of the tree is better than none.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, print warnings to stderr when errors occur
        """
        super().__init__()
        self.verbose = verbose

    async def handle(self, error: Exception, method_name: str, node: Any, *args, **kwargs) -> Any:
        record = self._record(error, method_name, node, *args)
        if self.verbose:
            where = f"{method_name}{args}" if args else method_name
            print(f"\nWARNING: Error in {where} for '{record['node']}': {error}", file=sys.stderr)
        return _default_for(method_name)


class CollectErrorsPolicy(_RecordingPolicy):
    """
    Policy that collects all errors silently, for inspection afterwards.
    """

    async def handle(self, error: Exception, method_name: str, node: Any, *args, **kwargs) -> Any:
        """Silently collect the error and return a default."""
        self._record(error, method_name, node, *args)
        return _default_for(method_name)


class ThresholdPolicy(_RecordingPolicy):
    """
    Policy that tolerates errors up to a threshold, then fails fast.

    Some unresponsive applications are expected on a desktop; many of
    them usually mean the bus itself is in trouble.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum errors to tolerate before failing
            verbose: If True, print warnings for errors
        """
        super().__init__()
        self.max_errors = max_errors
        self.verbose = verbose

    @property
    def error_count(self) -> int:
        return len(self.errors)

    async def handle(self, error: Exception, method_name: str, node: Any, *args, **kwargs) -> Any:
        """Handle error if under threshold, otherwise raise."""
        record = self._record(error, method_name, node, *args)

        if self.error_count > self.max_errors:
            raise RuntimeError(f"Error threshold exceeded ({self.max_errors} errors)") from error

        if self.verbose:
            print(f"\nWARNING [{self.error_count}/{self.max_errors}]: Error in {method_name} "
                  f"for '{record['node']}': {error}", file=sys.stderr)

        return _default_for(method_name)
