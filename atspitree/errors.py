"""Exceptions raised by remote calls.

Every failure of a remote call surfaces as a CallError subclass. The
null-child sentinel is not an error and never appears here.
"""

from typing import Optional


class CallError(Exception):
    """A remote call failed (transport, protocol or remote error)."""

    def __init__(self, message: str, member: Optional[str] = None,
                 error_name: Optional[str] = None):
        super().__init__(message)
        self.member = member
        self.error_name = error_name


class CallTimeoutError(CallError):
    """The call's deadline expired before a reply arrived."""


class ChannelClosedError(CallError):
    """The call channel was closed before or during the call."""


class MalformedReplyError(CallError):
    """The reply did not have the expected shape."""
