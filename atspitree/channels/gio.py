"""Call channel over a GDBus connection (PyGObject).

GDBusConnection is thread-safe, so blocking call_sync() calls run on a
small thread pool and the event loop only awaits their futures. The
connection itself is a GObject: every Accessible sharing this channel
shares one underlying connection.

Requires the optional 'gio' extra (PyGObject).
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Sequence, Tuple

from ..core.channel import CallChannel
from ..core.node import NodeIdentity
from ..errors import CallError, CallTimeoutError, ChannelClosedError


def _init_gio():
    """Import GLib and Gio via GObject Introspection."""
    import gi

    gi.require_version("Gio", "2.0")
    gi.require_version("GLib", "2.0")
    from gi.repository import Gio, GLib

    return Gio, GLib


class GioCallChannel(CallChannel):
    """CallChannel backed by a connected Gio.DBusConnection.

    Example:
        channel = GioCallChannel.for_address(atspi_bus_address)
        root = Accessible("org.a11y.atspi.Registry",
                          "/org/a11y/atspi/accessible/root", channel)
    """

    def __init__(self, connection: Any, max_workers: int = 4, owns_connection: bool = False):
        """
        Args:
            connection: A connected Gio.DBusConnection
            max_workers: Threads available for blocking calls
            owns_connection: Close the connection when the channel closes
        """
        super().__init__()
        self._gio, self._glib = _init_gio()
        self._connection = connection
        self._owns_connection = owns_connection
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix="atspitree-gio")

    @classmethod
    def for_address(cls, address: str, max_workers: int = 4) -> "GioCallChannel":
        """Connect to a message bus at a known address.

        Finding the accessibility bus address is up to the caller.
        """
        Gio, _GLib = _init_gio()
        flags = (Gio.DBusConnectionFlags.AUTHENTICATION_CLIENT
                 | Gio.DBusConnectionFlags.MESSAGE_BUS_CONNECTION)
        connection = Gio.DBusConnection.new_for_address_sync(address, flags, None, None)
        return cls(connection, max_workers=max_workers, owns_connection=True)

    @property
    def connection(self) -> Any:
        return self._connection

    def _call_blocking(self, identity: NodeIdentity, interface: str, member: str,
                       args: Sequence[Any], signature: str, timeout: float) -> Tuple[Any, ...]:
        parameters = None
        if signature:
            parameters = self._glib.Variant(f"({signature})", tuple(args))
        try:
            reply = self._connection.call_sync(
                identity.endpoint,
                identity.path,
                interface,
                member,
                parameters,
                None,
                self._gio.DBusCallFlags.NONE,
                int(timeout * 1000),
                None,
            )
        except self._glib.Error as e:
            raise self._translate(e, member) from e
        if reply is None:
            return ()
        return tuple(reply.unpack())

    def _translate(self, error: Any, member: str) -> CallError:
        io_error = self._gio.io_error_quark()
        if error.matches(io_error, self._gio.IOErrorEnum.TIMED_OUT):
            return CallTimeoutError(f"{member} timed out: {error.message}", member=member)
        if error.matches(io_error, self._gio.IOErrorEnum.CLOSED):
            return ChannelClosedError(f"{member}: {error.message}", member=member)
        remote_name = self._gio.DBusError.get_remote_error(error)
        return CallError(f"{member} failed: {error.message}", member=member,
                         error_name=remote_name)

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
        self.calls_issued += 1
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                self._executor,
                partial(self._call_blocking, identity, interface, member,
                        args, signature, timeout),
            )
        except CallError:
            self.calls_failed += 1
            raise

    async def close(self):
        if self._closed:
            return
        await super().close()
        loop = asyncio.get_running_loop()
        # Both close_sync() and a waiting shutdown() block
        if self._owns_connection:
            await loop.run_in_executor(self._executor,
                                       partial(self._connection.close_sync, None))
        await loop.run_in_executor(None, partial(self._executor.shutdown, wait=True))

    def __repr__(self) -> str:
        return f"GioCallChannel(closed={self._closed})"
