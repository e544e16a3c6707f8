"""Concrete call channels.

Import them from their modules; each one pulls in its transport library:

    from atspitree.channels.gio import GioCallChannel
"""
