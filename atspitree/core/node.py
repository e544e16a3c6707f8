"""Identity of a remote accessibility object."""

from typing import NamedTuple

from ..config import REGISTRY_BUS_NAME, NULL_PATH


class NodeIdentity(NamedTuple):
    """The (endpoint, path) pair addressing one remote object.

    Equality is plain string equality on both fields, no normalization.
    """
    endpoint: str
    path: str

    def is_null(self) -> bool:
        """True if this is the registry's "no such child" reply."""
        return self == NULL_CHILD

    def __str__(self) -> str:
        return f"{self.endpoint}:{self.path}"


NULL_CHILD = NodeIdentity(REGISTRY_BUS_NAME, NULL_PATH)
