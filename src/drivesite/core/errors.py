"""Upstream failure types.

Not-found outcomes are never raised; they are signalled structurally by
the resolver. These exceptions cover failures of the collaborators that
feed the core (listing export, metadata lookup, document bodies).
"""


class DrivesiteError(Exception):
    """Base class for drivesite failures."""


class TreeProviderError(DrivesiteError):
    """The tree snapshot could not be produced."""


class MissingMetadataError(TreeProviderError, KeyError):
    """A node id referenced by the tree has no metadata entry."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"No metadata for node {self.node_id!r}"


class DocumentFetchError(DrivesiteError):
    """A document body could not be fetched."""
