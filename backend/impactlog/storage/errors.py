class StoreError(Exception):
    """Base class for failures raised by the wins/reflections store."""


class StorageWriteError(StoreError):
    """The local medium refused a write (quota, permissions, corrupt file)."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Failed to persist {key} to local storage")


class NotSignedIn(StoreError):
    """A mutation was attempted while no principal is bound to the store."""


class LocalOnlyOperation(StoreError):
    """The operation only makes sense for a local-only (guest) session."""
