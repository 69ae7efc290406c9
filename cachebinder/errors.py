"""Exception hierarchy for the cache binder."""


class CacheBinderError(Exception):
    """Base exception for all cache binder errors."""


class IllegalStateError(CacheBinderError):
    """Lifecycle call made in a state that does not allow it."""


class UnmappedEntityKindError(CacheBinderError):
    """A notification arrived for a (change, kind) pair with no route."""

    def __init__(self, change: str, kind: str):
        self.change = change
        self.kind = kind
        super().__init__(f"No cache route for {change} notifications of kind '{kind}'")
