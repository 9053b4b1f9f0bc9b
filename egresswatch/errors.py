"""Exception types."""


class EgressWatchError(Exception):
    """Base error for egresswatch."""


class StoreConnectionError(EgressWatchError):
    """The intent store could not reach or prepare its backend."""
