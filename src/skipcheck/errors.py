"""Exceptions raised when analysis state is used out of order."""


class NotInitializedError(RuntimeError):
    """A holder or repository was queried before it was initialized."""

    def __init__(self, message: str = "Not initialized"):
        super().__init__(message)


class AlreadyInitializedError(RuntimeError):
    """A value that may only be set once was set a second time."""
