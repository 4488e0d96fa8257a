"""Custom exceptions for publication writing."""


class EpubError(Exception):
    """Base exception for all publication errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class DuplicateResourceError(EpubError):
    """Raised when a resource path is already present in the publication."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"a resource named {path!r} has already been added to the publication"
        )


class InvalidResourceNameError(EpubError):
    """Raised when a resource name cannot be stored inside the content root."""

    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(f"invalid resource name {name!r}: {reason}")


class InvalidDateError(EpubError):
    """Raised when a publication date does not match an accepted format."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f"invalid publication date {value!r}: expected a timestamp, "
            "YYYY-MM-DD, YYYY-MM or YYYY"
        )


class ClosedWriterError(EpubError):
    """Raised when a writer is used after it has been closed."""

    def __init__(self, message: str = "publication writer is closed"):
        super().__init__(message)


class StreamIOError(EpubError):
    """Raised when reading a resource or writing the archive fails.

    Attributes:
        path: Resource or output path involved in the failure
        operation: Operation that failed (e.g. "bootstrap", "add", "close")
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        operation: str | None = None,
        *args,
        **kwargs,
    ):
        self.path = path
        self.operation = operation
        super().__init__(message, *args, **kwargs)


class IdentifierError(StreamIOError):
    """Raised when no random identifier can be generated."""

    def __init__(self, message: str = "random source unavailable"):
        super().__init__(message, operation="identifier")
