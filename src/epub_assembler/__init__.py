"""Assemble EPUB 3 publications from streamed content resources."""

from .config import WriterConfig
from .exceptions import (
    ClosedWriterError,
    DuplicateResourceError,
    EpubError,
    IdentifierError,
    InvalidDateError,
    InvalidResourceNameError,
    StreamIOError,
)
from .manifest import ContentType
from .metadata import MetadataBuilder
from .writer import Writer

__all__ = [
    "ClosedWriterError",
    "ContentType",
    "DuplicateResourceError",
    "EpubError",
    "IdentifierError",
    "InvalidDateError",
    "InvalidResourceNameError",
    "MetadataBuilder",
    "StreamIOError",
    "Writer",
    "WriterConfig",
]
