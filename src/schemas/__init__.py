"""Schema definitions for epub-assembler."""

from .container import Container, RootFile
from .metadata import Element, LangElement, Link, Meta, Metadata
from .package import ManifestItem, Package, SpineEntry

__all__ = [
    "Container",
    "Element",
    "LangElement",
    "Link",
    "ManifestItem",
    "Meta",
    "Metadata",
    "Package",
    "RootFile",
    "SpineEntry",
]
