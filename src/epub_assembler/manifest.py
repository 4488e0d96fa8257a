"""Manifest and spine bookkeeping for a publication being written."""

import logging
import os
import posixpath
import re
from collections.abc import Iterable
from enum import Enum

from schemas.package import ManifestItem, SpineEntry

from .exceptions import DuplicateResourceError, InvalidResourceNameError
from .identifiers import item_id
from .media_types import type_by_filename

logger = logging.getLogger(__name__)

_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")


class ContentType(Enum):
    """How a resource takes part in the reading order.

    PRIMARY resources form the linear reading order, AUXILIARY resources are
    in the spine with linear="no", MEDIA resources are manifest-only.
    """

    MEDIA = "media"
    AUXILIARY = "auxiliary"
    PRIMARY = "primary"


def normalize_name(name: str | os.PathLike) -> str:
    """Normalize a resource name to a relative forward-slash path.

    Args:
        name: Resource path relative to the content root

    Returns:
        Normalized path, e.g. "text\\ch1.xhtml" -> "text/ch1.xhtml"

    Raises:
        InvalidResourceNameError: If the name is empty, absolute, names a
            directory or points outside the content root
    """
    raw = os.fspath(name)
    text = raw.replace("\\", "/")
    if not text.strip():
        raise InvalidResourceNameError(raw, "name is empty")
    if text.startswith("/") or _DRIVE_PREFIX.match(text):
        raise InvalidResourceNameError(raw, "name must be a relative path")
    if text.endswith("/"):
        raise InvalidResourceNameError(raw, "name refers to a directory")
    normalized = posixpath.normpath(text)
    if normalized == ".":
        raise InvalidResourceNameError(raw, "name is empty")
    if normalized == ".." or normalized.startswith("../"):
        raise InvalidResourceNameError(raw, "name points outside the content root")
    return normalized


class ManifestTracker:
    """Tracks manifest items and spine entries in addition order.

    Registration is two-phase: ``prepare`` validates a resource and builds
    its records without changing any state, ``commit`` records them once the
    resource bytes are in the archive.

    Example:
        tracker = ManifestTracker(reserved={"package.opf"})
        item, entry = tracker.prepare("ch1.xhtml", ContentType.PRIMARY)
        ...  # write the archive entry
        tracker.commit(item, entry)
    """

    def __init__(self, reserved: Iterable[str] = ()):
        """Initialize an empty tracker.

        Args:
            reserved: Hrefs already taken by entries the writer manages itself
        """
        self._items: list[ManifestItem] = []
        self._spine: list[SpineEntry] = []
        self._hrefs: set[str] = set()
        self._reserved = frozenset(reserved)
        self._counter = 0

    @property
    def items(self) -> tuple[ManifestItem, ...]:
        return tuple(self._items)

    @property
    def spine(self) -> tuple[SpineEntry, ...]:
        return tuple(self._spine)

    @property
    def counter(self) -> int:
        """Number of resources registered so far."""
        return self._counter

    def __contains__(self, href: str) -> bool:
        return href in self._hrefs

    def __len__(self) -> int:
        return len(self._items)

    def check(self, href: str) -> None:
        """Raise DuplicateResourceError if ``href`` is already taken."""
        if href in self._hrefs or href in self._reserved:
            raise DuplicateResourceError(href)

    def prepare(
        self,
        href: str,
        content_type: ContentType,
        properties: Iterable[str] = (),
        fallback: str | None = None,
        media_overlay: str | None = None,
    ) -> tuple[ManifestItem, SpineEntry | None]:
        """Build the manifest item and spine entry for the next resource.

        Args:
            href: Normalized resource path
            content_type: Reading-order membership of the resource
            properties: Manifest property tags
            fallback: ID of a fallback manifest item
            media_overlay: ID of a Media Overlay Document item

        Returns:
            (ManifestItem, SpineEntry or None for media resources)

        Raises:
            DuplicateResourceError: If ``href`` is already taken
        """
        self.check(href)
        content_type = ContentType(content_type)
        tags = [tag for tag in properties if tag]

        id = item_id(self._counter + 1)
        item = ManifestItem(
            id=id,
            href=href,
            media_type=type_by_filename(href),
            properties=" ".join(tags) or None,
            fallback=fallback,
            media_overlay=media_overlay,
        )
        entry = None
        if content_type is not ContentType.MEDIA:
            entry = SpineEntry(idref=id, linear=content_type is ContentType.PRIMARY)
        return item, entry

    def commit(self, item: ManifestItem, entry: SpineEntry | None) -> None:
        """Record a prepared item and its spine entry.

        Raises:
            DuplicateResourceError: If the href was taken since ``prepare``
            ValueError: If the item was not prepared for the current counter
        """
        self.check(item.href)
        expected = item_id(self._counter + 1)
        if item.id != expected:
            raise ValueError(f"stale manifest item {item.id}, expected {expected}")

        self._counter += 1
        self._items.append(item)
        self._hrefs.add(item.href)
        if entry is not None:
            self._spine.append(entry)
        logger.debug(
            f"Registered {item.id} {item.href} ({item.media_type})"
            + (" in spine" if entry is not None else "")
        )
