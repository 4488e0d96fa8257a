"""Publication writer for EPUB 3 archives.

The Writer streams resources into a ZIP archive while tracking the manifest
and spine, then writes the package document and finalizes the archive once.

Archive entry order:
1. mimetype (stored, uncompressed)
2. META-INF/container.xml
3. resources, in the order they were added
4. the package document
"""

import io
import logging
import os
import shutil
import tempfile
import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO

from lxml import etree

from schemas.container import Container, RootFile
from schemas.package import ManifestItem, Package, SpineEntry

from .compilers import ContainerCompiler, PackageCompiler
from .config import (
    CONTAINER_PATH,
    EPUB_MIMETYPE,
    MIMETYPE_PATH,
    PACKAGE_MEDIA_TYPE,
    PACKAGE_VERSION,
    WriterConfig,
)
from .exceptions import ClosedWriterError, StreamIOError
from .manifest import ContentType, ManifestTracker, normalize_name
from .metadata import MetadataBuilder
from .output import AtomicFile

logger = logging.getLogger(__name__)

# Errors raised by zipfile and the sink while an archive is being written
ARCHIVE_ERRORS = (OSError, ValueError, zipfile.LargeZipFile)


class Writer:
    """Writer for EPUB 3 publications.

    A Writer is bound to one output sink for the lifetime of one
    publication. It is not thread-safe; callers sharing a writer across
    threads must serialize every call.

    Example:
        with Writer.create("book.epub") as pub:
            pub.metadata.add_title("Test")
            pub.metadata.add_author("Author")
            pub.add_bytes("chapter1.xhtml", ContentType.PRIMARY, html)
            pub.add_file("images/cover.png", "cover.png",
                         ContentType.MEDIA, "cover-image")
    """

    def __init__(self, sink: BinaryIO, config: WriterConfig | None = None):
        """Start a publication on a writable binary sink.

        Writes the mimetype and container entries immediately.

        Args:
            sink: Binary file-like object opened for writing
            config: Writer configuration (defaults apply when omitted)

        Raises:
            StreamIOError: If the bootstrap entries cannot be written
        """
        self.config = config or WriterConfig()
        self.metadata = MetadataBuilder()

        self._sink = sink
        self._output: AtomicFile | None = None
        self._tracker = ManifestTracker(reserved=self._reserved_hrefs())
        self._package_compiler = PackageCompiler()
        self._closed = False
        self._failure: StreamIOError | None = None
        self._zip: zipfile.ZipFile | None = None

        try:
            self._zip = zipfile.ZipFile(
                sink,
                mode="w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=self.config.compression_level,
            )
            self._write_bootstrap()
        except ARCHIVE_ERRORS as e:
            self._detach_archive()
            raise StreamIOError(
                f"cannot start publication: {e}", operation="bootstrap"
            ) from e

    @classmethod
    def create(
        cls, path: str | os.PathLike, config: WriterConfig | None = None
    ) -> "Writer":
        """Start a publication that is written to ``path`` on close.

        The archive is built in a temporary file in the same directory and
        renamed to ``path`` only when close succeeds.

        Args:
            path: Destination of the EPUB file
            config: Writer configuration

        Returns:
            An open Writer

        Raises:
            StreamIOError: If the temporary file or bootstrap entries
                cannot be written
        """
        try:
            output = AtomicFile(path)
        except OSError as e:
            raise StreamIOError(
                f"cannot create {path}: {e}", path=str(path), operation="bootstrap"
            ) from e

        try:
            writer = cls(output.file, config)
        except StreamIOError as e:
            output.discard()
            e.path = str(path)
            raise

        writer._output = output
        logger.info(f"Started publication {output.destination}")
        return writer

    # Properties

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def path(self) -> Path | None:
        """Destination path when created with ``create``, else None."""
        return self._output.destination if self._output is not None else None

    @property
    def manifest(self) -> tuple[ManifestItem, ...]:
        """Manifest items in addition order."""
        return self._tracker.items

    @property
    def spine(self) -> tuple[SpineEntry, ...]:
        """Spine entries in reading order."""
        return self._tracker.spine

    # Bootstrap

    def _reserved_hrefs(self) -> set[str]:
        reserved = {self.config.package_filename}
        if not self.config.root_path:
            reserved.update({MIMETYPE_PATH, CONTAINER_PATH})
        return reserved

    def _write_bootstrap(self) -> None:
        """Write the mimetype and container entries."""
        mimetype = zipfile.ZipInfo(MIMETYPE_PATH, date_time=_now_date_time())
        self._zip.writestr(
            mimetype,
            EPUB_MIMETYPE.encode("ascii"),
            compress_type=zipfile.ZIP_STORED,
        )

        container = Container(
            rootfiles=[
                RootFile(
                    full_path=self.config.package_path,
                    media_type=PACKAGE_MEDIA_TYPE,
                )
            ]
        )
        self._zip.writestr(CONTAINER_PATH, ContainerCompiler().compile(container))
        logger.debug(f"Wrote {MIMETYPE_PATH} and {CONTAINER_PATH}")

    # Resources

    def add_content(
        self,
        name: str | os.PathLike,
        content_type: ContentType,
        reader: BinaryIO,
        *properties: str,
        fallback: str | None = None,
        media_overlay: str | None = None,
    ) -> ManifestItem:
        """Add a resource to the publication.

        The resource is stored at ``<root_path>/<name>`` and listed in the
        manifest; PRIMARY and AUXILIARY resources are also appended to the
        spine. Either the whole call succeeds or the publication state is
        unchanged.

        Args:
            name: Path of the resource relative to the content root
            content_type: Reading-order membership of the resource
            reader: Binary stream with the resource bytes
            *properties: Manifest property tags (e.g. "cover-image", "nav")
            fallback: ID of a fallback manifest item
            media_overlay: ID of a Media Overlay Document item

        Returns:
            The ManifestItem recorded for the resource

        Raises:
            ClosedWriterError: If the writer is closed
            InvalidResourceNameError: If ``name`` is not a relative path
            DuplicateResourceError: If ``name`` was already added
            StreamIOError: If reading the resource or writing the archive fails
        """
        self._ensure_open()
        if self._failure is not None:
            raise StreamIOError(
                f"publication cannot continue after earlier failure: {self._failure.message}",
                path=self._failure.path,
                operation="add",
            )
        href = normalize_name(name)
        item, entry = self._tracker.prepare(
            href, content_type, properties, fallback, media_overlay
        )

        with tempfile.SpooledTemporaryFile(max_size=self.config.spool_max_size) as spool:
            try:
                shutil.copyfileobj(reader, spool)
            except (OSError, ValueError) as e:
                raise StreamIOError(
                    f"cannot read resource {href!r}: {e}", path=href, operation="read"
                ) from e
            size = spool.tell()
            spool.seek(0)
            self._write_resource(href, spool, size)

        self._tracker.commit(item, entry)
        logger.debug(f"Added {href} as {item.id} ({size} bytes)")
        return item

    def add_bytes(
        self,
        name: str | os.PathLike,
        content_type: ContentType,
        data: bytes | str,
        *properties: str,
        fallback: str | None = None,
        media_overlay: str | None = None,
    ) -> ManifestItem:
        """Add a resource from memory; ``str`` data is encoded as UTF-8."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        return self.add_content(
            name,
            content_type,
            io.BytesIO(data),
            *properties,
            fallback=fallback,
            media_overlay=media_overlay,
        )

    def add_file(
        self,
        source: str | os.PathLike,
        name: str | os.PathLike | None = None,
        content_type: ContentType = ContentType.MEDIA,
        *properties: str,
        fallback: str | None = None,
        media_overlay: str | None = None,
    ) -> ManifestItem:
        """Add a resource from a file on disk.

        Args:
            source: Path of the file to read
            name: Resource path in the publication (default: the file name)
            content_type: Reading-order membership of the resource
            *properties: Manifest property tags

        Returns:
            The ManifestItem recorded for the resource
        """
        self._ensure_open()
        source = Path(source)
        if name is None:
            name = source.name
        try:
            f = source.open("rb")
        except OSError as e:
            raise StreamIOError(
                f"cannot open {source}: {e}", path=str(source), operation="read"
            ) from e
        with f:
            return self.add_content(
                name,
                content_type,
                f,
                *properties,
                fallback=fallback,
                media_overlay=media_overlay,
            )

    def _write_resource(self, href: str, source: BinaryIO, size: int) -> None:
        """Copy a buffered resource into a new archive entry."""
        path = self.config.resource_path(href)
        try:
            with self._zip.open(
                path, mode="w", force_zip64=size * 1.05 > zipfile.ZIP64_LIMIT
            ) as dst:
                shutil.copyfileobj(source, dst)
        except ARCHIVE_ERRORS as e:
            # Partially written entries cannot be removed from the archive
            self._failure = StreamIOError(
                f"cannot write {path}: {e}", path=path, operation="add"
            )
            self._detach_archive()
            logger.error(f"Publication write failed: {self._failure.message}")
            raise self._failure from e

    # Finalization

    def close(self) -> None:
        """Write the package document and finalize the archive.

        Fills metadata defaults, writes the package document as the last
        entry, writes the ZIP central directory and, for writers from
        ``create``, renames the temporary file into place. The writer is
        closed even if this fails.

        Raises:
            ClosedWriterError: If the writer was already closed
            StreamIOError: If the publication cannot be finished; no output
                is left at the destination path
        """
        self._ensure_open()
        self._closed = True

        if self._failure is not None:
            self._discard()
            raise StreamIOError(
                f"publication not written after earlier failure: {self._failure.message}",
                path=self._failure.path,
                operation="close",
            ) from self._failure

        try:
            uid = self.metadata.finalize(
                modified=datetime.now(timezone.utc),
                default_title=self.config.default_title,
                default_language=self.config.default_language,
            )
            package = Package(
                version=PACKAGE_VERSION,
                unique_identifier=uid,
                prefix=self.config.package_prefix,
                lang=self.config.package_lang,
                dir=self.config.package_dir,
                metadata=self.metadata.model,
                items=list(self._tracker.items),
                spine=list(self._tracker.spine),
                page_progression_direction=self.config.page_progression_direction,
            )
            self._zip.writestr(
                self.config.package_path, self._package_compiler.compile(package)
            )
            self._zip.close()
            if self._output is not None:
                self._output.commit()
            elif hasattr(self._sink, "flush"):
                self._sink.flush()
        except StreamIOError:
            self._discard()
            raise
        except (*ARCHIVE_ERRORS, etree.LxmlError) as e:
            self._discard()
            raise StreamIOError(
                f"cannot finish publication: {e}",
                path=str(self.path) if self.path else None,
                operation="close",
            ) from e

        logger.info(
            f"Closed publication with {len(self._tracker)} resources "
            f"({len(self._tracker.spine)} in spine)"
            + (f" at {self.path}" if self.path else "")
        )

    def abort(self) -> None:
        """Close the writer without writing the package document.

        For writers from ``create`` the temporary file is deleted. Does
        nothing if the writer is already closed.
        """
        if self._closed:
            return
        self._closed = True
        self._discard()

    def _detach_archive(self) -> None:
        """Drop the archive encoder without writing a central directory.

        ZipFile.close, also reached from ZipFile.__del__, is a no-op once its
        file object is unset, so nothing more reaches the sink.
        """
        if self._zip is not None:
            self._zip.fp = None

    def _discard(self) -> None:
        self._detach_archive()
        if self._output is not None:
            self._output.discard()
            logger.warning(f"Discarded incomplete publication {self._output.destination}")
        else:
            logger.warning("Publication left incomplete on the output sink")

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClosedWriterError()

    def __enter__(self) -> "Writer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close on success, abort if the block raised."""
        if exc_type is None:
            if not self._closed:
                self.close()
        else:
            self.abort()


def _now_date_time() -> tuple[int, int, int, int, int, int]:
    return datetime.now().timetuple()[:6]
