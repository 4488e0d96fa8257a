"""Pytest fixtures for epub-assembler tests."""

import io
import zipfile

import pytest
from lxml import etree

from epub_assembler import Writer


class EpubArchive:
    """Read-side view of a finished publication for assertions."""

    def __init__(self, data: bytes):
        self.data = data
        self.zip = zipfile.ZipFile(io.BytesIO(data))

    @property
    def names(self) -> list[str]:
        return [info.filename for info in self.zip.infolist()]

    def read(self, name: str) -> bytes:
        return self.zip.read(name)

    def package(self, path: str = "OEBPS/package.opf") -> etree._Element:
        return etree.fromstring(self.zip.read(path))


@pytest.fixture
def sink():
    """In-memory output sink for a publication."""
    return io.BytesIO()


@pytest.fixture
def writer(sink):
    """Open writer bound to the in-memory sink."""
    return Writer(sink)


@pytest.fixture
def open_epub():
    """Return a callable that wraps archive bytes in an EpubArchive."""
    return EpubArchive


@pytest.fixture
def sample_xhtml():
    """Minimal XHTML content document."""
    return (
        b'<?xml version="1.0" encoding="UTF-8"?>\n'
        b'<html xmlns="http://www.w3.org/1999/xhtml">'
        b"<head><title>Chapter 1</title></head>"
        b"<body><h1>Chapter 1</h1><p>Call me Ishmael.</p></body></html>"
    )


@pytest.fixture
def sample_png():
    """PNG signature followed by padding; content is never decoded."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
