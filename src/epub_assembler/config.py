"""Writer configuration.

Values fixed by the EPUB/OCF format are module constants; everything a
publication may choose lives on WriterConfig.
"""

import posixpath
from typing import Literal

from pydantic import BaseModel, Field, field_validator

EPUB_MIMETYPE = "application/epub+zip"
MIMETYPE_PATH = "mimetype"
CONTAINER_PATH = "META-INF/container.xml"
PACKAGE_MEDIA_TYPE = "application/oebps-package+xml"
PACKAGE_VERSION = "3.0"

DEFAULT_ROOT_PATH = "OEBPS"
DEFAULT_PACKAGE_FILENAME = "package.opf"
DEFAULT_TITLE = "Untitled"
DEFAULT_LANGUAGE = "en"


class WriterConfig(BaseModel):
    """Configuration for a publication writer.

    Attributes:
        root_path: Archive folder holding the package document and resources
        package_filename: File name of the package document
        compression_level: Deflate level (0-9) for content entries, or None
            for the zlib default
        spool_max_size: Bytes of a resource buffered in memory before
            spilling to a temporary file
        default_title: Title used when the publication has none
        default_language: Language tag used when the publication has none
        package_prefix: Value of the package prefix attribute
        package_lang: xml:lang of the package document
        package_dir: Base text direction of the package document
        page_progression_direction: Direction of the spine reading order
    """

    root_path: str = DEFAULT_ROOT_PATH
    package_filename: str = DEFAULT_PACKAGE_FILENAME
    compression_level: int | None = Field(default=None, ge=0, le=9)
    spool_max_size: int = Field(default=1024 * 1024, ge=1)
    default_title: str = Field(default=DEFAULT_TITLE, min_length=1)
    default_language: str = Field(default=DEFAULT_LANGUAGE, min_length=1)
    package_prefix: str | None = None
    package_lang: str | None = None
    package_dir: Literal["ltr", "rtl"] | None = None
    page_progression_direction: Literal["ltr", "rtl", "default"] | None = None

    model_config = {"frozen": True}

    @field_validator("root_path")
    @classmethod
    def _normalize_root_path(cls, value: str) -> str:
        value = value.replace("\\", "/").strip("/")
        if value in ("", "."):
            return ""
        value = posixpath.normpath(value)
        if value == ".." or value.startswith("../") or value.split("/")[0] == "META-INF":
            raise ValueError(f"root_path {value!r} is not allowed")
        return value

    @field_validator("package_filename")
    @classmethod
    def _check_package_filename(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError("package_filename must be a bare file name")
        return value

    @property
    def package_path(self) -> str:
        """Archive path of the package document."""
        return self.resource_path(self.package_filename)

    def resource_path(self, name: str) -> str:
        """Archive path of a resource given its href."""
        if not self.root_path:
            return name
        return f"{self.root_path}/{name}"
