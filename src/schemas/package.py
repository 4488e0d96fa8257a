"""Package document schemas.

The package document lists every resource of the publication (manifest),
the default reading order (spine) and the publication metadata. It is the
last entry written to the archive.
"""

from typing import Literal

from pydantic import BaseModel

from schemas.metadata import Metadata


class ManifestItem(BaseModel):
    """A publication resource listed in the manifest.

    Attributes:
        id: Sequential item identifier (e.g. "id01")
        href: Path of the resource relative to the package document
        media_type: MIME type of the resource
        properties: Space-separated property tags (e.g. "cover-image nav")
        fallback: ID of the fallback item for non-core media types
        media_overlay: ID of the Media Overlay Document for this item
    """

    id: str
    href: str
    media_type: str
    properties: str | None = None
    fallback: str | None = None
    media_overlay: str | None = None

    model_config = {"frozen": True}


class SpineEntry(BaseModel):
    """An itemref in the spine.

    Attributes:
        idref: ID of the referenced manifest item
        linear: False for auxiliary content outside the primary reading order
    """

    idref: str
    linear: bool = True

    model_config = {"frozen": True}


class Package(BaseModel):
    """The package document.

    Attributes:
        version: EPUB version marker
        unique_identifier: ID of the dc:identifier holding the unique identifier
        prefix: Prefix declarations for non-reserved vocabularies
        lang: Language of the package document (xml:lang)
        dir: Base text direction of the package document
        metadata: Finalized publication metadata
        items: Manifest items in addition order
        spine: Spine entries in reading order
        page_progression_direction: Global direction of the content flow
    """

    version: str = "3.0"
    unique_identifier: str
    prefix: str | None = None
    lang: str | None = None
    dir: str | None = None
    metadata: Metadata
    items: list[ManifestItem] = []
    spine: list[SpineEntry] = []
    page_progression_direction: Literal["ltr", "rtl", "default"] | None = None

    model_config = {"frozen": True}
