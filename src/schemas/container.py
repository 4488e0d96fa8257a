"""OCF container schemas.

The container document is the first thing a reading system parses after the
``mimetype`` entry. It has the same shape for every publication: a single
rootfile pointing at the package document.

Archive structure:
    mimetype                    # application/epub+zip, stored
    META-INF/
    └── container.xml           # Container
    OEBPS/
    ├── package.opf             # Package
    └── ...                     # content resources
"""

from pydantic import BaseModel


class RootFile(BaseModel):
    """A rootfile entry of the container document.

    Attributes:
        full_path: Archive path of the package document
        media_type: Media type of the package document
    """

    full_path: str
    media_type: str = "application/oebps-package+xml"


class Container(BaseModel):
    """The META-INF/container.xml document.

    Attributes:
        version: Container format version
        rootfiles: Package documents contained in the archive
    """

    version: str = "1.0"
    rootfiles: list[RootFile] = []

    model_config = {"frozen": True}
