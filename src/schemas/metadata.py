"""Publication metadata schemas.

Models the ``metadata`` block of an EPUB 3 package document: Dublin Core
elements, refinement ``meta`` elements and ``link`` elements. These are plain
data holders; the operations that add entries and fill defaults live in
``epub_assembler.metadata``.
"""

from pydantic import BaseModel


class Element(BaseModel):
    """A Dublin Core element with an optional ID.

    Attributes:
        value: Text content of the element
        id: Element ID, unique within the package document
    """

    value: str
    id: str | None = None


class LangElement(Element):
    """A Dublin Core element carrying language and direction attributes.

    Attributes:
        lang: Language of the text content (xml:lang)
        dir: Base text direction ("ltr" or "rtl")
    """

    lang: str | None = None
    dir: str | None = None


class Meta(BaseModel):
    """A meta element.

    Without ``refines`` the meta expresses a primary property of the
    publication (e.g. ``dcterms:modified``); with ``refines`` it augments
    another element referenced as ``#id``.

    Attributes:
        property: Property name (e.g. "title-type", "role")
        value: Property value
        refines: Reference to the element being refined
        id: Element ID
        scheme: Vocabulary the value is drawn from (e.g. "marc:relators")
    """

    property: str
    value: str
    refines: str | None = None
    id: str | None = None
    scheme: str | None = None


class Link(BaseModel):
    """A link element associating a resource with the publication.

    Attributes:
        href: Location of the linked resource
        rel: Relationship of the resource (e.g. "record")
        media_type: Media type of the linked resource
        id: Element ID
        refines: Reference to the element being refined
        properties: Space-separated property values
    """

    href: str
    rel: str
    media_type: str | None = None
    id: str | None = None
    refines: str | None = None
    properties: str | None = None


class Metadata(BaseModel):
    """Publication-level metadata.

    Attributes:
        identifiers: dc:identifier elements; one carries the unique identifier ID
        titles: dc:title elements
        languages: dc:language elements
        creators: dc:creator elements
        contributors: dc:contributor elements
        date: dc:date publication date
        coverages: dc:coverage elements
        descriptions: dc:description elements
        formats: dc:format elements
        publishers: dc:publisher elements
        relations: dc:relation elements
        rights: dc:rights elements
        subjects: dc:subject elements
        meta: meta elements, including refinements
        links: link elements
    """

    identifiers: list[Element] = []
    titles: list[LangElement] = []
    languages: list[Element] = []
    creators: list[LangElement] = []
    contributors: list[LangElement] = []
    date: Element | None = None
    coverages: list[LangElement] = []
    descriptions: list[LangElement] = []
    formats: list[Element] = []
    publishers: list[LangElement] = []
    relations: list[LangElement] = []
    rights: list[LangElement] = []
    subjects: list[LangElement] = []
    meta: list[Meta] = []
    links: list[Link] = []
