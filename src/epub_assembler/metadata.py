"""Operations on publication metadata.

MetadataBuilder adds entries to a ``schemas.Metadata`` model and, when the
writer closes, fills in the elements every EPUB 3 package must carry:

1. A dc:identifier with an ID, referenced as the package unique identifier
2. A dc:language
3. A dc:title
4. Exactly one ``dcterms:modified`` meta with the current UTC time
"""

import logging
import re
from collections.abc import Callable
from datetime import date, datetime, timezone

from schemas.metadata import Element, LangElement, Link, Meta, Metadata

from .exceptions import InvalidDateError
from .identifiers import new_uuid

logger = logging.getLogger(__name__)

MODIFIED_PROPERTY = "dcterms:modified"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
RELATOR_SCHEME = "marc:relators"

_TIMESTAMP_PATTERN = re.compile(
    r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]+)?(Z|[+-][0-9]{2}:[0-9]{2})$"
)
_DATE_FORMATS = (
    (re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"), "%Y-%m-%d"),
    (re.compile(r"^[0-9]{4}-[0-9]{2}$"), "%Y-%m"),
    (re.compile(r"^[0-9]{4}$"), "%Y"),
)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as a UTC timestamp (naive values are taken as UTC)."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)


def parse_date(value: str) -> str:
    """Validate a publication date string.

    Accepts a full timestamp with seconds and a UTC offset (e.g.
    "2024-03-01T12:00:00Z", "2024-03-01T12:00:00+02:00"), or a date with
    day, month or year granularity.

    Args:
        value: Date string

    Returns:
        The date string with surrounding whitespace removed

    Raises:
        InvalidDateError: If the value matches none of the accepted formats
    """
    text = value.strip()
    match = _TIMESTAMP_PATTERN.match(text)
    if match:
        try:
            datetime.strptime(text[:19], "%Y-%m-%dT%H:%M:%S")
        except ValueError as e:
            raise InvalidDateError(value) from e
        offset = match.group(2)
        if offset != "Z" and (int(offset[1:3]) > 23 or int(offset[4:6]) > 59):
            raise InvalidDateError(value)
        return text

    for pattern, date_format in _DATE_FORMATS:
        if pattern.match(text):
            try:
                datetime.strptime(text, date_format)
            except ValueError as e:
                raise InvalidDateError(value) from e
            return text

    raise InvalidDateError(value)


def _is_modified(meta: Meta) -> bool:
    return meta.property == MODIFIED_PROPERTY and not meta.refines


class MetadataBuilder:
    """Accumulates publication metadata before the package is written.

    Example:
        builder = MetadataBuilder()
        builder.add_title("Moby-Dick")
        builder.add_subtitle("or, The Whale")
        builder.add_author("Herman Melville", file_as="Melville, Herman")
        builder.set_date("1851-10-18")
    """

    def __init__(self, metadata: Metadata | None = None):
        self.model = metadata if metadata is not None else Metadata()

    def element_ids(self) -> set[str]:
        """Return every element ID used in the metadata."""
        m = self.model
        elements = [
            *m.identifiers,
            *m.titles,
            *m.languages,
            *m.creators,
            *m.contributors,
            *m.coverages,
            *m.descriptions,
            *m.formats,
            *m.publishers,
            *m.relations,
            *m.rights,
            *m.subjects,
            *m.meta,
            *m.links,
        ]
        if m.date is not None:
            elements.append(m.date)
        return {e.id for e in elements if e.id}

    def unique_identifier(self) -> str | None:
        """Return the ID of the first identifier that has one."""
        for identifier in self.model.identifiers:
            if identifier.id:
                return identifier.id
        return None

    def _allocate_id(self, prefix: str) -> str:
        used = self.element_ids()
        if prefix not in used:
            return prefix
        n = 2
        while f"{prefix}-{n}" in used:
            n += 1
        return f"{prefix}-{n}"

    def _add_lang(
        self,
        elements: list[LangElement],
        value: str,
        id: str | None,
        lang: str | None,
        dir: str | None,
    ) -> LangElement:
        element = LangElement(value=value, id=id, lang=lang, dir=dir)
        elements.append(element)
        return element

    # Identifiers and languages

    def add_identifier(self, value: str, id: str | None = None) -> Element:
        """Add a dc:identifier, e.g. ``urn:isbn:9780000000000``.

        The first identifier carrying an ID becomes the package's unique
        identifier.
        """
        element = Element(value=value, id=id)
        self.model.identifiers.append(element)
        return element

    def add_language(self, tag: str) -> Element:
        """Add a dc:language (BCP 47 tag)."""
        element = Element(value=tag)
        self.model.languages.append(element)
        return element

    # Titles

    def add_title(
        self,
        value: str,
        id: str | None = None,
        lang: str | None = None,
        dir: str | None = None,
        title_type: str | None = None,
        display_seq: int | None = None,
    ) -> LangElement:
        """Add a dc:title, optionally refined with title-type and display-seq."""
        if id is None and (title_type or display_seq is not None):
            id = self._allocate_id("title")
        element = self._add_lang(self.model.titles, value, id, lang, dir)
        if title_type:
            self.add_meta("title-type", title_type, refines=id)
        if display_seq is not None:
            self.add_meta("display-seq", str(display_seq), refines=id)
        return element

    def add_subtitle(self, value: str, lang: str | None = None) -> LangElement:
        return self.add_title(
            value, id=self._allocate_id("subtitle"), lang=lang, title_type="subtitle"
        )

    def add_collection(
        self, name: str, position: int | str | None = None, lang: str | None = None
    ) -> LangElement:
        """Add the title of the collection the publication belongs to."""
        element = self.add_title(
            name, id=self._allocate_id("collection"), lang=lang, title_type="collection"
        )
        if position is not None:
            self.add_meta("group-position", str(position), refines=element.id)
        return element

    def add_edition(self, value: str, lang: str | None = None) -> LangElement:
        return self.add_title(
            value, id=self._allocate_id("edition"), lang=lang, title_type="edition"
        )

    # Creators and contributors

    def _add_agent(
        self,
        elements: list[LangElement],
        prefix: str,
        name: str,
        role: str | None,
        file_as: str | None,
        id: str | None,
        lang: str | None,
        dir: str | None,
    ) -> LangElement:
        if id is None and (role or file_as):
            id = self._allocate_id(prefix)
        element = self._add_lang(elements, name, id, lang, dir)
        if role:
            self.add_meta("role", role, refines=id, scheme=RELATOR_SCHEME)
        if file_as:
            self.add_meta("file-as", file_as, refines=id)
        return element

    def add_creator(
        self,
        name: str,
        role: str | None = None,
        file_as: str | None = None,
        id: str | None = None,
        lang: str | None = None,
        dir: str | None = None,
    ) -> LangElement:
        """Add a dc:creator.

        Args:
            name: Display name
            role: MARC relator code (e.g. "aut", "ill")
            file_as: Sort form of the name
            id: Element ID; allocated automatically when a refinement needs it
            lang: Language of the name
            dir: Text direction of the name
        """
        return self._add_agent(
            self.model.creators, "creator", name, role, file_as, id, lang, dir
        )

    def add_author(
        self,
        name: str,
        file_as: str | None = None,
        lang: str | None = None,
    ) -> LangElement:
        return self.add_creator(name, role="aut", file_as=file_as, lang=lang)

    def add_contributor(
        self,
        name: str,
        role: str | None = None,
        file_as: str | None = None,
        id: str | None = None,
        lang: str | None = None,
        dir: str | None = None,
    ) -> LangElement:
        return self._add_agent(
            self.model.contributors, "contributor", name, role, file_as, id, lang, dir
        )

    # Other Dublin Core elements

    def add_publisher(self, value: str, lang: str | None = None) -> LangElement:
        return self._add_lang(self.model.publishers, value, None, lang, None)

    def add_subject(self, value: str, lang: str | None = None) -> LangElement:
        return self._add_lang(self.model.subjects, value, None, lang, None)

    def add_description(self, value: str, lang: str | None = None) -> LangElement:
        return self._add_lang(self.model.descriptions, value, None, lang, None)

    def add_rights(self, value: str, lang: str | None = None) -> LangElement:
        return self._add_lang(self.model.rights, value, None, lang, None)

    def add_coverage(self, value: str, lang: str | None = None) -> LangElement:
        return self._add_lang(self.model.coverages, value, None, lang, None)

    def add_relation(self, value: str, lang: str | None = None) -> LangElement:
        return self._add_lang(self.model.relations, value, None, lang, None)

    def add_format(self, value: str) -> Element:
        element = Element(value=value)
        self.model.formats.append(element)
        return element

    def set_date(self, value: str | date | datetime) -> Element:
        """Set the publication date (dc:date).

        Raises:
            InvalidDateError: If the value is not an accepted date; the
                current date is left unchanged
        """
        if isinstance(value, datetime):
            text = format_timestamp(value)
        elif isinstance(value, date):
            text = value.isoformat()
        elif isinstance(value, str):
            text = parse_date(value)
        else:
            raise InvalidDateError(repr(value))
        self.model.date = Element(value=text)
        return self.model.date

    # Meta and link

    def add_meta(
        self,
        property: str,
        value: str,
        refines: str | None = None,
        id: str | None = None,
        scheme: str | None = None,
    ) -> Meta:
        """Add a meta element; ``refines`` may be given with or without '#'."""
        if refines and not refines.startswith("#"):
            refines = f"#{refines}"
        meta = Meta(property=property, value=value, refines=refines, id=id, scheme=scheme)
        self.model.meta.append(meta)
        return meta

    def add_link(
        self,
        href: str,
        rel: str,
        media_type: str | None = None,
        id: str | None = None,
        refines: str | None = None,
        properties: str | None = None,
    ) -> Link:
        if refines and not refines.startswith("#"):
            refines = f"#{refines}"
        link = Link(
            href=href,
            rel=rel,
            media_type=media_type,
            id=id,
            refines=refines,
            properties=properties,
        )
        self.model.links.append(link)
        return link

    # Finalization

    def finalize(
        self,
        *,
        modified: datetime,
        default_title: str,
        default_language: str,
        identifier_factory: Callable[[], str] = new_uuid,
    ) -> str:
        """Fill required elements and stamp the modification time.

        Args:
            modified: Modification time written to ``dcterms:modified``
            default_title: Title used when none was added
            default_language: Language used when none was added
            identifier_factory: Returns a UUID string for a generated identifier

        Returns:
            ID of the identifier referenced as the package unique identifier

        Raises:
            IdentifierError: If a UUID is needed and cannot be generated
        """
        m = self.model

        uid = self.unique_identifier()
        if uid is None:
            value = f"urn:uuid:{identifier_factory()}"
            uid = self._allocate_id("uuid")
            m.identifiers.append(Element(value=value, id=uid))
            logger.debug(f"Generated publication identifier {value}")

        if not m.languages:
            m.languages.append(Element(value=default_language))
        if not m.titles:
            m.titles.append(LangElement(value=default_title))

        timestamp = format_timestamp(modified)
        stamp = next((meta for meta in m.meta if _is_modified(meta)), None)
        if stamp is None:
            m.meta.append(Meta(property=MODIFIED_PROPERTY, value=timestamp))
        else:
            stamp.value = timestamp
            m.meta = [meta for meta in m.meta if meta is stamp or not _is_modified(meta)]

        return uid
