"""Package Compiler for the EPUB 3 package document.

Builds the OPF document from a finalized Package model. Child order is
mandatory for conformance: metadata, then manifest, then spine.
"""

import logging

from lxml import etree

from schemas.metadata import Element, LangElement, Metadata
from schemas.package import ManifestItem, Package, SpineEntry

from .compiler import Compiler

logger = logging.getLogger(__name__)

OPF_NS = "http://www.idpf.org/2007/opf"
DC_NS = "http://purl.org/dc/elements/1.1/"
XML_NS = "http://www.w3.org/XML/1998/namespace"


class PackageCompiler(Compiler):
    """Compile the package document.

    The PackageCompiler emits:
    1. package root with version and unique-identifier
    2. metadata: dc:* elements in a fixed order, then meta, then link
    3. manifest: one item per resource, in addition order
    4. spine: one itemref per reading-order resource, in addition order
    """

    # (tag, Metadata field) in output order
    DC_ELEMENTS = (
        ("identifier", "identifiers"),
        ("title", "titles"),
        ("language", "languages"),
        ("creator", "creators"),
        ("contributor", "contributors"),
        ("date", "date"),
        ("coverage", "coverages"),
        ("description", "descriptions"),
        ("format", "formats"),
        ("publisher", "publishers"),
        ("relation", "relations"),
        ("rights", "rights"),
        ("subject", "subjects"),
    )

    def build(self, document: Package) -> etree._Element:
        root = etree.Element(f"{{{OPF_NS}}}package", nsmap={None: OPF_NS})
        root.set("version", document.version)
        root.set("unique-identifier", document.unique_identifier)
        _set_optional(root, "prefix", document.prefix)
        _set_optional(root, f"{{{XML_NS}}}lang", document.lang)
        _set_optional(root, "dir", document.dir)

        root.append(self._build_metadata(document.metadata))
        root.append(self._build_manifest(document.items))
        root.append(self._build_spine(document))

        logger.debug(
            f"Built package document with {len(document.items)} items "
            f"and {len(document.spine)} spine entries"
        )
        return root

    def _build_metadata(self, metadata: Metadata) -> etree._Element:
        """Build the metadata element with Dublin Core, meta and link children."""
        el = etree.Element(f"{{{OPF_NS}}}metadata", nsmap={"dc": DC_NS})

        for tag, field in self.DC_ELEMENTS:
            value = getattr(metadata, field)
            if value is None:
                continue
            elements = value if isinstance(value, list) else [value]
            for element in elements:
                self._append_dc(el, tag, element)

        for meta in metadata.meta:
            meta_el = etree.SubElement(el, f"{{{OPF_NS}}}meta")
            meta_el.set("property", meta.property)
            _set_optional(meta_el, "refines", meta.refines)
            _set_optional(meta_el, "id", meta.id)
            _set_optional(meta_el, "scheme", meta.scheme)
            meta_el.text = meta.value

        for link in metadata.links:
            link_el = etree.SubElement(el, f"{{{OPF_NS}}}link")
            link_el.set("href", link.href)
            link_el.set("rel", link.rel)
            _set_optional(link_el, "media-type", link.media_type)
            _set_optional(link_el, "id", link.id)
            _set_optional(link_el, "refines", link.refines)
            _set_optional(link_el, "properties", link.properties)

        return el

    def _append_dc(self, parent: etree._Element, tag: str, element: Element) -> None:
        dc_el = etree.SubElement(parent, f"{{{DC_NS}}}{tag}")
        _set_optional(dc_el, "id", element.id)
        if isinstance(element, LangElement):
            _set_optional(dc_el, f"{{{XML_NS}}}lang", element.lang)
            _set_optional(dc_el, "dir", element.dir)
        dc_el.text = element.value

    def _build_manifest(self, items: list[ManifestItem]) -> etree._Element:
        """Build the manifest with one item per resource."""
        manifest = etree.Element(f"{{{OPF_NS}}}manifest")
        for item in items:
            item_el = etree.SubElement(manifest, f"{{{OPF_NS}}}item")
            item_el.set("id", item.id)
            item_el.set("href", item.href)
            item_el.set("media-type", item.media_type)
            _set_optional(item_el, "fallback", item.fallback)
            _set_optional(item_el, "properties", item.properties)
            _set_optional(item_el, "media-overlay", item.media_overlay)
        return manifest

    def _build_spine(self, document: Package) -> etree._Element:
        """Build the spine in reading order."""
        spine = etree.Element(f"{{{OPF_NS}}}spine")
        _set_optional(spine, "page-progression-direction", document.page_progression_direction)
        for entry in document.spine:
            spine.append(self._build_itemref(entry))
        return spine

    def _build_itemref(self, entry: SpineEntry) -> etree._Element:
        itemref = etree.Element(f"{{{OPF_NS}}}itemref")
        itemref.set("idref", entry.idref)
        if not entry.linear:
            itemref.set("linear", "no")
        return itemref


def _set_optional(el: etree._Element, name: str, value: str | None) -> None:
    if value:
        el.set(name, value)
