"""Compiler for the OCF container document (META-INF/container.xml)."""

from lxml import etree

from schemas.container import Container

from .compiler import Compiler

CONTAINER_NS = "urn:oasis:names:tc:opendocument:xmlns:container"


class ContainerCompiler(Compiler):
    """Compile the container document pointing at the package document.

    Output shape::

        <container xmlns="urn:oasis:names:tc:opendocument:xmlns:container" version="1.0">
          <rootfiles>
            <rootfile full-path="OEBPS/package.opf" media-type="application/oebps-package+xml"/>
          </rootfiles>
        </container>
    """

    def build(self, document: Container) -> etree._Element:
        root = etree.Element(f"{{{CONTAINER_NS}}}container", nsmap={None: CONTAINER_NS})
        root.set("version", document.version)

        rootfiles = etree.SubElement(root, f"{{{CONTAINER_NS}}}rootfiles")
        for rootfile in document.rootfiles:
            el = etree.SubElement(rootfiles, f"{{{CONTAINER_NS}}}rootfile")
            el.set("full-path", rootfile.full_path)
            el.set("media-type", rootfile.media_type)

        return root
