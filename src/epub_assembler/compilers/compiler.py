"""Base class for XML document compilers."""

from abc import ABC, abstractmethod

from lxml import etree
from pydantic import BaseModel


class Compiler(ABC):
    """Abstract base class for XML document compilers.

    Compilers turn a schema model into one of the XML documents stored in
    the publication archive. Elements and attributes are emitted explicitly
    in a fixed order so the output is stable across runs.
    """

    @abstractmethod
    def build(self, document: BaseModel) -> etree._Element:
        """Build the XML tree for a document.

        Args:
            document: Schema model to serialize

        Returns:
            Root element of the document
        """
        pass

    def compile(self, document: BaseModel) -> bytes:
        """Serialize a document with an XML declaration and indentation.

        Args:
            document: Schema model to serialize

        Returns:
            UTF-8 encoded XML
        """
        return etree.tostring(
            self.build(document),
            xml_declaration=True,
            encoding="UTF-8",
            pretty_print=True,
        )
