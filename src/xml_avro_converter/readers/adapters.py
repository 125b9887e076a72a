"""Reader adapters that turn XML libraries' documents into markup elements.

Three adapters are provided: ``xml.dom.minidom`` (the default, and the only
one that distinguishes CDATA sections from plain text), the standard
library's ElementTree, and lxml when it is installed. Each produces the same
``MarkupElement`` stream so the tree builder stays library-neutral.
"""

import io
import time
import xml.dom.minidom
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, TextIO, Type, Union
from xml.dom import Node
from xml.parsers.expat import ExpatError

from xml_avro_converter.readers.markup import (
    MarkupElement,
    OtherBlock,
    TextBlock,
)
from xml_avro_converter.shared import MarkupReadError, get_logger

# Type definitions for input data
SourceType = Union[str, bytes, BinaryIO, TextIO, Path]

PREVIEW_LENGTH = 100  # Max length for content preview in logs


@dataclass
class ReaderMetadata:
    """Metadata about a markup reader."""

    name: str
    target_library: str
    preserves_cdata: bool
    description: str


def load_source(source: SourceType) -> Union[str, bytes]:
    """Load raw markup from any supported source.

    Strings are taken to be markup, not file names; pass a ``Path`` to read
    a file.
    """
    if isinstance(source, (str, bytes)):
        return source
    if isinstance(source, Path):
        try:
            return source.read_bytes()
        except OSError as e:
            raise MarkupReadError(f"Cannot read {source}: {e}") from e
    if hasattr(source, "read"):
        return source.read()
    raise TypeError(f"Unsupported markup source type: {type(source).__name__}")


def _local_name(name: str) -> str:
    """Drop the ``{uri}`` part of an ElementTree qualified name."""
    if name.startswith("{"):
        return name.split("}", 1)[1]
    return name


class MarkupReader(ABC):
    """Abstract base class for markup readers."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, self.metadata.name)

    @property
    @abstractmethod
    def metadata(self) -> ReaderMetadata:
        """Get reader metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the backing library can be imported."""

    @abstractmethod
    def _parse(self, content: Union[str, bytes]) -> MarkupElement:
        """Parse markup content into the root element."""

    def read(self, source: SourceType) -> MarkupElement:
        """Read a document and return its root element.

        Raises:
            MarkupReadError: if the backing library rejects the document
        """
        if not self.is_available():
            raise MarkupReadError(
                f"Reader '{self.metadata.name}' requires "
                f"{self.metadata.target_library}, which is not installed"
            )

        start_time = time.time()
        content = load_source(source)
        root = self._parse(content)

        self.logger.debug(
            "Markup read",
            extra={
                "reader": self.metadata.name,
                "root": root.name,
                "input_length": len(content),
                "preview": content[:PREVIEW_LENGTH],
                "processing_time_ms": (time.time() - start_time) * 1000,
            },
        )
        return root


class DomReader(MarkupReader):
    """Reader based on ``xml.dom.minidom``.

    Names are reported as written (``prefix:local``) and namespace
    declarations appear as ordinary attributes.
    """

    @property
    def metadata(self) -> ReaderMetadata:
        return ReaderMetadata(
            name="dom",
            target_library="xml.dom.minidom",
            preserves_cdata=True,
            description="Standard library DOM with CDATA sections preserved",
        )

    def is_available(self) -> bool:
        return True

    def _parse(self, content: Union[str, bytes]) -> MarkupElement:
        try:
            document = xml.dom.minidom.parseString(content)
        except ExpatError as e:
            raise MarkupReadError(f"Malformed markup: {e}") from e
        try:
            return self._convert(document.documentElement)
        finally:
            document.unlink()

    def _convert(self, dom_element: Any) -> MarkupElement:
        element = MarkupElement(
            name=dom_element.tagName,
            attributes=list(dom_element.attributes.items()),
        )
        for child in dom_element.childNodes:
            node_type = child.nodeType
            if node_type == Node.ELEMENT_NODE:
                element.children.append(self._convert(child))
            elif node_type == Node.CDATA_SECTION_NODE:
                element.children.append(TextBlock(child.data, verbatim=True))
            elif node_type == Node.TEXT_NODE:
                element.children.append(TextBlock(child.data))
            elif node_type == Node.COMMENT_NODE:
                element.children.append(OtherBlock("comment"))
            elif node_type == Node.PROCESSING_INSTRUCTION_NODE:
                element.children.append(OtherBlock("processing-instruction"))
        return element


class ElementTreeReader(MarkupReader):
    """Reader based on ``xml.etree.ElementTree``.

    CDATA sections are merged into ordinary text, and qualified names are
    reduced to their local part.
    """

    @property
    def metadata(self) -> ReaderMetadata:
        return ReaderMetadata(
            name="etree",
            target_library="xml.etree.ElementTree",
            preserves_cdata=False,
            description="Standard library ElementTree",
        )

    def is_available(self) -> bool:
        return True

    def _parse(self, content: Union[str, bytes]) -> MarkupElement:
        parser = ET.XMLParser(
            target=ET.TreeBuilder(insert_comments=True, insert_pis=True)
        )
        try:
            parser.feed(content)
            root = parser.close()
        except ET.ParseError as e:
            raise MarkupReadError(f"Malformed markup: {e}") from e
        return self._convert(root)

    def _convert(self, et_element: Any) -> MarkupElement:
        element = MarkupElement(
            name=_local_name(et_element.tag),
            attributes=[
                (_local_name(name), value)
                for name, value in et_element.attrib.items()
            ],
        )
        if et_element.text is not None:
            element.children.append(TextBlock(et_element.text))
        for child in et_element:
            if child.tag is ET.Comment:
                element.children.append(OtherBlock("comment"))
            elif child.tag is ET.ProcessingInstruction:
                element.children.append(OtherBlock("processing-instruction"))
            else:
                element.children.append(self._convert(child))
            if child.tail is not None:
                element.children.append(TextBlock(child.tail))
        return element


class LxmlReader(MarkupReader):
    """Reader based on ``lxml.etree``; entity resolution is disabled."""

    @property
    def metadata(self) -> ReaderMetadata:
        return ReaderMetadata(
            name="lxml",
            target_library="lxml",
            preserves_cdata=False,
            description="lxml.etree with external entities disabled",
        )

    def is_available(self) -> bool:
        """Check if lxml is available."""
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _parse(self, content: Union[str, bytes]) -> MarkupElement:
        from lxml import etree

        if isinstance(content, str):
            content = content.encode("utf-8")
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            root = etree.parse(io.BytesIO(content), parser).getroot()
        except etree.XMLSyntaxError as e:
            raise MarkupReadError(f"Malformed markup: {e}") from e
        return self._convert(root, etree)

    def _convert(self, lxml_element: Any, etree: Any) -> MarkupElement:
        element = MarkupElement(
            name=etree.QName(lxml_element).localname,
            attributes=[
                (etree.QName(name).localname, value)
                for name, value in lxml_element.attrib.items()
            ],
        )
        if lxml_element.text is not None:
            element.children.append(TextBlock(lxml_element.text))
        for child in lxml_element:
            if not isinstance(child.tag, str):
                # comments, processing instructions and entity references
                if child.tag is etree.Comment:
                    kind = "comment"
                elif child.tag is etree.ProcessingInstruction:
                    kind = "processing-instruction"
                else:
                    kind = "entity"
                element.children.append(OtherBlock(kind))
            else:
                element.children.append(self._convert(child, etree))
            if child.tail is not None:
                element.children.append(TextBlock(child.tail))
        return element


_READERS: Dict[str, Type[MarkupReader]] = {
    "dom": DomReader,
    "etree": ElementTreeReader,
    "lxml": LxmlReader,
}


def available_readers() -> List[str]:
    """Names of the readers whose backing library can be imported."""
    return [name for name, cls in _READERS.items() if cls().is_available()]


def get_reader(name: str, correlation_id: Optional[str] = None) -> MarkupReader:
    """Create the reader registered under ``name``."""
    try:
        reader_class = _READERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown reader '{name}', expected one of {sorted(_READERS)}"
        ) from None
    return reader_class(correlation_id)
