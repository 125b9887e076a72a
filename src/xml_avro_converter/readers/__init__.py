"""Markup readers producing library-neutral element streams.

Key Components:
    MarkupElement: Element name, ordered attributes and child constructs
    TextBlock: Text or CDATA child content
    MarkupReader: Base class of the DOM, ElementTree and lxml adapters
"""

from .adapters import (
    DomReader,
    ElementTreeReader,
    LxmlReader,
    MarkupReader,
    ReaderMetadata,
    SourceType,
    available_readers,
    get_reader,
    load_source,
)
from .markup import Construct, MarkupElement, OtherBlock, TextBlock

__all__ = [
    "Construct",
    "DomReader",
    "ElementTreeReader",
    "LxmlReader",
    "MarkupElement",
    "MarkupReader",
    "OtherBlock",
    "ReaderMetadata",
    "SourceType",
    "TextBlock",
    "available_readers",
    "get_reader",
    "load_source",
]
