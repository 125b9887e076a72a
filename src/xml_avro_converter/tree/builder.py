"""Tree building from markup element streams.

This module converts a reader's ``MarkupElement`` stream into a
``DocumentTree``, merging child elements and attributes into one name-keyed
namespace per node.
"""

import time
from typing import Optional

from xml_avro_converter.readers.markup import MarkupElement, TextBlock
from xml_avro_converter.shared import (
    ConversionError,
    ConversionMetrics,
    TreeConfig,
    get_logger,
)
from xml_avro_converter.tree.nodes import DocumentTree


def normalize_name(name: str) -> str:
    """Reduce a prefixed name to its local part.

    Avro names may only contain ``[A-Za-z0-9_]``, so ``ns:Item`` becomes
    ``Item``.
    """
    if ":" in name:
        return name.rsplit(":", 1)[-1]
    return name


def is_pure_text(element: MarkupElement) -> bool:
    """Check that an element holds nothing but a single piece of text.

    Almost every element has text children that only carry the document's
    indentation, so a single text child must be non-blank to count. A CDATA
    section counts even when blank since its whitespace is explicit.
    """
    if len(element.children) != 1:
        return False
    only = element.children[0]
    if not isinstance(only, TextBlock):
        return False
    return only.verbatim or not only.is_blank


class TreeBuilder:
    """Builds a ``DocumentTree`` from a markup element stream."""

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")
        self.metrics = ConversionMetrics()

    def build(self, root: MarkupElement) -> DocumentTree:
        """Convert a root element into a document tree.

        The returned node is the document itself: it holds the root element
        under the root's own name, so the top-level schema record is expected
        to have a field named after the root element.

        Args:
            root: Root element produced by a markup reader

        Returns:
            Document node with a single field for the root element
        """
        start_time = time.time()
        self.metrics = ConversionMetrics()

        document = DocumentTree()
        self._attach(document, root, depth=1)

        self.metrics.processing_time_ms = (time.time() - start_time) * 1000
        self.logger.debug(
            "Document tree built",
            extra={
                "root": root.name,
                "elements": self.metrics.elements_processed,
                "attributes": self.metrics.attributes_processed,
                "processing_time_ms": self.metrics.processing_time_ms,
            },
        )
        return document

    def _name(self, raw: str) -> str:
        if self.config.strip_namespace_prefixes:
            return normalize_name(raw)
        return raw

    def _attach(self, parent: DocumentTree, element: MarkupElement, depth: int) -> None:
        if depth > self.config.max_depth:
            raise ConversionError(
                f"Element nesting exceeds max_depth={self.config.max_depth}",
                path=element.name,
            )
        self.metrics.elements_processed += 1

        node = DocumentTree()
        if is_pure_text(element):
            # Attributes may still follow; deciding between text and record
            # needs the schema, so both are kept.
            node.scalar = element.children[0].text  # type: ignore[union-attr]
        parent.add_field(self._name(element.name), node)

        for child in element.child_elements:
            self._attach(node, child, depth + 1)

        for raw_name, value in element.attributes:
            name = self._name(raw_name)
            node.add_field(
                name, DocumentTree(scalar=value), name + self.config.attribute_suffix
            )
            self.metrics.attributes_processed += 1
