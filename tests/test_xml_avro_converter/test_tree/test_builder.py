"""Tests for building document trees from markup element streams."""

import pytest

from xml_avro_converter.readers import DomReader, MarkupElement, OtherBlock, TextBlock
from xml_avro_converter.shared import ConversionError, TreeConfig
from xml_avro_converter.tree import (
    DocumentTree,
    TreeBuilder,
    is_pure_text,
    normalize_name,
)


def _build(xml: str, config: TreeConfig = None) -> DocumentTree:
    return TreeBuilder(config).build(DomReader().read(xml))


def _root(xml: str) -> DocumentTree:
    document = _build(xml)
    assert len(document.keys()) == 1
    return document.value(document.keys()[0])


class TestNormalizeName:
    """Test namespace prefix stripping."""

    def test_prefixed_name_reduced_to_local_part(self) -> None:
        """Test 'ns:local' becomes 'local'."""
        assert normalize_name("poslog:Transaction") == "Transaction"

    def test_plain_name_unchanged(self) -> None:
        """Test names without a prefix are kept."""
        assert normalize_name("Transaction") == "Transaction"

    def test_last_segment_wins(self) -> None:
        """Test only the final segment of a multi-colon name is kept."""
        assert normalize_name("a:b:c") == "c"


class TestIsPureText:
    """Test pure text classification."""

    def test_single_non_blank_text(self) -> None:
        """Test a single non-blank text child is pure text."""
        assert is_pure_text(MarkupElement("a", children=[TextBlock("42")]))

    def test_single_cdata_is_pure_even_when_blank(self) -> None:
        """Test CDATA counts as pure text since its whitespace is explicit."""
        element = MarkupElement("a", children=[TextBlock("  ", verbatim=True)])
        assert is_pure_text(element)

    def test_single_blank_text_is_not_pure(self) -> None:
        """Test formatting whitespace is not a scalar."""
        assert not is_pure_text(MarkupElement("a", children=[TextBlock("\n   ")]))

    def test_no_children_is_not_pure(self) -> None:
        """Test an empty element is not pure text."""
        assert not is_pure_text(MarkupElement("a"))

    def test_multiple_children_is_not_pure(self) -> None:
        """Test text mixed with other constructs is not pure text."""
        element = MarkupElement(
            "a", children=[TextBlock("x"), TextBlock("y", verbatim=True)]
        )
        assert not is_pure_text(element)

    def test_single_element_child_is_not_pure(self) -> None:
        """Test an element whose only child is an element is not pure text."""
        assert not is_pure_text(MarkupElement("a", children=[MarkupElement("b")]))

    def test_single_comment_is_not_pure(self) -> None:
        """Test a comment-only element is not pure text."""
        assert not is_pure_text(MarkupElement("a", children=[OtherBlock("comment")]))


class TestTreeBuilder:
    """Test TreeBuilder against documents read with the DOM reader."""

    def test_root_wrapped_under_its_name(self) -> None:
        """Test the document node holds the root element under its name."""
        document = _build("<Order/>")

        assert document.keys() == ["Order"]
        assert document.scalar is None

    def test_pure_text_element_becomes_scalar(self) -> None:
        """Test a non-blank text element yields a scalar with no fields."""
        root = _root("<root><amount>42</amount></root>")
        amount = root.value("amount")

        assert amount.scalar == "42"
        assert amount.fields == {}

    def test_scalar_is_not_trimmed(self) -> None:
        """Test stored text keeps its surrounding whitespace."""
        root = _root("<root><name>  Ada  </name></root>")
        assert root.value("name").scalar == "  Ada  "

    def test_cdata_scalar_preserved(self) -> None:
        """Test CDATA content is stored verbatim."""
        root = _root("<root><note><![CDATA[ <b>bold</b> ]]></note></root>")
        assert root.value("note").scalar == " <b>bold</b> "

    def test_indentation_whitespace_is_not_scalar(self) -> None:
        """Test whitespace around nested elements is not treated as a value."""
        root = _root("<root>\n  <a>1</a>\n  <b>2</b>\n</root>")

        assert root.scalar is None
        assert root.keys() == ["a", "b"]

    def test_whitespace_only_element_has_no_scalar(self) -> None:
        """Test an element containing only spaces has no scalar."""
        root = _root("<root><blank>   </blank></root>")
        assert root.value("blank").scalar is None

    def test_repeated_elements_grouped(self) -> None:
        """Test repeated tags accumulate under one key in document order."""
        root = _root("<root><i>1</i><i>2</i><i>3</i></root>")
        assert [n.scalar for n in root.values("i")] == ["1", "2", "3"]

    def test_attributes_become_scalar_fields(self) -> None:
        """Test attributes are stored as scalar-only child nodes."""
        root = _root('<root id="7" kind="sale"/>')

        assert root.value("id").scalar == "7"
        assert root.value("id").is_leaf
        assert root.value("kind").scalar == "sale"

    def test_attribute_collision_uses_alternate_key(self) -> None:
        """Test an attribute sharing an element's name is stored separately."""
        root = _root('<root x="attr"><x>element</x></root>')

        assert root.keys() == ["x", "x_attr"]
        assert root.value("x").scalar == "element"
        assert root.value("x_attr").scalar == "attr"

    def test_custom_attribute_suffix(self) -> None:
        """Test the collision suffix comes from configuration."""
        document = _build(
            '<root x="attr"><x>element</x></root>',
            TreeConfig(attribute_suffix="_at"),
        )
        assert document.value("root").keys() == ["x", "x_at"]

    def test_text_and_attributes_both_kept(self) -> None:
        """Test an element with text and attributes keeps both."""
        root = _root('<root><price currency="EUR">9.50</price></root>')
        price = root.value("price")

        assert price.scalar == "9.50"
        assert price.value("currency").scalar == "EUR"

    def test_namespace_prefixes_stripped(self) -> None:
        """Test prefixed element and attribute names are reduced."""
        root = _root(
            '<p:root xmlns:p="urn:p"><p:item p:code="A">1</p:item></p:root>'
        )
        item = root.value("item")

        assert item.scalar == "1"
        assert item.value("code").scalar == "A"

    def test_namespace_prefixes_kept_when_disabled(self) -> None:
        """Test prefixes survive when stripping is turned off."""
        document = _build(
            '<p:root xmlns:p="urn:p"><p:item>1</p:item></p:root>',
            TreeConfig(strip_namespace_prefixes=False),
        )
        assert "p:item" in document.value("p:root")

    def test_no_empty_field_lists(self) -> None:
        """Test every key of every node maps to at least one child."""
        document = _build(
            '<root a="1"><b><c/><c x="y">t</c></b><d><![CDATA[]]></d></root>'
        )
        for node in document.walk():
            for key in node.keys():
                assert len(node.values(key)) >= 1

    def test_metrics_count_elements_and_attributes(self) -> None:
        """Test the builder counts what it processed."""
        builder = TreeBuilder()
        builder.build(DomReader().read('<root a="1"><b c="2"/><b/></root>'))

        assert builder.metrics.elements_processed == 3
        assert builder.metrics.attributes_processed == 2

    def test_max_depth_enforced(self) -> None:
        """Test nesting beyond max_depth raises ConversionError."""
        element = MarkupElement("leaf")
        for _ in range(5):
            element = MarkupElement("wrap", children=[element])

        with pytest.raises(ConversionError, match="max_depth=3"):
            TreeBuilder(TreeConfig(max_depth=3)).build(element)
