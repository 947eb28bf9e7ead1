"""Tests for XML serialization of node trees."""

import pytest

from xmlx.shared import Attribute, QualifiedName, SerializerConfig
from xmlx.tokenization import XMLTokenizer
from xmlx.tree import (
    Node,
    TreeBuilder,
    XMLDeclaration,
    XMLSerializer,
    escape_attribute,
    escape_text,
)


def build(text):
    return TreeBuilder().build(XMLTokenizer(text)).root


def compact(text):
    return XMLSerializer().serialize_to_string(build(text))


def pretty(text, prefix="  "):
    return XMLSerializer(SerializerConfig.pretty(prefix)).serialize_to_string(build(text))


class TestEscaping:
    """Tests for escaping helpers."""

    def test_escape_text(self):
        """Test the characters escaped in character data."""
        assert escape_text("a<b>&\"'") == "a&lt;b&gt;&amp;&quot;&apos;"
        assert escape_text("x\ry\nz") == "x&#13;y\nz"

    def test_escape_attribute(self):
        """Test that attribute values also escape whitespace controls."""
        assert escape_attribute("x\ty\nz\r") == "x&#9;y&#10;z&#13;"
        assert escape_attribute('"&') == "&quot;&amp;"

    def test_plain_text_unchanged(self):
        """Test text needing no escapes."""
        assert escape_text("hello world") == "hello world"


class TestXMLDeclaration:
    """Tests for the declaration line."""

    def test_defaults(self):
        """Test the default declaration."""
        assert XMLDeclaration().render() == (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        )

    def test_custom_values(self):
        """Test declaration fields."""
        declaration = XMLDeclaration("1.1", "ISO-8859-1", "no")
        assert declaration.render() == (
            '<?xml version="1.1" encoding="ISO-8859-1" standalone="no"?>'
        )


class TestCompactSerialization:
    """Tests for output without indentation."""

    def test_empty_root(self):
        """Test that an empty tree writes nothing."""
        assert XMLSerializer().serialize(Node.root()) == b""

    def test_empty_root_with_declaration(self):
        """Test that only the declaration is written for an empty tree."""
        output = XMLSerializer().serialize(Node.root(), XMLDeclaration())
        assert output == b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

    def test_tree_is_written_as_stored(self):
        """Test that whitespace and markup survive unchanged."""
        text = '<a id="1">\n  <b>x &amp; y</b>\n  <c/>\n</a>'
        assert compact(text) == text

    def test_all_node_kinds(self):
        """Test comments, directives and processing instructions."""
        text = "<!DOCTYPE a><a><!--c--><?go now?><?bare?></a>"
        assert compact(text) == text

    def test_comment_content_is_trimmed(self):
        """Test that comment padding is not kept."""
        assert compact("<a><!--  c  --></a>") == "<a><!--c--></a>"

    def test_cdata_is_written_as_escaped_text(self):
        """Test that CDATA content comes back as ordinary text."""
        assert compact("<a><![CDATA[<x>]]></a>") == "<a>&lt;x&gt;</a>"

    def test_attribute_escaping(self):
        """Test escaped attribute output."""
        assert compact("<a t='say \"hi\" &amp; &#10;'/>") == (
            '<a t="say &quot;hi&quot; &amp; &#10;"/>'
        )

    def test_namespace_aliases(self):
        """Test that rewritten names are written with their aliases."""
        text = '<p:a xmlns:p="urn:p" p:id="1"><p:b/></p:a>'
        assert compact(text) == text

    def test_no_self_closing(self):
        """Test explicit end tags for empty elements."""
        config = SerializerConfig(self_close_empty=False)
        output = XMLSerializer(config).serialize_to_string(build("<a><b/></a>"))
        assert output == "<a><b></b></a>"

    def test_deep_nesting(self):
        """Test that deep trees serialize without recursion limits."""
        depth = 5000
        root = Node.root()
        current = root
        for _ in range(depth):
            child = Node.element(QualifiedName("", "n"))
            current.add_child(child)
            current = child
        output = XMLSerializer().serialize_to_string(root)
        assert output == "<n>" * (depth - 1) + "<n/>" + "</n>" * (depth - 1)

    def test_serialize_subtree(self):
        """Test serializing a node below the root."""
        root = build("<a><b x='1'>t</b></a>")
        assert XMLSerializer().serialize(root.children[0].children[0]) == b'<b x="1">t</b>'

    def test_output_is_utf8(self):
        """Test the output encoding."""
        root = Node.root()
        root.add_child(Node.element(QualifiedName("", "é"), [
            Attribute(QualifiedName("", "v"), "ü")
        ]))
        assert XMLSerializer().serialize(root) == '<é v="ü"/>'.encode("utf-8")


class TestPrettySerialization:
    """Tests for indented output."""

    def test_block_layout(self):
        """Test one block-level node per line."""
        output = pretty("<a><b>text</b><c><d/></c><!--n--></a>")
        assert output == (
            "<a>\n"
            "  <b>text</b>\n"
            "  <c>\n"
            "    <d/>\n"
            "  </c>\n"
            "  <!--n-->\n"
            "</a>\n"
        )

    def test_whitespace_only_text_is_dropped(self):
        """Test that existing indentation is replaced."""
        assert pretty("<a>\n      <b/>\n</a>") == "<a>\n  <b/>\n</a>\n"

    def test_mixed_content_stays_inline(self):
        """Test that elements with text are written on one line."""
        assert pretty("<a><p>x <b>y</b> z</p></a>", "\t") == (
            "<a>\n\t<p>x <b>y</b> z</p>\n</a>\n"
        )

    def test_element_with_only_blank_text_is_empty(self):
        """Test an element whose only content is whitespace."""
        assert pretty("<a>  </a>") == "<a/>\n"

    def test_declaration_followed_by_newline(self):
        """Test the line break after the declaration."""
        serializer = XMLSerializer(SerializerConfig.pretty())
        output = serializer.serialize_to_string(build("<a/>"), XMLDeclaration())
        assert output == '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n<a/>\n'

    def test_top_level_siblings(self):
        """Test prolog nodes at depth zero."""
        assert pretty("<!DOCTYPE a>\n<?pi x?>\n<a/>") == "<!DOCTYPE a>\n<?pi x?>\n<a/>\n"

    def test_no_self_closing(self):
        """Test explicit end tags in pretty mode."""
        config = SerializerConfig(indent_prefix="  ", self_close_empty=False)
        output = XMLSerializer(config).serialize_to_string(build("<a/>"))
        assert output == "<a></a>\n"


class TestRoundTrip:
    """Tests for load, save and reload."""

    @pytest.mark.parametrize("text", [
        "<a/>",
        '<a xmlns="urn:a" x="1"><b>t</b>\n<c/></a>',
        '<!DOCTYPE a><?pi v?><a><!--c--><![CDATA[<&>]]>&lt;</a>',
        '<p:a xmlns:p="urn:p" xmlns:q="urn:q" q:x="&quot;"><q:b/></p:a>',
        "<a>line\r\nbreak &#9;tab</a>",
        "<a>x&#13;y</a>",
    ])
    def test_compact_round_trip(self, text):
        """Test that reloading compact output gives an equal tree."""
        first = build(text)
        second = build(XMLSerializer().serialize_to_string(first))
        assert second.to_dict() == first.to_dict()
