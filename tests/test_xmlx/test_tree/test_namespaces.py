"""Tests for the namespace alias table."""

import pytest

from xmlx.shared import Attribute, QualifiedName
from xmlx.tree import NamespaceTable


class TestNamespaceTable:
    """Tests for NamespaceTable."""

    def test_starts_empty(self):
        """Test a fresh table."""
        table = NamespaceTable()
        assert len(table) == 0
        assert dict(table) == {}

    def test_declare_and_resolve(self):
        """Test URI to alias lookup."""
        table = NamespaceTable()
        table.declare("urn:a", "a")
        assert table["urn:a"] == "a"
        assert table.resolve("urn:a") == "a"

    def test_unknown_space_resolves_to_itself(self):
        """Test that undeclared spaces pass through."""
        assert NamespaceTable().resolve("urn:missing") == "urn:missing"
        assert NamespaceTable().resolve("") == ""

    def test_redeclaration_replaces_alias(self):
        """Test that the latest alias for a URI wins."""
        table = NamespaceTable({"urn:a": "a"})
        table.declare("urn:a", "b")
        assert table.resolve("urn:a") == "b"
        assert len(table) == 1

    def test_is_read_only_mapping(self):
        """Test that item assignment is not supported."""
        with pytest.raises(TypeError):
            NamespaceTable()["urn:a"] = "a"

    def test_declare_default_namespace_attribute(self):
        """Test xmlns="uri" declaring the empty alias."""
        table = NamespaceTable()
        assert table.declare_attribute(Attribute(QualifiedName("", "xmlns"), "urn:a"))
        assert table.resolve("urn:a") == ""

    def test_declare_prefixed_namespace_attribute(self):
        """Test xmlns:p="uri" declaring alias p."""
        table = NamespaceTable()
        assert table.declare_attribute(Attribute(QualifiedName("xmlns", "p"), "urn:p"))
        assert table.resolve("urn:p") == "p"

    def test_ordinary_attribute_declares_nothing(self):
        """Test that other attributes leave the table alone."""
        table = NamespaceTable()
        assert not table.declare_attribute(Attribute(QualifiedName("", "id"), "1"))
        assert len(table) == 0

    def test_rewrite(self):
        """Test rewriting a name through the table."""
        table = NamespaceTable({"urn:p": "p"})
        assert table.rewrite(QualifiedName("urn:p", "a")) == QualifiedName("p", "a")
        assert table.rewrite(QualifiedName("q", "a")) == QualifiedName("q", "a")

    def test_uri_for(self):
        """Test reverse lookup of an alias."""
        table = NamespaceTable({"urn:a": "", "urn:p": "p"})
        assert table.uri_for("p") == "urn:p"
        assert table.uri_for("") == "urn:a"
        assert table.uri_for("q") is None

    def test_copy_is_independent(self):
        """Test that copies do not share state."""
        table = NamespaceTable({"urn:a": "a"})
        copied = table.copy()
        copied.declare("urn:b", "b")
        assert "urn:b" not in table
        assert copied == {"urn:a": "a", "urn:b": "b"}
