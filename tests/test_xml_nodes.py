"""
Unit Tests — XML Documents & Node Helpers
=========================================
"""
import pytest

from buildkit.xmlkit.documents import as_document, doc_element, load_document, xml_doc
from buildkit.xmlkit.errors import NodeNotFound, NodeParseError
from buildkit.xmlkit.nodes import (
    get_attribute,
    get_children,
    get_sub_node,
    node_name,
    parse_node,
    parse_sub_node,
)

NUSPEC = """<package xmlns:x="urn:extra">
  <metadata>
    <id>BuildKit</id>
    <version>2.0.0</version>
    <dependencies>
      <dependency id="lxml" version="5.0" />
      <dependency id="pydantic" version="2.0" />
    </dependencies>
  </metadata>
  <x:files />
</package>"""


class TestDocuments:

    def test_xml_doc_empty_text_is_none(self):
        assert xml_doc("") is None
        assert xml_doc(None) is None

    def test_xml_doc_with_declaration(self):
        doc = xml_doc('<?xml version="1.0" encoding="utf-8"?><a>1</a>')
        assert doc_element(doc).tag == "a"

    def test_xml_doc_bytes(self):
        assert doc_element(xml_doc(b"<a/>")).tag == "a"

    def test_load_document_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="missing.xml"):
            load_document(tmp_path / "missing.xml")

    def test_as_document_accepts_element(self):
        root = doc_element(xml_doc(NUSPEC))
        assert as_document(root).getroot() is root

    def test_external_entities_not_resolved(self, tmp_path):
        secret = tmp_path / "secret.txt"
        secret.write_text("top-secret")
        text = (
            f'<!DOCTYPE r [<!ENTITY e SYSTEM "file://{secret}">]>'
            "<r>&e;</r>"
        )
        doc = xml_doc(text)
        assert "top-secret" not in (doc_element(doc).xpath("string()"))


class TestNodeHelpers:

    @pytest.fixture
    def metadata(self):
        return get_sub_node("metadata", doc_element(xml_doc(NUSPEC)))

    def test_get_sub_node(self, metadata):
        assert get_sub_node("id", metadata).text == "BuildKit"

    def test_get_sub_node_missing(self, metadata):
        with pytest.raises(NodeNotFound, match="authors"):
            get_sub_node("authors", metadata)

    def test_get_children(self, metadata):
        assert [node_name(c) for c in get_children(metadata)] == ["id", "version", "dependencies"]

    def test_get_attribute(self, metadata):
        dependency = get_sub_node("dependency", get_sub_node("dependencies", metadata))
        assert get_attribute("id", dependency) == "lxml"
        with pytest.raises(NodeNotFound):
            get_attribute("missing", dependency)

    def test_prefixed_node_name(self):
        root = doc_element(xml_doc(NUSPEC))
        assert node_name(get_sub_node("x:files", root)) == "x:files"

    def test_parse_node(self, metadata):
        assert parse_node("metadata", lambda n: len(n), metadata) == 3
        with pytest.raises(NodeParseError, match="Could not parse package - Node was metadata"):
            parse_node("package", len, metadata)

    def test_parse_sub_node(self, metadata):
        read_dependencies = parse_sub_node(
            "dependencies",
            lambda n: [(get_attribute("id", d), get_attribute("version", d)) for d in n],
        )
        assert read_dependencies(metadata) == [("lxml", "5.0"), ("pydantic", "2.0")]
