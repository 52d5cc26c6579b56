"""
XML Patch
=========
Rewrite the value of exactly one node selected by an XPath.

Resolution rules:
    - zero matches        → NodeNotFound
    - more than one match → AmbiguousNodeMatch
    - scalar expressions  → XmlPatchError (nothing to rewrite)

How the value is written depends on what was selected:
    attribute            → attribute value
    text node            → the owning element's text (or tail)
    comment / PI         → its content
    element              → children removed, text set (inner-text semantics)

There is no lenient mode: a patch that cannot resolve its node always raises.
"""
import logging
from typing import Any, Optional

from lxml import etree

from buildkit.filesystem.paths import PathLike
from buildkit.xmlkit.documents import has_xml_declaration, load_document, save_document
from buildkit.xmlkit.errors import AmbiguousNodeMatch, NodeNotFound, XmlPatchError
from buildkit.xmlkit.expressions import NamespaceBindings, ScalarResult, compile_expression

logger = logging.getLogger(__name__)


def select_single_node(xpath: str, doc: etree._ElementTree,
                       namespaces: Optional[NamespaceBindings] = None) -> Any:
    """Resolve ``xpath`` to exactly one node of ``doc``."""
    result = compile_expression(xpath, namespaces).evaluate(doc)
    if isinstance(result, ScalarResult):
        raise XmlPatchError(f"XPath '{xpath}' evaluates to a value, not a node")
    if not result.nodes:
        raise NodeNotFound(xpath)
    if len(result.nodes) > 1:
        raise AmbiguousNodeMatch(xpath, len(result.nodes))
    return result.nodes[0]


def set_node_value(node: Any, value: str, xpath: str = "<node>") -> None:
    """Overwrite the value of a single node returned by an lxml XPath."""
    if isinstance(node, etree._ElementUnicodeResult):
        parent = node.getparent()
        if parent is None:
            raise XmlPatchError(f"XPath '{xpath}' selected a detached string value")
        if node.is_attribute:
            parent.set(node.attrname, value)
        elif node.is_tail:
            parent.tail = value
        elif node.is_text:
            parent.text = value
        else:
            raise XmlPatchError(f"XPath '{xpath}' selected a computed string, not a node")
        return
    if isinstance(node, (etree._Comment, etree._ProcessingInstruction)):
        node.text = value
        return
    if isinstance(node, etree._Element):
        for child in list(node):
            node.remove(child)
        node.text = value
        return
    raise XmlPatchError(f"XPath '{xpath}' selected an unsupported node of type {type(node).__name__}")


def xpath_replace(xpath: str, value: Any, doc: etree._ElementTree) -> etree._ElementTree:
    """
    Replace the value of the node selected by ``xpath``.

    Mutates ``doc`` in place and returns it for chaining.
    """
    return xpath_replace_ns(xpath, value, None, doc)


def xpath_replace_ns(xpath: str, value: Any, namespaces: Optional[NamespaceBindings],
                     doc: etree._ElementTree) -> etree._ElementTree:
    """Like xpath_replace, evaluating ``xpath`` with prefix → URI bindings."""
    node = select_single_node(xpath, doc, namespaces)
    set_node_value(node, str(value), xpath)
    logger.debug("Replaced value at '%s'", xpath)
    return doc


def xml_poke(file_name: PathLike, xpath: str, value: Any) -> None:
    """Replace the node value selected by ``xpath`` in an XML file and save it in place."""
    xml_poke_ns(file_name, None, xpath, value)


def xml_poke_ns(file_name: PathLike, namespaces: Optional[NamespaceBindings],
                xpath: str, value: Any) -> None:
    """
    Namespace-aware xml_poke.

    Read-modify-write: the file is loaded, patched and written back. The
    write itself is atomic (see save_document); a concurrent writer between
    load and save still loses its update.
    """
    doc = load_document(file_name)
    declared = has_xml_declaration(file_name)
    xpath_replace_ns(xpath, value, namespaces, doc)
    save_document(doc, file_name, xml_declaration=declared)
    logger.info("Poked '%s' in %s", xpath, file_name)
