"""
XML Node Helpers
================
Small accessors used when walking a loaded document by hand
(e.g. reading a .nuspec or a project file element by element).
"""
from typing import Callable, Iterator, TypeVar

from lxml import etree

from buildkit.xmlkit.errors import NodeNotFound, NodeParseError

T = TypeVar("T")


def node_name(node: etree._Element) -> str:
    """Qualified name of a node as written in the document (``prefix:local``)."""
    if isinstance(node, etree._Comment):
        return "#comment"
    if isinstance(node, etree._ProcessingInstruction):
        return node.target
    local_name = etree.QName(node).localname
    return f"{node.prefix}:{local_name}" if node.prefix else local_name


def get_attribute(name: str, node: etree._Element) -> str:
    value = node.get(name)
    if value is None:
        raise NodeNotFound(f"@{name}")
    return value


def get_children(node: etree._Element) -> Iterator[etree._Element]:
    """All child nodes, comments and processing instructions included."""
    return iter(node)


def get_sub_node(name: str, node: etree._Element) -> etree._Element:
    """First child called ``name``; raises NodeNotFound when there is none."""
    for child in get_children(node):
        if node_name(child) == name:
            return child
    raise NodeNotFound(name)


def parse_node(name: str, parser: Callable[[etree._Element], T], node: etree._Element) -> T:
    if node_name(node) == name:
        return parser(node)
    raise NodeParseError(name, node_name(node))


def parse_sub_node(name: str, parser: Callable[[etree._Element], T]) -> Callable[[etree._Element], T]:
    """Build a function that finds the ``name`` child of a node and parses it."""
    def _parse(node: etree._Element) -> T:
        return parse_node(name, parser, get_sub_node(name, node))
    return _parse
