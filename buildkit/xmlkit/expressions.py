"""
XPath Expressions
=================
Compiled XPath expressions and the tagged result they evaluate to.

An expression is compiled once (lxml.etree.XPath) and can be evaluated
against any number of documents. Each evaluation is classified exactly once
into one of two variants:

    ScalarResult   — string, number or boolean; carries the XPath string form
    NodeSetResult  — selected nodes in document order; string values are
                     produced lazily, one node at a time

Anything else (lxml can return e.g. raw extension-function objects) is an
UnsupportedResultType.
"""
import logging
import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterator, Mapping, Optional, Sequence, Tuple, Union

from lxml import etree

from buildkit.core.constants import XPATH_FALSE, XPATH_INFINITY, XPATH_NAN, XPATH_TRUE
from buildkit.xmlkit.errors import UnsupportedResultType

logger = logging.getLogger(__name__)

NamespaceBindings = Union[Mapping[str, str], Sequence[Tuple[str, str]]]


def namespace_map(namespaces: Optional[NamespaceBindings]) -> dict[str, str]:
    """Turn prefix → URI bindings (mapping or pairs) into an ordered dict."""
    if not namespaces:
        return {}
    if isinstance(namespaces, Mapping):
        return dict(namespaces)
    return {prefix: uri for prefix, uri in namespaces}


def xpath_string(value: Union[bool, float, int, str]) -> str:
    """Convert a scalar XPath value to its string form (XPath 1.0 string())."""
    if isinstance(value, bool):
        return XPATH_TRUE if value else XPATH_FALSE
    if isinstance(value, (int, float)):
        number = float(value)
        if math.isnan(number):
            return XPATH_NAN
        if math.isinf(number):
            return XPATH_INFINITY if number > 0 else "-" + XPATH_INFINITY
        if number.is_integer():
            return str(int(number))
        # XPath never uses exponent notation: 1e-07 is "0.0000001"
        return format(Decimal(repr(number)), "f")
    return str(value)


def string_value(node: Any) -> str:
    """
    String value of a single node-set member.

    Elements yield the concatenation of all descendant text, attributes and
    text nodes their text, comments and processing instructions their
    content, namespace nodes their URI.
    """
    if isinstance(node, str):
        return str(node)
    if isinstance(node, tuple) and len(node) == 2:
        return node[1]
    if isinstance(node, (etree._Comment, etree._ProcessingInstruction)):
        return node.text or ""
    if isinstance(node, etree._Element):
        return str(node.xpath("string()"))
    raise UnsupportedResultType("<node>", type(node).__name__)


@dataclass(frozen=True)
class ScalarResult:
    value: str

    def values(self) -> Iterator[str]:
        yield self.value


@dataclass(frozen=True)
class NodeSetResult:
    nodes: Tuple[Any, ...] = field(default_factory=tuple)

    def values(self) -> Iterator[str]:
        for node in self.nodes:
            yield string_value(node)

    def __len__(self) -> int:
        return len(self.nodes)


QueryResult = Union[ScalarResult, NodeSetResult]


class CompiledExpression:
    """
    Reusable, immutable compiled XPath expression.

    Parameters
    ----------
    xpath : str
        XPath 1.0 expression.
    namespaces : NamespaceBindings, optional
        Prefix → URI bindings consulted when the expression is evaluated.

    Raises
    ------
    lxml.etree.XPathSyntaxError
        If the expression does not compile.
    """

    __slots__ = ("_xpath", "_compiled", "_namespaces")

    def __init__(self, xpath: str, namespaces: Optional[NamespaceBindings] = None):
        self._xpath = xpath
        self._namespaces = namespace_map(namespaces)
        self._compiled = etree.XPath(xpath, namespaces=self._namespaces or None)

    @property
    def xpath(self) -> str:
        return self._xpath

    @property
    def namespaces(self) -> dict[str, str]:
        return dict(self._namespaces)

    def __repr__(self) -> str:
        return f"CompiledExpression({self._xpath!r})"

    def evaluate(self, context: Union[etree._ElementTree, etree._Element]) -> QueryResult:
        """Evaluate once against ``context`` and classify the result."""
        raw = self._compiled(context)
        result = self.classify(raw)
        logger.debug("Evaluated %r -> %s", self._xpath, type(result).__name__)
        return result

    def classify(self, raw: Any) -> QueryResult:
        if isinstance(raw, list):
            return NodeSetResult(tuple(raw))
        if isinstance(raw, (bool, int, float, str)):
            return ScalarResult(xpath_string(raw))
        raise UnsupportedResultType(self._xpath, type(raw).__name__)


def compile_expression(xpath: str, namespaces: Optional[NamespaceBindings] = None) -> CompiledExpression:
    return CompiledExpression(xpath, namespaces)
