"""
XML Query
=========
Read values out of XML documents with XPath.

Two entry points over the same machinery:

    query_xml  — returns a QueryOutcome (QuerySuccess | QueryFailure);
                 callers pattern-match instead of passing a flag.
    xml_read   — flag-driven convenience: strict mode raises XmlReadError,
                 lenient mode degrades to an empty sequence.

Values come back as an XmlValues sequence: finite, lazy (node string values
are computed while iterating) and restartable (every iter() starts over).
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from lxml import etree

from buildkit.core.constants import INT32_MAX, INT32_MIN
from buildkit.xmlkit.documents import XmlSource, as_document, doc_element
from buildkit.xmlkit.errors import NodeNotFound, UnsupportedResultType, XmlReadError
from buildkit.xmlkit.expressions import (
    NamespaceBindings,
    QueryResult,
    ScalarResult,
    compile_expression,
    string_value,
)

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r"^\s*[+-]?[0-9]+\s*$")

# Failures that turn into a QueryFailure instead of escaping query_xml
_QUERY_ERRORS = (OSError, ValueError, etree.LxmlError, UnsupportedResultType)


class XmlValues:
    """Restartable lazy sequence of string values from one evaluation."""

    __slots__ = ("_result",)

    def __init__(self, result: Optional[QueryResult] = None):
        self._result = result

    def __iter__(self) -> Iterator[str]:
        if self._result is None:
            return iter(())
        return self._result.values()

    def __repr__(self) -> str:
        kind = type(self._result).__name__ if self._result is not None else "empty"
        return f"XmlValues({kind})"

    @property
    def result(self) -> Optional[QueryResult]:
        return self._result


@dataclass(frozen=True)
class QuerySuccess:
    xpath: str
    result: QueryResult

    @property
    def values(self) -> XmlValues:
        return XmlValues(self.result)


@dataclass(frozen=True)
class QueryFailure:
    xpath: str
    error: Exception

    @property
    def values(self) -> XmlValues:
        return XmlValues()

    def raise_error(self):
        if isinstance(self.error, UnsupportedResultType):
            raise self.error
        raise XmlReadError(self.xpath, str(self.error)) from self.error


QueryOutcome = Union[QuerySuccess, QueryFailure]


def query_xml(source: XmlSource, xpath: str,
              namespaces: Optional[NamespaceBindings] = None) -> QueryOutcome:
    """
    Load (if needed), compile and evaluate ``xpath`` once.

    Parameters
    ----------
    source : path | lxml document | lxml element
        Where to read from.
    xpath : str
        XPath 1.0 expression.
    namespaces : NamespaceBindings, optional
        Prefix → URI bindings for the expression.

    Returns
    -------
    QueryOutcome
        QuerySuccess carrying the classified result, or QueryFailure carrying
        the load / compile / evaluate error. Never raises for those.
    """
    try:
        document = as_document(source)
        expression = compile_expression(xpath, namespaces)
        result = expression.evaluate(document)
    except _QUERY_ERRORS as exc:
        return QueryFailure(xpath=xpath, error=exc)
    return QuerySuccess(xpath=xpath, result=result)


def xml_read(fail_on_error: bool, xml_file_name: XmlSource, namespace: str,
             prefix: str, xpath: str) -> XmlValues:
    """
    Read values from an XML document using an XPath.

    The ``prefix → namespace`` binding is only registered when both are
    non-empty.

    Raises
    ------
    XmlReadError
        In strict mode, when the document can't be loaded or the expression
        can't be compiled or evaluated.
    UnsupportedResultType
        In strict mode, when the expression yields neither scalar nor node set.
    """
    bindings = {prefix: namespace} if prefix and namespace else None
    outcome = query_xml(xml_file_name, xpath, bindings)

    if isinstance(outcome, QuerySuccess):
        return outcome.values

    if fail_on_error:
        outcome.raise_error()
    logger.warning("XMLRead of '%s' failed, returning no values: %s", xpath, outcome.error)
    return outcome.values


def try_parse_int(text: str) -> Tuple[bool, int]:
    """Parse a 32-bit signed integer; ``(False, 0)`` when the text isn't one."""
    if not _INT_PATTERN.match(text):
        return False, 0
    value = int(text)
    if not INT32_MIN <= value <= INT32_MAX:
        return False, 0
    return True, value


def xml_read_int(fail_on_error: bool, xml_file_name: XmlSource, namespace: str,
                 prefix: str, xpath: str) -> Tuple[bool, int]:
    """
    Read the first value of an XPath as an integer.

    Returns ``(parsed, value)`` for the first value only. In strict mode a
    read that yields no value at all raises XmlReadError; in lenient mode it
    gives ``(False, 0)``.
    """
    values = xml_read(fail_on_error, xml_file_name, namespace, prefix, xpath)
    parsed = (try_parse_int(v) for v in values)
    first = next(parsed, None)

    if first is not None:
        return first
    if fail_on_error:
        raise XmlReadError(xpath, "expression returned no value")
    return False, 0


def xpath_value(xpath: str, namespaces: Optional[NamespaceBindings],
                doc: etree._ElementTree) -> str:
    """
    String value of the first node selected by ``xpath``, evaluated relative
    to the document element.

    Raises NodeNotFound when nothing is selected.
    """
    result = compile_expression(xpath, namespaces).evaluate(doc_element(doc))
    if isinstance(result, ScalarResult):
        raise XmlReadError(xpath, "expression does not select a node")
    if not result.nodes:
        raise NodeNotFound(xpath)
    return string_value(result.nodes[0])
