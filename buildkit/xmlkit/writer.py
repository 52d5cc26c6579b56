"""
XML Writer Stream
=================
Fluent builder that emits a new XML document into a file or binary stream.

    with xml_writer("out.xml") as w:
        (w.comment("generated")
          .start_element("package")
          .attribute("id", "buildkit")
          .cdata_element("notes", "<raw> & unescaped")
          .end_element())

Every operation returns the stream. Ordering is validated against an
explicit open-element stack:

    - attribute() only on the innermost open element, before any child content
    - end_element() only while an element is open
    - only one root element per document

The stream owns its target for its whole lifetime. close() finishes any
open elements and serializes the document; leaving a ``with`` block through
an exception releases the target without writing a partial document.
"""
import logging
import os
from typing import Any, BinaryIO, Optional, Union

from lxml import etree

from buildkit.core.config import XML_ENCODING
from buildkit.filesystem.paths import PathLike
from buildkit.xmlkit.errors import XmlWriterStateError

logger = logging.getLogger(__name__)


class XmlWriterStream:
    """
    Stateful builder over a single output target.

    Parameters
    ----------
    target : path | binary file object
        A path is opened (and truncated) immediately and closed by close();
        a file object is written to but left open for its owner.
    encoding : str, optional
        Output encoding, declared in the XML declaration. Defaults to XML_ENCODING.
    """

    def __init__(self, target: Union[PathLike, BinaryIO], encoding: Optional[str] = None):
        self._encoding = encoding or XML_ENCODING
        if isinstance(target, (str, os.PathLike)):
            self._path: Optional[str] = os.fspath(target)
            self._created = not os.path.exists(self._path)
            self._file = open(self._path, "wb")
        else:
            self._path = None
            self._created = False
            self._file = target
        self._root: Optional[etree._Element] = None
        self._stack: list[etree._Element] = []
        self._prolog: list[etree._Element] = []
        self._epilog: list[etree._Element] = []
        self._attributes_allowed = False
        self._closed = False
        logger.debug("Started XML document (%s)", self._path or "stream")

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------
    def __enter__(self) -> "XmlWriterStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self.abort()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    @property
    def depth(self) -> int:
        """Number of currently open elements."""
        return len(self._stack)

    @property
    def closed(self) -> bool:
        return self._closed

    def comment(self, text: str) -> "XmlWriterStream":
        self._require_open()
        self._append(etree.Comment(text))
        self._attributes_allowed = False
        return self

    def start_element(self, name: str) -> "XmlWriterStream":
        self._require_open()
        element = etree.Element(name)
        self._append(element)
        self._stack.append(element)
        self._attributes_allowed = True
        return self

    def attribute(self, name: str, value: Any) -> "XmlWriterStream":
        self._require_open()
        if not self._stack:
            raise XmlWriterStateError(f"Cannot write attribute '{name}' outside of an element")
        if not self._attributes_allowed:
            raise XmlWriterStateError(
                f"Cannot write attribute '{name}' after content of <{self._stack[-1].tag}>"
            )
        self._stack[-1].set(name, str(value))
        return self

    def end_element(self) -> "XmlWriterStream":
        self._require_open()
        if not self._stack:
            raise XmlWriterStateError("end_element() without a matching start_element()")
        self._stack.pop()
        self._attributes_allowed = False
        return self

    def cdata_element(self, name: str, data: str) -> "XmlWriterStream":
        """Write ``<name><![CDATA[data]]></name>``; data is not escaped."""
        self.start_element(name)
        self._stack[-1].text = etree.CDATA(data)
        self._attributes_allowed = False
        return self.end_element()

    def close(self) -> None:
        """Close open elements, write the document and release the target."""
        if self._closed:
            return
        try:
            if self._stack:
                logger.debug("Auto-closing %d open element(s)", len(self._stack))
                self._stack.clear()
            if self._root is None:
                raise XmlWriterStateError("Cannot close a document without a root element")
            for node in self._prolog:
                self._root.addprevious(node)
            for node in reversed(self._epilog):
                self._root.addnext(node)
            self._root.getroottree().write(
                self._file, xml_declaration=True, encoding=self._encoding
            )
        except BaseException:
            self.abort()
            raise
        self._release()
        logger.info("Wrote XML document to %s", self._path or "stream")

    def abort(self) -> None:
        """
        Release the target without writing.

        A file created by this stream is removed. A file that existed before
        stays in place, already truncated when the stream opened it.
        """
        if self._closed:
            return
        self._release()
        if self._created and os.path.exists(self._path):
            os.remove(self._path)
        logger.warning("Aborted XML document %s", self._path or "stream")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _require_open(self) -> None:
        if self._closed:
            raise XmlWriterStateError("XML writer stream is already closed")

    def _append(self, node: etree._Element) -> None:
        if self._stack:
            self._stack[-1].append(node)
            return
        is_element = not isinstance(node, etree._Comment)
        if self._root is None:
            if is_element:
                self._root = node
            else:
                self._prolog.append(node)
            return
        if is_element:
            raise XmlWriterStateError("Document already has a root element")
        self._epilog.append(node)

    def _release(self) -> None:
        self._closed = True
        if self._path is not None:
            self._file.close()


# ---------------------------------------------------------------------------
# Pipeline-style helpers (writer last, writer returned)
# ---------------------------------------------------------------------------
def xml_writer(file_name: PathLike, encoding: Optional[str] = None) -> XmlWriterStream:
    """Create a writer stream on ``file_name``; the document is started implicitly."""
    return XmlWriterStream(file_name, encoding)


def xml_comment(comment: str, writer: XmlWriterStream) -> XmlWriterStream:
    return writer.comment(comment)


def xml_start_element(name: str, writer: XmlWriterStream) -> XmlWriterStream:
    return writer.start_element(name)


def xml_end_element(writer: XmlWriterStream) -> XmlWriterStream:
    return writer.end_element()


def xml_attribute(name: str, value: Any, writer: XmlWriterStream) -> XmlWriterStream:
    return writer.attribute(name, value)


def xml_cdata_element(element_name: str, data: str, writer: XmlWriterStream) -> XmlWriterStream:
    return writer.cdata_element(element_name, data)
