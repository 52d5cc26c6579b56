"""
XML Documents
=============
Loading and persisting lxml documents.

Documents are always ``lxml.etree._ElementTree`` instances so that prolog
comments and processing instructions survive a load/save cycle.

Parser:
    External entities and network access are disabled unless
    XML_RESOLVE_ENTITIES is set. Whitespace is preserved as-is so that
    untouched element content of a patched file is written back unchanged.

Persistence:
    save_document writes atomically by default: serialize to a temp file in
    the target directory, fsync, then os.replace over the target.
    A file loaded without an XML declaration is saved without one; a declared
    standalone flag is kept. lxml re-emits the declaration with single quotes.
"""
import logging
import os
import re
import shutil
import tempfile
from typing import Optional, Union

from lxml import etree

from buildkit.core.config import XML_ATOMIC_WRITES, XML_ENCODING, XML_RESOLVE_ENTITIES
from buildkit.filesystem.paths import PathLike

logger = logging.getLogger(__name__)

XmlSource = Union[PathLike, etree._ElementTree, etree._Element]

# Optional UTF-8 BOM, then "<?xml" and whitespace
_DECLARATION = re.compile(rb"^(\xef\xbb\xbf)?<\?xml\s")
_UTF16_BOMS = (b"\xff\xfe", b"\xfe\xff")


def make_xml_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=XML_RESOLVE_ENTITIES,
        no_network=True,
        remove_blank_text=False,
    )


def load_document(file_name: PathLike) -> etree._ElementTree:
    """Parse the XML file at ``file_name``."""
    path = os.fspath(file_name)
    if not os.path.isfile(path):
        raise FileNotFoundError(f"XML file {path} does not exist.")
    return etree.parse(path, make_xml_parser())


def has_xml_declaration(file_name: PathLike) -> bool:
    """Check whether the file starts with an XML declaration."""
    with open(file_name, "rb") as f:
        head = f.read(64)
    if head.startswith(_UTF16_BOMS):
        # UTF-16 documents always declare their encoding
        return True
    return bool(_DECLARATION.match(head))


def xml_doc(text: Optional[Union[str, bytes]]) -> Optional[etree._ElementTree]:
    """
    Load literal XML text into a document.

    Returns None for empty text.
    """
    if not text:
        return None
    if isinstance(text, str) and text.lstrip().startswith("<?xml"):
        # lxml refuses unicode input that carries an encoding declaration
        text = text.encode("utf-8")
    return etree.fromstring(text, make_xml_parser()).getroottree()


def as_document(source: XmlSource) -> etree._ElementTree:
    """Accept a path, a loaded document or an element and return a document."""
    if isinstance(source, etree._ElementTree):
        return source
    if isinstance(source, etree._Element):
        return source.getroottree()
    return load_document(source)


def doc_element(doc: etree._ElementTree) -> etree._Element:
    """The document (root) element."""
    return doc.getroot()


def save_document(doc: etree._ElementTree, file_name: PathLike,
                  atomic: Optional[bool] = None, xml_declaration: bool = True) -> None:
    """
    Serialize ``doc`` to ``file_name``.

    The original document encoding and standalone flag are kept; new
    documents use XML_ENCODING. ``xml_declaration=False`` omits the
    declaration, for files that were loaded without one.
    """
    path = os.fspath(file_name)
    write_options = {
        "encoding": doc.docinfo.encoding or XML_ENCODING,
        "xml_declaration": xml_declaration,
    }
    if xml_declaration and doc.docinfo.standalone is not None:
        write_options["standalone"] = doc.docinfo.standalone
    if atomic is None:
        atomic = XML_ATOMIC_WRITES

    if not atomic:
        doc.write(path, **write_options)
        logger.info("Saved XML document to %s", path)
        return

    target_dir = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(
        prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=target_dir
    )
    try:
        with os.fdopen(fd, "wb") as f:
            doc.write(f, **write_options)
            f.flush()
            os.fsync(f.fileno())
        if os.path.exists(path):
            shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    logger.info("Saved XML document to %s (atomic)", path)
