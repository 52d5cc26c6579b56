"""
XML Errors
==========
Exception hierarchy for the XML helpers.

    XmlError
    ├── XmlReadError            — strict-mode load / compile / evaluate failure
    ├── UnsupportedResultType   — XPath evaluated to something other than scalar or node set
    ├── XmlPatchError           — a node could not be rewritten
    │   ├── NodeNotFound        — expression matched no node
    │   └── AmbiguousNodeMatch  — expression matched more than one node
    ├── NodeParseError          — node name differs from the expected one
    └── XmlWriterStateError     — writer stream operation out of order
"""


class XmlError(Exception):
    """Base class for all XML helper errors."""


class XmlReadError(XmlError):
    def __init__(self, xpath: str, reason: str):
        self.xpath = xpath
        self.reason = reason
        super().__init__(f"XMLRead error for '{xpath}':\n{reason}")


class UnsupportedResultType(XmlError):
    def __init__(self, xpath: str, type_name: str):
        self.xpath = xpath
        self.type_name = type_name
        super().__init__(f"XPath-Expression return type {type_name} not implemented ('{xpath}')")


class XmlPatchError(XmlError):
    pass


class NodeNotFound(XmlPatchError):
    def __init__(self, xpath: str):
        self.xpath = xpath
        super().__init__(f"XML node '{xpath}' not found")


class AmbiguousNodeMatch(XmlPatchError):
    def __init__(self, xpath: str, count: int):
        self.xpath = xpath
        self.count = count
        super().__init__(f"XML node '{xpath}' is ambiguous: {count} nodes matched, expected exactly one")


class NodeParseError(XmlError):
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Could not parse {expected} - Node was {actual}")


class XmlWriterStateError(XmlError):
    pass
