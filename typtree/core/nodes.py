from __future__ import annotations

import dataclasses
import logging
from itertools import chain
from typing import Any, Iterator, NamedTuple, Optional, Tuple, Union

from lxml import etree

from typtree import util
from typtree.compat import Protocol, runtime_checkable
from typtree.core.constants import DEFAULT_ENCODING
from typtree.core.context import DeserializationContext
from typtree.core.errors import DocumentMalformed
from typtree.core.strings import matches

__all__ = (
    "Attribute",
    "DocumentNode",
    "DocumentT",
    "ElementNode",
    "load",
    "parse",
    "select_root",
)

logger = logging.getLogger(__name__)

_BOM = "\ufeff"
_DECLARATION = "<?xml"


class Attribute(NamedTuple):
    name: str
    namespace: Optional[str]
    value: str


@runtime_checkable
class DocumentNode(Protocol):
    """A read-only view of one element in a parsed document."""

    @property
    def name(self) -> str:
        ...

    @property
    def namespace(self) -> Optional[str]:
        ...

    @property
    def attributes(self) -> Tuple[Attribute, ...]:
        ...

    @property
    def children(self) -> Tuple[DocumentNode, ...]:
        ...

    @property
    def text(self) -> Optional[str]:
        ...

    @property
    def value(self) -> str:
        ...

    def iter(self) -> Iterator[DocumentNode]:
        ...


@util.slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class ElementNode:
    """A :py:class:`DocumentNode` over an :py:mod:`lxml` element.

    Examples
    --------
    >>> from typtree.core.nodes import parse
    >>> node = parse('<p:Person xmlns:p="urn:p" Age="28"><Name>Kim</Name></p:Person>')
    >>> node.name, node.namespace
    ('Person', 'urn:p')
    >>> node.attributes[0].value
    '28'
    >>> [c.name for c in node.children]
    ['Name']
    """

    element: etree._Element

    @property
    def name(self) -> str:
        return etree.QName(self.element).localname

    @property
    def namespace(self) -> Optional[str]:
        return etree.QName(self.element).namespace

    @property
    def attributes(self) -> Tuple[Attribute, ...]:
        attributes = []
        for key, value in self.element.attrib.items():
            qname = etree.QName(key)
            attributes.append(Attribute(qname.localname, qname.namespace, value))
        return (*attributes,)

    @property
    def children(self) -> Tuple[ElementNode, ...]:
        return (*(ElementNode(c) for c in self.element.iterchildren(etree.Element)),)

    @property
    def text(self) -> Optional[str]:
        return self.element.text

    @property
    def value(self) -> str:
        """All of the text within this element, descendants included."""
        return "".join(self.element.itertext())

    def iter(self) -> Iterator[ElementNode]:
        """Iterate over every descendant element in document order."""
        for element in self.element.iterdescendants(etree.Element):
            yield ElementNode(element)


DocumentT = Union[str, bytes, etree._Element, etree._ElementTree, DocumentNode, Any]


def _parser(encoding: Optional[str] = None) -> etree.XMLParser:
    return etree.XMLParser(
        encoding=encoding,
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def parse(document: Union[str, bytes]) -> ElementNode:
    """Parse raw document text into a node tree.

    Entities are never resolved and the network is never touched.

    Raises
    ------
    DocumentMalformed
        If the text isn't a well-formed document.
    """
    parser = _parser()
    if isinstance(document, str):
        document = document.lstrip(_BOM)
        # lxml refuses text carrying its own encoding declaration.
        if document.lstrip().startswith(_DECLARATION):
            document = document.encode(DEFAULT_ENCODING)
            parser = _parser(DEFAULT_ENCODING)
    try:
        root = etree.fromstring(document, parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise DocumentMalformed(f"Couldn't parse document: {e}") from e
    if root is None:
        raise DocumentMalformed("Couldn't parse document: no root element.")
    return ElementNode(root)


def load(document: DocumentT) -> DocumentNode:
    """Get a :py:class:`DocumentNode` from any of the supported inputs.

    Accepts raw text or bytes, an lxml element or tree, a ready-made
    :py:class:`DocumentNode`, or a response-like object with a ``content``.
    """
    if isinstance(document, (str, bytes, bytearray)):
        return parse(bytes(document) if isinstance(document, bytearray) else document)
    if isinstance(document, etree._ElementTree):
        return ElementNode(document.getroot())
    if isinstance(document, etree._Element):
        return ElementNode(document)
    if isinstance(document, DocumentNode):
        return document
    if hasattr(document, "content"):
        return load(document.content)
    raise TypeError(
        f"Can't load a document from {type(document).__name__!r}. "
        "Provide text, bytes, an lxml element, or a DocumentNode."
    )


def select_root(node: DocumentNode, context: DeserializationContext) -> DocumentNode:
    """Pick the node to start building from.

    The document root is used as-is, whatever its name, unless a root element is
    configured and an element of that name exists.
    """
    name = context.root_element
    if not name:
        return node
    for candidate in chain((node,), node.iter()):
        if matches(name, candidate.name):
            logger.debug("Using %r as the root element.", candidate.name)
            return candidate
    logger.debug("No element matches root %r, using the document root.", name)
    return node
