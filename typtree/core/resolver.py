from __future__ import annotations

import dataclasses
import enum
from typing import Optional

from typtree import util
from typtree.core.context import DeserializationContext
from typtree.core.descriptors import MemberDescriptor
from typtree.core.interfaces import Kind
from typtree.core.nodes import Attribute, DocumentNode

__all__ = (
    "NOT_FOUND",
    "ResolvedSource",
    "SourceKind",
    "find_attribute",
    "find_element",
    "resolve",
)


class SourceKind(str, enum.Enum):
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    NOT_FOUND = "not found"


@util.slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class ResolvedSource:
    """Where a member's value was found in the document, if anywhere."""

    kind: SourceKind
    node: Optional[DocumentNode] = None
    """The matched element, or the element which carries the matched attribute."""
    text: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.kind is not SourceKind.NOT_FOUND


NOT_FOUND = ResolvedSource(SourceKind.NOT_FOUND)


def find_element(
    member: MemberDescriptor, node: DocumentNode, context: DeserializationContext
) -> Optional[DocumentNode]:
    """Find the first child element of `node` which matches `member`."""
    namespace = context.namespace
    for child in node.children:
        if namespace and child.namespace != namespace:
            continue
        if member.matches(child.name):
            return child
    return None


def find_attribute(
    member: MemberDescriptor, node: DocumentNode, context: DeserializationContext
) -> Optional[Attribute]:
    """Find the attribute of `node` which matches `member`.

    Unqualified attributes always qualify, even when a namespace is configured.
    """
    namespace = context.namespace
    for attribute in node.attributes:
        if namespace and attribute.namespace not in {None, namespace}:
            continue
        if member.matches(attribute.name):
            return attribute
    return None


def resolve(
    member: MemberDescriptor, node: DocumentNode, context: DeserializationContext
) -> ResolvedSource:
    """Find the node which should supply the value for `member`.

    Child elements win over attributes. Nested objects and sequences can only
    come from elements.

    Examples
    --------
    >>> import typtree
    >>> from typtree.core.nodes import parse
    >>> from typtree.core.resolver import resolve
    >>> class Person:
    ...     age: int
    ...
    >>> member = typtree.describe(Person).member("age")
    >>> ctx = typtree.DeserializationContext()
    >>> resolve(member, parse('<Person age="28"/>'), ctx).text
    '28'
    >>> resolve(member, parse('<Person age="28"><Age>29</Age></Person>'), ctx).text
    '29'
    >>> resolve(member, parse('<Person/>'), ctx).found
    False
    """
    element = find_element(member, node, context)
    if element is not None:
        return ResolvedSource(SourceKind.ELEMENT, element, element.value)
    if member.kind in {Kind.NESTED, Kind.SEQUENCE}:
        return NOT_FOUND
    attribute = find_attribute(member, node, context)
    if attribute is not None:
        return ResolvedSource(SourceKind.ATTRIBUTE, node, attribute.value)
    return NOT_FOUND
