from __future__ import annotations

import logging
from typing import Any, List, Optional

from typtree import checks, util
from typtree.core import constants
from typtree.core.context import DeserializationContext
from typtree.core.descriptors import MemberDescriptor, TypeDescriptor, describe
from typtree.core.errors import CoercionFailure
from typtree.core.interfaces import Kind
from typtree.core.nodes import DocumentNode
from typtree.core.resolver import find_attribute, find_element, resolve

__all__ = ("build", "build_sequence", "coerce", "populate")

logger = logging.getLogger(__name__)


def coerce(
    member: MemberDescriptor, text: Optional[str], context: DeserializationContext
) -> Any:
    """Convert raw text to the member's declared type.

    Returns :py:class:`~typtree.core.constants.empty` for empty text when the
    member should keep its default.

    Raises
    ------
    CoercionFailure
        If the text is present but can't be read as the member's type.
    """
    try:
        return member.coercer(text, context)
    except CoercionFailure as e:
        raise CoercionFailure(member.name, e.raw, e.target) from e.__cause__


def build(
    node: DocumentNode, descriptor: TypeDescriptor, context: DeserializationContext
) -> Any:
    """Create an instance of the described type and populate it from `node`."""
    instance = descriptor.instantiate()
    populate(instance, node, descriptor, context)
    return instance


def populate(
    instance: Any,
    node: DocumentNode,
    descriptor: TypeDescriptor,
    context: DeserializationContext,
) -> None:
    """Assign every writable member of `instance` which `node` has a value for.

    Members are assigned in declaration order. Anything in the document which
    doesn't match a member is ignored.
    """
    for member in descriptor.writable:
        if member.kind is Kind.SEQUENCE:
            setattr(instance, member.name, build_sequence(node, member, context))
            continue
        source = resolve(member, node, context)
        if not source.found:
            logger.debug(
                "No node in <%s> matches %s.%s.",
                node.name,
                util.get_name(descriptor.type),
                member.name,
            )
            continue
        if member.kind is Kind.NESTED:
            nested = describe(util.origin(member.annotation))
            setattr(instance, member.name, build(source.node, nested, context))
            continue
        value = coerce(member, source.text, context)
        if value is not constants.empty:
            setattr(instance, member.name, value)


def build_sequence(
    node: DocumentNode, member: MemberDescriptor, context: DeserializationContext
) -> Any:
    """Collect the items of a sequence member from its container element.

    Every child element of the container is one item. An absent container is an
    empty sequence.
    """
    container = find_element(member, node, context)
    if container is None:
        logger.debug("No container in <%s> matches %r.", node.name, member.name)
        return member.empty()
    item = member.item
    items: List[Any] = []
    if item.kind is Kind.NESTED:
        descriptor = describe(util.origin(item.annotation))
        for child in container.children:
            items.append(build(child, descriptor, context))
    else:
        for child in container.children:
            value = coerce(item, child.value, context)
            items.append(item.zero() if value is constants.empty else value)
    return _collect(member, items, container, context)


def _collect(
    member: MemberDescriptor,
    items: List[Any],
    container: DocumentNode,
    context: DeserializationContext,
) -> Any:
    cls = member.container
    if checks.isbuiltintype(cls) or issubclass(cls, (tuple, frozenset)):
        return cls(items)
    # A user-defined list or set, which may carry members of its own.
    descriptor = describe(cls)
    wrapper = descriptor.instantiate()
    if isinstance(wrapper, set):
        wrapper.update(items)
    else:
        wrapper.extend(items)
    for attribute in descriptor.writable:
        if not attribute.kind.isscalar:
            continue
        found = find_attribute(attribute, container, context)
        if found is None:
            continue
        value = coerce(attribute, found.value, context)
        if value is not constants.empty:
            setattr(wrapper, attribute.name, value)
    return wrapper
