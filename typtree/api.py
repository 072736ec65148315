from __future__ import annotations

import dataclasses
import logging
from typing import Any, Optional, Type, TypeVar

from typtree import env
from typtree.core import builder, nodes
from typtree.core.annotations import Ignore, ReadOnly
from typtree.core.context import DeserializationContext
from typtree.core.des.factory import coercers
from typtree.core.descriptors import describe
from typtree.core.interfaces import Kind, SerdeFlags
from typtree.util import get_qualname, slotted

__all__ = (
    "Deserializer",
    "Ignore",
    "Kind",
    "ReadOnly",
    "SerdeFlags",
    "deserialize",
    "deserializer",
    "describe",
    "environ",
    "flags",
    "parse",
    "register",
)

logger = logging.getLogger(__name__)

ObjectT = TypeVar("ObjectT")


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class Deserializer:
    """Build typed objects from documents.

    A deserializer holds default options and is never changed by a call, so one
    instance may be shared freely. Use :py:meth:`with_options` to derive a new one.

    Examples
    --------
    >>> import typtree
    >>> class Person:
    ...     name: str
    ...     age: int
    ...
    >>> document = "<Root><Name>Kim</Name><Age>28</Age></Root>"
    >>> person = typtree.deserialize(document, Person)
    >>> person.name, person.age
    ('Kim', 28)
    >>> german = typtree.Deserializer().with_options(culture="de-DE")
    >>> german.context.culture.name
    'de-DE'
    """

    context: DeserializationContext = DeserializationContext()

    @classmethod
    def from_env(cls, **overrides: Any) -> Deserializer:
        """Create a deserializer with options read from ``TYPTREE_*`` variables."""
        return cls(env.context(**overrides))

    def with_options(self, **options: Any) -> Deserializer:
        """Get a new deserializer with the given options changed.

        Accepts ``date_format``, ``culture``, ``root_element`` and ``namespace``.
        """
        return dataclasses.replace(self, context=self.context.replace(**options))

    def deserialize(
        self,
        document: nodes.DocumentT,
        target: Type[ObjectT],
        *,
        context: Optional[DeserializationContext] = None,
        **options: Any,
    ) -> ObjectT:
        """Create an instance of `target` populated from `document`.

        Parameters
        ----------
        document
            Raw text or bytes, an lxml element or tree, a
            :py:class:`~typtree.core.nodes.DocumentNode`, or an object with a
            ``content`` attribute holding any of those.
        target
            The class to create.
        context
            Use these options instead of this deserializer's.
        **options
            Override individual options for this call only.

        Raises
        ------
        DocumentMalformed
            If the document can't be parsed.
        CoercionFailure
            If a value in the document can't be read as its member's type.
        UnsupportedMemberType
            If `target` has a member which can't be built from a document.
        """
        ctx = context or self.context
        if options:
            ctx = ctx.replace(**options)
        descriptor = describe(target)
        root = nodes.select_root(nodes.load(document), ctx)
        logger.debug("Building %s from <%s>.", get_qualname(target), root.name)
        return builder.build(root, descriptor, ctx)


deserializer = Deserializer()
deserialize = deserializer.deserialize
register = coercers.register
parse = nodes.parse
environ = env.environ
flags = SerdeFlags
