from __future__ import annotations

import dataclasses
import datetime
import inspect
import logging
import types
import uuid
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Type

from typtree import checks, util
from typtree.compat import lru_cache
from typtree.core import constants
from typtree.core.des.factory import coercers
from typtree.core.errors import UnsupportedMemberType
from typtree.core.interfaces import CoercerT, Kind, SerdeFlags
from typtree.core.strings import canonical

__all__ = ("MemberDescriptor", "TypeDescriptor", "describe")

logger = logging.getLogger(__name__)

_ZEROS: Dict[Kind, Callable[[Any], Any]] = {
    Kind.BOOLEAN: lambda origin: False,
    Kind.INTEGER: lambda origin: origin(),
    Kind.FLOATING: lambda origin: origin(),
    Kind.DECIMAL: lambda origin: origin(),
    Kind.UUID: lambda origin: uuid.UUID(int=0),
    Kind.DATETIME: lambda origin: datetime.datetime.min,
    Kind.DATE: lambda origin: datetime.date.min,
}
_DEFAULT_FLAGS = SerdeFlags()


@util.slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class MemberDescriptor:
    """Everything needed to populate one member of a target type."""

    name: str
    """The member's name on the target type."""
    node_name: str
    """The document node name this member is read from."""
    annotation: Any
    """The declared type, with ``Optional``, ``ReadOnly`` and ``Ignore`` removed."""
    kind: Optional[Kind]
    nullable: bool = False
    readonly: bool = False
    ignored: bool = False
    attribute: bool = True
    """Whether the member is a plain instance attribute (not a property)."""
    default: Any = constants.empty
    default_factory: Optional[Callable[[], Any]] = None
    item: Optional[MemberDescriptor] = None
    """The descriptor for each item of a sequence member."""
    container: Optional[type] = None
    """The concrete type a sequence member is collected into."""
    coercer: Optional[CoercerT] = dataclasses.field(default=None, compare=False)

    @property
    def canonical(self) -> str:
        return canonical(self.node_name)

    @property
    def writable(self) -> bool:
        return not (self.readonly or self.ignored)

    def matches(self, node_name: str) -> bool:
        return canonical(node_name) == self.canonical

    def empty(self) -> Any:
        """Get an empty instance of this member's sequence container."""
        container = self.container
        if issubclass(container, (tuple, frozenset)):
            return container(())
        if checks.isbuiltintype(container):
            return container()
        # A user-defined list or set, which may carry members of its own.
        return describe(container).instantiate()

    def zero(self) -> Any:
        """The value of this member when nothing in the document supplied one."""
        if self.default is not constants.empty:
            return self.default
        if self.default_factory is not None:
            return self.default_factory()
        if self.nullable:
            return None
        if self.kind is Kind.SEQUENCE:
            return self.empty()
        if self.kind in _ZEROS:
            return _ZEROS[self.kind](util.origin(self.annotation))
        return None


@util.slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class TypeDescriptor:
    """The members of a target type, built once and cached.

    Examples
    --------
    >>> import typtree
    >>> class Person:
    ...     name: str
    ...     age: int
    ...     id: typtree.ReadOnly[int]
    ...
    >>> descriptor = typtree.describe(Person)
    >>> [m.name for m in descriptor.writable]
    ['name', 'age']
    >>> descriptor.member("age").kind
    <Kind.INTEGER: 'integer'>
    """

    type: type
    members: Tuple[MemberDescriptor, ...]

    @property
    def writable(self) -> Tuple[MemberDescriptor, ...]:
        return (*(m for m in self.members if m.writable),)

    def member(self, name: str) -> MemberDescriptor:
        for member in self.members:
            if member.name == name:
                return member
        raise KeyError(name)

    def instantiate(self) -> Any:
        """Create a blank instance, with every unset attribute at its zero value."""
        cls = self.type
        instance = cls() if _callable_without_args(cls) else cls.__new__(cls)
        for member in self.members:
            if member.attribute and not hasattr(instance, member.name):
                setattr(instance, member.name, member.zero())
        return instance


def _callable_without_args(cls: type) -> bool:
    try:
        sig = util.cached_signature(cls)
    except (TypeError, ValueError):
        return True
    return all(
        p.default is not p.empty or p.kind in {p.VAR_POSITIONAL, p.VAR_KEYWORD}
        for p in sig.parameters.values()
    )


def _defaults(cls: type) -> Dict[str, Tuple[Any, Optional[Callable[[], Any]]]]:
    defaults = {}
    if dataclasses.is_dataclass(cls):
        for f in dataclasses.fields(cls):
            default = constants.empty if f.default is dataclasses.MISSING else f.default
            factory = (
                None if f.default_factory is dataclasses.MISSING else f.default_factory
            )
            defaults[f.name] = (default, factory)
    return defaults


def _class_default(cls: type, name: str) -> Any:
    try:
        value = inspect.getattr_static(cls, name)
    except AttributeError:
        return constants.empty
    if isinstance(value, (types.MemberDescriptorType, property)):
        return constants.empty
    return value


def _properties(cls: type) -> Iterator[Tuple[str, property]]:
    seen = set()
    for base in reversed(cls.__mro__):
        for name, value in vars(base).items():
            if checks.isproperty(value) and name not in seen:
                seen.add(name)
                prop = inspect.getattr_static(cls, name)
                if checks.isproperty(prop):
                    yield name, prop


def _strip(annotation: Any) -> Tuple[Any, bool, bool, bool]:
    readonly = ignored = False
    inner, nullable = util.unwrap(annotation)
    while checks.isreadonly(inner) or checks.isignored(inner):
        readonly = readonly or checks.isreadonly(inner)
        ignored = ignored or checks.isignored(inner)
        args = util.get_args(inner)
        inner, optional = util.unwrap(args[0] if args else Any)
        nullable = nullable or optional
    return inner, nullable, readonly, ignored


def _item(owner: type, name: str, annotation: Any) -> MemberDescriptor:
    item_annotation = util.get_item_type(annotation)
    inner, nullable, _, _ = _strip(item_annotation)
    kind = coercers.kind(inner)
    if kind is None or kind is Kind.SEQUENCE:
        raise UnsupportedMemberType(owner, name, annotation)
    coercer = coercers.factory(inner, nullable=nullable) if kind.isscalar else None
    return MemberDescriptor(
        name=name,
        node_name=name,
        annotation=inner,
        kind=kind,
        nullable=nullable,
        coercer=coercer,
    )


def _member(
    owner: type,
    name: str,
    annotation: Any,
    flags: SerdeFlags,
    *,
    default: Any = constants.empty,
    default_factory: Optional[Callable[[], Any]] = None,
    attribute: bool = True,
    readonly: bool = False,
) -> MemberDescriptor:
    ignored = name.startswith("_") or name in flags.exclude
    if checks.isclassvartype(annotation):
        ignored, attribute = True, False
        args = util.get_args(annotation)
        annotation = args[0] if args else Any
    inner, nullable, ro, ig = _strip(annotation)
    readonly, ignored = readonly or ro, ignored or ig
    kind = coercers.kind(inner)
    writable = not (readonly or ignored)
    if kind is None and writable:
        raise UnsupportedMemberType(owner, name, annotation)
    item = container = coercer = None
    if kind is Kind.SEQUENCE:
        container = util.origin(inner)
        item = _item(owner, name, inner) if writable else None
    elif kind is not None and kind.isscalar:
        coercer = coercers.factory(inner, nullable=nullable)
    return MemberDescriptor(
        name=name,
        node_name=flags.fields.get(name, name),
        annotation=inner,
        kind=kind,
        nullable=nullable,
        readonly=readonly,
        ignored=ignored,
        attribute=attribute,
        default=default,
        default_factory=default_factory,
        item=item,
        container=container,
        coercer=coercer,
    )


@lru_cache(maxsize=None)
def describe(t: Type[Any]) -> TypeDescriptor:
    """Get the cached :py:class:`TypeDescriptor` for a target class.

    Raises
    ------
    UnsupportedMemberType
        If a writable member's annotation can't be built from a document.
    """
    if not inspect.isclass(t):
        raise TypeError(f"Can only describe classes, got {t!r}.")
    flags = getattr(t, constants.SERDE_FLAGS_ATTR, None) or _DEFAULT_FLAGS
    hints = util.cached_type_hints(t)
    defaults = _defaults(t)
    members: Dict[str, MemberDescriptor] = {}
    properties = dict(_properties(t))
    for name, annotation in hints.items():
        if name == constants.SERDE_FLAGS_ATTR:
            continue
        prop = properties.pop(name, None)
        if prop is not None:
            members[name] = _member(
                t, name, annotation, flags, attribute=False, readonly=prop.fset is None
            )
            continue
        default, factory = defaults.get(name, (_class_default(t, name), None))
        members[name] = _member(
            t, name, annotation, flags, default=default, default_factory=factory
        )
    for name, prop in properties.items():
        if prop.fset is None:
            continue
        annotation = util.cached_type_hints(prop.fget).get("return")
        if annotation is None:
            logger.debug(
                "Skipping property %s.%s, it has no return annotation.",
                util.get_name(t),
                name,
            )
            continue
        members[name] = _member(t, name, annotation, flags, attribute=False)
    descriptor = TypeDescriptor(t, (*members.values(),))
    logger.debug(
        "Described %s: %s.",
        util.get_qualname(t),
        ", ".join(m.name for m in descriptor.writable) or "no writable members",
    )
    return descriptor
