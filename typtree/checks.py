from __future__ import annotations

import builtins
import datetime
import decimal
import enum
import inspect
import sys
import uuid
from typing import Any, ClassVar, Collection, Type, TypeVar, Union

import typtree.util as util
from typtree.compat import (
    UNION_TYPES,
    Annotated,
    TypeGuard,
    get_origin,
    lru_cache,
)
from typtree.core.annotations import Ignore, ReadOnly

ObjectT = TypeVar("ObjectT")
"""A type-alias for a python object.

Used in place of :py:class:`Any` for better type-hinting.
"""

__all__ = (
    "BUILTIN_TYPES",
    "isannotated",
    "isbuiltinsubtype",
    "isbuiltintype",
    "isclassvartype",
    "iscollectiontype",
    "isdatetimetype",
    "isdatetype",
    "isdecimaltype",
    "isenumtype",
    "isignored",
    "isoptionaltype",
    "isproperty",
    "isreadonly",
    "isstructuredtype",
    "isuniontype",
    "isuuidtype",
)


# Here we are with a manually-defined set of builtin-types.
# This probably won't break anytime soon, but we shall see...
BuiltInTypeT = Union[
    int, bool, float, str, bytes, bytearray, list, set, frozenset, tuple, dict, None
]
BUILTIN_TYPES = frozenset(
    (type(None), *(t for t in BuiltInTypeT.__args__ if t is not None))  # type: ignore
)
BUILTIN_TYPES_TUPLE = tuple(BUILTIN_TYPES)
_SEQUENCE_TYPES = (list, tuple, set, frozenset)
_TEXT_TYPES = (str, bytes, bytearray)
_STDLIB_MODULES = frozenset(
    {"builtins", "typing", *getattr(sys, "stdlib_module_names", ())}
)


def _issubclass(o: Any, t) -> bool:
    return inspect.isclass(o) and builtins.issubclass(o, t)


@lru_cache(maxsize=None)
def isbuiltintype(obj: Type[ObjectT]) -> TypeGuard[Type[BuiltInTypeT]]:
    """Check whether the provided object is a builtin-type.

    Examples
    --------
    >>> import typtree
    >>> from typing import NewType, Mapping
    >>> typtree.isbuiltintype(str)
    True
    >>> typtree.isbuiltintype(NewType("MyStr", str))
    True
    >>> class Foo: ...
    ...
    >>> typtree.isbuiltintype(Foo)
    False
    >>> typtree.isbuiltintype(Mapping)
    False
    """
    return (
        util.resolve_supertype(obj) in BUILTIN_TYPES
        or util.resolve_supertype(type(obj)) in BUILTIN_TYPES
    )


@lru_cache(maxsize=None)
def isbuiltinsubtype(t: Type[ObjectT]) -> TypeGuard[Type[BuiltInTypeT]]:
    """Check whether the provided type is a subclass of a builtin-type.

    Examples
    --------
    >>> import typtree
    >>> class SuperStr(str): ...
    ...
    >>> typtree.isbuiltinsubtype(SuperStr)
    True
    >>> class Foo: ...
    ...
    >>> typtree.isbuiltinsubtype(Foo)
    False
    """
    return _issubclass(util.resolve_supertype(t), BUILTIN_TYPES_TUPLE)


@lru_cache(maxsize=None)
def isuniontype(obj: Type[ObjectT]) -> TypeGuard[Union]:
    return get_origin(obj) in UNION_TYPES


@lru_cache(maxsize=None)
def isoptionaltype(obj: Type[ObjectT]) -> bool:
    """Test whether an annotation is :py:class`typing.Optional`, or can be treated as.

    Examples
    --------
    >>> import typtree
    >>> from typing import Optional, Union, Dict
    >>> typtree.isoptionaltype(Optional[str])
    True
    >>> typtree.isoptionaltype(Union[str, None])
    True
    >>> typtree.isoptionaltype(Dict[str, None])
    False
    """
    return isuniontype(obj) and type(None) in util.get_args(obj)


@lru_cache(maxsize=None)
def isannotated(obj: Type[ObjectT]) -> bool:
    return get_origin(obj) is Annotated


@lru_cache(maxsize=None)
def isclassvartype(obj: Type[ObjectT]) -> TypeGuard[ClassVar]:
    """Test whether an annotation is a ClassVar annotation.

    Examples
    --------
    >>> import typtree
    >>> from typing import ClassVar
    >>> typtree.isclassvartype(ClassVar[str])
    True
    >>> typtree.isclassvartype(str)
    False
    """
    return obj is ClassVar or get_origin(obj) is ClassVar


@lru_cache(maxsize=None)
def isreadonly(obj: Type[ObjectT]) -> TypeGuard[ReadOnly]:
    """Test whether an annotation is marked as :py:class:`typtree.ReadOnly`

    Examples
    --------
    >>> import typtree
    >>> from typing import NewType
    >>> typtree.isreadonly(typtree.ReadOnly[str])
    True
    >>> typtree.isreadonly(NewType("Foo", typtree.ReadOnly[str]))
    True
    """
    return util.origin(obj) is ReadOnly


@lru_cache(maxsize=None)
def isignored(obj: Type[ObjectT]) -> TypeGuard[Ignore]:
    """Test whether an annotation is marked as :py:class:`typtree.Ignore`

    Examples
    --------
    >>> import typtree
    >>> typtree.isignored(typtree.Ignore[str])
    True
    >>> typtree.isignored(str)
    False
    """
    return util.origin(obj) is Ignore


@lru_cache(maxsize=None)
def isenumtype(obj: Type[ObjectT]) -> TypeGuard[Type[enum.Enum]]:
    return _issubclass(util.origin(obj), enum.Enum)


@lru_cache(maxsize=None)
def isdatetimetype(obj: Type[ObjectT]) -> TypeGuard[Type[datetime.datetime]]:
    """Test whether this annotation is a datetime object.

    Examples
    --------
    >>> import typtree
    >>> import datetime
    >>> typtree.isdatetimetype(datetime.datetime)
    True
    >>> typtree.isdatetimetype(datetime.date)
    False
    """
    return _issubclass(util.origin(obj), datetime.datetime)


@lru_cache(maxsize=None)
def isdatetype(obj: Type[ObjectT]) -> TypeGuard[Type[datetime.date]]:
    """Test whether this annotation is a date (and only a date).

    Examples
    --------
    >>> import typtree
    >>> import datetime
    >>> typtree.isdatetype(datetime.date)
    True
    >>> typtree.isdatetype(datetime.datetime)
    False
    """
    o = util.origin(obj)
    return _issubclass(o, datetime.date) and not _issubclass(o, datetime.datetime)


@lru_cache(maxsize=None)
def isuuidtype(obj: Type[ObjectT]) -> TypeGuard[Type[uuid.UUID]]:
    """Test whether this annotation is a subclass of :py:class:`uuid.UUID`.

    Examples
    --------
    >>> import typtree
    >>> import uuid
    >>> typtree.isuuidtype(uuid.UUID)
    True
    """
    return _issubclass(util.origin(obj), uuid.UUID)


@lru_cache(maxsize=None)
def isdecimaltype(obj: Type[ObjectT]) -> TypeGuard[Type[decimal.Decimal]]:
    return _issubclass(util.origin(obj), decimal.Decimal)


@lru_cache(maxsize=None)
def iscollectiontype(obj: Type[ObjectT]) -> TypeGuard[Type[Collection]]:
    """Test whether this annotation describes a sequence of items.

    Text and mappings are collections too, but never sequences of document nodes.

    Examples
    --------
    >>> import typtree
    >>> from typing import List, Tuple, Sequence, Dict
    >>> typtree.iscollectiontype(List[int])
    True
    >>> typtree.iscollectiontype(Sequence[str])
    True
    >>> typtree.iscollectiontype(str)
    False
    >>> typtree.iscollectiontype(Dict[str, int])
    False
    """
    o = util.origin(obj)
    return _issubclass(o, _SEQUENCE_TYPES) and not _issubclass(o, _TEXT_TYPES)


@lru_cache(maxsize=None)
def isstructuredtype(obj: Type[ObjectT]) -> bool:
    """Test whether this annotation is a user-defined class we can populate.

    Examples
    --------
    >>> import typtree
    >>> class Foo:
    ...     bar: str
    ...
    >>> typtree.isstructuredtype(Foo)
    True
    >>> typtree.isstructuredtype(dict)
    False
    >>> import datetime
    >>> typtree.isstructuredtype(datetime.time)
    False
    """
    o = util.origin(obj)
    return (
        inspect.isclass(o)
        and not isbuiltinsubtype(o)
        and o.__module__.partition(".")[0] not in _STDLIB_MODULES
        and not _issubclass(o, (enum.Enum, datetime.date, uuid.UUID, decimal.Decimal))
        and _hasmembers(o)
    )


def _hasmembers(o: type) -> bool:
    for base in o.__mro__:
        if getattr(base, "__annotations__", None):
            return True
        if any(isproperty(v) and v.fset for v in vars(base).values()):
            return True
    return False


def isproperty(obj) -> TypeGuard[property]:
    return builtins.isinstance(obj, property)
