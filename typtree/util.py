from __future__ import annotations

import collections.abc
import dataclasses
import inspect
import sys
import typing
import warnings
from typing import (  # type: ignore  # ironic...
    AbstractSet,
    Any,
    Callable,
    Collection,
    Dict,
    Iterable,
    MutableSequence,
    MutableSet,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
    _eval_type,
    get_type_hints as _get_type_hints,
)

import typtree.checks as checks
from typtree.compat import ForwardRef, get_origin, lru_cache

__all__ = (
    "cached_signature",
    "cached_type_hints",
    "get_args",
    "get_item_type",
    "get_name",
    "get_qualname",
    "get_type_hints",
    "origin",
    "resolve_supertype",
    "signature",
    "slotted",
    "unwrap",
)


GENERIC_TYPE_MAP = {
    Sequence: list,
    MutableSequence: list,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    Collection: list,
    collections.abc.Collection: list,
    Iterable: list,
    collections.abc.Iterable: list,
    AbstractSet: set,
    MutableSet: set,
    collections.abc.Set: set,
    collections.abc.MutableSet: set,
}


def _check_generics(hint: Any):
    return GENERIC_TYPE_MAP.get(hint, hint)


@lru_cache(maxsize=None)
def origin(annotation: Any) -> Any:
    """Get the highest-order 'origin'-type for subclasses of typing._SpecialForm.

    For the purposes of this library, if we can resolve to a builtin type, we will.

    Examples
    --------
    >>> from typtree import util
    >>> from typing import List, Sequence, NewType
    >>> util.origin(List[int])
    <class 'list'>
    >>> util.origin(Sequence)
    <class 'list'>
    >>> Names = NewType('Names', List[str])
    >>> util.origin(Names)
    <class 'list'>
    """
    # Resolve custom NewTypes.
    actual = resolve_supertype(annotation)

    # Unwrap classvar
    if checks.isclassvartype(actual):
        args = get_args(actual)
        actual = args[0] if args else actual

    actual = get_origin(actual) or actual

    # provide defaults for generics
    if not checks.isbuiltintype(actual):
        actual = _check_generics(actual)

    return actual


@lru_cache(maxsize=None)
def get_args(annotation: Any) -> Tuple[Any, ...]:
    """Get the args supplied to an annotation, excluding :py:class:`typing.TypeVar`.

    Examples
    --------
    >>> from typtree import util
    >>> from typing import Dict, TypeVar
    >>> T = TypeVar("T")
    >>> util.get_args(Dict)
    ()
    >>> util.get_args(Dict[str, int])
    (<class 'str'>, <class 'int'>)
    >>> util.get_args(Dict[str, T])
    (<class 'str'>,)
    """
    return (
        *(x for x in getattr(annotation, "__args__", ()) if type(x) is not TypeVar),
    )


@lru_cache(maxsize=None)
def unwrap(annotation: Any) -> Tuple[Any, bool]:
    """Strip ``Optional``, ``Annotated`` and ``NewType`` from an annotation.

    Returns the inner annotation and whether it was nullable.

    Examples
    --------
    >>> from typtree import util
    >>> from typing import Optional, List
    >>> util.unwrap(Optional[int])
    (<class 'int'>, True)
    >>> util.unwrap(List[int])
    (typing.List[int], False)
    """
    nullable = False
    while True:
        annotation = resolve_supertype(annotation)
        if checks.isannotated(annotation):
            annotation = annotation.__origin__
            continue
        if checks.isoptionaltype(annotation):
            nullable = True
            args = (*(a for a in get_args(annotation) if a is not type(None)),)
            annotation = args[0] if len(args) == 1 else Union[args]
            continue
        return annotation, nullable


@lru_cache(maxsize=None)
def get_item_type(annotation: Any) -> Any:
    """Get the declared item type of a sequence annotation.

    User-defined subclasses of a subscripted builtin are searched through their
    generic bases.

    Examples
    --------
    >>> from typtree import util
    >>> from typing import List, Tuple
    >>> util.get_item_type(List[int])
    <class 'int'>
    >>> util.get_item_type(Tuple[str, ...])
    <class 'str'>
    >>> class Names(List[str]): ...
    ...
    >>> util.get_item_type(Names)
    <class 'str'>
    >>> util.get_item_type(list)
    typing.Any
    """
    args = get_args(annotation)
    if args:
        return args[0]
    if inspect.isclass(annotation):
        for base in annotation.__mro__:
            for generic in getattr(base, "__orig_bases__", ()):
                if checks.iscollectiontype(origin(generic)) and get_args(generic):
                    return get_args(generic)[0]
    return Any


@lru_cache(maxsize=None)
def get_name(obj: Union[Type, ForwardRef, Callable]) -> str:
    """Safely retrieve the name of either a standard object or a type annotation.

    Examples
    --------
    >>> from typtree import util
    >>> from typing import Dict, Any
    >>> util.get_name(Dict)
    'Dict'
    >>> util.get_name(Dict[str, str])
    'Dict'
    >>> util.get_name(Any)
    'Any'
    >>> util.get_name(dict)
    'dict'
    """
    strobj = get_qualname(obj)
    return strobj.rsplit(".")[-1]


@lru_cache(maxsize=None)
def get_qualname(obj: Union[Type, ForwardRef, Callable]) -> str:
    """Safely retrieve the qualname of either a standard object or a type annotation.

    Examples
    --------
    >>> from typtree import util
    >>> from typing import Dict, Any
    >>> util.get_qualname(Dict)
    'typing.Dict'
    >>> util.get_qualname(Dict[str, str])
    'typing.Dict'
    >>> util.get_qualname(Any)
    'typing.Any'
    >>> util.get_qualname(dict)
    'dict'
    """
    strobj = str(obj)
    if isinstance(obj, ForwardRef):
        strobj = str(obj.__forward_arg__)
    isgeneric = (
        strobj.startswith("typing.")
        or strobj.startswith("typing_extensions.")
        or "[" in strobj
    )
    # We got a typing thing.
    if isgeneric:
        # If this is a subscripted generic we should clean that up.
        return strobj.split("[")[0]
    # Easy-ish path, use name magix
    if hasattr(obj, "__qualname__") and obj.__qualname__:  # type: ignore
        qualname = obj.__qualname__  # type: ignore
        if "<locals>" in qualname:
            return qualname.rsplit(".")[-1]
        return qualname
    if hasattr(obj, "__name__") and obj.__name__:  # type: ignore
        return obj.__name__  # type: ignore
    return strobj


@lru_cache(maxsize=None)
def resolve_supertype(annotation: Type[Any]) -> Any:
    """Get the highest-order supertype for a NewType.

    Examples
    --------
    >>> from typtree import util
    >>> from typing import NewType
    >>> UserID = NewType("UserID", int)
    >>> AdminID = NewType("AdminID", UserID)
    >>> util.resolve_supertype(AdminID)
    <class 'int'>
    """
    while hasattr(annotation, "__supertype__"):
        annotation = annotation.__supertype__
    return annotation


def signature(obj: Union[Callable, Type]) -> inspect.Signature:
    return inspect.signature(obj)


cached_signature = lru_cache(maxsize=None)(signature)


def _safe_get_type_hints(annotation: Union[Type, Callable]) -> Dict[str, Type[Any]]:
    raw_annotations: Dict[str, Any] = {}
    base_globals: Dict[str, Any] = {"typing": typing}
    if isinstance(annotation, type):
        for base in reversed(annotation.__mro__):
            base_globals.update(sys.modules[base.__module__].__dict__)
            raw_annotations.update(getattr(base, "__annotations__", None) or {})
    else:
        raw_annotations = getattr(annotation, "__annotations__", None) or {}
        module_name = getattr(annotation, "__module__", None)
        if module_name:
            base_globals.update(sys.modules[module_name].__dict__)
    annotations = {}
    for name, value in raw_annotations.items():
        try:
            if isinstance(value, str):
                value = ForwardRef(value, is_argument=False)
            value = _eval_type(value, base_globals or None, None)
        except (NameError, SyntaxError, TypeError) as e:
            warnings.warn(f"Couldn't evaluate type {value!r}: {e}")
            value = Any
        annotations[name] = value
    return annotations


def get_type_hints(obj: Union[Type, Callable]) -> Dict[str, Type[Any]]:
    try:
        return _get_type_hints(obj, include_extras=True)
    except (NameError, TypeError):
        return _safe_get_type_hints(obj)


cached_type_hints = lru_cache(maxsize=None)(get_type_hints)


def slotted(
    _cls: Type = None,
    *,
    dict: bool = True,
    weakref: bool = False,
):
    """Decorator to create a "slotted" version of the provided class.

    Returns new class object as it's not possible to add __slots__ after class creation.

    Source: https://github.com/starhel/dataslots/blob/master/dataslots/__init__.py
    """

    def _slots_setstate(self, state):
        for param_dict in filter(None, state):
            for slot, value in param_dict.items():
                object.__setattr__(self, slot, value)

    def wrap(cls):
        cls_dict = {**cls.__dict__}
        # Create only missing slots
        inherited_slots = set().union(
            *(getattr(c, "__slots__", set()) for c in cls.mro())
        )

        field_names = {f.name for f in dataclasses.fields(cls)}
        if dict:
            field_names.add("__dict__")
        if weakref:
            field_names.add("__weakref__")
        cls_dict["__slots__"] = (*(field_names - inherited_slots),)

        # Erase field names from class __dict__
        for f in field_names:
            cls_dict.pop(f, None)

        # Erase __dict__ and __weakref__
        cls_dict.pop("__dict__", None)
        cls_dict.pop("__weakref__", None)

        # Pickle fix for frozen dataclass as mentioned in https://bugs.python.org/issue36424
        # Use only if __getstate__ and __setstate__ are not declared and frozen=True
        if (
            all(param not in cls_dict for param in ["__getstate__", "__setstate__"])
            and cls.__dataclass_params__.frozen
        ):
            cls_dict["__setstate__"] = _slots_setstate

        # Prepare new class with slots
        new_cls = cls.__class__(cls.__name__, cls.__bases__, cls_dict)
        new_cls.__qualname__ = cls.__qualname__
        new_cls.__module__ = cls.__module__
        return new_cls

    return wrap if _cls is None else wrap(_cls)

