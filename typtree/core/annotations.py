from typing import Any, Generic, Type, TypeVar, Union

AnyOrTypeT = Union[Type, Any]
ObjectT = TypeVar("ObjectT")
"""A generic alias for an object."""

T = TypeVar("T")


class ReadOnly(Generic[T]):
    """A type annotation to indicate a member is never written from a document."""

    pass


class Ignore(Generic[T]):
    """A type annotation to indicate a member takes no part in deserialization."""

    pass
