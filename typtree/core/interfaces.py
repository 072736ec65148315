from __future__ import annotations

import dataclasses
import enum
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Deque,
    FrozenSet,
    Iterable,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from typtree import util
from typtree.compat import Protocol

if TYPE_CHECKING:  # pragma: nocover
    from typtree.core.context import DeserializationContext

__all__ = (
    "CoercerCheckT",
    "CoercerRegistryT",
    "CoercerT",
    "FieldSettingsT",
    "Kind",
    "SerdeFlags",
)

_OutputT = TypeVar("_OutputT", covariant=True)


class Kind(str, enum.Enum):
    """The closed set of member kinds we know how to populate.

    Scalar kinds are converted from text by a coercer. ``NESTED`` and ``SEQUENCE``
    are built from document nodes.
    """

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOATING = "floating"
    DECIMAL = "decimal"
    UUID = "uuid"
    DATETIME = "datetime"
    DATE = "date"
    ENUM = "enum"
    USER = "user"
    NESTED = "nested"
    SEQUENCE = "sequence"

    @property
    def isscalar(self) -> bool:
        return self not in {Kind.NESTED, Kind.SEQUENCE}


class CoercerT(Protocol[_OutputT]):
    """The signature of a text coercer.

    ``raw`` is ``None`` when the source node carried no text at all. ``context``
    is ``None`` for the invariant culture and no custom date format.
    """

    __name__: str
    __qualname__: str

    def __call__(
        self, raw: Optional[str], context: Optional[DeserializationContext] = None
    ) -> _OutputT:
        ...


CoercerCheckT = Callable[[Type[Any]], bool]
"""A type alias for the expected signature of a type-check for a coercer.

Type-checks should return a boolean indicating whether the provided type is valid
for a given coercer.
"""
CoercerRegistryT = Deque[Tuple[CoercerCheckT, CoercerT]]
"""A stack of user-defined coercers and their type-checks."""

FieldSettingsT = Mapping[str, str]
"""A mapping of member name -> document node name."""


@util.slotted(dict=False)
@dataclasses.dataclass(frozen=True)
class SerdeFlags:
    """Optional settings for building a class from a document.

    Attach to a class as ``__serde_flags__``.

    Examples
    --------
    >>> import typtree
    >>> class Person:
    ...     __serde_flags__ = typtree.flags(
    ...         fields={"name": "FullName"}, exclude=("secret",)
    ...     )
    ...     name: str
    ...     secret: str
    ...
    >>> Person.__serde_flags__.fields["name"]
    'FullName'
    >>> "secret" in Person.__serde_flags__.exclude
    True
    """

    fields: FieldSettingsT
    """Map a member to the document node name it should be read from."""
    exclude: FrozenSet[str]
    """Provide a set of members which will never be populated."""

    def __init__(
        self,
        *,
        fields: Optional[FieldSettingsT] = None,
        exclude: Optional[Iterable[str]] = None,
    ):
        object.__setattr__(self, "fields", {**(fields or {})})
        object.__setattr__(self, "exclude", frozenset(exclude or ()))
