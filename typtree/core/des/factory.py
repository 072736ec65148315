from __future__ import annotations

from collections import deque
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type

from typtree import checks, util
from typtree.core.des import routines
from typtree.core.interfaces import (
    CoercerCheckT,
    CoercerRegistryT,
    CoercerT,
    Kind,
)

__all__ = ("CoercerFactory", "coercers", "register")


class CoercerFactory:
    """Build and cache text coercers for scalar annotations.

    Coercers are built once per (annotation, nullability) and re-used.

    Examples
    --------
    >>> import typtree
    >>> from typing import Optional
    >>> from typtree.core.des.factory import coercers
    >>> coercers.factory(int)("28")
    28
    >>> coercers.factory(Optional[int])("") is None
    True
    >>> coercers.kind(bool)
    <Kind.BOOLEAN: 'boolean'>
    """

    __COERCER_CACHE: Dict[Tuple[Any, bool], CoercerT] = {}
    __USER_COERCERS: CoercerRegistryT = deque()

    def register(self, coercer: Callable[..., Any], check: CoercerCheckT):
        """Register a user-defined coercer.

        When a member's type isn't one typtree knows how to read from text, a
        coercer may be registered alongside a check function which returns a simple
        boolean indicating whether this is the correct coercer for an annotation.

        The coercer is called with the stripped, non-empty text and the current
        :py:class:`~typtree.DeserializationContext`.

        Register your coercers before the first deserialization which needs them.
        """
        self.__USER_COERCERS.appendleft((check, coercer))

    def registered(self, annotation: Type[Any]) -> Optional[Callable[..., Any]]:
        for check, coercer in self.__USER_COERCERS:
            if check(annotation):
                return coercer
        return None

    # Order is IMPORTANT! This is a FIFO queue.
    _KINDS: Mapping[Callable[[Any], bool], Kind] = {
        # Enums may subclass str or int, so must come first.
        checks.isenumtype: Kind.ENUM,
        # A bool is an int so must come before that check.
        lambda origin: issubclass(origin, bool): Kind.BOOLEAN,
        lambda origin: issubclass(origin, int): Kind.INTEGER,
        lambda origin: issubclass(origin, float): Kind.FLOATING,
        checks.isdecimaltype: Kind.DECIMAL,
        lambda origin: issubclass(origin, str): Kind.STRING,
        checks.isuuidtype: Kind.UUID,
        # A datetime is a date so must come before that check.
        checks.isdatetimetype: Kind.DATETIME,
        checks.isdatetype: Kind.DATE,
        checks.iscollectiontype: Kind.SEQUENCE,
        # Catch-all for user-defined classes.
        checks.isstructuredtype: Kind.NESTED,
    }

    _ROUTINES: Mapping[Kind, Type[routines.BaseCoercerRoutine]] = {
        Kind.STRING: routines.TextCoercerRoutine,
        Kind.BOOLEAN: routines.BooleanCoercerRoutine,
        Kind.INTEGER: routines.IntegerCoercerRoutine,
        Kind.FLOATING: routines.FloatCoercerRoutine,
        Kind.DECIMAL: routines.DecimalCoercerRoutine,
        Kind.UUID: routines.UUIDCoercerRoutine,
        Kind.DATETIME: routines.DateTimeCoercerRoutine,
        Kind.DATE: routines.DateCoercerRoutine,
        Kind.ENUM: routines.EnumCoercerRoutine,
        Kind.USER: routines.UserCoercerRoutine,
    }

    def kind(self, annotation: Any) -> Optional[Kind]:
        """Find the kind of member an annotation describes, if any.

        ``Optional`` and ``Annotated`` wrappers are ignored.
        """
        annotation, _ = util.unwrap(annotation)
        if self.registered(annotation) is not None:
            return Kind.USER
        origin = util.origin(annotation)
        if not isinstance(origin, type):
            return None
        for check, kind in self._KINDS.items():
            if check(origin):
                return kind
        return None

    def factory(self, annotation: Any, *, nullable: bool = False) -> CoercerT:
        """Get a coercer for a scalar annotation.

        Raises
        ------
        TypeError
            If the annotation isn't a scalar we can read from text.
        """
        annotation, optional = util.unwrap(annotation)
        nullable = nullable or optional
        key = (annotation, nullable)
        if key in self.__COERCER_CACHE:
            return self.__COERCER_CACHE[key]
        kind = self.kind(annotation)
        if kind is None or not kind.isscalar:
            raise TypeError(f"Can't coerce text to {annotation!r}.")
        routine_cls = self._ROUTINES[kind]
        if kind is Kind.USER:
            routine = routine_cls(
                annotation, nullable, user=self.registered(annotation)
            )
        else:
            routine = routine_cls(util.origin(annotation), nullable)
        coercer = routine.coercer()
        self.__COERCER_CACHE[key] = coercer
        return coercer


coercers = CoercerFactory()
register = coercers.register
