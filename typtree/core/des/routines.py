from __future__ import annotations

import dataclasses
import decimal
import enum
import uuid
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Generic,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    cast,
)

from typtree.core import constants, dates
from typtree.core.context import DeserializationContext
from typtree.core.errors import CoercionFailure
from typtree.core.strings import canonical
from typtree.util import get_name, slotted

if TYPE_CHECKING:  # pragma: nocover
    from typtree.core.interfaces import CoercerT


__all__ = (
    "BaseCoercerRoutine",
    "BooleanCoercerRoutine",
    "DateCoercerRoutine",
    "DateTimeCoercerRoutine",
    "DecimalCoercerRoutine",
    "EnumCoercerRoutine",
    "FloatCoercerRoutine",
    "IntegerCoercerRoutine",
    "TextCoercerRoutine",
    "UUIDCoercerRoutine",
    "UserCoercerRoutine",
)

_T = TypeVar("_T")
_CheckT = Callable[[Optional[str]], Tuple[Any, bool]]
_ConvertT = Callable[[str, DeserializationContext], Any]

_DEFAULT_CONTEXT = DeserializationContext()
_COERCION_ERRORS = (TypeError, ValueError, ArithmeticError)


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class BaseCoercerRoutine(Generic[_T]):
    """Build a coercer which converts raw text to a single target type.

    Empty text is settled by the checks and never reaches the conversion: a
    nullable target gets ``None``, anything else gets
    :py:class:`~typtree.core.constants.empty` so the caller keeps its default.
    """

    annotation: type
    nullable: bool = False

    def coercer(self) -> CoercerT[_T]:
        check = self._get_checks()
        convert = self._get_converter()

        def coercer(
            raw: Optional[str],
            context: Optional[DeserializationContext] = None,
            *,
            __check=check,
            __convert=convert,
            __target=self.annotation,
            __default=_DEFAULT_CONTEXT,
        ) -> _T:
            value, done = __check(raw)
            if done:
                return value
            try:
                return __convert(value, context or __default)
            except CoercionFailure:
                raise
            except _COERCION_ERRORS as e:
                raise CoercionFailure(None, raw, __target) from e

        name = f"coerce_{get_name(self.annotation)}"
        coercer.__name__ = coercer.__qualname__ = name
        return cast("CoercerT", coercer)

    def _get_converter(self) -> _ConvertT:
        ...

    def _get_checks(self) -> _CheckT:
        if self.nullable:

            def check_nullable(raw: Optional[str]) -> Tuple[Any, bool]:
                if raw is None:
                    return None, True
                text = raw.strip()
                return (None, True) if not text else (text, False)

            return check_nullable

        def check_empty(
            raw: Optional[str], *, __empty=constants.empty
        ) -> Tuple[Any, bool]:
            if raw is None:
                return __empty, True
            text = raw.strip()
            return (__empty, True) if not text else (text, False)

        return check_empty


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class TextCoercerRoutine(BaseCoercerRoutine[_T]):
    """Text passes through untouched; empty text is an empty string."""

    def _get_checks(self) -> _CheckT:
        empty = None if self.nullable else self.annotation()

        def check_text(raw: Optional[str], *, __empty=empty) -> Tuple[Any, bool]:
            if not raw:
                return __empty, True
            return raw, False

        return check_text

    def _get_converter(self) -> _ConvertT:
        if self.annotation is str:

            def convert_str(text: str, context: DeserializationContext) -> str:
                return text

            return convert_str

        def convert_text(
            text: str, context: DeserializationContext, *, __origin=self.annotation
        ):
            return __origin(text)

        return convert_text


_TRUTHY = frozenset({"true", "1"})
_FALSY = frozenset({"false", "0"})


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class BooleanCoercerRoutine(BaseCoercerRoutine[bool]):
    def _get_converter(self) -> _ConvertT:
        def convert_bool(
            text: str,
            context: DeserializationContext,
            *,
            __truthy=_TRUTHY,
            __falsy=_FALSY,
        ) -> bool:
            token = text.lower()
            if token in __truthy:
                return True
            if token in __falsy:
                return False
            raise ValueError(f"{text!r} is not a boolean.")

        return convert_bool


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class _NumberCoercerRoutine(BaseCoercerRoutine[_T]):
    """Numbers are normalized with the context's culture before parsing."""

    def _get_converter(self) -> _ConvertT:
        def convert_number(
            text: str, context: DeserializationContext, *, __origin=self.annotation
        ):
            number = context.culture.normalize_number(text)
            if "_" in number:
                raise ValueError(f"{text!r} is not a number.")
            return __origin(number)

        return convert_number


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class IntegerCoercerRoutine(_NumberCoercerRoutine[int]):
    ...


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class FloatCoercerRoutine(_NumberCoercerRoutine[float]):
    ...


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class DecimalCoercerRoutine(_NumberCoercerRoutine[decimal.Decimal]):
    def _get_converter(self) -> _ConvertT:
        convert_number = _NumberCoercerRoutine._get_converter(self)

        def convert_decimal(
            text: str, context: DeserializationContext, *, __convert=convert_number
        ) -> decimal.Decimal:
            value = __convert(text, context)
            if not value.is_finite():
                raise ValueError(f"{text!r} is not a finite decimal.")
            return value

        return convert_decimal


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class UUIDCoercerRoutine(BaseCoercerRoutine[uuid.UUID]):
    def _get_converter(self) -> _ConvertT:
        def convert_uuid(
            text: str, context: DeserializationContext, *, __origin=self.annotation
        ) -> uuid.UUID:
            return __origin(text)

        return convert_uuid


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class DateTimeCoercerRoutine(BaseCoercerRoutine[_T]):
    """Date-times honor the context's format, or its culture when there is none."""

    def _get_converter(self) -> _ConvertT:
        def convert_datetime(
            text: str, context: DeserializationContext, *, __parse=dates.parse_datetime
        ):
            return __parse(text, fmt=context.date_format, culture=context.culture)

        return convert_datetime


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class DateCoercerRoutine(BaseCoercerRoutine[_T]):
    def _get_converter(self) -> _ConvertT:
        def convert_date(
            text: str, context: DeserializationContext, *, __parse=dates.parse_date
        ):
            return __parse(text, fmt=context.date_format, culture=context.culture)

        return convert_date


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class EnumCoercerRoutine(BaseCoercerRoutine[enum.Enum]):
    """Enum members are found by value first, then by canonical name."""

    def _get_lookups(self) -> Tuple[Mapping[str, Any], Mapping[str, Any]]:
        members = self.annotation.__members__.items()
        by_value = {str(m.value): m for _, m in members}
        by_name = {canonical(name): m for name, m in members}
        return by_value, by_name

    def _get_converter(self) -> _ConvertT:
        by_value, by_name = self._get_lookups()

        def convert_enum(
            text: str,
            context: DeserializationContext,
            *,
            __by_value=by_value,
            __by_name=by_name,
            __canonical=canonical,
            __origin=self.annotation,
        ):
            if text in __by_value:
                return __by_value[text]
            name = __canonical(text)
            if name in __by_name:
                return __by_name[name]
            raise ValueError(f"{text!r} is not a valid {__origin.__name__}.")

        return convert_enum


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class UserCoercerRoutine(BaseCoercerRoutine[_T]):
    """Wrap a registered coercer with the standard empty and null handling."""

    user: Optional[Callable[..., Any]] = None

    def _get_converter(self) -> _ConvertT:
        def convert_user(
            text: str, context: DeserializationContext, *, __user=self.user
        ):
            return __user(text, context)

        return convert_user
