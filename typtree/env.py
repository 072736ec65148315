from __future__ import annotations

import os
from typing import Any, Callable, Mapping, Optional, Type, TypeVar

from typtree.core import constants
from typtree.core.context import DeserializationContext
from typtree.core.des.factory import CoercerFactory, coercers
from typtree.core.errors import CoercionFailure
from typtree.util import get_name

__all__ = (
    "Environ",
    "EnvironmentTypeError",
    "EnvironmentValueError",
    "context",
    "environ",
)

_ET = TypeVar("_ET")


class EnvironmentValueError(ValueError):
    ...


class EnvironmentTypeError(TypeError):
    ...


class Environ:
    """A proxy for the os.environ which allows for getting typed values.

    Examples
    --------
    >>> import os
    >>> from typtree.env import environ
    >>> os.environ["TYPTREE_EXAMPLE_PORT"] = "8080"
    >>> environ.int("TYPTREE_EXAMPLE_PORT")
    8080
    >>> environ.str("TYPTREE_EXAMPLE_MISSING", default=None) is None
    True
    """

    def __init__(self, factory: CoercerFactory):
        self.factory = factory
        for t in (str, int, float, bool):
            self.register(t)

    def __contains__(self, item):
        return os.environ.__contains__(item)

    def __getitem__(self, item):
        return os.environ.__getitem__(item)

    def register(self, t: Type[_ET], *aliases: str, name: str = None):
        """Register a typed getter for the target type `t`."""
        name = name or get_name(t)
        if name in self.__dict__:
            return self.__dict__[name]

        kind = self.factory.kind(t)
        if kind is None or not kind.isscalar:
            raise EnvironmentTypeError(
                f"Can't coerce to target {name!r} with t: {t!r}."
            ) from None

        def get(var: str, *, ci: bool = True, default: _ET = ...):  # type: ignore
            return self.getenv(var, default, *aliases, t=t, ci=ci)

        setattr(self, name, get)
        return get

    def getenv(
        self,
        var: str,
        default: _ET = ...,  # type: ignore
        *aliases: str,
        t: Type[_ET] = str,  # type: ignore
        ci: bool = True,
    ) -> _ET:
        """Get the value of an Environment Variable.

        Keyword Args:
            t: The type to coerce the value to.
            ci: Whether the variable should be considered case-insensitive.
        """
        names = {*aliases}
        environ: Mapping[str, str] = os.environ
        if ci:
            var = var.lower()
            names = {v.lower() for v in aliases}
            environ = {k.lower(): value for k, value in os.environ.items()}
        value = environ.get(var, default)
        if value is default and names:
            value = next((environ[k] for k in environ.keys() & names), default)
        if value is ...:
            raise EnvironmentValueError(
                f"{var!r} should be of {t!r}, got nothing."
            ) from None
        if value is default:
            return value  # type: ignore
        coerce = self.factory.factory(Optional[t])
        try:
            return coerce(value)
        except CoercionFailure as err:
            raise EnvironmentValueError(
                f"Couldn't parse <{var}:{value}> to {t!r}: {err}."
            ) from None


environ = Environ(coercers)


_OPTIONS: Mapping[str, Callable[..., Any]] = {
    "date_format": environ.str,
    "culture": environ.str,
    "root_element": environ.str,
    "namespace": environ.str,
}


def context(**overrides: Any) -> DeserializationContext:
    """Build a :py:class:`~typtree.DeserializationContext` from the environment.

    Each option is read from ``TYPTREE_<OPTION>``, e.g. ``TYPTREE_DATE_FORMAT``.
    Explicit `overrides` win over the environment.
    """
    options = {
        option: get(f"{constants.ENV_PREFIX}{option}", default=None)
        for option, get in _OPTIONS.items()
    }
    options.update(overrides)
    return DeserializationContext(**options)
