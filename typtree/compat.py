# flake8: noqa
# pragma: nocover
from __future__ import annotations

import types
from functools import lru_cache
from typing import ForwardRef, Union

try:
    from typing import Protocol, runtime_checkable  # type: ignore
except ImportError:  # pragma: nocover
    from typing_extensions import Protocol, runtime_checkable  # type: ignore
try:
    from typing import TypeGuard  # type: ignore
except ImportError:  # pragma: nocover
    from typing_extensions import TypeGuard  # type: ignore
try:
    from typing import Annotated  # type: ignore
except ImportError:  # pragma: nocover
    from typing_extensions import Annotated  # type: ignore
try:
    from typing import get_origin, get_args  # type: ignore
except ImportError:  # pragma: nocover
    from typing_extensions import get_origin, get_args  # type: ignore

# `X | Y` unions only exist on 3.10+.
UnionType = getattr(types, "UnionType", Union)
UNION_TYPES = frozenset({Union, UnionType})

__all__ = (
    "Annotated",
    "ForwardRef",
    "Protocol",
    "TypeGuard",
    "UNION_TYPES",
    "UnionType",
    "get_args",
    "get_origin",
    "lru_cache",
    "runtime_checkable",
)
