from __future__ import annotations

from typing import Any, Optional

__all__ = (
    "CoercionFailure",
    "DocumentMalformed",
    "TypTreeError",
    "UnsupportedMemberType",
)


class TypTreeError(Exception):
    """The base error for every failure raised by typtree."""


class DocumentMalformed(TypTreeError, ValueError):
    """The parser could not produce a node tree from the provided document."""


class CoercionFailure(TypTreeError, ValueError):
    """A present, non-empty value could not be converted to its declared type."""

    def __init__(self, member: Optional[str], raw: str, target: Any):
        self.member = member
        self.raw = raw
        self.target = target
        name = getattr(target, "__name__", None) or repr(target)
        where = f" for member {member!r}" if member else ""
        super().__init__(f"Couldn't coerce {raw!r} to {name}{where}.")

    def __reduce__(self):
        return self.__class__, (self.member, self.raw, self.target)


class UnsupportedMemberType(TypTreeError, TypeError):
    """A member's annotation has no coercion or recursion rule."""

    def __init__(self, owner: Any, member: str, annotation: Any):
        self.owner = owner
        self.member = member
        self.annotation = annotation
        super().__init__(
            f"Member {member!r} of {getattr(owner, '__qualname__', owner)!r} is "
            f"annotated with {annotation!r}, which can't be built from a document."
        )

    def __reduce__(self):
        return self.__class__, (self.owner, self.member, self.annotation)
