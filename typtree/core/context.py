from __future__ import annotations

import dataclasses
from typing import Dict, Optional, Union

from typtree import util

__all__ = ("Culture", "DeserializationContext")

_WHITESPACE = {ord(c): None for c in (" ", "\t", "\n", "\r", "\u00a0", "\u202f")}


@util.slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class Culture:
    """The conventions used to read numbers and dates for a locale.

    Examples
    --------
    >>> from typtree import Culture
    >>> Culture.get("de-DE").normalize_number("1.234,5")
    '1234.5'
    >>> Culture().normalize_number("1,234.5")
    '1234.5'
    """

    name: str = "invariant"
    decimal_separator: str = "."
    group_separator: str = ","
    dayfirst: bool = False

    def normalize_number(self, text: str) -> str:
        """Rewrite a localized number into the invariant form Python parses."""
        text = text.translate(_WHITESPACE)
        if self.group_separator:
            text = text.replace(self.group_separator, "")
        if self.decimal_separator != ".":
            text = text.replace(self.decimal_separator, ".")
        return text

    @staticmethod
    def get(name: str) -> Culture:
        """Look up a built-in culture by name, case-insensitively."""
        try:
            return CULTURES[name.lower()]
        except KeyError:
            raise LookupError(
                f"Unknown culture {name!r}. "
                f"Choose one of {sorted(c.name for c in CULTURES.values())}, "
                "or construct a Culture directly."
            ) from None


INVARIANT = Culture()
CULTURES: Dict[str, Culture] = {
    c.name.lower(): c
    for c in (
        INVARIANT,
        Culture("en-US"),
        Culture("en-GB", dayfirst=True),
        Culture("de-DE", decimal_separator=",", group_separator=".", dayfirst=True),
        Culture(
            "fr-FR", decimal_separator=",", group_separator="\u00a0", dayfirst=True
        ),
    )
}


@util.slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class DeserializationContext:
    """The options for one deserialization, threaded through every recursive call.

    Examples
    --------
    >>> from typtree import DeserializationContext
    >>> ctx = DeserializationContext(culture="de-DE")
    >>> ctx.culture.decimal_separator
    ','
    >>> ctx.replace(date_format="yyyy-MM-dd").date_format
    'yyyy-MM-dd'
    """

    date_format: Optional[str] = None
    """A format applied to every date and datetime member."""
    culture: Culture = INVARIANT
    """The culture used for numbers and default date parsing."""
    root_element: Optional[str] = None
    """Start from the first element with this name instead of the document root."""
    namespace: Optional[str] = None
    """Only match elements in this namespace URI."""

    def __init__(
        self,
        date_format: Optional[str] = None,
        culture: Union[Culture, str, None] = None,
        root_element: Optional[str] = None,
        namespace: Optional[str] = None,
    ):
        if culture is None:
            culture = INVARIANT
        elif isinstance(culture, str):
            culture = Culture.get(culture)
        object.__setattr__(self, "date_format", date_format or None)
        object.__setattr__(self, "culture", culture)
        object.__setattr__(self, "root_element", root_element or None)
        object.__setattr__(self, "namespace", namespace or None)

    def replace(self, **changes) -> DeserializationContext:
        """Get a copy of this context with the given options changed."""
        return dataclasses.replace(self, **changes)
