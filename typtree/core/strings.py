from __future__ import annotations

import inflection

from typtree.compat import lru_cache
from typtree.core.constants import SEPARATOR

__all__ = ("canonical", "matches")


@lru_cache(maxsize=4096)
def canonical(name: str, *, separator: str = SEPARATOR) -> str:
    """Fold a member or node name into the form used for matching.

    Hyphens are treated as separators, then all separators are removed and the
    result is upper-cased.

    Examples
    --------
    >>> from typtree.core.strings import canonical
    >>> canonical("StartDate")
    'STARTDATE'
    >>> canonical("start_date")
    'STARTDATE'
    >>> canonical("Start-Date")
    'STARTDATE'
    """
    return inflection.underscore(name).replace(separator, "").upper()


def matches(member_name: str, node_name: str, *, separator: str = SEPARATOR) -> bool:
    """Check whether a member name and a node name refer to the same thing.

    Examples
    --------
    >>> from typtree.core.strings import matches
    >>> matches("StartDate", "START_DATE")
    True
    >>> matches("is_cool", "IsCool")
    True
    >>> matches("Start", "StartDate")
    False
    """
    return canonical(member_name, separator=separator) == canonical(
        node_name, separator=separator
    )
