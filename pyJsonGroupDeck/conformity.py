"""Length conformity between command lists and their delay lists.

*n* commands need *n - 1* delays for the gaps between them.  A delay list
that is too short is padded at the tail with a default delay; one that is
too long is left alone.
"""

from __future__ import annotations

from typing import Any, List, Sequence

#: Default gap (milliseconds) appended when a delay list is too short.
DEFAULT_DELAY_MS: int = 500


def check_length_conformity(items: Sequence[Any], delays: Sequence[Any]) -> bool:
    """Return ``True`` when *delays* fits *items*.

    Lists with zero or one item always conform.
    """
    if len(items) > 1 and len(items) != len(delays) + 1:
        return False
    return True


def enforce_length_conformity(
    items: Sequence[Any],
    delays: List[Any],
    default_delay: Any = DEFAULT_DELAY_MS,
) -> None:
    """Pad *delays* in place so that it covers every gap in *items*.

    Never truncates: an over-long delay list passes through unchanged.
    """
    if check_length_conformity(items, delays):
        return
    missing = len(items) - 1 - len(delays)
    for _ in range(missing):
        delays.append(default_delay)
