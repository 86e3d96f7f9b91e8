"""Parsing of ``<integer><unit>`` lifetimes such as ``15m`` or ``7d``."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Final

log = logging.getLogger(__name__)

#: Lifetime applied when the unit suffix is not one of ``s``, ``m``, ``h``, ``d``.
FALLBACK_LIFETIME: Final[timedelta] = timedelta(days=7)

_UNITS: Final[dict[str, str]] = {
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


def parse_duration(text: str) -> timedelta:
    """
    Convert a lifetime string into a :class:`~datetime.timedelta`.

    The last character is the unit, everything before it the amount:
    ``"30s"``, ``"15m"``, ``"12h"``, ``"7d"``.

    An unknown unit (``"15x"``, ``"2w"``) yields :data:`FALLBACK_LIFETIME`
    and logs a warning instead of failing, so existing deployments keep
    their current token lifetimes.

    :param text: Lifetime string.
    :returns: Parsed duration.
    :raises ValueError: If the amount is not an integer.
    """
    raw = text.strip()
    unit = raw[-1:]
    try:
        amount = int(raw[:-1])
    except ValueError:
        raise ValueError(f"Invalid duration {text!r}: expected '<integer><s|m|h|d>'.") from None

    field = _UNITS.get(unit)
    if field is None:
        log.warning(
            "Unrecognized duration unit in %r; falling back to %s.", text, FALLBACK_LIFETIME
        )
        return FALLBACK_LIFETIME
    return timedelta(**{field: amount})
