"""
Timeline marker normalisation and ordering.

Recipe authors describe when a step happens in many ways ("T – 48 HOURS",
"T-90m", "Day of", "SERVICE", "Method (T – 24 h)"...). All timeline markers
are normalised into a small canonical vocabulary:

* ``T-<N>m``: N minutes before service (only when N is not a whole number of
  hours)
* ``T-<N>h``: N hours before service (days are converted into hours)
* ``Day-of``: on the day, shortly before service
* ``Service``: at service time

Canonical markers sort chronologically according to the number of minutes
before service they represent (see :py:func:`marker_minutes`).

.. autofunction:: normalize_timeline_marker

.. autofunction:: is_recognized_timeline_marker

.. autofunction:: looks_like_timeline_marker

.. autofunction:: marker_minutes

.. autofunction:: sort_timeline_markers
"""

from typing import Iterable, List, Optional

import re

import logging

logger = logging.getLogger(__name__)


SERVICE = "Service"
DAY_OF = "Day-of"

SPECIAL_MARKERS = (DAY_OF, SERVICE)
"""The canonical markers which are not of the form ``T-<N><unit>``."""

DAY_OF_MINUTES = 30
"""Day-of sorts between T-1h and Service."""

# Hyphen last so it is not read as a range
DASH = r"[—–-]"

METHOD_PREFIX = re.compile(r"^Method\s*\(", re.IGNORECASE)
CLOSING_BRACKET = re.compile(r"\)$")
OR_EARLIER = re.compile(r"\s+or\s+earlier", re.IGNORECASE)

DAY_OF_PATTERN = re.compile(r"day\s*" + DASH + r"?\s*of", re.IGNORECASE)
SERVICE_PATTERN = re.compile(r"^(?:service|plating|to\s*serve)$", re.IGNORECASE)
T_ZERO_PATTERN = re.compile(r"T\s*" + DASH + r"\s*0\b", re.IGNORECASE)
T_WITH_UNIT_PATTERN = re.compile(
    r"T\s*"
    + DASH
    + r"\s*(\d+)\s*(m|min|mins|minutes?|h|hrs?|hours?|d|days?)",
    re.IGNORECASE,
)
T_WITHOUT_UNIT_PATTERN = re.compile(r"T\s*" + DASH + r"\s*(\d+)\s*$", re.IGNORECASE)

LOOKS_LIKE_T_PATTERN = re.compile(r"^T\s*" + DASH + r"\s*\d+", re.IGNORECASE)
LOOKS_LIKE_SERVICE_PATTERN = re.compile(
    r"^(?:service|plating|to\s*serve)", re.IGNORECASE
)

CANONICAL_PATTERN = re.compile(r"^T-(\d+)([mh])$")


def _strip_marker(marker: str) -> str:
    marker = marker.strip()
    marker = METHOD_PREFIX.sub("", marker)
    marker = CLOSING_BRACKET.sub("", marker)
    marker = OR_EARLIER.sub("", marker)
    return marker.strip()


def _normalize(marker: str) -> Optional[str]:
    marker = _strip_marker(marker)

    if DAY_OF_PATTERN.search(marker):
        return DAY_OF

    if SERVICE_PATTERN.match(marker):
        return SERVICE

    if T_ZERO_PATTERN.search(marker):
        return SERVICE

    match = T_WITH_UNIT_PATTERN.search(marker)
    if match is not None:
        value = int(match.group(1))
        unit = match.group(2)[0].lower()
        if value == 0:
            return SERVICE
        if unit == "m":
            if value % 60 == 0:
                return f"T-{value // 60}h"
            return f"T-{value}m"
        elif unit == "d":
            return f"T-{value * 24}h"
        else:
            return f"T-{value}h"

    # A bare number of hours, e.g. "T-6"
    match = T_WITHOUT_UNIT_PATTERN.search(marker)
    if match is not None:
        value = int(match.group(1))
        if value == 0:
            return SERVICE
        return f"T-{value}h"

    return None


def is_recognized_timeline_marker(marker: str) -> bool:
    """
    Does the supplied (raw) marker match one of the recognised notations? If
    not, :py:func:`normalize_timeline_marker` falls back to ``Service``.
    """
    return _normalize(marker) is not None


def normalize_timeline_marker(marker: str) -> str:
    """
    Normalise a free-text timeline marker into its canonical form.

    Examples::

        >>> normalize_timeline_marker("Method (T – 24 h)")
        'T-24h'
        >>> normalize_timeline_marker("T – 120 min")
        'T-2h'
        >>> normalize_timeline_marker("T-1 d or earlier")
        'T-24h'
        >>> normalize_timeline_marker("Day of")
        'Day-of'

    Markers which are not recognised are normalised to ``Service`` and a
    warning is logged.
    """
    normalized = _normalize(marker)
    if normalized is None:
        logger.warning("Unrecognised timeline marker %r treated as %s", marker, SERVICE)
        return SERVICE
    return normalized


def looks_like_timeline_marker(header: str) -> bool:
    """
    Does a (sub-)heading look like it names a timeline marker? True for
    headings starting ``T-<N>``, mentioning the "day of" or starting with
    "service", "plating" or "to serve".
    """
    header = header.strip()
    return bool(
        LOOKS_LIKE_T_PATTERN.match(header)
        or DAY_OF_PATTERN.search(header)
        or LOOKS_LIKE_SERVICE_PATTERN.match(header)
    )


def marker_minutes(marker: str) -> int:
    """
    The number of minutes before service a canonical marker represents. Returns
    -1 for non-canonical markers.
    """
    if marker == SERVICE:
        return 0
    if marker == DAY_OF:
        return DAY_OF_MINUTES

    match = CANONICAL_PATTERN.match(marker)
    if match is None:
        return -1

    value = int(match.group(1))
    if match.group(2) == "m":
        return value
    else:
        return value * 60


def sort_timeline_markers(markers: Iterable[str]) -> List[str]:
    """
    Sort canonical markers into chronological order: the marker furthest
    from service first, ``Service`` last. Non-canonical markers come after
    everything else.
    """
    return sorted(markers, key=marker_minutes, reverse=True)
