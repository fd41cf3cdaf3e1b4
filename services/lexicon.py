"""Keyword, location and date matching over raw utterances.

Matching is plain case-insensitive substring containment. There is no
tokenisation, so "best" also matches "bestseller".
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Iterable

AREA_ABBREVIATIONS = {
    "jb": "johor bahru",
    "kl": "kuala lumpur",
    "kk": "kota kinabalu",
}

# (term in the utterance, term that must appear in the state name)
STATE_ALIASES = (
    ("melaka", "malacca"),
    ("malacca", "malacca"),
    ("penang", "penang"),
)

KNOWN_LOCATIONS = (
    "kuala lumpur",
    "kl",
    "selangor",
    "penang",
    "johor",
    "johor bahru",
    "jb",
    "ipoh",
    "kuching",
    "kota kinabalu",
    "kk",
    "malacca",
    "melaka",
    "seremban",
    "alor setar",
    "kuala terengganu",
    "kota bharu",
    "shah alam",
    "petaling jaya",
    "pj",
    "subang",
    "puchong",
)

MONTHS = {
    "jan": "01",
    "feb": "02",
    "mar": "03",
    "apr": "04",
    "may": "05",
    "jun": "06",
    "jul": "07",
    "aug": "08",
    "sep": "09",
    "oct": "10",
    "nov": "11",
    "dec": "12",
}

_MONTH_ALTERNATION = "|".join(MONTHS)
_DAY_MONTH_RE = re.compile(rf"(\d{{1,2}})\s*({_MONTH_ALTERNATION})", re.IGNORECASE)
_MONTH_DAY_RE = re.compile(rf"({_MONTH_ALTERNATION})\s*(\d{{1,2}})", re.IGNORECASE)


def normalize(text: str) -> str:
    return text.lower()


def contains_keyword(haystack: str, needle: str) -> bool:
    return normalize(needle) in normalize(haystack)


def contains_any(haystack: str, needles: Iterable[str]) -> bool:
    lowered = normalize(haystack)
    return any(normalize(needle) in lowered for needle in needles)


def matches_area(utterance: str, district: str, state: str) -> bool:
    """Return True when the utterance names this district or state."""
    message = normalize(utterance)
    district_l = normalize(district)
    state_l = normalize(state)

    # Empty names from short rows would otherwise match every utterance.
    if district_l and district_l in message:
        return True
    if state_l and state_l in message:
        return True

    for abbreviation, full_name in AREA_ABBREVIATIONS.items():
        if abbreviation in message and full_name in district_l:
            return True

    for term, state_term in STATE_ALIASES:
        if term in message and state_term in state_l:
            return True

    return False


def matches_location(location: str, district: str, state: str) -> bool:
    """Return True when a detected location refers to this district or state."""
    location_l = normalize(location)
    district_l = normalize(district)

    if not location_l:
        return False
    if location_l in district_l or location_l in normalize(state):
        return True

    full_name = AREA_ABBREVIATIONS.get(location_l)
    return full_name is not None and full_name in district_l


def detect_location(utterance: str) -> str:
    message = normalize(utterance)
    for location in KNOWN_LOCATIONS:
        if location in message:
            return location
    return ""


def extract_date(utterance: str, reference_date: str) -> str:
    """Pull an ISO date out of the utterance, or return an empty string.

    "today" and "yesterday" resolve against ``reference_date``; explicit
    day/month mentions use the reference year.
    """
    message = normalize(utterance)
    today = date.fromisoformat(reference_date)

    if "today" in message:
        return today.isoformat()
    if "yesterday" in message:
        return (today - timedelta(days=1)).isoformat()

    match = _DAY_MONTH_RE.search(message)
    if match:
        return _format_date(today.year, match.group(2), match.group(1))

    match = _MONTH_DAY_RE.search(message)
    if match:
        return _format_date(today.year, match.group(1), match.group(2))

    return ""


def _format_date(year: int, month: str, day: str) -> str:
    return f"{year}-{MONTHS[month.lower()]}-{day.zfill(2)}"
