"""Culture-aware date formatting using .NET-style custom format patterns.

Rendered pages historically received dates formatted by the .NET runtime, so
the patterns stored in docset templates (``M/d/yyyy``, ``yyyy-MM-dd hh:mm tt``)
follow .NET custom date and time format strings. This module implements the
subset of that syntax those patterns use, together with a small table of
culture settings keyed by locale.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Tuple

_SPECIFIERS = frozenset("yMdhHmst")
_UNSUPPORTED_SPECIFIERS = frozenset("fFgKz")

_ENGLISH_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_ENGLISH_DAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
_ENGLISH_ABBREVIATED_MONTHS = tuple(name[:3] for name in _ENGLISH_MONTHS)
_ENGLISH_ABBREVIATED_DAYS = tuple(name[:3] for name in _ENGLISH_DAYS)
_GERMAN_MONTHS = (
    "Januar", "Februar", "März", "April", "Mai", "Juni",
    "Juli", "August", "September", "Oktober", "November", "Dezember",
)
_GERMAN_DAYS = ("Sonntag", "Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag")
_GERMAN_ABBREVIATED_MONTHS = (
    "Jan.", "Feb.", "März", "Apr.", "Mai", "Juni",
    "Juli", "Aug.", "Sept.", "Okt.", "Nov.", "Dez.",
)
_GERMAN_ABBREVIATED_DAYS = ("So.", "Mo.", "Di.", "Mi.", "Do.", "Fr.", "Sa.")
_FRENCH_MONTHS = (
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
)
_FRENCH_DAYS = ("dimanche", "lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi")
_FRENCH_ABBREVIATED_MONTHS = (
    "janv.", "févr.", "mars", "avr.", "mai", "juin",
    "juil.", "août", "sept.", "oct.", "nov.", "déc.",
)
_FRENCH_ABBREVIATED_DAYS = ("dim.", "lun.", "mar.", "mer.", "jeu.", "ven.", "sam.")


class CultureError(ValueError):
    """Raised when a date pattern cannot be applied for a culture."""


@dataclass(frozen=True)
class CultureInfo:
    """Date formatting conventions for a locale."""

    name: str
    short_date_pattern: str
    date_separator: str = "/"
    time_separator: str = ":"
    am_designator: str = "AM"
    pm_designator: str = "PM"
    month_names: Tuple[str, ...] = _ENGLISH_MONTHS
    day_names: Tuple[str, ...] = _ENGLISH_DAYS
    abbreviated_month_names: Tuple[str, ...] = _ENGLISH_ABBREVIATED_MONTHS
    abbreviated_day_names: Tuple[str, ...] = _ENGLISH_ABBREVIATED_DAYS


INVARIANT_CULTURE = CultureInfo(name="", short_date_pattern="MM/dd/yyyy")

_CULTURES: Dict[str, CultureInfo] = {
    culture.name: culture
    for culture in (
        CultureInfo(name="en-us", short_date_pattern="M/d/yyyy"),
        CultureInfo(name="en-gb", short_date_pattern="dd/MM/yyyy"),
        CultureInfo(
            name="de-de",
            short_date_pattern="dd.MM.yyyy",
            date_separator=".",
            month_names=_GERMAN_MONTHS,
            day_names=_GERMAN_DAYS,
            abbreviated_month_names=_GERMAN_ABBREVIATED_MONTHS,
            abbreviated_day_names=_GERMAN_ABBREVIATED_DAYS,
        ),
        CultureInfo(
            name="fr-fr",
            short_date_pattern="dd/MM/yyyy",
            month_names=_FRENCH_MONTHS,
            day_names=_FRENCH_DAYS,
            abbreviated_month_names=_FRENCH_ABBREVIATED_MONTHS,
            abbreviated_day_names=_FRENCH_ABBREVIATED_DAYS,
        ),
        CultureInfo(name="es-es", short_date_pattern="dd/MM/yyyy"),
        CultureInfo(name="ja-jp", short_date_pattern="yyyy/MM/dd", am_designator="午前", pm_designator="午後"),
        CultureInfo(name="zh-cn", short_date_pattern="yyyy/M/d", am_designator="上午", pm_designator="下午"),
    )
}


def get_culture(locale: str | None) -> CultureInfo:
    """Return the culture for ``locale``, falling back to its language, then invariant."""
    if not locale:
        return INVARIANT_CULTURE
    key = locale.strip().lower()
    culture = _CULTURES.get(key)
    if culture is not None:
        return culture
    language = key.split("-", 1)[0]
    for name in sorted(_CULTURES):
        if name.split("-", 1)[0] == language:
            return _CULTURES[name]
    return INVARIANT_CULTURE


def format_short_date(value: datetime, culture: CultureInfo) -> str:
    return format_datetime(value, culture.short_date_pattern, culture)


def format_datetime(value: datetime, pattern: str, culture: CultureInfo) -> str:
    """Format ``value`` using a .NET custom date and time pattern."""
    if not pattern:
        raise CultureError("Date pattern must not be empty")

    parts: List[str] = []
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if char in ("'", '"'):
            end = pattern.find(char, index + 1)
            if end == -1:
                raise CultureError(f"Unterminated quoted literal in date pattern {pattern!r}")
            parts.append(pattern[index + 1:end])
            index = end + 1
        elif char == "\\":
            if index + 1 >= length:
                raise CultureError(f"Dangling escape at end of date pattern {pattern!r}")
            parts.append(pattern[index + 1])
            index += 2
        elif char == "%":
            if index + 1 >= length:
                raise CultureError(f"Dangling '%' at end of date pattern {pattern!r}")
            index += 1
        elif char in _UNSUPPORTED_SPECIFIERS:
            raise CultureError(f"Unsupported specifier {char!r} in date pattern {pattern!r}")
        elif char in _SPECIFIERS:
            run = 1
            while index + run < length and pattern[index + run] == char:
                run += 1
            parts.append(_render(value, char, run, culture))
            index += run
        elif char == "/":
            parts.append(culture.date_separator)
            index += 1
        elif char == ":":
            parts.append(culture.time_separator)
            index += 1
        else:
            parts.append(char)
            index += 1
    return "".join(parts)


def _render(value: datetime, specifier: str, run: int, culture: CultureInfo) -> str:
    if specifier == "y":
        if run == 1:
            return str(value.year % 100)
        if run == 2:
            return f"{value.year % 100:02d}"
        return str(value.year).zfill(run)
    if specifier == "M":
        if run <= 2:
            return _number(value.month, run)
        names = culture.month_names if run >= 4 else culture.abbreviated_month_names
        return names[value.month - 1]
    if specifier == "d":
        if run <= 2:
            return _number(value.day, run)
        # datetime.weekday() is Monday-based; culture tables start on Sunday.
        weekday = (value.weekday() + 1) % 7
        names = culture.day_names if run >= 4 else culture.abbreviated_day_names
        return names[weekday]
    if specifier == "h":
        return _number(value.hour % 12 or 12, run)
    if specifier == "H":
        return _number(value.hour, run)
    if specifier == "m":
        return _number(value.minute, run)
    if specifier == "s":
        return _number(value.second, run)
    designator = culture.am_designator if value.hour < 12 else culture.pm_designator
    return designator[:1] if run == 1 else designator


def _number(value: int, run: int) -> str:
    return str(value) if run == 1 else f"{value:02d}"


__all__ = [
    "CultureError",
    "CultureInfo",
    "INVARIANT_CULTURE",
    "format_datetime",
    "format_short_date",
    "get_culture",
]
