"""
Recurrence day parsing

Stored day lists are meant to be JSON arrays (`["MON","WED"]`) but older rows
hold double-encoded strings, comma lists or truncated text. Parsing never
raises: structured parse first, token extraction from the raw text second,
empty set last.
"""
import json
import re
from datetime import date
from typing import FrozenSet, Iterable, Optional, NamedTuple

from atams.logging import get_logger

logger = get_logger(__name__)

# Index matches date.weekday() shifted so that Sunday is first, as stored
WEEK_ORDER = ("SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT")
VALID_DAYS = frozenset(WEEK_ORDER)

_DAY_TOKEN = re.compile(r"(?<![A-Za-z])(MON|TUE|WED|THU|FRI|SAT|SUN)(?![A-Za-z])", re.IGNORECASE)


class RecurrenceDays(NamedTuple):
    days: FrozenSet[str]
    stored: bool  # False when nothing was ever saved for the schedule
    recovered: bool  # True when the structured parse failed and tokens were extracted


def weekday_token(day: date) -> str:
    """SUN..SAT abbreviation of a calendar date"""
    return WEEK_ORDER[(day.weekday() + 1) % 7]


def parse_recurrence_days(raw: Optional[str]) -> RecurrenceDays:
    """Parse a stored day list, recovering tokens from corrupt text"""
    if raw is None or not raw.strip():
        return RecurrenceDays(frozenset(), stored=False, recovered=False)

    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        parsed = None

    if isinstance(parsed, list) and all(isinstance(item, str) for item in parsed):
        days = frozenset(item.strip().upper() for item in parsed) & VALID_DAYS
        return RecurrenceDays(days, stored=True, recovered=False)

    days = frozenset(match.upper() for match in _DAY_TOKEN.findall(raw))
    if days:
        logger.warning(
            "Recovered recurrence days from malformed value",
            extra={"extra_data": {"raw": raw[:200], "days": sorted(days)}}
        )
    else:
        logger.warning(
            "Unreadable recurrence days, schedule will not match any weekday",
            extra={"extra_data": {"raw": raw[:200]}}
        )
    return RecurrenceDays(days, stored=True, recovered=True)


def serialize_recurrence_days(days: Iterable[str]) -> Optional[str]:
    """Canonical JSON list in week order, or None for an empty selection"""
    wanted = {day.strip().upper() for day in days} & VALID_DAYS
    if not wanted:
        return None
    return json.dumps([day for day in WEEK_ORDER if day in wanted])
