"""
Parsing of raw HTML form values into typed domain values
"""

import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from event_manager.core.errors import InvalidInputError

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_CENTS = Decimal("0.01")
# NUMERIC(10, 2)
_MAX_COST = Decimal("100000000")
# Largest value an INTEGER column (SQLite, BIGINT) can hold
MAX_DB_INT = 2**63 - 1


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def parse_id(value: object) -> Optional[int]:
    """Integer id from a path or form value; None if it cannot name a row"""
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return None
    if parsed < 1 or parsed > MAX_DB_INT:
        return None
    return parsed


def parse_ticket_count(value: Optional[str]) -> int:
    """Leading integer of a ticket field; anything unparsable or negative counts as 0"""
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return max(int(match.group(1)), 0)


def parse_capacity(value: Optional[str], field: str) -> int:
    if is_blank(value):
        return 0
    try:
        capacity = int(str(value).strip())
    except ValueError:
        raise InvalidInputError(f"{field} must be a whole number")
    if capacity < 0:
        raise InvalidInputError(f"{field} cannot be negative")
    if capacity > MAX_DB_INT:
        raise InvalidInputError(f"{field} is too large")
    return capacity


def parse_cost(value: Optional[str], field: str) -> Decimal:
    if is_blank(value):
        return Decimal("0.00")
    try:
        cost = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidInputError(f"{field} must be a number")
    if not cost.is_finite():
        raise InvalidInputError(f"{field} must be a number")
    if cost < 0:
        raise InvalidInputError(f"{field} cannot be negative")
    if cost >= _MAX_COST:
        raise InvalidInputError(f"{field} is too large")
    return cost.quantize(_CENTS, rounding=ROUND_HALF_UP)


def parse_event_date(value: str) -> datetime:
    """
    Normalise an event date for storage.

    Accepts the datetime-local form value (YYYY-MM-DDTHH:MM), the stored
    format (YYYY-MM-DD HH:MM:SS) and other ISO-8601 strings. Offsets are
    converted to UTC and dropped, microseconds are discarded.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        raise InvalidInputError(f"Invalid event date: {value}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed.replace(microsecond=0)
