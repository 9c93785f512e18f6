"""Derived company values (no DB access, never stored)."""

from __future__ import annotations

from datetime import datetime, timezone

NOT_SPECIFIED = "Not specified"

# (exclusive upper bound, label) in ascending order; anything above is "1000+".
EMPLOYEE_BUCKETS: tuple[tuple[int, str], ...] = (
    (10, "1-10"),
    (50, "11-50"),
    (200, "51-200"),
    (1000, "201-1000"),
)


def current_year() -> int:
    return datetime.now(timezone.utc).year


def company_age(founded_year: int | None, year: int | None = None) -> int:
    """Years since founding; 0 when the founding year is unknown."""
    if not founded_year:
        return 0
    return (year if year is not None else current_year()) - founded_year


def employee_range(employees: int | None) -> str:
    """Bucketed label for a head count."""
    if not employees:
        return NOT_SPECIFIED
    for upper, label in EMPLOYEE_BUCKETS:
        if employees < upper:
            return label
    return "1000+"
