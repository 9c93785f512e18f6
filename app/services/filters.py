"""Query-parameter filters and search suggestions for companies."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from datetime import date, datetime, time, timezone

from sqlalchemy import ColumnElement, or_

from app.errors import BadQueryError
from app.models.company import Company, CompanyLocation

FILTER_PARAMS: tuple[str, ...] = (
    "name",
    "location",
    "industry",
    "isActive",
    "employees",
    "createdAt",
    "foundedYear",
)

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


@dataclass(frozen=True)
class CompanyFilter:
    """Conjunction of the constraints present in a search request.

    ``None`` means "no constraint" for every member.
    """

    name_contains: str | None = None
    location_contains: str | None = None
    industry: str | None = None
    is_active: bool | None = None
    min_employees: int | None = None
    created_since: datetime | None = None
    founded_year: int | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def clauses(self) -> list[ColumnElement[bool]]:
        """Render the present constraints as SQLAlchemy criteria (implicitly ANDed)."""
        criteria: list[ColumnElement[bool]] = []
        if self.name_contains is not None:
            criteria.append(Company.name.icontains(self.name_contains, autoescape=True))
        if self.location_contains is not None:
            criteria.append(location_contains(self.location_contains))
        if self.industry is not None:
            criteria.append(Company.industry == self.industry)
        if self.is_active is not None:
            criteria.append(Company.is_active.is_(self.is_active))
        if self.min_employees is not None:
            criteria.append(Company.employees >= self.min_employees)
        if self.created_since is not None:
            criteria.append(Company.created_at >= self.created_since)
        if self.founded_year is not None:
            criteria.append(Company.founded_year == self.founded_year)
        return criteria


def location_contains(query: str) -> ColumnElement[bool]:
    return Company.locations.any(CompanyLocation.value.icontains(query, autoescape=True))


def _parse_int(param: str, raw: str) -> int:
    """Parse an integer that fits the 32-bit INTEGER columns it is compared with."""
    try:
        value = int(raw.strip())
    except ValueError:
        raise BadQueryError(f"Invalid {param}: {raw}") from None
    if not INT32_MIN <= value <= INT32_MAX:
        raise BadQueryError(f"Invalid {param}: {raw}")
    return value


def _parse_datetime(param: str, raw: str) -> datetime:
    value = raw.strip()
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(value), time.min)
        except ValueError:
            raise BadQueryError(f"Invalid {param}: {raw}") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_company_filter(params: Mapping[str, str]) -> CompanyFilter:
    """Translate raw query parameters into a :class:`CompanyFilter`.

    Empty values count as absent, except ``isActive`` which applies whenever
    the parameter is present (``"true"`` is the only truthy spelling).

    Raises:
        BadQueryError: on non-numeric ``employees``/``foundedYear`` or an
            unparsable ``createdAt``.
    """
    def present(key: str) -> str | None:
        value = params.get(key)
        return value if value else None

    name = present("name")
    location = present("location")
    industry = present("industry")
    employees = present("employees")
    created_at = present("createdAt")
    founded_year = present("foundedYear")
    is_active = params.get("isActive")

    return CompanyFilter(
        name_contains=name,
        location_contains=location,
        industry=industry,
        is_active=(is_active == "true") if is_active is not None else None,
        min_employees=_parse_int("employees", employees) if employees else None,
        created_since=_parse_datetime("createdAt", created_at) if created_at else None,
        founded_year=_parse_int("foundedYear", founded_year) if founded_year else None,
    )


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------


def suggestion_clause(query: str) -> ColumnElement[bool]:
    """Records whose name, industry or any location contains ``query``."""
    return or_(
        Company.name.icontains(query, autoescape=True),
        Company.industry.icontains(query, autoescape=True),
        location_contains(query),
    )


def _matches(value: str | None, needle: str) -> bool:
    return bool(value) and needle in value.casefold()


def collect_suggestions(companies: Iterable[Company], query: str) -> list[str]:
    """Every individual name / industry / location value containing ``query``.

    Duplicates are dropped; the first occurrence keeps its position.
    """
    needle = query.casefold()
    seen: dict[str, None] = {}
    for company in companies:
        candidates = [company.name, company.industry, *company.location]
        for value in candidates:
            if _matches(value, needle):
                seen.setdefault(value, None)
    return list(seen)
