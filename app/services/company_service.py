"""Company CRUD and search service."""

from __future__ import annotations

import functools
import logging
import uuid
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, ParamSpec, TypeVar

from sqlalchemy import exc as sa_exc
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, NotFoundError, translate_db_error
from app.models.company import Company
from app.schemas.company import CompanyDetail, CompanyListItem, CompanyRecord
from app.services.filters import build_company_filter, collect_suggestions, suggestion_clause
from app.services.validation import (
    check_industry,
    ensure_valid,
    extract_update_fields,
    to_columns,
    validate_create_payload,
)

logger = logging.getLogger("app.services.company")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

P = ParamSpec("P")
R = TypeVar("R")


def translate_db_errors(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    """Re-raise SQLAlchemy errors as API errors; nothing raw leaves the service."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await func(*args, **kwargs)
        except sa_exc.SQLAlchemyError as exc:
            logger.warning("%s failed: %s", func.__name__, exc.__class__.__name__)
            raise translate_db_error(exc) from exc

    return wrapper


def _parse_id(company_id: str | uuid.UUID) -> uuid.UUID | None:
    if isinstance(company_id, uuid.UUID):
        return company_id
    try:
        return uuid.UUID(company_id)
    except (ValueError, TypeError, AttributeError):
        return None


async def _get_or_404(session: AsyncSession, company_id: str | uuid.UUID) -> Company:
    """A malformed id cannot resolve to a record, so it is a 404 like an unknown one."""
    parsed = _parse_id(company_id)
    company = await session.get(Company, parsed) if parsed is not None else None
    if company is None:
        raise NotFoundError("Company not found")
    return company


@translate_db_errors
async def create_company(session: AsyncSession, body: Mapping[str, Any]) -> CompanyRecord:
    """Validate and insert a company.

    Order of checks: required fields, duplicate name/email, industry enum,
    field constraints.  Nothing is written until all of them pass.
    """
    fields = validate_create_payload(body)

    existing = await session.execute(
        select(Company.id)
        .where(or_(Company.name == fields["name"], Company.email == fields["email"]))
        .limit(1)
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError()

    check_industry(fields["industry"])
    ensure_valid(fields)

    company = Company(**to_columns(fields))
    session.add(company)
    try:
        await session.commit()
    except sa_exc.IntegrityError as exc:
        # Lost a race with a concurrent create; the unique constraint decides.
        await session.rollback()
        raise translate_db_error(exc) from exc

    await session.refresh(company)
    logger.info("create_company id=%s name=%s", company.id, company.name)
    return CompanyRecord.from_company(company)


@translate_db_errors
async def list_companies(
    session: AsyncSession,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
) -> list[CompanyListItem]:
    """One offset/limit page of companies in insertion order."""
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_LIMIT)  # hard cap

    stmt = (
        select(Company)
        .order_by(Company.created_at, Company.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await session.execute(stmt)
    rows = list(result.scalars().all())
    logger.info("list_companies page=%d limit=%d results=%d", page, limit, len(rows))
    return [CompanyListItem.from_company(row) for row in rows]


@translate_db_errors
async def get_company(session: AsyncSession, company_id: str | uuid.UUID) -> CompanyDetail:
    company = await _get_or_404(session, company_id)
    return CompanyDetail.from_company(company)


@translate_db_errors
async def update_company(
    session: AsyncSession,
    company_id: str | uuid.UUID,
    body: Mapping[str, Any],
) -> CompanyRecord:
    """Apply a partial update limited to the allow-listed fields."""
    fields = extract_update_fields(body)
    ensure_valid(fields)

    company = await _get_or_404(session, company_id)
    for attr, value in to_columns(fields).items():
        setattr(company, attr, value)
    await session.commit()
    await session.refresh(company)

    logger.info("update_company id=%s fields=%s", company.id, sorted(fields))
    return CompanyRecord.from_company(company)


@translate_db_errors
async def delete_company(session: AsyncSession, company_id: str | uuid.UUID) -> None:
    company = await _get_or_404(session, company_id)
    await session.delete(company)
    await session.commit()
    logger.info("delete_company id=%s", company.id)


@translate_db_errors
async def search_suggestions(session: AsyncSession, query: str) -> list[str]:
    """Distinct name / industry / location values containing ``query``."""
    result = await session.execute(
        select(Company).where(suggestion_clause(query)).order_by(Company.created_at, Company.id)
    )
    suggestions = collect_suggestions(result.scalars().all(), query)
    logger.info("search_suggestions q=%s results=%d", query, len(suggestions))
    return suggestions


@translate_db_errors
async def search_companies(session: AsyncSession, params: Mapping[str, str]) -> list[CompanyRecord]:
    """Full records matching every filter present in ``params``."""
    company_filter = build_company_filter(params)
    stmt = (
        select(Company)
        .where(*company_filter.clauses())
        .order_by(Company.created_at, Company.id)
    )
    result = await session.execute(stmt)
    rows = list(result.scalars().all())
    logger.info("search_companies filters=%s results=%d", dict(params), len(rows))
    return [CompanyRecord.from_company(row) for row in rows]
