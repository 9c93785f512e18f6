"""Company endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_session
from app.errors import BadQueryError
from app.schemas.common import ApiResponse
from app.services import company_service

router = APIRouter(prefix="/companies", tags=["Companies"])

_CREATE_EXAMPLE = {
    "name": "Tech Corp",
    "email": "contact@techcorp.com",
    "industry": "Technology",
    "location": ["New York", "London"],
    "foundedYear": 2010,
    "employees": 250,
    "website": "techcorp.com",
}

_UPDATE_EXAMPLE = {"description": "Cloud tooling for small teams", "isActive": False}


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(by_alias=True, mode="json")


@router.post("", status_code=201, summary="Create a company")
async def create_company(
    body: dict[str, Any] = Body(..., examples=[_CREATE_EXAMPLE]),
    session: AsyncSession = Depends(get_session),
) -> JSONResponse:
    record = await company_service.create_company(session, body)
    return ApiResponse.created(_dump(record), "Company created successfully").to_response()


@router.get("", summary="List companies (offset pagination)")
async def list_companies(
    page: int = Query(company_service.DEFAULT_PAGE, ge=1),
    limit: int = Query(
        company_service.DEFAULT_LIMIT,
        ge=1,
        description=f"Page size, capped at {company_service.MAX_LIMIT}",
    ),
    session: AsyncSession = Depends(get_session),
) -> JSONResponse:
    items = await company_service.list_companies(session, page, limit)
    return ApiResponse.ok([_dump(item) for item in items], "Companies retrieved successfully").to_response()


@router.get("/search/suggestions", summary="Autocomplete values for a free-text query")
async def search_suggestions(
    request: Request,
    q: str | None = Query(None, description="Case-insensitive substring"),
    session: AsyncSession = Depends(get_session),
) -> JSONResponse:
    values = request.query_params.getlist("q")
    if len(values) != 1:
        raise BadQueryError()
    suggestions = await company_service.search_suggestions(session, values[0])
    return ApiResponse.ok(suggestions, "Suggestions retrieved successfully").to_response()


@router.get("/search", summary="Filter companies")
async def search_companies(
    name: str | None = Query(None, description="Case-insensitive substring of the name"),
    location: str | None = Query(None, description="Case-insensitive substring of any location"),
    industry: str | None = Query(None, description="Exact industry"),
    is_active: str | None = Query(None, alias="isActive", description='"true" or anything else'),
    employees: str | None = Query(None, description="Minimum head count"),
    created_at: str | None = Query(None, alias="createdAt", description="Created on or after (ISO-8601)"),
    founded_year: str | None = Query(None, alias="foundedYear", description="Exact founding year"),
    session: AsyncSession = Depends(get_session),
) -> JSONResponse:
    raw = {
        "name": name,
        "location": location,
        "industry": industry,
        "isActive": is_active,
        "employees": employees,
        "createdAt": created_at,
        "foundedYear": founded_year,
    }
    params = {key: value for key, value in raw.items() if value is not None}
    records = await company_service.search_companies(session, params)
    return ApiResponse.ok([_dump(r) for r in records], "Companies retrieved successfully").to_response()


@router.get("/{company_id}", summary="Get one company")
async def get_company(
    company_id: str,
    session: AsyncSession = Depends(get_session),
) -> JSONResponse:
    detail = await company_service.get_company(session, company_id)
    return ApiResponse.ok(_dump(detail), "Company retrieved successfully").to_response()


@router.patch("/{company_id}", summary="Update logo, description, location, phone or isActive")
async def update_company(
    company_id: str,
    body: dict[str, Any] = Body(..., examples=[_UPDATE_EXAMPLE]),
    session: AsyncSession = Depends(get_session),
) -> JSONResponse:
    record = await company_service.update_company(session, company_id, body)
    return ApiResponse.ok(_dump(record), "Company updated successfully").to_response()


@router.delete("/{company_id}", summary="Delete a company")
async def delete_company(
    company_id: str,
    session: AsyncSession = Depends(get_session),
) -> JSONResponse:
    await company_service.delete_company(session, company_id)
    return ApiResponse.ok(message="Company deleted successfully").to_response()
