"""Company-related Pydantic schemas (camelCase on the wire)."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.company import Company
from app.services.derived import company_age, employee_range


class CompanyListItem(BaseModel):
    """Projection returned by the paginated list."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: uuid.UUID
    name: str
    description: str | None = None
    industry: str
    founded_year: int | None = None
    location: list[str]
    website: str | None = None
    is_active: bool
    logo: str | None = None
    employee_range: str

    @classmethod
    def from_company(cls, company: Company) -> "CompanyListItem":
        return cls(
            id=company.id,
            name=company.name,
            description=company.description,
            industry=company.industry,
            founded_year=company.founded_year,
            location=company.location,
            website=company.website,
            is_active=company.is_active,
            logo=company.logo,
            employee_range=employee_range(company.employees),
        )


class CompanyRecord(CompanyListItem):
    """Full stored record plus its employee range."""

    email: str
    phone: str | None = None
    employees: int | None = None
    headquarters: str | None = None
    revenue: float | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_company(cls, company: Company) -> "CompanyRecord":
        brief = CompanyListItem.from_company(company)
        return cls(
            **brief.model_dump(),
            email=company.email,
            phone=company.phone,
            employees=company.employees,
            headquarters=company.headquarters,
            revenue=company.revenue,
            created_at=company.created_at,
            updated_at=company.updated_at,
        )


class CompanyDetail(CompanyRecord):
    """Single-company view with the computed age."""

    company_age: int

    @classmethod
    def from_company(cls, company: Company) -> "CompanyDetail":
        record = CompanyRecord.from_company(company)
        return cls(**record.model_dump(), company_age=company_age(company.founded_year))
