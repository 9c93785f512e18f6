"""Company ORM model."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

INDUSTRIES: tuple[str, ...] = (
    "Technology",
    "Healthcare",
    "Manufacturing",
    "Financial Services",
    "Retail",
    "Education",
    "Construction",
    "Transportation",
    "Entertainment",
    "Other",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Shared declarative base for all models."""

    pass


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    industry: Mapped[str] = mapped_column(String(50), nullable=False)
    founded_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    employees: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    logo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    headquarters: Mapped[str | None] = mapped_column(String(200), nullable=True)
    revenue: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    # Eager "selectin" loading: async sessions cannot lazy-load on attribute access.
    locations: Mapped[list["CompanyLocation"]] = relationship(
        back_populates="company",
        order_by="CompanyLocation.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("name", name="uq_companies_name"),
        UniqueConstraint("email", name="uq_companies_email"),
        Index("ix_companies_industry", "industry"),
        Index("ix_companies_is_active", "is_active"),
        Index("ix_companies_created_at", "created_at"),
        Index("ix_companies_employees", "employees"),
    )

    @property
    def location(self) -> list[str]:
        return [loc.value for loc in self.locations]

    @location.setter
    def location(self, values: list[str]) -> None:
        self.locations = [
            CompanyLocation(position=i, value=value) for i, value in enumerate(values)
        ]

    def __repr__(self) -> str:
        return f"<Company {self.id} – {self.name}>"


class CompanyLocation(Base):
    """One entry of a company's ordered location list."""

    __tablename__ = "company_locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    value: Mapped[str] = mapped_column(String(200), nullable=False)

    company: Mapped[Company] = relationship(back_populates="locations")

    __table_args__ = (
        Index("ix_company_locations_company_id", "company_id"),
    )

    def __repr__(self) -> str:
        return f"<CompanyLocation {self.position}: {self.value}>"
