"""SQLAlchemy ORM models."""

from app.models.company import INDUSTRIES, Base, Company, CompanyLocation

__all__ = ["Base", "Company", "CompanyLocation", "INDUSTRIES"]
