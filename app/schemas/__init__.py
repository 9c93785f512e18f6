"""Pydantic response schemas."""

from app.schemas.common import ApiResponse
from app.schemas.company import CompanyDetail, CompanyListItem, CompanyRecord

__all__ = [
    "ApiResponse",
    "CompanyDetail",
    "CompanyListItem",
    "CompanyRecord",
]
