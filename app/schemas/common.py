"""Shared ApiResponse envelope."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

# Members that are left out of the JSON body entirely when unset.
_OPTIONAL_MEMBERS = ("data", "errors", "path")


def iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ApiResponse(BaseModel):
    """Standard envelope for every HTTP result, success or failure."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    status_code: int = Field(..., alias="statusCode")
    message: str
    data: Any | None = None
    errors: list[str] | None = None
    timestamp: str = Field(default_factory=iso_now, description="ISO-8601, UTC")
    path: str | None = None

    @classmethod
    def build(
        cls,
        status_code: int,
        message: str = "Success",
        data: Any = None,
        errors: list[str] | None = None,
        path: str | None = None,
    ) -> "ApiResponse":
        return cls(
            success=status_code < 400,
            status_code=status_code,
            message=message,
            data=data,
            errors=errors,
            path=path,
        )

    @classmethod
    def ok(cls, data: Any = None, message: str = "Operation successful") -> "ApiResponse":
        return cls.build(200, message, data)

    @classmethod
    def created(cls, data: Any = None, message: str = "Resource created successfully") -> "ApiResponse":
        return cls.build(201, message, data)

    def to_dict(self) -> dict[str, Any]:
        body = self.model_dump(by_alias=True, mode="json")
        for key in _OPTIONAL_MEMBERS:
            if body.get(key) is None:
                body.pop(key, None)
        return body

    def to_response(self, headers: dict[str, str] | None = None) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.to_dict(), headers=headers)
