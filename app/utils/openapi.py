"""OpenAPI 3 document for the API, built from the FastAPI routes.

FastAPI generates the paths; this module adds the info block, servers and the
shared ``ApiResponse`` envelope component that every endpoint answers with.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from app.config import Settings
from app.schemas.common import ApiResponse

DESCRIPTION = """
REST API for managing company records.

## Error Responses

All responses, successful or not, share one envelope:

```json
{
  "success": false,
  "statusCode": 400,
  "message": "Error description",
  "errors": ["Detailed error messages"],
  "timestamp": "2024-01-01T00:00:00.000Z",
  "path": "/api/v1/companies"
}
```

## Rate Limiting

Requests are rate limited per client IP; see the `RateLimit-*` response headers.
"""


class OpenAPIGenerator:
    """Build (and cache on the app) the OpenAPI specification.

    Example:
        generator = OpenAPIGenerator(app, settings)
        app.openapi = generator.generate_spec
    """

    def __init__(self, app: FastAPI, settings: Settings, server_url: str | None = None):
        self.app = app
        self.settings = settings
        self.server_url = server_url or f"http://localhost:{settings.fastapi_port}"

    def generate_spec(self) -> dict[str, Any]:
        if self.app.openapi_schema:
            return self.app.openapi_schema

        spec = get_openapi(
            title=self.settings.app_name,
            version=self.settings.app_version,
            description=DESCRIPTION,
            routes=self.app.routes,
            tags=self._build_tags(),
        )
        spec["info"].update(self._build_info())
        spec["servers"] = self._build_servers()
        spec.setdefault("components", {}).setdefault("schemas", {}).update(self._build_components())

        self.app.openapi_schema = spec
        return spec

    def _build_info(self) -> dict[str, Any]:
        return {
            "contact": {"name": "API Support", "email": "support@company.com"},
            "license": {"name": "MIT", "url": "https://opensource.org/licenses/MIT"},
        }

    def _build_servers(self) -> list[dict[str, Any]]:
        description = "Development server" if self.settings.is_development else "Production server"
        return [{"url": self.server_url, "description": description}]

    def _build_components(self) -> dict[str, Any]:
        return {"ApiResponse": ApiResponse.model_json_schema(by_alias=True)}

    def _build_tags(self) -> list[dict[str, str]]:
        return [
            {"name": "Companies", "description": "Create, read, update, delete and search companies"},
            {"name": "Health", "description": "Health checks and system status"},
        ]


def install_openapi(app: FastAPI, settings: Settings) -> OpenAPIGenerator:
    generator = OpenAPIGenerator(app, settings)
    app.openapi = generator.generate_spec  # type: ignore[method-assign]
    return generator
