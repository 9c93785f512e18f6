"""Tests for OpenAPI documentation endpoints."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import create_app
from app.utils.openapi import OpenAPIGenerator
from tests.conftest import make_settings


class TestOpenAPIGenerator:
    """Test the OpenAPI specification generator."""

    @pytest.mark.asyncio
    async def test_default_server_url(self, app, settings):
        generator = OpenAPIGenerator(app, settings)
        assert generator.server_url == "http://localhost:3000"

    @pytest.mark.asyncio
    async def test_custom_server_url(self, app, settings):
        generator = OpenAPIGenerator(app, settings, server_url="https://api.example.com")
        assert generator.generate_spec()["servers"][0]["url"] == "https://api.example.com"

    @pytest.mark.asyncio
    async def test_spec_info(self, app):
        spec = app.openapi()
        assert spec["openapi"].startswith("3.")
        assert spec["info"]["title"] == "Company Data Management API"
        assert spec["info"]["version"] == "1.0.0"
        assert spec["info"]["license"]["name"] == "MIT"
        assert "contact" in spec["info"]

    @pytest.mark.asyncio
    async def test_spec_paths(self, app):
        paths = app.openapi()["paths"]
        assert set(paths["/api/v1/companies"]) == {"get", "post"}
        assert set(paths["/api/v1/companies/{company_id}"]) == {"get", "patch", "delete"}
        assert "/api/v1/companies/search" in paths
        assert "/api/v1/companies/search/suggestions" in paths
        assert "/api/v1/health/status" in paths
        assert "/health" in paths

    @pytest.mark.asyncio
    async def test_search_params_use_wire_names(self, app):
        params = app.openapi()["paths"]["/api/v1/companies/search"]["get"]["parameters"]
        assert {p["name"] for p in params} == {
            "name",
            "location",
            "industry",
            "isActive",
            "employees",
            "createdAt",
            "foundedYear",
        }

    @pytest.mark.asyncio
    async def test_envelope_component(self, app):
        schema = app.openapi()["components"]["schemas"]["ApiResponse"]
        assert {"success", "statusCode", "message", "timestamp"} <= set(schema["properties"])

    @pytest.mark.asyncio
    async def test_tags(self, app):
        assert [tag["name"] for tag in app.openapi()["tags"]] == ["Companies", "Health"]

    @pytest.mark.asyncio
    async def test_spec_is_cached(self, app):
        assert app.openapi() is app.openapi()


class TestOpenAPIEndpoints:
    @pytest.mark.asyncio
    async def test_openapi_json(self, client):
        response = await client.get("/openapi.json")
        assert response.status_code == 200
        assert "/api/v1/companies" in response.json()["paths"]

    @pytest.mark.asyncio
    async def test_swagger_ui(self, client):
        response = await client.get("/api-docs")
        assert response.status_code == 200
        assert "swagger-ui" in response.text.lower()

    @pytest.mark.asyncio
    async def test_docs_disabled(self, database):
        app = create_app(settings=make_settings(docs_enabled=False), database=database)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            assert (await client.get("/openapi.json")).status_code == 404
            assert (await client.get("/api-docs")).status_code == 404
