"""ApiResponse envelope tests."""

from __future__ import annotations

import json
from datetime import datetime

from app.errors import MissingFieldError
from app.schemas.common import ApiResponse


def test_success_flag_follows_status_code():
    assert ApiResponse.build(200, "ok").success is True
    assert ApiResponse.build(201, "created").success is True
    assert ApiResponse.build(399, "redirect-ish").success is True
    assert ApiResponse.build(400, "bad").success is False
    assert ApiResponse.build(500, "boom").success is False


def test_wire_shape_uses_camel_case_and_omits_unset_members():
    body = ApiResponse.ok(message="Done").to_dict()
    assert set(body) == {"success", "statusCode", "message", "timestamp"}
    assert body["statusCode"] == 200


def test_data_is_kept_even_when_falsy():
    body = ApiResponse.ok([], "Nothing found").to_dict()
    assert body["data"] == []


def test_error_envelope_carries_errors_and_path():
    body = ApiResponse.build(400, "Missing fields", errors=["Name is required"], path="/x").to_dict()
    assert body["success"] is False
    assert body["errors"] == ["Name is required"]
    assert body["path"] == "/x"
    assert "data" not in body


def test_timestamp_is_iso_8601_utc():
    ts = ApiResponse.created({"id": 1}).timestamp
    assert ts.endswith("Z")
    parsed = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    assert parsed.utcoffset().total_seconds() == 0


def test_created_defaults():
    envelope = ApiResponse.created({"id": 1})
    assert envelope.status_code == 201
    assert envelope.message == "Resource created successfully"


def test_to_response_is_json_with_status():
    response = ApiResponse.build(404, "Company not found", path="/api/v1/companies/x").to_response()
    assert response.status_code == 404
    payload = json.loads(response.body)
    assert payload["message"] == "Company not found"
    assert payload["success"] is False


def test_api_error_renders_through_the_same_envelope():
    error = MissingFieldError(errors=["Name is required", "Email is required"])
    body = error.to_envelope("/api/v1/companies").to_dict()
    assert body["statusCode"] == 400
    assert body["message"] == "Missing fields"
    assert body["errors"] == ["Name is required", "Email is required"]
