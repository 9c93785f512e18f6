"""Request validation and field constraints for company payloads.

Everything here is a pure function over plain dictionaries keyed by the wire
(camelCase) field names.  The company service composes them in order:

1. :func:`validate_create_payload` / :func:`extract_update_fields` - request shape
2. duplicate check (service, needs the database)
3. :func:`check_industry` - enum membership
4. :func:`ensure_valid` - store-level field constraints
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping
from typing import Any

from app.errors import InvalidEnumError, InvalidInputError, MissingFieldError, NoFieldsProvidedError
from app.models.company import INDUSTRIES
from app.services.derived import current_year

# Wire name -> ORM attribute.
FIELD_COLUMNS: dict[str, str] = {
    "name": "name",
    "description": "description",
    "industry": "industry",
    "foundedYear": "founded_year",
    "location": "location",
    "website": "website",
    "email": "email",
    "phone": "phone",
    "employees": "employees",
    "isActive": "is_active",
    "logo": "logo",
    "headquarters": "headquarters",
    "revenue": "revenue",
}

UPDATABLE_FIELDS: tuple[str, ...] = ("logo", "description", "location", "phone", "isActive")

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000
LOCATION_MAX_LENGTH = 200
HEADQUARTERS_MAX_LENGTH = 200
MIN_FOUNDED_YEAR = 1800
MIN_EMPLOYEES = 1
MAX_EMPLOYEES = 10_000_000

# Same language as ``^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$`` without the
# nested quantifiers that make that form backtrack exponentially.
EMAIL_RE = re.compile(r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}$", re.ASCII)
WEBSITE_RE = re.compile(r"^https?://.+\..+")
PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")
PHONE_SEPARATORS_RE = re.compile(r"[\s\-()]")

# Fields whose string values are trimmed before validation.
_TRIMMED = ("name", "description", "website", "email", "phone", "logo", "headquarters")


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------


def missing_field_errors(body: Mapping[str, Any]) -> list[str]:
    """Collect every required-field violation of a create body, in a fixed order."""
    errors: list[str] = []
    if _blank(body.get("name")):
        errors.append("Name is required")
    if _blank(body.get("email")):
        errors.append("Email is required")
    if not body.get("industry"):
        errors.append("Industry is required")

    location = body.get("location")
    if not isinstance(location, list) or len(location) == 0:
        errors.append("At least one location is required")
    elif any(_blank(loc) for loc in location):
        errors.append("Each location must be a non-empty string")
    return errors


def validate_create_payload(body: Mapping[str, Any]) -> dict[str, Any]:
    """Check required fields and return the normalized create fields.

    Raises:
        MissingFieldError: with all violations at once.
    """
    errors = missing_field_errors(body)
    if errors:
        raise MissingFieldError(errors=errors)
    fields = {key: body[key] for key in FIELD_COLUMNS if key in body}
    return normalize_fields(fields)


def extract_update_fields(body: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only allow-listed keys (``null`` counts as present).

    Raises:
        NoFieldsProvidedError: if nothing allowed remains.
    """
    fields = {key: body[key] for key in UPDATABLE_FIELDS if key in body}
    if not fields:
        raise NoFieldsProvidedError()
    return normalize_fields(fields)


def check_industry(industry: Any) -> None:
    if industry not in INDUSTRIES:
        raise InvalidEnumError("industry", INDUSTRIES)


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_website(website: str) -> str:
    if website and not website.startswith("http"):
        return f"https://{website}"
    return website


def normalize_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Trim strings, lowercase the email and give bare websites an https:// prefix."""
    result = dict(fields)
    for key in _TRIMMED:
        if isinstance(result.get(key), str):
            result[key] = result[key].strip()
    if isinstance(result.get("email"), str):
        result["email"] = result["email"].lower()
    if isinstance(result.get("website"), str):
        result["website"] = normalize_website(result["website"])
    return result


# ---------------------------------------------------------------------------
# Field constraints
# ---------------------------------------------------------------------------


def _check_name(value: Any) -> list[str]:
    if _blank(value):
        return ["Company name is required"]
    if len(value) > NAME_MAX_LENGTH:
        return [f"Company name cannot exceed {NAME_MAX_LENGTH} characters"]
    return []


def _check_description(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, str):
        return ["Description must be a string"]
    if len(value) > DESCRIPTION_MAX_LENGTH:
        return [f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters"]
    return []


def _check_industry(value: Any) -> list[str]:
    return [] if value in INDUSTRIES else ["Please select a valid industry"]


def _check_founded_year(value: Any) -> list[str]:
    if value is None:
        return []
    if not _is_integer(value):
        return ["Please provide a valid founded year"]
    if value < MIN_FOUNDED_YEAR:
        return [f"Founded year must be after {MIN_FOUNDED_YEAR}"]
    if value > current_year():
        return ["Founded year cannot be in the future"]
    return []


def _check_location(value: Any) -> list[str]:
    if not isinstance(value, list) or not value:
        return ["At least one location is required"]
    if any(_blank(loc) for loc in value):
        return ["Each location must be a non-empty string"]
    if any(len(loc) > LOCATION_MAX_LENGTH for loc in value):
        return [f"Each location must not exceed {LOCATION_MAX_LENGTH} characters"]
    return []


def _check_website(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if not isinstance(value, str) or not WEBSITE_RE.match(value):
        return ["Please provide a valid website URL"]
    return []


def _check_email(value: Any) -> list[str]:
    if not isinstance(value, str) or not EMAIL_RE.match(value):
        return ["Please enter a valid email"]
    return []


def _check_phone(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if not isinstance(value, str) or not PHONE_RE.match(PHONE_SEPARATORS_RE.sub("", value)):
        return ["Please provide a valid phone number"]
    return []


def _check_employees(value: Any) -> list[str]:
    if value is None:
        return []
    if not _is_integer(value):
        return ["Employee count must be a whole number"]
    if value < MIN_EMPLOYEES:
        return [f"Employee count must be at least {MIN_EMPLOYEES}"]
    if value > MAX_EMPLOYEES:
        return ["Employee count seems unrealistic"]
    return []


def _check_is_active(value: Any) -> list[str]:
    return [] if isinstance(value, bool) else ["isActive must be a boolean"]


def _check_logo(value: Any) -> list[str]:
    if value is None or isinstance(value, str):
        return []
    return ["Logo must be a string"]


def _check_headquarters(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, str):
        return ["Headquarters must be a string"]
    if len(value) > HEADQUARTERS_MAX_LENGTH:
        return [f"Headquarters cannot exceed {HEADQUARTERS_MAX_LENGTH} characters"]
    return []


def _check_revenue(value: Any) -> list[str]:
    if value is None:
        return []
    if not _is_number(value):
        return ["Revenue must be a number"]
    try:
        finite = math.isfinite(float(value))
    except OverflowError:
        finite = False
    if not finite:
        return ["Revenue must be a finite number"]
    if value < 0:
        return ["Revenue cannot be negative"]
    return []


FIELD_CHECKS: dict[str, Callable[[Any], list[str]]] = {
    "name": _check_name,
    "description": _check_description,
    "industry": _check_industry,
    "foundedYear": _check_founded_year,
    "location": _check_location,
    "website": _check_website,
    "email": _check_email,
    "phone": _check_phone,
    "employees": _check_employees,
    "isActive": _check_is_active,
    "logo": _check_logo,
    "headquarters": _check_headquarters,
    "revenue": _check_revenue,
}


def constraint_errors(fields: Mapping[str, Any]) -> list[str]:
    """Run the constraint of every present field and collect the messages."""
    errors: list[str] = []
    for key, check in FIELD_CHECKS.items():
        if key in fields:
            errors.extend(check(fields[key]))
    return errors


def ensure_valid(fields: Mapping[str, Any]) -> None:
    errors = constraint_errors(fields)
    if errors:
        raise InvalidInputError(errors=errors)


def to_columns(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Rename wire keys to ORM attribute names."""
    return {FIELD_COLUMNS[key]: value for key, value in fields.items() if key in FIELD_COLUMNS}
