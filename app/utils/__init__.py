"""Utility modules for the Company Data Management API."""

from app.utils.openapi import OpenAPIGenerator, install_openapi

__all__ = ["OpenAPIGenerator", "install_openapi"]
