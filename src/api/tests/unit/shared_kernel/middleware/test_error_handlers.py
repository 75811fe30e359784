"""Unit tests for the envelope-rendering exception handlers."""

from __future__ import annotations

from unittest.mock import create_autospec

import pytest
from fastapi import FastAPI, HTTPException, status
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field, field_validator

from infrastructure.observability import RequestErrorProbe
from shared_kernel.exceptions import (
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from shared_kernel.middleware import http_error, register_error_handlers


class Payload(BaseModel):
    name: str = Field(..., min_length=2)
    count: int = 1

    @field_validator("count")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Count must be positive.")
        return value


def build_app(probe, debug: bool = False) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app, debug=debug, probe=probe)

    @app.post("/payload")
    async def accept(payload: Payload) -> dict:
        return {"ok": True}

    @app.get("/conflict")
    async def conflict() -> dict:
        raise ConflictError("Analysis already running", code="ANALYSIS_IN_PROGRESS")

    @app.get("/converted")
    async def converted() -> dict:
        try:
            raise NotFoundError("Brand not found", code="BRAND_NOT_FOUND")
        except NotFoundError as e:
            raise http_error(e) from e

    @app.get("/details")
    async def details() -> dict:
        raise ValidationError(
            "No evidence", code="NO_EVIDENCE", details={"suggestion": "brand_name_only"}
        )

    @app.get("/upstream")
    async def upstream() -> dict:
        raise ExternalServiceError("model timed out", code="ANALYSIS_FAILED")

    @app.get("/plain-http")
    async def plain_http() -> dict:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Nope")

    @app.get("/boom")
    async def boom() -> dict:
        raise RuntimeError("db exploded")

    return app


@pytest.fixture
def mock_probe():
    return create_autospec(RequestErrorProbe, instance=True)


@pytest.fixture
def client(mock_probe) -> TestClient:
    return TestClient(build_app(mock_probe), raise_server_exceptions=False)


class TestExpectedErrors:
    """Taxonomy errors keep their message and code."""

    def test_raised_error_is_rendered(self, client, mock_probe):
        response = client.get("/conflict")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {
            "success": False,
            "error": "Analysis already running",
            "code": "ANALYSIS_IN_PROGRESS",
        }
        mock_probe.request_rejected.assert_called_once_with(
            path="/conflict", status_code=409, error="Analysis already running"
        )

    def test_http_error_conversion(self, client):
        response = client.get("/converted")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {
            "success": False,
            "error": "Brand not found",
            "code": "BRAND_NOT_FOUND",
        }

    def test_details_are_included(self, client):
        response = client.get("/details")

        assert response.json()["details"] == {"suggestion": "brand_name_only"}

    def test_plain_http_exception(self, client):
        response = client.get("/plain-http")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"success": False, "error": "Nope"}


class TestValidationErrors:
    """Request validation reports only the first violation as a 400."""

    def test_missing_field(self, client):
        response = client.post("/payload", json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {
            "success": False,
            "error": "name is required",
            "code": "VALIDATION_ERROR",
        }

    def test_value_error_prefix_is_stripped(self, client):
        response = client.post("/payload", json={"name": "Acme", "count": 0})

        assert response.json()["error"] == "Count must be positive."

    def test_constraint_message_names_field(self, client):
        response = client.post("/payload", json={"name": "A"})

        assert response.json()["error"].startswith("name: ")


class TestServerErrors:
    """Internal detail never leaks outside debug mode."""

    def test_external_failure_is_generic(self, client, mock_probe):
        response = client.get("/upstream")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {
            "success": False,
            "error": "Internal server error",
            "code": "ANALYSIS_FAILED",
        }
        mock_probe.unhandled_error.assert_called_once()

    def test_unexpected_exception_is_generic(self, client, mock_probe):
        response = client.get("/boom")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"success": False, "error": "Internal server error"}
        error = mock_probe.unhandled_error.call_args.kwargs["error"]
        assert isinstance(error, RuntimeError)

    def test_debug_mode_echoes_detail(self, mock_probe):
        client = TestClient(
            build_app(mock_probe, debug=True), raise_server_exceptions=False
        )

        upstream = client.get("/upstream").json()
        boom = client.get("/boom").json()

        assert upstream["error"] == "model timed out"
        assert boom["details"] == "RuntimeError: db exploded"
