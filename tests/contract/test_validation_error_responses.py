"""Contract tests for validation failure HTTP responses."""

from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from validation_response.core.config import ValidationResponseSettings
from validation_response.core.errors import ValidationFailedError
from validation_response.core.errors import register_error_handlers
from validation_response.main import create_app
from validation_response.schemas.violation import Violation


class _Item(BaseModel):
    name: str
    quantity: int


class _OrderPayload(BaseModel):
    customer: str
    items: list[_Item]


class _InventoryPayload(BaseModel):
    labels: dict[str, int]
    quantity: int | list[int]


def _build_client(settings: ValidationResponseSettings | None = None) -> TestClient:
    app = create_app(settings)

    @app.post("/orders")
    def create_order(payload: _OrderPayload) -> dict[str, str]:
        return {"customer": payload.customer}

    @app.post("/inventory")
    def update_inventory(payload: _InventoryPayload) -> dict[str, int]:
        return {"labels": len(payload.labels)}

    @app.get("/domain")
    def domain_error() -> None:
        raise ValidationFailedError(
            [
                Violation(path="items[0]", message="Item is invalid", code="item_invalid"),
                Violation(path="items[0].name", message="Name is required"),
            ]
        )

    @app.get("/other")
    def other_error() -> None:
        raise RuntimeError("boom")

    return TestClient(app, raise_server_exceptions=False)


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_request_validation_errors_use_simple_format_by_default() -> None:
    client = _build_client()

    response = client.post("/orders", json={"items": [{"name": "Pen", "quantity": "two"}]})

    assert response.status_code == 422
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {
        "errors": {
            "customer": ["Field required"],
            "items[0].quantity": ["Input should be a valid integer, unable to parse string as an integer"],
        }
    }


def test_request_validation_errors_use_nested_format() -> None:
    client = _build_client(ValidationResponseSettings(format="nested"))

    response = client.post("/orders", json={"customer": "Ada", "items": [{"quantity": 1}, {"name": "Pen"}]})

    assert response.status_code == 422
    assert response.json() == {
        "errors": {
            "items": {
                "0": {"name": ["Field required"]},
                "1": {"quantity": ["Field required"]},
            }
        }
    }


def test_request_validation_errors_use_problem_details_format() -> None:
    client = _build_client(
        ValidationResponseSettings(
            status_code=400,
            format="rfc7807",
            rfc7807_type="https://example.com/problems/validation",
            rfc7807_title="Invalid order",
        )
    )

    response = client.post("/orders", json={"items": []})

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("application/problem+json")
    assert response.json() == {
        "type": "https://example.com/problems/validation",
        "title": "Invalid order",
        "status": 422,
        "detail": "1 validation error detected",
        "violations": [{"field": "customer", "message": "Field required", "code": "missing"}],
    }


def test_missing_body_maps_to_root_violation() -> None:
    client = _build_client(ValidationResponseSettings(format="nested"))

    response = client.post("/orders")

    assert response.status_code == 422
    assert list(response.json()["errors"]) == ["_root"]


def test_application_violations_are_formatted() -> None:
    client = _build_client(ValidationResponseSettings(format="nested"))

    response = client.get("/domain")

    assert response.status_code == 422
    assert response.json() == {
        "errors": {"items": {"0": {"_root": ["Item is invalid"], "name": ["Name is required"]}}},
    }


def test_custom_status_code_is_used() -> None:
    client = _build_client(ValidationResponseSettings(status_code=400))

    response = client.get("/domain")

    assert response.status_code == 400
    assert response.json()["errors"]["items[0]"] == ["Item is invalid"]


def test_other_exceptions_are_not_intercepted() -> None:
    client = _build_client()

    response = client.get("/other")

    assert response.status_code == 500


def test_settings_are_loaded_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VALIDATION_RESPONSE_FORMAT", "rfc7807")
    monkeypatch.setenv("VALIDATION_RESPONSE_STATUS_CODE", "409")
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/domain")
    def domain_error() -> None:
        raise ValidationFailedError([Violation(path="name", message="Name is required")])

    response = TestClient(app).get("/domain")

    assert response.status_code == 409
    assert response.json()["detail"] == "1 validation error detected"


def test_violation_responses_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    client = _build_client()

    with caplog.at_level(logging.INFO, logger="validation_response.core.errors"):
        client.get("/domain")

    assert "Returning 2 validation violation(s) with format=simple status=422" in caplog.text


def test_request_union_and_dict_fields_keep_their_field_paths() -> None:
    client = _build_client(ValidationResponseSettings(format="nested"))

    response = client.post("/inventory", json={"labels": {"a.b": "x", "c[0]": "y"}, "quantity": "z"})

    assert response.status_code == 422
    errors = response.json()["errors"]
    assert set(errors) == {"labels", "quantity"}
    assert set(errors["labels"]) == {"a.b", "c[0]"}
    assert len(errors["quantity"]) == 2


def test_request_dict_keys_are_bracketed_in_simple_format() -> None:
    client = _build_client()

    response = client.post("/inventory", json={"labels": {"a.b": "x"}, "quantity": 1})

    assert response.status_code == 422
    assert response.json() == {
        "errors": {'labels["a.b"]': ["Input should be a valid integer, unable to parse string as an integer"]}
    }
