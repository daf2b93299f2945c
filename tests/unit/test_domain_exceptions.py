"""Tests for the domain exception hierarchy and its JSON shape."""

from ca_admin.application.dtos.cascade import CascadeDeleteResult, CascadeError
from ca_admin.domain.exceptions import (
    CaAdminException,
    PartialCascadeException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    StoreException,
    ValidationException,
)


def test_base_exception_defaults_code_to_class_name() -> None:
    exc = CaAdminException("boom")
    assert exc.error_code == "CaAdminException"
    assert exc.to_dict() == {"error": "CaAdminException", "message": "boom", "details": {}}


def test_validation_exception_carries_field() -> None:
    exc = ValidationException("Contact number is required", field="contact")
    assert exc.to_dict()["error"] == "VALIDATION_ERROR"
    assert exc.details == {"field": "contact"}
    assert ValidationException("x").details == {}


def test_resource_exceptions() -> None:
    missing = ResourceNotFoundException("client", "9876543210")
    assert missing.message == "client not found: 9876543210"
    assert missing.details == {"resource_type": "client", "resource_id": "9876543210"}
    exists = ResourceAlreadyExistsException("year", "2024-25")
    assert exists.error_code == "RESOURCE_ALREADY_EXISTS"


def test_store_exception_keeps_code_and_path() -> None:
    exc = StoreException("not-found", "No document", "tenants/t1")
    assert exc.code == "not-found"
    assert exc.error_code == "STORE_ERROR"
    assert exc.details == {"code": "not-found", "path": "tenants/t1"}
    assert "path" not in StoreException("unavailable", "down").details


def test_partial_cascade_exception_reports_result() -> None:
    result = CascadeDeleteResult(client_path="tenants/t1/clients/c1", deleted_years=2)
    result.errors.append(CascadeError("client", "tenants/t1/clients/c1", "denied"))
    exc = PartialCascadeException(result)
    assert exc.result is result
    assert exc.error_code == "PARTIAL_CASCADE"
    assert exc.details["deleted_years"] == 2
    assert exc.details["errors"] == ["denied"]
    assert not result.complete
