"""Tests for domain value objects and store path types."""

import pytest

from ca_admin.domain.exceptions import ValidationException
from ca_admin.domain.value_objects import (
    ContactNumber,
    EmailAddress,
    FiscalYear,
    PanNumber,
    sort_years_desc,
    year_sort_key,
)
from ca_admin.domain.value_objects.paths import CollectionPath, DocumentPath


def test_contact_number_strips_formatting() -> None:
    assert ContactNumber.parse("(987) 654-3210").value == "9876543210"
    assert ContactNumber.parse(" 98765 43210 ").value == "9876543210"


@pytest.mark.parametrize("raw", ["", None, "987654321", "98765432101", "1234567890"])
def test_contact_number_rejects_invalid(raw) -> None:
    with pytest.raises(ValidationException) as exc_info:
        ContactNumber.parse(raw)
    assert exc_info.value.details == {"field": "contact"}


def test_pan_number_is_uppercased_and_optional() -> None:
    assert PanNumber.parse("abcde 1234f").value == "ABCDE1234F"
    assert PanNumber.parse(None).value == ""
    assert PanNumber.parse("   ").value == ""


def test_pan_number_rejects_bad_shape() -> None:
    with pytest.raises(ValidationException):
        PanNumber.parse("ABCD12345F")


def test_email_address_is_normalized_and_optional() -> None:
    assert EmailAddress.parse("  Asha@Example.COM ").value == "asha@example.com"
    assert EmailAddress.parse(None).value == ""
    with pytest.raises(ValidationException):
        EmailAddress.parse("not-an-email")


@pytest.mark.parametrize(
    ("raw", "label"),
    [(2024, "2024-25"), ("2024", "2024-25"), ("2024-25", "2024-25"), ("1999", "1999-00")],
)
def test_fiscal_year_parse(raw, label) -> None:
    year = FiscalYear.parse(raw)
    assert year.value == label
    assert year.start_year == int(label[:4])


@pytest.mark.parametrize("raw", ["2024-26", "24-25", "abcd", "", None, "1800"])
def test_fiscal_year_rejects_invalid(raw) -> None:
    with pytest.raises(ValidationException):
        FiscalYear.parse(raw)


def test_years_sort_newest_first_without_duplicates() -> None:
    assert sort_years_desc(["2022-23", "2024-25", "2023-24", "2024-25"]) == [
        "2024-25",
        "2023-24",
        "2022-23",
    ]
    assert year_sort_key("junk") == -1


def test_path_parity_is_enforced() -> None:
    with pytest.raises(ValueError):
        DocumentPath(("tenants",))
    with pytest.raises(ValueError):
        CollectionPath(("tenants", "t1"))
    with pytest.raises(ValueError):
        DocumentPath(("tenants", "a/b"))


def test_path_navigation() -> None:
    doc = DocumentPath.from_string("tenants/t1/clients/c1")
    assert doc.id == "c1"
    assert doc.parent == CollectionPath(("tenants", "t1", "clients"))
    assert doc.collection("years").path == "tenants/t1/clients/c1/years"
    assert CollectionPath(("tenants",)).parent is None
    assert doc.parent.parent == DocumentPath(("tenants", "t1"))


@pytest.mark.parametrize("raw", ["2024", 2024, "2024-25", " 2019-20 "])
def test_existing_year_id_is_kept_as_written(raw) -> None:
    assert FiscalYear.existing(raw) == str(raw).strip()


@pytest.mark.parametrize("raw", ["24", "2024-5", "1800", "2024/25", "", None])
def test_existing_year_id_rejects_invalid(raw) -> None:
    with pytest.raises(ValidationException):
        FiscalYear.existing(raw)
