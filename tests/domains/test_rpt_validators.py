# tests/domains/test_rpt_validators.py

"""
보고서 값 검증 함수(app.domains.rpt.validators)에 대한 단위 테스트 모듈입니다.
"""

from types import SimpleNamespace

import pytest

from app.domains.rpt.validators import (
    FieldType,
    FieldValidationError,
    ValidationResult,
    get_field_validation_message,
    has_validation_errors,
    out_of_range_fields,
    validate_numeric_field,
    validate_range_indicator,
    validate_report_field,
    validate_report_form,
    validate_required_field,
    validation_errors_to_map,
)


def make_field(**overrides):
    data = {
        "field_name": "hb",
        "field_label": "Hb",
        "field_type": FieldType.NUMBER,
        "is_required": True,
        "normal_range_min": 13.0,
        "normal_range_max": 17.0,
        "normal_range_text": "13-17",
        "dropdown_options": None,
    }
    data.update(overrides)
    return SimpleNamespace(**data)


BLOOD_GROUP = make_field(
    field_name="blood_group", field_label="Blood Group", field_type=FieldType.DROPDOWN,
    normal_range_min=None, normal_range_max=None, normal_range_text=None,
    dropdown_options=["A", "B", "AB", "O"],
)
REMARKS = make_field(
    field_name="remarks", field_label="Remarks", field_type=FieldType.TEXT, is_required=False,
    normal_range_min=None, normal_range_max=None, normal_range_text=None,
)


# =============================================================================
# 1. 필드 단위 검증
# =============================================================================
@pytest.mark.parametrize(
    "value, expected",
    [
        ("123", True),
        ("123.45", True),
        (" 7 ", True),
        (0, True),
        (-2.5, True),
        ("abc", False),
        ("", False),
        ("   ", False),
        (None, False),
        (True, False),
        (float("nan"), False),
        (float("inf"), False),
        ("inf", False),
        (["1"], False),
        (10**400, False),
        ("9" * 400, False),
    ],
)
def test_validate_numeric_field(value, expected):
    assert validate_numeric_field(value) is expected


def test_validate_required_field():
    assert validate_required_field("test") is True
    assert validate_required_field(0) is True
    assert validate_required_field(False) is True
    assert validate_required_field("  ") is False
    assert validate_required_field(None) is False


def test_validate_range_indicator():
    field = make_field()
    assert validate_range_indicator(15, field) is False
    assert validate_range_indicator(5, field) is True
    assert validate_range_indicator("25", field) is True
    assert validate_range_indicator("abc", field) is False
    assert validate_range_indicator(13.0, field) is False
    assert validate_range_indicator(99, make_field(normal_range_max=None)) is False


def test_get_field_validation_message():
    field = make_field()
    assert get_field_validation_message(field, "required") == "Hb is required"
    assert get_field_validation_message(field, "numeric") == "Hb must be a valid number"
    assert get_field_validation_message(field, "range") == "Hb is outside normal range (13-17)"
    assert get_field_validation_message(make_field(normal_range_text=None), "range") == "Hb is outside normal range"
    assert get_field_validation_message(field, "other") == "Hb is invalid"


# =============================================================================
# 2. 폼 단위 검증
# =============================================================================
def test_validate_report_field_checks_in_order():
    assert validate_report_field(make_field(), None).message == "Hb is required"
    assert validate_report_field(make_field(), "x").message == "Hb must be a valid number"
    assert validate_report_field(make_field(), "15.5") is None
    assert validate_report_field(BLOOD_GROUP, "Z").message == "Blood Group must be one of: A, B, AB, O"
    assert validate_report_field(BLOOD_GROUP, "AB") is None
    assert validate_report_field(REMARKS, 12).message == "Remarks must be text"
    assert validate_report_field(REMARKS, "") is None


def test_validate_report_field_without_required_enforcement():
    assert validate_report_field(make_field(), None, enforce_required=False) is None
    assert validate_report_field(make_field(), "", enforce_required=False) is None
    assert validate_report_field(make_field(), "x", enforce_required=False).message == "Hb must be a valid number"


def test_out_of_range_value_is_not_an_error():
    result = validate_report_form([make_field()], {"hb": 25})
    assert result.is_valid is True
    assert out_of_range_fields([make_field(), BLOOD_GROUP], {"hb": 25, "blood_group": "A"}) == ["hb"]


def test_validate_report_form_collects_errors():
    # Given: 숫자 필드에 문자열, 필수 드롭다운은 비어 있음
    fields = [make_field(), BLOOD_GROUP, REMARKS]
    values = {"hb": "invalid", "blood_group": ""}

    # When
    result = validate_report_form(fields, values)

    # Then
    assert result.is_valid is False
    assert validation_errors_to_map(result.errors) == {
        "hb": "Hb must be a valid number",
        "blood_group": "Blood Group is required",
    }
    assert has_validation_errors(result) is True


def test_validate_report_form_accepts_valid_values():
    result = validate_report_form([make_field(), BLOOD_GROUP, REMARKS], {"hb": "15.5", "blood_group": "A"})
    assert result == ValidationResult(is_valid=True, errors=[])
    assert has_validation_errors(result) is False


def test_validation_errors_to_map_keeps_last_message_per_field():
    errors = [
        FieldValidationError(field_name="hb", message="first"),
        FieldValidationError(field_name="hb", message="second"),
    ]
    assert validation_errors_to_map(errors) == {"hb": "second"}
