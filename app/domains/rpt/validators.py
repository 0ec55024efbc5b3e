# app/domains/rpt/validators.py

"""
보고서 입력 값의 필드 단위/폼 단위 검증 함수 모음입니다.

- 필수 입력, 숫자 형식, 드롭다운 선택지, 텍스트 타입을 검사합니다.
- 정상 범위를 벗어난 값은 오류가 아닙니다. 화면 표시용 지시자(validate_range_indicator)로만 사용합니다.
"""

import math
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

from .status import is_field_filled


class FieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DROPDOWN = "dropdown"
    TEXTAREA = "textarea"


class FieldValidationError(BaseModel):
    field_name: str
    message: str


class ValidationResult(BaseModel):
    is_valid: bool = True
    errors: List[FieldValidationError] = Field(default_factory=list)


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _field_type_value(field: Any) -> str:
    field_type = field.field_type
    return field_type.value if isinstance(field_type, Enum) else str(field_type)


# =============================================================================
# 필드 단위 검증 함수
# =============================================================================
def validate_numeric_field(value: Any) -> bool:
    """숫자로 해석 가능한 유한한 값인지 확인합니다. bool은 숫자로 보지 않습니다."""
    if _is_empty(value) or isinstance(value, bool):
        return False

    if isinstance(value, (int, float)):
        try:
            return math.isfinite(value)
        except OverflowError:
            # float로 표현할 수 없는 큰 정수
            return False

    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return False
        try:
            return math.isfinite(float(trimmed))
        except ValueError:
            return False

    return False


def validate_required_field(value: Any) -> bool:
    """필수 필드에 값이 있는지 확인합니다. 0과 False는 유효한 값입니다."""
    return is_field_filled(value)


def validate_range_indicator(value: Any, field: Any) -> bool:
    """
    숫자 값이 필드의 정상 범위를 벗어났으면 True를 반환합니다.
    범위가 정의되지 않았거나 숫자가 아니면 판단할 수 없으므로 False입니다.
    """
    if field.normal_range_min is None or field.normal_range_max is None:
        return False

    if not validate_numeric_field(value):
        return False

    numeric_value = float(value.strip()) if isinstance(value, str) else float(value)
    return numeric_value < field.normal_range_min or numeric_value > field.normal_range_max


def get_field_validation_message(field: Any, validation_type: str) -> str:
    label = field.field_label
    if validation_type == "required":
        return f"{label} is required"
    if validation_type == "numeric":
        return f"{label} must be a valid number"
    if validation_type == "range":
        if field.normal_range_text:
            return f"{label} is outside normal range ({field.normal_range_text})"
        return f"{label} is outside normal range"
    return f"{label} is invalid"


# =============================================================================
# 폼 단위 검증 함수
# =============================================================================
def validate_report_field(
    field: Any, value: Any, *, enforce_required: bool = True
) -> Optional[FieldValidationError]:
    """
    단일 필드 값을 검증하여 첫 번째 오류를 반환합니다. 통과하면 None입니다.

    enforce_required=False이면 필수 필드가 비어 있어도 오류로 보지 않습니다.
    (부분 저장 시 사용)
    """
    if field.is_required and enforce_required and not validate_required_field(value):
        return FieldValidationError(
            field_name=field.field_name,
            message=get_field_validation_message(field, "required"),
        )

    if _is_empty(value):
        return None

    field_type = _field_type_value(field)

    if field_type == FieldType.NUMBER.value and not validate_numeric_field(value):
        return FieldValidationError(
            field_name=field.field_name,
            message=get_field_validation_message(field, "numeric"),
        )

    if field_type == FieldType.DROPDOWN.value and field.dropdown_options and value:
        if value not in field.dropdown_options:
            return FieldValidationError(
                field_name=field.field_name,
                message=f"{field.field_label} must be one of: {', '.join(field.dropdown_options)}",
            )

    if field_type in (FieldType.TEXT.value, FieldType.TEXTAREA.value) and not isinstance(value, str):
        return FieldValidationError(
            field_name=field.field_name,
            message=f"{field.field_label} must be text",
        )

    return None


def validate_report_form(
    fields: Iterable[Any], values: Optional[Mapping[str, Any]], *, enforce_required: bool = True
) -> ValidationResult:
    """필드 정의 목록 전체에 대해 값을 검증하고 오류를 모아 반환합니다."""
    values = values or {}
    errors: List[FieldValidationError] = []
    for field in fields:
        error = validate_report_field(field, values.get(field.field_name), enforce_required=enforce_required)
        if error is not None:
            errors.append(error)
    return ValidationResult(is_valid=not errors, errors=errors)


def out_of_range_fields(fields: Iterable[Any], values: Optional[Mapping[str, Any]]) -> List[str]:
    """정상 범위를 벗어난 숫자 필드의 이름 목록."""
    values = values or {}
    return [
        field.field_name
        for field in fields
        if _field_type_value(field) == FieldType.NUMBER.value
        and validate_range_indicator(values.get(field.field_name), field)
    ]


def validation_errors_to_map(errors: Iterable[FieldValidationError]) -> Dict[str, str]:
    return {error.field_name: error.message for error in errors}


def has_validation_errors(result: ValidationResult) -> bool:
    return not result.is_valid or len(result.errors) > 0
