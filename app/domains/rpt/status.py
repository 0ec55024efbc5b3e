# app/domains/rpt/status.py

"""
보고서 인스턴스의 완료 상태(status)를 계산하는 모듈입니다.

필드 정의 목록과 입력 값 맵만으로 상태를 도출하는 순수 함수들로 구성되며,
데이터베이스나 세션에 접근하지 않습니다. 저장 흐름(crud.report_instance.save_report)과
상태 재계산 태스크(tasks.recalculate_report_statuses)가 이 모듈을 사용합니다.
"""

from enum import Enum
from typing import Any, Iterable, Mapping, NamedTuple, Optional


class ReportStatus(str, Enum):
    """보고서 상태. 세 가지 값 외의 중간/오류 상태는 없습니다."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class CompletionSummary(NamedTuple):
    filled_count: int
    total_required: int
    percent_complete: int


def _field_attr(field: Any, name: str, camel_name: str, default: Any = None) -> Any:
    # ORM 모델/스키마 객체와 dict 입력(snake_case, camelCase 키)을 모두 허용합니다.
    if isinstance(field, Mapping):
        if name in field:
            return field[name]
        return field.get(camel_name, default)
    return getattr(field, name, default)


def _required_field_names(fields: Iterable[Any]) -> list:
    return [
        _field_attr(field, "field_name", "fieldName")
        for field in fields
        if _field_attr(field, "is_required", "isRequired", False)
    ]


def is_field_filled(value: Any) -> bool:
    """
    값이 '입력됨'으로 간주되는지 판단합니다.

    - None: False
    - 문자열: 앞뒤 공백 제거 후 길이가 0보다 크면 True
    - 그 외 (0, False 포함): True
    """
    if value is None:
        return False
    if isinstance(value, str):
        return len(value.strip()) > 0
    return True


def calculate_status(fields: Iterable[Any], values: Optional[Mapping[str, Any]]) -> ReportStatus:
    """
    필드 정의와 입력 값으로 보고서 상태를 계산합니다.

    1. 필수 필드가 없으면: 값 맵에 키가 하나라도 있으면 COMPLETED, 없으면 PENDING.
    2. 값 맵 전체에서 입력된 값이 하나도 없으면 PENDING.
    3. 모든 필수 필드가 입력되었으면 COMPLETED, 그렇지 않으면 IN_PROGRESS.
    """
    values = values or {}
    required_names = _required_field_names(fields)

    if not required_names:
        return ReportStatus.COMPLETED if len(values) > 0 else ReportStatus.PENDING

    if not any(is_field_filled(value) for value in values.values()):
        return ReportStatus.PENDING

    filled_required = sum(1 for name in required_names if is_field_filled(values.get(name)))
    if filled_required == len(required_names):
        return ReportStatus.COMPLETED

    return ReportStatus.IN_PROGRESS


def completion_summary(fields: Iterable[Any], values: Optional[Mapping[str, Any]]) -> CompletionSummary:
    """진행률 표시용 요약. 필수 필드가 없으면 100%로 간주합니다."""
    values = values or {}
    required_names = _required_field_names(fields)
    total_required = len(required_names)
    filled_count = sum(1 for name in required_names if is_field_filled(values.get(name)))

    if total_required == 0:
        return CompletionSummary(filled_count=0, total_required=0, percent_complete=100)

    # 0.5는 올림 (Python round()의 은행원 반올림을 사용하지 않음)
    percent_complete = int(filled_count * 100 / total_required + 0.5)
    return CompletionSummary(
        filled_count=filled_count,
        total_required=total_required,
        percent_complete=percent_complete,
    )
