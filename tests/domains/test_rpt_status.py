# tests/domains/test_rpt_status.py

"""
보고서 상태 계산 함수(app.domains.rpt.status)에 대한 단위 테스트 모듈입니다.
"""

from types import SimpleNamespace

import pytest

from app.domains.rpt.status import (
    CompletionSummary,
    ReportStatus,
    calculate_status,
    completion_summary,
    is_field_filled,
)

BLOOD_GROUP_FIELDS = [
    {"field_name": "blood_group", "is_required": True},
    {"field_name": "rh_factor", "is_required": True},
]


# =============================================================================
# 1. is_field_filled
# =============================================================================
@pytest.mark.parametrize(
    "value, expected",
    [
        (None, False),
        ("", False),
        ("   ", False),
        ("\t\n", False),
        ("A", True),
        ("  A  ", True),
        (0, True),
        (0.0, True),
        (False, True),
        (True, True),
        (15.5, True),
    ],
)
def test_is_field_filled(value, expected):
    assert is_field_filled(value) is expected


# =============================================================================
# 2. calculate_status
# =============================================================================
def test_status_values_are_literal_strings():
    assert [s.value for s in ReportStatus] == ["pending", "in-progress", "completed"]


def test_blood_group_examples():
    assert calculate_status(BLOOD_GROUP_FIELDS, {}) == ReportStatus.PENDING
    assert calculate_status(BLOOD_GROUP_FIELDS, {"blood_group": "A"}) == ReportStatus.IN_PROGRESS
    assert calculate_status(
        BLOOD_GROUP_FIELDS, {"blood_group": "A", "rh_factor": "POSITIVE"}
    ) == ReportStatus.COMPLETED
    assert calculate_status(BLOOD_GROUP_FIELDS, {"blood_group": "   "}) == ReportStatus.PENDING


def test_empty_field_list():
    assert calculate_status([], {}) == ReportStatus.PENDING
    assert calculate_status([], {"any": "x"}) == ReportStatus.COMPLETED


def test_no_required_fields_counts_keys_only():
    # 필수 필드가 없으면 값의 내용과 관계없이 키가 있는지만 봅니다.
    fields = [{"field_name": "remarks", "is_required": False}]
    assert calculate_status(fields, {}) == ReportStatus.PENDING
    assert calculate_status(fields, {"remarks": ""}) == ReportStatus.COMPLETED
    assert calculate_status(fields, None) == ReportStatus.PENDING


def test_empty_values_with_required_field_is_pending():
    fields = [{"field_name": "hb", "is_required": True}, {"field_name": "note", "is_required": False}]
    assert calculate_status(fields, {}) == ReportStatus.PENDING


def test_only_optional_field_filled_is_in_progress():
    fields = [{"field_name": "hb", "is_required": True}, {"field_name": "note", "is_required": False}]
    assert calculate_status(fields, {"note": "hemolysed"}) == ReportStatus.IN_PROGRESS


def test_optional_whitespace_value_does_not_count_as_filled():
    fields = [{"field_name": "hb", "is_required": True}, {"field_name": "note", "is_required": False}]
    assert calculate_status(fields, {"note": "   "}) == ReportStatus.PENDING
    assert calculate_status(fields, {"note": "   ", "hb": None}) == ReportStatus.PENDING


def test_zero_and_false_count_as_filled():
    fields = [{"field_name": "basophil", "is_required": True}, {"field_name": "flag", "is_required": True}]
    assert calculate_status(fields, {"basophil": 0, "flag": False}) == ReportStatus.COMPLETED


def test_unknown_keys_make_report_in_progress():
    assert calculate_status(BLOOD_GROUP_FIELDS, {"unrelated": "x"}) == ReportStatus.IN_PROGRESS


def test_accepts_objects_and_camel_case_mappings():
    objects = [SimpleNamespace(field_name="blood_group", is_required=True)]
    camel = [{"fieldName": "blood_group", "isRequired": True}]
    values = {"blood_group": "O"}
    assert calculate_status(objects, values) == ReportStatus.COMPLETED
    assert calculate_status(camel, values) == ReportStatus.COMPLETED


def test_calculate_status_is_deterministic():
    values = {"blood_group": "A"}
    first = calculate_status(BLOOD_GROUP_FIELDS, values)
    second = calculate_status(BLOOD_GROUP_FIELDS, values)
    assert first == second
    assert values == {"blood_group": "A"}


def test_status_can_move_backwards():
    # Given: 모든 필수 필드가 채워진 값
    values = {"blood_group": "A", "rh_factor": "POSITIVE"}
    order = [ReportStatus.PENDING, ReportStatus.IN_PROGRESS, ReportStatus.COMPLETED]
    completed = calculate_status(BLOOD_GROUP_FIELDS, values)

    # When: 필수 값을 하나씩 제거
    without_rh = {k: v for k, v in values.items() if k != "rh_factor"}
    regressed = calculate_status(BLOOD_GROUP_FIELDS, without_rh)
    cleared = calculate_status(BLOOD_GROUP_FIELDS, {"blood_group": ""})

    # Then: 상태는 증가하지 않고 뒤로 돌아갈 수 있습니다.
    assert completed == ReportStatus.COMPLETED
    assert regressed == ReportStatus.IN_PROGRESS
    assert cleared == ReportStatus.PENDING
    assert order.index(regressed) <= order.index(completed)
    assert order.index(cleared) <= order.index(regressed)


# =============================================================================
# 3. completion_summary
# =============================================================================
def test_completion_summary_counts_required_only():
    fields = BLOOD_GROUP_FIELDS + [{"field_name": "note", "is_required": False}]
    summary = completion_summary(fields, {"blood_group": "B", "note": "ok"})
    assert summary == CompletionSummary(filled_count=1, total_required=2, percent_complete=50)


def test_completion_summary_without_required_fields_is_complete():
    assert completion_summary([], {}).percent_complete == 100
    assert completion_summary([{"field_name": "note", "is_required": False}], {"note": "x"}).percent_complete == 100


def test_completion_summary_rounds_half_up():
    fields = [{"field_name": f"f{i}", "is_required": True} for i in range(8)]
    # 1/8 = 12.5% -> 13
    assert completion_summary(fields, {"f0": 1}).percent_complete == 13
    # 3/8 = 37.5% -> 38
    assert completion_summary(fields, {"f0": 1, "f1": 1, "f2": 1}).percent_complete == 38


@pytest.mark.parametrize("filled", range(0, 4))
def test_completion_summary_percent_in_range(filled):
    fields = [{"field_name": f"f{i}", "is_required": True} for i in range(3)]
    values = {f"f{i}": "x" for i in range(filled)}
    summary = completion_summary(fields, values)
    assert 0 <= summary.percent_complete <= 100
    assert summary.filled_count == min(filled, 3)
