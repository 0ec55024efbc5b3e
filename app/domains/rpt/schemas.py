# app/domains/rpt/schemas.py

"""
'rpt' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.
보고서 유형/필드 조회, 보고서 값 검증, 보고서 인스턴스 저장/조회 요청과 응답에 사용됩니다.
"""

import uuid
from typing import Any, Dict, List, Optional, Union
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .status import ReportStatus
from .validators import FieldType, FieldValidationError

# 필드 이름 -> 입력 값 (문자열, 숫자, 불리언, 없음)
FieldValue = Optional[Union[bool, int, float, str]]
ValueMap = Dict[str, FieldValue]


# =============================================================================
# 1. 보고서 유형 (ReportType) 스키마
# =============================================================================
class ReportTypeBase(BaseModel):
    code: str = Field(..., max_length=50, description="보고서 유형 코드")
    name: str = Field(..., max_length=255, description="보고서 유형 이름")
    description: Optional[str] = Field(None, description="보고서 유형 설명")
    is_active: bool = Field(True, description="활성화 여부")


class ReportTypeRead(ReportTypeBase):
    id: uuid.UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# 2. 보고서 필드 (ReportField) 스키마
# =============================================================================
class ReportFieldBase(BaseModel):
    field_name: str = Field(..., max_length=100, description="필드 내부 이름")
    field_label: str = Field(..., max_length=255, description="화면 표시 라벨")
    field_type: FieldType = Field(..., description="입력 유형")
    field_order: int = Field(..., description="표시 순서")
    is_required: bool = Field(False, description="필수 입력 여부")
    unit: Optional[str] = Field(None, max_length=50)
    normal_range_min: Optional[float] = None
    normal_range_max: Optional[float] = None
    normal_range_text: Optional[str] = Field(None, max_length=255)
    dropdown_options: Optional[List[str]] = None
    default_value: Optional[str] = None
    validation_rules: Optional[Dict[str, Any]] = None


class ReportFieldRead(ReportFieldBase):
    id: uuid.UUID
    report_type_id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)


class ReportTypeWithFields(BaseModel):
    """보고서 작성 화면 생성을 위한 유형 + 필드 목록 응답입니다."""
    report_type: ReportTypeRead
    fields: List[ReportFieldRead]


# =============================================================================
# 3. 값 검증 스키마
# =============================================================================
class ReportValuesValidateRequest(BaseModel):
    values: ValueMap = Field(default_factory=dict)


class ReportValuesValidateResponse(BaseModel):
    is_valid: bool
    errors: List[FieldValidationError] = Field(default_factory=list)
    out_of_range: List[str] = Field(default_factory=list, description="정상 범위를 벗어난 필드 이름")


# =============================================================================
# 4. 보고서 인스턴스 (ReportInstance) 스키마
# =============================================================================
class ReportInstanceSave(BaseModel):
    """보고서 저장(생성/갱신) 요청 본문입니다."""
    test_assignment_id: uuid.UUID
    report_type_id: uuid.UUID
    values: ValueMap = Field(default_factory=dict)


class ReportInstanceRead(BaseModel):
    id: uuid.UUID
    test_assignment_id: uuid.UUID
    report_type_id: uuid.UUID
    status: ReportStatus
    created_by: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReportInstanceSaveResponse(BaseModel):
    report_instance: ReportInstanceRead
    status: str = Field(..., description="수행된 작업 (created 또는 updated)")


class CompletionSummaryRead(BaseModel):
    filled_count: int
    total_required: int
    percent_complete: int


class ReportInstanceDataResponse(BaseModel):
    report_instance: Optional[ReportInstanceRead] = None
    values: ValueMap = Field(default_factory=dict)
    summary: CompletionSummaryRead


class RecalculateResponse(BaseModel):
    report_type_code: str
    job_id: Optional[str] = None
    message: str
