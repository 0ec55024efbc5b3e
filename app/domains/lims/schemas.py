# app/domains/lims/schemas.py

"""
'lims' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.
보고서 작성 화면에서 사용하는 환자 + 시험 배정 목록 응답을 직렬화합니다.
"""

import uuid
from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, Field as PydanticField


# =============================================================================
# 1. 시험 배정 (TestAssignment) 스키마
# =============================================================================
class TestAssignmentWithStatus(BaseModel):
    id: uuid.UUID
    test_name: str = PydanticField(description="시험 표시명 (예: Complete Blood Count)")
    assigned_date: Optional[datetime] = PydanticField(default=None, description="시험 배정 일시")
    report_status: str = PydanticField(default="pending", description="보고서 상태 (pending, in-progress, completed)")
    report_type_code: str = PydanticField(description="보고서 유형 코드 (예: BLOOD_GROUP)")


class TestAssignmentListResponse(BaseModel):
    patient_id: uuid.UUID
    test_assignments: List[TestAssignmentWithStatus] = PydanticField(default_factory=list)


# =============================================================================
# 2. 환자 (Patient) 스키마
# =============================================================================
class PatientWithTests(BaseModel):
    id: uuid.UUID
    name: str = PydanticField(description="호칭을 포함한 환자 이름")
    age: int = PydanticField(description="반올림한 나이 (년)")
    gender: str
    contact: str
    test_assignments: List[TestAssignmentWithStatus] = PydanticField(default_factory=list)


class PatientsWithTestsResponse(BaseModel):
    patients: List[PatientWithTests] = PydanticField(default_factory=list)
