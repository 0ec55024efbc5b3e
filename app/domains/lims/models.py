# app/domains/lims/models.py

"""
'lims' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

환자(Patient)와 환자에게 배정된 시험(TestAssignment)을 다룹니다.
환자 등록 화면/엔드포인트는 이 API의 범위가 아니며, 보고서 화면이 참조하는 읽기 모델로 사용합니다.
"""

import uuid
from enum import Enum
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime, UTC

from sqlalchemy import Enum as SAEnum, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from sqlmodel import Field, Relationship, SQLModel, Column

# 순환 임포트 방지를 위한 TYPE_CHECKING
if TYPE_CHECKING:
    from app.domains.rpt.models import ReportInstance


# =============================================================================
# Enum 정의
# =============================================================================
class TestType(str, Enum):
    """배정 가능한 시험 종류 코드입니다."""
    CBC = "CBC"     # Complete Blood Count
    BG = "BG"       # Blood Group
    VDRL = "VDRL"   # Venereal Disease Research Laboratory


class AssignmentStatus(str, Enum):
    """시험 배정 자체의 진행 상태 (보고서 상태와는 별개)."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# 시험 종류 코드 -> 보고서 유형 코드
TEST_TYPE_TO_REPORT_TYPE_CODE = {
    TestType.CBC: "CBC",
    TestType.BG: "BLOOD_GROUP",
    TestType.VDRL: "VDRL",
}

# 시험 종류 코드 -> 화면 표시명
TEST_TYPE_DISPLAY_NAMES = {
    TestType.CBC: "Complete Blood Count",
    TestType.BG: "Blood Group",
    TestType.VDRL: "VDRL Test",
}


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# =============================================================================
# 1. lims_patients 테이블 모델
# =============================================================================
class PatientBase(SQLModel):
    mobile_number: str = Field(max_length=20, index=True, description="연락처 (휴대폰 번호)")
    title: str = Field(max_length=10, description="호칭 (Mr., Mrs., Ms., Dr., Master, Miss)")
    first_name: str = Field(max_length=100, description="이름")
    last_name: Optional[str] = Field(default=None, max_length=100, description="성")
    sex: str = Field(max_length=10, description="성별 (Male, Female, Other)")
    age_years: int = Field(default=0, ge=0, description="나이 (년)")
    age_months: int = Field(default=0, ge=0, le=11, description="나이 (개월)")
    age_days: int = Field(default=0, ge=0, le=31, description="나이 (일)")
    referred_by: Optional[str] = Field(default=None, max_length=255, description="의뢰 의사")


class Patient(PatientBase, table=True):
    __tablename__ = "lims_patients"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_by: Optional[uuid.UUID] = Field(default=None, description="등록한 사용자 ID (인증 공급자)")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )

    # --- 관계 정의 ---
    test_assignments: List["TestAssignment"] = Relationship(
        back_populates="patient", sa_relationship_kwargs={'cascade': 'all, delete-orphan'}
    )

    @property
    def full_name(self) -> str:
        """호칭을 포함한 표시용 이름입니다. 성이 없으면 생략합니다."""
        if self.last_name:
            return f"{self.title} {self.first_name} {self.last_name}"
        return f"{self.title} {self.first_name}"

    @property
    def display_age(self) -> int:
        """년/개월/일을 합산한 나이를 가장 가까운 정수 년으로 반올림합니다."""
        total_age = self.age_years + (self.age_months or 0) / 12 + (self.age_days or 0) / 365
        return int(total_age + 0.5)


# =============================================================================
# 2. lims_test_assignments 테이블 모델
# =============================================================================
class TestAssignment(SQLModel, table=True):
    __tablename__ = "lims_test_assignments"
    __table_args__ = (
        UniqueConstraint("patient_id", "test_type", name="uq_test_assignment_patient_test_type"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    patient_id: uuid.UUID = Field(foreign_key="lims_patients.id", index=True, description="환자 ID (FK)")
    test_type: TestType = Field(
        sa_column=Column(
            SAEnum(TestType, native_enum=False, length=20, values_callable=_enum_values),
            nullable=False,
        ),
        description="시험 종류 (CBC, BG, VDRL)"
    )
    status: AssignmentStatus = Field(
        default=AssignmentStatus.PENDING,
        sa_column=Column(
            SAEnum(AssignmentStatus, native_enum=False, length=20, values_callable=_enum_values),
            nullable=False,
            default=AssignmentStatus.PENDING.value,
        ),
        description="시험 배정 상태"
    )
    assigned_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), index=True),
        description="시험 배정 일시"
    )
    assigned_by: Optional[uuid.UUID] = Field(default=None, description="배정한 사용자 ID (인증 공급자)")
    completed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(TIMESTAMP(timezone=True)), description="시험 완료 일시"
    )
    notes: Optional[str] = Field(default=None, description="비고")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )

    # --- 관계 정의 ---
    patient: Optional[Patient] = Relationship(back_populates="test_assignments")
    report_instance: Optional["ReportInstance"] = Relationship(
        back_populates="test_assignment",
        sa_relationship_kwargs={'uselist': False, 'cascade': 'all, delete-orphan'},
    )

    @property
    def report_type_code(self) -> str:
        return TEST_TYPE_TO_REPORT_TYPE_CODE.get(TestType(self.test_type), str(self.test_type))

    @property
    def test_name(self) -> str:
        return TEST_TYPE_DISPLAY_NAMES.get(TestType(self.test_type), str(self.test_type))
