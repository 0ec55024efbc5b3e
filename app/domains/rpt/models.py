# app/domains/rpt/models.py

"""
'rpt' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- ReportType: 보고서 유형 (예: BLOOD_GROUP, CBC). 입력 필드들의 템플릿입니다.
- ReportField: 보고서 유형에 속한 입력 필드 정의. 화면 생성과 상태 계산에 사용됩니다.
- ReportInstance: 시험 배정 1건에 대해 작성되는 보고서 1건. 상태(status)를 저장합니다.
- ReportValue: 보고서 인스턴스의 필드 값 (EAV 패턴).
"""

import uuid
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from datetime import datetime, UTC

from sqlalchemy import JSON, Enum as SAEnum, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from sqlmodel import Field, Relationship, SQLModel, Column

from .status import ReportStatus
from .validators import FieldType

if TYPE_CHECKING:
    from app.domains.lims.models import TestAssignment


# PostgreSQL에서는 JSONB, 그 외(SQLite 테스트 DB 등)에서는 JSON으로 저장합니다.
JSONVariant = JSON().with_variant(JSONB(), "postgresql")


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# =============================================================================
# 1. rpt_report_types 테이블 모델
# =============================================================================
class ReportTypeBase(SQLModel):
    """
    보고서 유형 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    code: str = Field(max_length=50, sa_column_kwargs={"unique": True}, index=True, description="보고서 유형 코드 (예: BLOOD_GROUP, CBC)")
    name: str = Field(max_length=255, description="보고서 유형 이름")
    description: Optional[str] = Field(default=None, description="보고서 유형 설명")
    is_active: bool = Field(default=True, nullable=False, description="활성화 여부")


class ReportType(ReportTypeBase, table=True):
    __tablename__ = "rpt_report_types"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
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
    fields: List["ReportField"] = Relationship(
        back_populates="report_type",
        sa_relationship_kwargs={'cascade': 'all, delete-orphan', 'order_by': 'ReportField.field_order'},
    )


# =============================================================================
# 2. rpt_report_fields 테이블 모델
# =============================================================================
class ReportFieldBase(SQLModel):
    field_name: str = Field(max_length=100, description="필드 내부 이름 (값 저장 키)")
    field_label: str = Field(max_length=255, description="화면 표시 라벨")
    field_type: FieldType = Field(
        sa_column=Column(
            SAEnum(FieldType, native_enum=False, length=50, values_callable=_enum_values),
            nullable=False,
        ),
        description="입력 유형 (text, number, dropdown, textarea)"
    )
    field_order: int = Field(description="표시 순서")
    is_required: bool = Field(default=False, nullable=False, description="필수 입력 여부")
    unit: Optional[str] = Field(default=None, max_length=50, description="측정 단위 (예: gm/dl)")
    normal_range_min: Optional[float] = Field(default=None, description="정상 범위 하한")
    normal_range_max: Optional[float] = Field(default=None, description="정상 범위 상한")
    normal_range_text: Optional[str] = Field(default=None, max_length=255, description="정상 범위 표시 문자열 (예: 13-17)")
    dropdown_options: Optional[List[str]] = Field(default=None, sa_column=Column(JSONVariant), description="드롭다운 선택지")
    default_value: Optional[str] = Field(default=None, description="기본값")
    validation_rules: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSONVariant), description="추가 검증 규칙")


class ReportField(ReportFieldBase, table=True):
    __tablename__ = "rpt_report_fields"
    __table_args__ = (
        UniqueConstraint("report_type_id", "field_name", name="uq_report_field_type_name"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    report_type_id: uuid.UUID = Field(foreign_key="rpt_report_types.id", index=True, description="보고서 유형 ID (FK)")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )

    # --- 관계 정의 ---
    report_type: Optional[ReportType] = Relationship(back_populates="fields")


# =============================================================================
# 3. rpt_report_instances 테이블 모델
# =============================================================================
class ReportInstance(SQLModel, table=True):
    __tablename__ = "rpt_report_instances"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    # 시험 배정 1건당 보고서 인스턴스는 1건입니다.
    test_assignment_id: uuid.UUID = Field(
        foreign_key="lims_test_assignments.id", sa_column_kwargs={"unique": True}, index=True,
        description="시험 배정 ID (FK)"
    )
    report_type_id: uuid.UUID = Field(foreign_key="rpt_report_types.id", description="보고서 유형 ID (FK)")
    status: ReportStatus = Field(
        default=ReportStatus.PENDING,
        sa_column=Column(
            SAEnum(ReportStatus, native_enum=False, length=50, values_callable=_enum_values),
            nullable=False,
            index=True,
            default=ReportStatus.PENDING.value,
        ),
        description="보고서 상태 (pending, in-progress, completed)"
    )
    created_by: Optional[uuid.UUID] = Field(default=None, description="작성한 사용자 ID (인증 공급자)")
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
    completed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(TIMESTAMP(timezone=True)),
        description="모든 필수 필드가 채워진 시점 (completed가 아니면 NULL)"
    )

    # --- 관계 정의 ---
    test_assignment: Optional["TestAssignment"] = Relationship(back_populates="report_instance")
    values: List["ReportValue"] = Relationship(
        back_populates="report_instance", sa_relationship_kwargs={'cascade': 'all, delete-orphan'}
    )


# =============================================================================
# 4. rpt_report_values 테이블 모델 (EAV)
# =============================================================================
class ReportValue(SQLModel, table=True):
    __tablename__ = "rpt_report_values"
    __table_args__ = (
        UniqueConstraint("report_instance_id", "report_field_id", name="uq_report_value_instance_field"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    report_instance_id: uuid.UUID = Field(
        foreign_key="rpt_report_instances.id", ondelete="CASCADE", index=True,
        description="보고서 인스턴스 ID (FK)"
    )
    report_field_id: uuid.UUID = Field(foreign_key="rpt_report_fields.id", description="보고서 필드 ID (FK)")
    value_text: Optional[str] = Field(default=None, description="text, dropdown, textarea 필드 값")
    value_number: Optional[float] = Field(default=None, description="number 필드 값")
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
    report_instance: Optional[ReportInstance] = Relationship(back_populates="values")
