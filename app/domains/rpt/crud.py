# app/domains/rpt/crud.py

"""
'rpt' 도메인의 CRUD 로직을 담당하는 모듈입니다.

- 보고서 유형/필드 조회 (필드 정의 제공자)
- 보고서 인스턴스 저장 흐름 (검증 -> 상태 계산 -> 인스턴스 upsert -> EAV 값 교체)
- 보고서 인스턴스 조회 및 시험 배정별 상태 맵 구성
"""

import logging
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from datetime import datetime, UTC

from fastapi import HTTPException, status
from sqlalchemy import delete as sa_delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.domains.lims import models as lims_models

from . import models as rpt_models
from . import schemas as rpt_schemas
from .status import CompletionSummary, ReportStatus, calculate_status, completion_summary
from .validators import FieldType, validate_report_form

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 보고서 유형 (ReportType) CRUD
# =============================================================================
class CRUDReportType(CRUDBase[rpt_models.ReportType]):
    def __init__(self):
        super().__init__(model=rpt_models.ReportType)

    async def get_by_code(
        self, db: AsyncSession, *, code: str, active_only: bool = False
    ) -> Optional[rpt_models.ReportType]:
        """보고서 유형 코드로 조회합니다. active_only=True이면 활성 유형만 반환합니다."""
        statement = select(self.model).where(self.model.code == code)
        if active_only:
            statement = statement.where(self.model.is_active == True)  # noqa: E712
        result = await db.execute(statement)
        return result.scalars().one_or_none()


report_type = CRUDReportType()


# =============================================================================
# 2. 보고서 필드 (ReportField) CRUD
# =============================================================================
class CRUDReportField(CRUDBase[rpt_models.ReportField]):
    def __init__(self):
        super().__init__(model=rpt_models.ReportField)

    async def get_by_report_type(
        self, db: AsyncSession, report_type_id: uuid.UUID
    ) -> List[rpt_models.ReportField]:
        """보고서 유형에 속한 필드 정의를 표시 순서(field_order)대로 반환합니다."""
        statement = (
            select(self.model)
            .where(self.model.report_type_id == report_type_id)
            .order_by(self.model.field_order)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_by_name(
        self, db: AsyncSession, *, report_type_id: uuid.UUID, field_name: str
    ) -> Optional[rpt_models.ReportField]:
        statement = select(self.model).where(
            self.model.report_type_id == report_type_id, self.model.field_name == field_name
        )
        result = await db.execute(statement)
        return result.scalars().one_or_none()


report_field = CRUDReportField()


# =============================================================================
# 3. 보고서 인스턴스 (ReportInstance) CRUD
# =============================================================================
def _is_number_field(field: rpt_models.ReportField) -> bool:
    return FieldType(field.field_type) == FieldType.NUMBER


def stored_values_map(fields: Iterable[rpt_models.ReportField], values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    입력 값 중 EAV 행으로 저장되는 값만 남긴 맵을 반환합니다.
    알 수 없는 필드와 None, 빈 문자열은 제외됩니다. 저장 시 상태 계산과 재계산이 같은 입력을 보도록 이 맵을 사용합니다.
    """
    field_names = {field.field_name for field in fields}
    return {
        name: value
        for name, value in values.items()
        if name in field_names and value is not None and value != ""
    }


def build_values_map(
    fields: Iterable[rpt_models.ReportField], value_rows: Iterable[rpt_models.ReportValue]
) -> Dict[str, Any]:
    """EAV 값 행들을 필드 이름 -> 값 맵으로 재구성합니다. 숫자 필드는 value_number를 사용합니다."""
    fields_by_id = {field.id: field for field in fields}
    values: Dict[str, Any] = {}
    for row in value_rows:
        field = fields_by_id.get(row.report_field_id)
        if field is None:
            continue
        values[field.field_name] = row.value_number if _is_number_field(field) else row.value_text
    return values


class CRUDReportInstance(CRUDBase[rpt_models.ReportInstance]):
    def __init__(self):
        super().__init__(model=rpt_models.ReportInstance)

    async def get_by_test_assignment(
        self, db: AsyncSession, *, test_assignment_id: uuid.UUID
    ) -> Optional[rpt_models.ReportInstance]:
        return await self.get_by_attribute(db, attribute="test_assignment_id", value=test_assignment_id)

    async def get_multi_by_report_type(
        self, db: AsyncSession, *, report_type_id: uuid.UUID
    ) -> List[rpt_models.ReportInstance]:
        return await self.get_multi(db, limit=None, report_type_id=report_type_id)

    async def get_values(
        self, db: AsyncSession, *, report_instance_id: uuid.UUID
    ) -> List[rpt_models.ReportValue]:
        statement = select(rpt_models.ReportValue).where(
            rpt_models.ReportValue.report_instance_id == report_instance_id
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    def save_status(
        self, db: AsyncSession, *, db_obj: rpt_models.ReportInstance, new_status: ReportStatus
    ) -> rpt_models.ReportInstance:
        """
        계산된 상태를 인스턴스에 반영합니다.
        completed이면 completed_at을 현재 시각으로, 그 외에는 None으로 설정합니다.
        커밋은 호출자가 수행합니다.
        """
        now = datetime.now(UTC)
        db_obj.status = new_status
        db_obj.completed_at = now if new_status == ReportStatus.COMPLETED else None
        db_obj.updated_at = now
        db.add(db_obj)
        return db_obj

    async def _replace_values(
        self,
        db: AsyncSession,
        *,
        report_instance_id: uuid.UUID,
        fields: List[rpt_models.ReportField],
        values: Mapping[str, Any],
    ) -> int:
        await db.execute(
            sa_delete(rpt_models.ReportValue).where(
                rpt_models.ReportValue.report_instance_id == report_instance_id
            )
        )

        fields_by_name = {field.field_name: field for field in fields}
        inserted = 0
        for field_name, value in stored_values_map(fields, values).items():
            field = fields_by_name[field_name]
            value_row = rpt_models.ReportValue(
                report_instance_id=report_instance_id,
                report_field_id=field.id,
            )
            if _is_number_field(field):
                value_row.value_number = float(value)
            else:
                value_row.value_text = str(value)
            db.add(value_row)
            inserted += 1
        return inserted

    async def save_report(
        self, db: AsyncSession, *, obj_in: rpt_schemas.ReportInstanceSave, created_by: Optional[uuid.UUID]
    ) -> Tuple[rpt_models.ReportInstance, str]:
        """
        보고서 값을 저장하고 상태를 갱신합니다.
        반환값은 (인스턴스, "created" | "updated") 입니다.
        """
        test_assignment = await db.get(lims_models.TestAssignment, obj_in.test_assignment_id)
        if not test_assignment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Test assignment not found")

        db_report_type = await report_type.get(db, id=obj_in.report_type_id)
        if not db_report_type:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report type not found")
        fields = await report_field.get_by_report_type(db, db_report_type.id)
        if not fields:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report type not found")
        if db_report_type.code != test_assignment.report_type_code:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Report type does not match test assignment",
            )

        # 부분 저장을 허용하므로 필수 입력은 검사하지 않습니다.
        validation = validate_report_form(fields, obj_in.values, enforce_required=False)
        if not validation.is_valid:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=[error.model_dump() for error in validation.errors],
            )

        new_status = calculate_status(fields, stored_values_map(fields, obj_in.values))

        try:
            db_obj = await self.get_by_test_assignment(db, test_assignment_id=obj_in.test_assignment_id)
            if db_obj:
                operation = "updated"
            else:
                operation = "created"
                db_obj = rpt_models.ReportInstance(
                    test_assignment_id=obj_in.test_assignment_id,
                    report_type_id=obj_in.report_type_id,
                    created_by=created_by,
                )
            self.save_status(db, db_obj=db_obj, new_status=new_status)
            await db.flush()

            value_count = await self._replace_values(
                db, report_instance_id=db_obj.id, fields=fields, values=obj_in.values
            )
            await db.commit()
            await db.refresh(db_obj)
        except SQLAlchemyError:
            await db.rollback()
            logger.error(
                "보고서 인스턴스 저장 실패 (test_assignment_id=%s)", obj_in.test_assignment_id, exc_info=True
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to save report instance",
            )

        logger.info(
            "보고서 인스턴스 %s: id=%s, status=%s, values=%d",
            operation, db_obj.id, new_status.value, value_count,
        )
        return db_obj, operation

    async def get_instance_data(
        self, db: AsyncSession, *, test_assignment_id: uuid.UUID
    ) -> Tuple[Optional[rpt_models.ReportInstance], Dict[str, Any], CompletionSummary]:
        """
        시험 배정에 대한 보고서 인스턴스와 저장된 값 맵, 진행률 요약을 반환합니다.
        인스턴스가 아직 없으면 (None, {}, 요약)을 반환합니다.
        """
        test_assignment = await db.get(lims_models.TestAssignment, test_assignment_id)
        if not test_assignment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Test assignment not found")

        db_obj = await self.get_by_test_assignment(db, test_assignment_id=test_assignment_id)
        if db_obj:
            fields = await report_field.get_by_report_type(db, db_obj.report_type_id)
            value_rows = await self.get_values(db, report_instance_id=db_obj.id)
            values = build_values_map(fields, value_rows)
        else:
            db_report_type = await report_type.get_by_code(db, code=test_assignment.report_type_code)
            fields = await report_field.get_by_report_type(db, db_report_type.id) if db_report_type else []
            values = {}

        return db_obj, values, completion_summary(fields, values)

    async def recalculate_statuses(self, db: AsyncSession, *, report_type_id: uuid.UUID) -> int:
        """
        보고서 유형의 모든 인스턴스 상태를 현재 필드 정의 기준으로 다시 계산합니다.
        상태가 바뀐 인스턴스 수를 반환하며, 커밋은 호출자가 수행합니다.
        """
        fields = await report_field.get_by_report_type(db, report_type_id)
        updated_count = 0
        for db_obj in await self.get_multi_by_report_type(db, report_type_id=report_type_id):
            value_rows = await self.get_values(db, report_instance_id=db_obj.id)
            new_status = calculate_status(fields, build_values_map(fields, value_rows))
            if ReportStatus(db_obj.status) != new_status:
                self.save_status(db, db_obj=db_obj, new_status=new_status)
                updated_count += 1
        return updated_count

    async def get_status_map(
        self, db: AsyncSession, *, test_assignment_ids: Iterable[uuid.UUID]
    ) -> Dict[uuid.UUID, str]:
        """시험 배정 ID -> 보고서 상태 문자열 맵. 요청 단위로 생성해 사용합니다."""
        ids = list(test_assignment_ids)
        if not ids:
            return {}
        statement = select(self.model.test_assignment_id, self.model.status).where(
            self.model.test_assignment_id.in_(ids)
        )
        result = await db.execute(statement)
        return {
            assignment_id: ReportStatus(report_status).value
            for assignment_id, report_status in result.all()
        }


report_instance = CRUDReportInstance()
