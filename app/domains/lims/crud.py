# app/domains/lims/crud.py

"""
'lims' 도메인의 조회 로직을 담당하는 모듈입니다.
환자와 시험 배정을 읽고, 보고서 상태를 붙여 화면용 구조로 변환합니다.
"""

import uuid
from typing import Dict, List, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase

from . import models as lims_models
from . import schemas as lims_schemas


# =============================================================================
# 1. 환자 (Patient) CRUD
# =============================================================================
class CRUDPatient(CRUDBase[lims_models.Patient]):
    def __init__(self):
        super().__init__(model=lims_models.Patient)

    async def get_patients_with_tests(self, db: AsyncSession) -> List[lims_models.Patient]:
        """시험 배정이 1건 이상 있는 환자 목록을 최근 등록 순으로 조회합니다."""
        statement = (
            select(self.model)
            .where(self.model.test_assignments.any())
            .options(selectinload(self.model.test_assignments))
            .order_by(self.model.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())


patient = CRUDPatient()


# =============================================================================
# 2. 시험 배정 (TestAssignment) CRUD
# =============================================================================
class CRUDTestAssignment(CRUDBase[lims_models.TestAssignment]):
    def __init__(self):
        super().__init__(model=lims_models.TestAssignment)

    async def get_by_patient(
        self, db: AsyncSession, *, patient_id: uuid.UUID
    ) -> List[lims_models.TestAssignment]:
        """환자의 시험 배정 목록을 최근 배정 순으로 조회합니다."""
        statement = (
            select(self.model)
            .where(self.model.patient_id == patient_id)
            .order_by(self.model.assigned_at.desc())
        )
        result = await db.execute(statement)
        return list(result.scalars().all())


test_assignment = CRUDTestAssignment()


# =============================================================================
# 3. 응답 변환 함수
# =============================================================================
def to_assignment_with_status(
    db_obj: lims_models.TestAssignment, status_map: Dict[uuid.UUID, str]
) -> lims_schemas.TestAssignmentWithStatus:
    return lims_schemas.TestAssignmentWithStatus(
        id=db_obj.id,
        test_name=db_obj.test_name,
        assigned_date=db_obj.assigned_at,
        report_status=status_map.get(db_obj.id, "pending"),
        report_type_code=db_obj.report_type_code,
    )


def to_patient_with_tests(
    db_obj: lims_models.Patient,
    status_map: Dict[uuid.UUID, str],
    assignments: Optional[List[lims_models.TestAssignment]] = None,
) -> lims_schemas.PatientWithTests:
    if assignments is None:
        assignments = db_obj.test_assignments
    return lims_schemas.PatientWithTests(
        id=db_obj.id,
        name=db_obj.full_name,
        age=db_obj.display_age,
        gender=db_obj.sex,
        contact=db_obj.mobile_number,
        test_assignments=[to_assignment_with_status(ta, status_map) for ta in assignments],
    )
