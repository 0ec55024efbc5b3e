# app/domains/lims/routers.py

"""
'lims' 도메인 (환자 및 시험 배정) 관련 API 엔드포인트를 정의하는 모듈입니다.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

# 중앙 의존성 관리 모듈 임포트
from app.core import dependencies as deps
from app.domains.rpt import crud as rpt_crud

# 도메인 관련 모듈 임포트
from . import crud as lims_crud
from . import schemas as lims_schemas

router = APIRouter(
    tags=["Laboratory Information Management (실험실 정보 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 환자 (Patient) 라우터
# =============================================================================
@router.get("/patients/with-tests", response_model=lims_schemas.PatientsWithTestsResponse, summary="시험이 배정된 환자 목록 조회")
async def read_patients_with_tests(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_active_user),
):
    """시험 배정이 있는 환자와 각 시험의 보고서 상태를 최근 등록 순으로 반환합니다."""
    patients = await lims_crud.patient.get_patients_with_tests(db)

    # 요청 단위의 시험 배정 ID -> 보고서 상태 맵
    status_map = await rpt_crud.report_instance.get_status_map(
        db, test_assignment_ids=[ta.id for p in patients for ta in p.test_assignments]
    )
    return {"patients": [lims_crud.to_patient_with_tests(p, status_map) for p in patients]}


# =============================================================================
# 2. 시험 배정 (TestAssignment) 라우터
# =============================================================================
@router.get("/patients/{patient_id}/test-assignments", response_model=lims_schemas.TestAssignmentListResponse, summary="환자의 시험 배정 목록 조회")
async def read_patient_test_assignments(
    patient_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_active_user),
):
    """특정 환자의 시험 배정 목록과 보고서 상태를 반환합니다."""
    db_patient = await lims_crud.patient.get(db, id=patient_id)
    if not db_patient:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")

    assignments = await lims_crud.test_assignment.get_by_patient(db, patient_id=patient_id)
    status_map = await rpt_crud.report_instance.get_status_map(
        db, test_assignment_ids=[ta.id for ta in assignments]
    )
    return {
        "patient_id": patient_id,
        "test_assignments": [lims_crud.to_assignment_with_status(ta, status_map) for ta in assignments],
    }
