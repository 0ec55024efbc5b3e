# app/domains/rpt/routers.py

"""
'rpt' 도메인 (보고서 작성) 관련 API 엔드포인트를 정의하는 모듈입니다.
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps

from . import crud as rpt_crud
from . import schemas as rpt_schemas
from .validators import out_of_range_fields, validate_report_form

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Report Management (보고서 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 보고서 유형 (ReportType) 라우터
# =============================================================================
@router.get("/types/{report_type_code}", response_model=rpt_schemas.ReportTypeWithFields, summary="보고서 유형 및 필드 조회")
async def read_report_type(
    report_type_code: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_active_user),
):
    """활성 보고서 유형과 표시 순서대로 정렬된 필드 정의를 반환합니다."""
    db_report_type = await rpt_crud.report_type.get_by_code(db, code=report_type_code, active_only=True)
    if not db_report_type:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report type not found")

    fields = await rpt_crud.report_field.get_by_report_type(db, db_report_type.id)
    return {"report_type": db_report_type, "fields": fields}


@router.post("/types/{report_type_code}/validate", response_model=rpt_schemas.ReportValuesValidateResponse, summary="보고서 값 검증")
async def validate_report_values(
    report_type_code: str,
    request_in: rpt_schemas.ReportValuesValidateRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_active_user),
):
    """
    입력 값을 보고서 유형의 필드 정의로 검증합니다. 필수 입력도 검사합니다.
    정상 범위를 벗어난 값은 오류가 아니며 out_of_range 목록으로만 알려줍니다.
    """
    db_report_type = await rpt_crud.report_type.get_by_code(db, code=report_type_code, active_only=True)
    if not db_report_type:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report type not found")

    fields = await rpt_crud.report_field.get_by_report_type(db, db_report_type.id)
    result = validate_report_form(fields, request_in.values)
    return {
        "is_valid": result.is_valid,
        "errors": result.errors,
        "out_of_range": out_of_range_fields(fields, request_in.values),
    }


@router.post(
    "/types/{report_type_code}/recalculate",
    response_model=rpt_schemas.RecalculateResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="보고서 상태 재계산 요청",
)
async def recalculate_report_type_statuses(
    report_type_code: str,
    db: AsyncSession = Depends(deps.get_db_session),
    task_queue: Optional[Any] = Depends(deps.get_task_queue),
    current_admin_user: deps.AuthenticatedUser = Depends(deps.get_current_admin_user),
):
    """보고서 유형의 모든 인스턴스 상태 재계산을 백그라운드 작업으로 등록합니다. 관리자 권한이 필요합니다."""
    db_report_type = await rpt_crud.report_type.get_by_code(db, code=report_type_code)
    if not db_report_type:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report type not found")

    if task_queue is None:
        logger.warning("작업 큐가 설정되지 않아 상태 재계산을 등록하지 못했습니다. (report_type=%s)", report_type_code)
        return {"report_type_code": report_type_code, "job_id": None, "message": "Task queue unavailable"}

    job = await task_queue.enqueue_job("recalculate_report_statuses", str(db_report_type.id))
    return {
        "report_type_code": report_type_code,
        "job_id": job.job_id if job else None,
        "message": "Recalculation enqueued",
    }


# =============================================================================
# 2. 보고서 인스턴스 (ReportInstance) 라우터
# =============================================================================
@router.get("/instances/{test_assignment_id}", response_model=rpt_schemas.ReportInstanceDataResponse, summary="시험 배정의 보고서 조회")
async def read_report_instance(
    test_assignment_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_active_user),
):
    """시험 배정에 대한 보고서 인스턴스와 저장된 값을 반환합니다. 아직 작성되지 않았으면 report_instance는 null입니다."""
    db_obj, values, summary = await rpt_crud.report_instance.get_instance_data(
        db, test_assignment_id=test_assignment_id
    )
    return {"report_instance": db_obj, "values": values, "summary": summary._asdict()}


@router.post("/instances", response_model=rpt_schemas.ReportInstanceSaveResponse, summary="보고서 저장")
async def save_report_instance(
    report_in: rpt_schemas.ReportInstanceSave,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_active_user),
):
    """
    보고서 값을 저장합니다. 인스턴스가 없으면 생성하고 있으면 갱신합니다.
    상태는 필수 필드 입력 여부로 다시 계산됩니다.
    """
    db_obj, operation = await rpt_crud.report_instance.save_report(
        db, obj_in=report_in, created_by=current_user.id
    )
    return {"report_instance": db_obj, "status": operation}
