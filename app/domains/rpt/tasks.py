# app/domains/rpt/tasks.py

import logging
import uuid
from typing import Any, Dict, Union

from sqlalchemy.exc import SQLAlchemyError

from app.core.database import get_async_session_context

from . import crud as rpt_crud

logger = logging.getLogger(__name__)


async def recalculate_report_statuses(
    ctx: Dict[str, Any], report_type_id: Union[uuid.UUID, str]
) -> Dict[str, Any]:
    """
    보고서 유형의 필드 정의가 바뀐 뒤, 해당 유형의 모든 보고서 인스턴스 상태를
    저장된 값 기준으로 다시 계산하는 백그라운드 작업입니다.
    """
    report_type_id = uuid.UUID(str(report_type_id))
    logger.info("백그라운드 작업 시작: 보고서 유형 %s 상태 재계산", report_type_id)

    async with get_async_session_context() as db:
        try:
            updated_count = await rpt_crud.report_instance.recalculate_statuses(
                db, report_type_id=report_type_id
            )
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("보고서 상태 재계산 실패 (report_type_id=%s)", report_type_id, exc_info=True)
            return {"status": "error", "message": str(e)}

    logger.info("작업 완료! 총 %d개의 보고서 상태가 갱신됨.", updated_count)
    return {"status": "success", "updated_count": updated_count}
