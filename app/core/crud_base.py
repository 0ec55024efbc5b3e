# app/core/crud_base.py

"""
공통 조회 작업을 위한 기본 CRUD 클래스 모듈입니다.
모든 메서드는 비동기(async) 세션을 사용하며, 기본 키는 UUID를 기준으로 합니다.
저장 흐름은 도메인별 CRUD 클래스(예: rpt.crud.report_instance.save_report)가 직접 구현합니다.
"""

import logging
import uuid
from typing import Generic, List, Optional, Type, TypeVar, Any

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

ModelType = TypeVar("ModelType", bound=SQLModel)

logger = logging.getLogger(__name__)


class CRUDBase(Generic[ModelType]):
    """
    도메인 CRUD 클래스가 공유하는 조회 메서드를 정의합니다.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: uuid.UUID) -> Optional[ModelType]:
        """기본 키(UUID)로 단일 레코드를 조회합니다."""
        return await db.get(self.model, id)

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: Optional[int] = 100, **kwargs: Any
    ) -> List[ModelType]:
        """
        여러 레코드를 조회합니다. 필터링을 위한 키워드 인자를 지원합니다.
        limit=None이면 전체를 조회합니다.
        """
        query = select(self.model).offset(skip)
        if limit is not None:
            query = query.limit(limit)

        for field, value in kwargs.items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)
            else:
                logger.warning("Model %s has no attribute '%s'", self.model.__name__, field)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        """단일 속성 값으로 레코드 하나를 조회합니다. 없으면 None을 반환합니다."""
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        response = await db.execute(statement)
        return response.scalars().first()
