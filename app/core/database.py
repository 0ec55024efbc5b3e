# app/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLModel의 비동기 엔진을 설정합니다.
- 비동기 세션 생성을 위한 유틸리티 함수를 제공합니다.
- 애플리케이션 시작 시 데이터베이스 테이블을 생성하는 함수를 포함합니다 (개발용).
"""

import logging
from typing import Any, AsyncGenerator, Dict
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings

# =============================================================================
# 모든 도메인 모델 임포트
# =============================================================================
# 모든 SQLModel 클래스가 SQLModel.metadata에 등록되도록 명시적으로 임포트해야 합니다.
from app.domains.lims import models     # noqa
from app.domains.rpt import models      # noqa

logger = logging.getLogger(__name__)


def build_engine_kwargs(database_url: str) -> Dict[str, Any]:
    """
    데이터베이스 종류에 맞는 엔진 옵션을 반환합니다.
    SQLite(aiosqlite)는 커넥션 풀 크기 옵션을 받지 않으므로 서버형 DB에만 풀 설정을 적용합니다.
    """
    kwargs: Dict[str, Any] = {"echo": settings.DEBUG_MODE, "future": True}
    if not database_url.startswith("sqlite"):
        kwargs.update(
            pool_recycle=3600,  # 1시간마다 연결 재활용
            pool_size=10,       # 최소 10개의 연결 유지
            max_overflow=20,    # 최대 20개의 추가 연결 허용 (총 30개)
        )
    return kwargs


_database_url = settings.DATABASE_URL.get_secret_value()

# SQLModel 엔진을 생성합니다.
engine: AsyncEngine = create_async_engine(_database_url, **build_engine_kwargs(_database_url))

# 비동기 세션을 생성하는 '세션 공장'을 정의합니다.
AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# SQLModel의 기본 MetaData 객체입니다.
metadata = SQLModel.metadata


# =============================================================================
# 데이터베이스 초기화 및 테이블 생성 함수
# =============================================================================
async def create_db_and_tables() -> None:
    """
    데이터베이스 테이블을 생성합니다.
    개발 환경에서만 사용해야 하며, 기존 테이블을 삭제하지는 않습니다. 운영 환경은 Alembic을 사용합니다.
    """
    logger.info("데이터베이스 테이블 생성을 시도합니다...")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("데이터베이스 테이블 생성이 완료되었습니다 (또는 이미 존재).")


# =============================================================================
# 비동기 데이터베이스 세션 의존성 주입
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    요청마다 새로운 세션을 생성하고, 요청 처리 후 세션을 자동으로 닫습니다.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    ARQ Task 등 비동기 컨텍스트에서 사용할 수 있는
    독립적인 비동기 DB 세션을 제공하는 컨텍스트 관리자입니다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
