# app/main.py

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from arq.connections import create_pool, RedisSettings

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

# 핵심 설정 및 데이터베이스 모듈 임포트
from app.core.config import settings
from app.core.database import create_db_and_tables, engine, get_session

from app import API_PREFIX

# 태스크 모듈 임포트
from app.core import tasks as core_tasks
from app.domains.rpt import tasks as rpt_tasks

# 도메인 라우터 임포트
from app.domains.lims.routers import router as lims_router
from app.domains.rpt.routers import router as rpt_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# ARQ 워커가 실행할 태스크 함수 목록
worker_functions = [
    core_tasks.health_check_database_task,
    rpt_tasks.recalculate_report_statuses,
]


# ARQ 워커 설정 클래스
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions
    jobs = [
        {
            'name': 'daily_db_health_check',
            'function': 'app.core.tasks.health_check_database_task',
            'cron': '0 0 * * *',
            'timeout': 300,
            'keep_result': 600,
        },
    ]


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(데이터베이스, ARQ Redis)를 함께 처리합니다.
    """
    logger.info("FastAPI 애플리케이션 시작 중...")
    try:
        # 1. 개발 환경에서는 테이블을 직접 생성합니다. (운영은 Alembic 사용)
        if settings.APP_ENV == "development":
            await create_db_and_tables()

        # 2. ARQ Redis 커넥션 풀 생성 및 app.state에 할당
        logger.info("ARQ Redis 커넥션 풀을 생성합니다...")
        app.state.redis = await create_pool(ArqWorkerSettings.redis_settings)
        logger.info("ARQ Redis 커넥션 풀 생성 완료.")

    except Exception:
        logger.error("애플리케이션 시작 중 오류 발생", exc_info=True)
        raise

    yield  # 애플리케이션 실행

    logger.info("FastAPI 애플리케이션 종료 중...")
    try:
        # 1. ARQ Redis 연결 풀 종료
        if getattr(app.state, "redis", None):
            await app.state.redis.close()
            logger.info("ARQ Redis 연결 풀 종료 완료.")

        # 2. 데이터베이스 연결 풀 종료
        await engine.dispose()
        logger.info("데이터베이스 연결 풀 종료 완료.")

    except Exception:
        logger.error("애플리케이션 종료 중 오류 발생", exc_info=True)


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# -- CORS (Cross-Origin Resource Sharing) 미들웨어 설정 --
# 운영 환경에서는 allow_origins를 실제 프론트엔드 도메인으로 제한해야 합니다.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- 도메인 라우터 포함 --
app.include_router(lims_router, prefix=f"{API_PREFIX}/lims", tags=["Laboratory Information Management (실험실 정보 관리)"])
app.include_router(rpt_router, prefix=f"{API_PREFIX}/rpt", tags=["Report Management (보고서 관리)"])


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """
    LIMS Report API의 루트 엔드포인트입니다.
    API의 시작점을 알리고 문서 링크를 제공합니다.
    """
    return {"message": "Welcome to LIMS Report API. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    애플리케이션의 헬스 체크 엔드포인트입니다.
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.exec(select(1))
        if result.first():
            return {"status": "ok", "database_connection": "successful"}
    except Exception as e:
        logger.error("헬스 체크 중 데이터베이스 오류", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database health check failed: No result from test query"
    )
