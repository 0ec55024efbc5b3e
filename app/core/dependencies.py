# app/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session).
- 현재 인증된 사용자 정보 획득 (get_current_active_user, get_current_admin_user).
- ARQ 작업 큐 클라이언트 획득 (get_task_queue).
"""

from typing import Any, AsyncGenerator, Optional

from fastapi import Request
from sqlmodel.ext.asyncio.session import AsyncSession

# 실제 데이터베이스 세션 제너레이터 임포트
from app.core.database import get_session as get_main_app_session

# flake8: noqa
from app.core.security import (
    AuthenticatedUser,
    get_current_user_from_token,
    get_current_active_user,
    get_current_admin_user,
)


# --- 데이터베이스 세션 의존성 주입 ---
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    app.core.database.get_session을 래핑하여 사용합니다.
    """
    async for session in get_main_app_session():
        yield session


# --- 작업 큐 의존성 주입 ---
def get_task_queue(request: Request) -> Optional[Any]:
    """
    lifespan 핸들러가 app.state에 등록한 ARQ Redis 풀을 반환합니다.
    Redis 없이 기동된 경우(테스트 등)에는 None을 반환합니다.
    """
    return getattr(request.app.state, "redis", None)
