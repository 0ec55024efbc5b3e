# app/core/security.py

"""
애플리케이션의 인증 경계(Authentication boundary)를 정의하는 모듈입니다.

사용자 가입, 로그인, 토큰 발급/갱신은 외부 인증 공급자가 담당합니다.
이 모듈은 공급자가 발급한 Bearer JWT를 검증하여 현재 사용자를 식별하고,
역할(role) 클레임 기반의 관리자 권한 검사를 제공합니다.
"""

import logging
import uuid
from typing import Optional

from jose import jwt, JWTError
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError

from app.core.config import settings

logger = logging.getLogger(__name__)


class AuthenticatedUser(BaseModel):
    """
    검증된 액세스 토큰에서 추출한 현재 사용자 정보입니다.
    사용자 레코드 자체는 외부 인증 공급자에 있으므로 DB 조회는 하지 않습니다.
    """
    id: uuid.UUID
    email: Optional[str] = None
    role: str = "authenticated"


# --- Bearer 스키마 설정 ---
# auto_error=False: 토큰이 없을 때도 403 대신 아래에서 401을 돌려주기 위함
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> AuthenticatedUser:
    """
    액세스 토큰을 디코딩하고 검증합니다.
    서명, 만료, audience 중 하나라도 맞지 않으면 JWTError가 발생합니다.
    """
    payload = jwt.decode(
        token,
        settings.SECRET_KEY.get_secret_value(),
        algorithms=[settings.ALGORITHM],
        audience=settings.JWT_AUDIENCE,
    )
    subject = payload.get("sub")
    if subject is None:
        raise JWTError("Token has no subject")
    try:
        return AuthenticatedUser(
            id=subject,
            email=payload.get("email"),
            role=payload.get("role", "authenticated"),
        )
    except ValidationError as e:
        raise JWTError(f"Invalid subject claim: {e}") from e


async def get_current_user_from_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """
    Authorization 헤더의 Bearer 토큰을 검증하여 현재 사용자를 반환합니다.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception
    try:
        user = decode_access_token(credentials.credentials)
    except JWTError as e:
        logger.debug("JWTError: %s", e)
        raise credentials_exception
    return user


# --- 역할 기반 권한 부여 의존성 ---

def get_current_active_user(
    current_user: AuthenticatedUser = Depends(get_current_user_from_token),
) -> AuthenticatedUser:
    """
    현재 인증된 사용자를 반환합니다.
    계정 활성 여부는 인증 공급자가 토큰 발급 시점에 이미 확인합니다.
    """
    return current_user


def get_current_admin_user(
    current_user: AuthenticatedUser = Depends(get_current_active_user),
) -> AuthenticatedUser:
    """
    현재 인증된 관리자 사용자를 반환합니다.
    토큰의 role 클레임이 ADMIN_ROLES에 없으면 403 Forbidden을 발생시킵니다.
    """
    if current_user.role not in settings.ADMIN_ROLES:
        logger.info("Role '%s' is not in admin roles. Raising 403.", current_user.role)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions. Admin role required."
        )
    return current_user
