# tests/utils.py

"""테스트 공용 헬퍼 함수 모듈입니다."""

from datetime import datetime, timedelta, UTC

from jose import jwt

from app.core.config import settings
from app.core.security import AuthenticatedUser


def make_access_token(user: AuthenticatedUser, *, expires_in: timedelta = timedelta(minutes=30), **extra_claims) -> str:
    """외부 인증 공급자가 발급하는 형식의 액세스 토큰을 생성합니다."""
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "aud": settings.JWT_AUDIENCE,
        "exp": datetime.now(UTC) + expires_in,
    }
    claims.update(extra_claims)
    return jwt.encode(claims, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)
