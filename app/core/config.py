# app/core/config.py

from typing import List
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일을 명시적으로 지정
        env_file_encoding='utf-8',
        extra='ignore',                      # .env 파일에 정의되었지만 모델에 없는 변수는 무시
        case_sensitive=True                  # 환경 변수 이름 대소문자 구분
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "LIMS Report API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Laboratory report entry and report status API"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for detailed logging and error messages")
    LOG_LEVEL: str = Field("INFO", description="Root log level applied at startup")

    # --- 데이터베이스 설정 ---
    DATABASE_URL: SecretStr = Field(..., description="Database connection URL (postgresql+asyncpg://...)")

    # --- 외부 인증 공급자 JWT 설정 ---
    # 토큰 발급과 갱신은 외부 인증 공급자의 책임이며, 이 API는 검증만 수행합니다.
    SECRET_KEY: SecretStr = Field(..., description="JWT secret shared with the authentication provider")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing (e.g., HS256)")
    JWT_AUDIENCE: str = Field("authenticated", description="Expected 'aud' claim of access tokens")
    ADMIN_ROLES: List[str] = Field(default_factory=lambda: ["service_role"], description="JWT 'role' claims allowed to call admin endpoints")

    # --- ARQ (Redis) 설정 ---
    REDIS_HOST: str = Field("localhost", description="Redis host for the ARQ task queue")
    REDIS_PORT: int = Field(6379, description="Redis port for the ARQ task queue")


settings = Settings()
