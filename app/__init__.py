# app/__init__.py

"""
LIMS Report API 애플리케이션의 메인 패키지입니다.

이 패키지는 애플리케이션의 핵심 로직과 도메인별 모듈을 포함합니다.
FastAPI 애플리케이션의 진입점 (main.py)과
공통 설정, 데이터베이스 연결, 인증 경계를 담는 core 서브패키지,
그리고 각 비즈니스 도메인(lims: 환자/시험 배정, rpt: 보고서)을 대표하는 domains 서브패키지로 구성됩니다.
"""

# 패키지 레벨에서 사용할 수 있는 공통 상수입니다.
APP_NAME = "LIMS Report API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Laboratory report entry and report status API backend."
__all__ = []
