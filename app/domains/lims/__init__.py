# app/domains/lims/__init__.py

"""
FastAPI 애플리케이션의 'lims' 도메인 패키지입니다.

환자(Patient)와 환자별 시험 배정(TestAssignment)을 다루며,
보고서 작성 화면이 사용하는 조회용 엔드포인트를 제공합니다.
(환자 등록 등 쓰기 작업은 이 API의 범위가 아닙니다.)

주요 서브모듈:
- `models.py`: 'lims' 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 응답 직렬화를 위한 Pydantic 모델.
- `crud.py`: 환자/시험 배정 조회 로직.
- `routers.py`: FastAPI API 엔드포인트 정의.
"""

# 패키지 메타데이터
__title__ = "LIMS Patient & Test Assignment Domain"
__description__ = "Read side of patients and their test assignments for report entry."
__version__ = "0.1.0"
__all__ = []
