# app/domains/rpt/__init__.py

"""
FastAPI 애플리케이션의 'rpt' (Report) 도메인 패키지입니다.

이 패키지는 시험 배정별 보고서 작성을 담당합니다.
보고서 유형(ReportType)은 입력 필드(ReportField)들의 템플릿이며,
시험 배정 1건마다 보고서 인스턴스(ReportInstance) 1건과 필드 값(ReportValue)들이 저장됩니다.
보고서 상태(pending, in-progress, completed)는 필수 필드 입력 여부로 계산됩니다.

주요 서브모듈:
- `models.py`: 'rpt' 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 유효성 검사를 위한 Pydantic 모델.
- `status.py`: 보고서 상태 계산 함수 (순수 함수).
- `validators.py`: 필드/폼 단위 값 검증 함수.
- `crud.py`: 보고서 유형/필드 조회와 보고서 저장 흐름.
- `routers.py`: FastAPI API 엔드포인트 정의.
- `tasks.py`: 상태 재계산 ARQ 백그라운드 작업.
"""

# 패키지 메타데이터
__title__ = "LIMS Report Domain"
__description__ = "Report types, field definitions, report entry and status calculation."
__version__ = "0.1.0"
__all__ = []
