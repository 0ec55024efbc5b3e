# tests/domains/__init__.py

"""
도메인별 테스트 패키지입니다.

- `test_lims_n.py`: 환자 및 시험 배정 조회 API.
- `test_rpt_*.py`: 보고서 상태 계산기, 필드 검증, 보고서 API, 재계산 작업.
"""

__all__ = []
