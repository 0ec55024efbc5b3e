# tests/__init__.py

"""
LIMS Report API 테스트 스위트 패키지입니다.

- `domains/`: 'lims', 'rpt' 도메인별 테스트 모듈.
- `conftest.py`: 테스트 DB, 인증 클라이언트, 도메인 데이터 픽스처.
- `utils.py`: 테스트용 액세스 토큰 발급 헬퍼.
"""

__title__ = "LIMS Report API Tests"
__version__ = "0.1.0"
__all__ = []
