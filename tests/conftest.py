# tests/conftest.py

import os
import uuid
from typing import AsyncGenerator, Callable, Dict, List
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, UTC

# app 모듈이 설정을 읽기 전에 테스트용 환경 변수를 지정합니다.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-lims-report-api")
os.environ.setdefault("APP_ENV", "testing")

import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from app.main import app as main_app  # noqa: E402
from app.core import dependencies as deps  # noqa: E402
from app.core.database import get_session  # noqa: E402
from app.core.security import AuthenticatedUser  # noqa: E402

# --- 모든 모델 임포트 ---
# SQLModel.metadata.create_all()이 모든 테이블을 인식하도록 임포트합니다.
from app.domains.models import *  # noqa: F401, F403, E402
from app.domains.lims import models as lims_models  # noqa: E402
from app.domains.rpt import models as rpt_models  # noqa: E402
from app.domains.rpt.validators import FieldType  # noqa: E402
from tests.utils import make_access_token  # noqa: E402


# --- 테스트용 데이터베이스 설정 ---
# 테스트마다 독립된 인메모리 SQLite 데이터베이스를 사용합니다.
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    테스트 함수마다 새 인메모리 데이터베이스를 만들고 모든 테이블을 생성합니다.
    StaticPool로 하나의 연결을 공유해야 인메모리 DB가 유지됩니다.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트 함수에서 사용할 비동기 데이터베이스 세션을 제공합니다."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with TestingSessionLocal() as session:
        yield session


# --- 인증 사용자 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_user() -> AuthenticatedUser:
    """일반 인증 사용자(authenticated)입니다."""
    return AuthenticatedUser(id=uuid.uuid4(), email="analyst@example.com", role="authenticated")


@pytest_asyncio.fixture(scope="function")
async def test_admin_user() -> AuthenticatedUser:
    """관리자 역할(service_role) 사용자입니다."""
    return AuthenticatedUser(id=uuid.uuid4(), email="admin@example.com", role="service_role")


# --- 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
def client_factory(db_session: AsyncSession) -> Callable:
    """
    테스트 DB 세션을 사용하는 AsyncClient를 생성하는 팩토리 함수를 반환합니다.
    user가 주어지면 해당 사용자의 Bearer 토큰을 Authorization 헤더에 넣습니다.
    인증 의존성은 오버라이드하지 않으므로 실제 토큰 검증 경로를 거칩니다.
    """
    @asynccontextmanager
    async def _create_client_context(user: AuthenticatedUser = None) -> AsyncGenerator[AsyncClient, None]:
        async def override_get_session():
            yield db_session

        original_overrides = main_app.dependency_overrides.copy()
        try:
            main_app.dependency_overrides.update({
                get_session: override_get_session,
                deps.get_db_session: override_get_session,
            })

            transport = ASGITransport(app=main_app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                if user is not None:
                    client.headers["Authorization"] = f"Bearer {make_access_token(user)}"
                yield client
        finally:
            main_app.dependency_overrides.clear()
            main_app.dependency_overrides.update(original_overrides)

    return _create_client_context


@pytest_asyncio.fixture(scope="function")
async def client(client_factory: Callable) -> AsyncGenerator[AsyncClient, None]:
    """인증 헤더가 없는 클라이언트를 반환합니다."""
    async with client_factory() as c:
        yield c


@pytest_asyncio.fixture(scope="function")
async def authorized_client(client_factory: Callable, test_user: AuthenticatedUser) -> AsyncGenerator[AsyncClient, None]:
    """일반 사용자로 인증된 클라이언트를 반환합니다."""
    async with client_factory(test_user) as c:
        yield c


@pytest_asyncio.fixture(scope="function")
async def admin_client(client_factory: Callable, test_admin_user: AuthenticatedUser) -> AsyncGenerator[AsyncClient, None]:
    """관리자로 인증된 클라이언트를 반환합니다."""
    async with client_factory(test_admin_user) as c:
        yield c


# --- 도메인 데이터 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_patient(db_session: AsyncSession) -> lims_models.Patient:
    """테스트용 환자를 생성합니다."""
    patient = lims_models.Patient(
        mobile_number="9800000001",
        title="Mr.",
        first_name="Ram",
        last_name="Sharma",
        sex="Male",
        age_years=34,
        age_months=7,
    )
    db_session.add(patient)
    await db_session.commit()
    await db_session.refresh(patient)
    return patient


@pytest_asyncio.fixture(scope="function")
async def test_bg_assignment(db_session: AsyncSession, test_patient: lims_models.Patient) -> lims_models.TestAssignment:
    """환자에게 혈액형(BG) 시험을 배정합니다."""
    assignment = lims_models.TestAssignment(
        patient_id=test_patient.id,
        test_type=lims_models.TestType.BG,
    )
    db_session.add(assignment)
    await db_session.commit()
    await db_session.refresh(assignment)
    return assignment


@pytest_asyncio.fixture(scope="function")
async def test_cbc_assignment(db_session: AsyncSession, test_patient: lims_models.Patient) -> lims_models.TestAssignment:
    """환자에게 CBC 시험을 배정합니다."""
    assignment = lims_models.TestAssignment(
        patient_id=test_patient.id,
        test_type=lims_models.TestType.CBC,
        assigned_at=datetime.now(UTC) - timedelta(days=1),
    )
    db_session.add(assignment)
    await db_session.commit()
    await db_session.refresh(assignment)
    return assignment


async def _create_report_type(
    db_session: AsyncSession, *, code: str, name: str, fields: List[Dict], is_active: bool = True
) -> rpt_models.ReportType:
    report_type = rpt_models.ReportType(code=code, name=name, is_active=is_active)
    db_session.add(report_type)
    await db_session.flush()
    for field_data in fields:
        db_session.add(rpt_models.ReportField(report_type_id=report_type.id, **field_data))
    await db_session.commit()
    await db_session.refresh(report_type)
    return report_type


@pytest_asyncio.fixture(scope="function")
async def blood_group_report_type(db_session: AsyncSession) -> rpt_models.ReportType:
    """필수 드롭다운 필드 2개(blood_group, rh_factor)를 가진 BLOOD_GROUP 보고서 유형입니다."""
    return await _create_report_type(
        db_session,
        code="BLOOD_GROUP",
        name="Blood Group Test",
        fields=[
            {
                "field_name": "rh_factor",
                "field_label": "Rh Factor",
                "field_type": FieldType.DROPDOWN,
                "field_order": 2,
                "is_required": True,
                "dropdown_options": ["POSITIVE", "NEGATIVE"],
            },
            {
                "field_name": "blood_group",
                "field_label": "Blood Group",
                "field_type": FieldType.DROPDOWN,
                "field_order": 1,
                "is_required": True,
                "dropdown_options": ["A", "B", "AB", "O"],
            },
        ],
    )


@pytest_asyncio.fixture(scope="function")
async def cbc_report_type(db_session: AsyncSession) -> rpt_models.ReportType:
    """필수 숫자 필드 1개와 선택 드롭다운 필드 1개를 가진 CBC 보고서 유형입니다."""
    return await _create_report_type(
        db_session,
        code="CBC",
        name="Complete Blood Count",
        fields=[
            {
                "field_name": "hb",
                "field_label": "Hb (Haemoglobin)",
                "field_type": FieldType.NUMBER,
                "field_order": 1,
                "is_required": True,
                "unit": "gm/dl",
                "normal_range_min": 13.0,
                "normal_range_max": 17.0,
                "normal_range_text": "13-17",
            },
            {
                "field_name": "platelet_on_smear",
                "field_label": "Platelet on Smear",
                "field_type": FieldType.DROPDOWN,
                "field_order": 2,
                "is_required": False,
                "dropdown_options": ["Adequate", "Increased", "Decreased"],
            },
            {
                "field_name": "remarks",
                "field_label": "Remarks",
                "field_type": FieldType.TEXTAREA,
                "field_order": 3,
                "is_required": False,
            },
        ],
    )
