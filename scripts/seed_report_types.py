# flake8: noqa
# scripts/seed_report_types.py

import asyncio
import typer

from app.core.database import AsyncSessionLocal, create_db_and_tables, engine
from app.domains.rpt.seed import BUILTIN_REPORT_TYPES, seed_report_types

cli = typer.Typer()


@cli.command()
def main(
    create_tables: bool = typer.Option(
        False, '--create-tables',
        help="시드 전에 테이블을 생성합니다. (개발용, 운영은 Alembic 사용)"
    ),
):
    """
    기본 보고서 유형(BLOOD_GROUP, CBC)과 필드 정의를 등록/갱신하고 보고서 상태를 재계산합니다.
    """
    codes = ", ".join(type_def["code"] for type_def in BUILTIN_REPORT_TYPES)
    print(f"보고서 유형 시드를 시작합니다: {codes}")

    async def run_seed():
        if create_tables:
            await create_db_and_tables()
        try:
            async with AsyncSessionLocal() as db:
                return await seed_report_types(db)
        finally:
            await engine.dispose()

    recalculated = asyncio.run(run_seed())
    for code, updated_count in recalculated.items():
        print(f"  - {code}: 상태 갱신 {updated_count}건")
    print("보고서 유형 시드가 완료되었습니다.")


if __name__ == "__main__":
    cli()
