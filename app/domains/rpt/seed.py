# app/domains/rpt/seed.py

"""
기본 제공 보고서 유형(BLOOD_GROUP, CBC)과 필드 정의를 데이터베이스에 반영합니다.
scripts/seed_report_types.py CLI에서 사용합니다.
"""

import logging
from typing import Any, Dict, List

from sqlmodel.ext.asyncio.session import AsyncSession

from . import crud as rpt_crud
from . import models as rpt_models
from .validators import FieldType

logger = logging.getLogger(__name__)


def _number_field(name: str, label: str, order: int, unit: str, low: float, high: float, text: str) -> Dict[str, Any]:
    return {
        "field_name": name,
        "field_label": label,
        "field_type": FieldType.NUMBER,
        "field_order": order,
        "is_required": True,
        "unit": unit,
        "normal_range_min": low,
        "normal_range_max": high,
        "normal_range_text": text,
    }


BUILTIN_REPORT_TYPES: List[Dict[str, Any]] = [
    {
        "code": "BLOOD_GROUP",
        "name": "Blood Group Test",
        "description": "Determines blood type and Rh factor",
        "fields": [
            {
                "field_name": "blood_group",
                "field_label": "Blood Group",
                "field_type": FieldType.DROPDOWN,
                "field_order": 1,
                "is_required": True,
                "dropdown_options": ["A", "B", "AB", "O"],
            },
            {
                "field_name": "rh_factor",
                "field_label": "Rh Factor",
                "field_type": FieldType.DROPDOWN,
                "field_order": 2,
                "is_required": True,
                "dropdown_options": ["POSITIVE", "NEGATIVE"],
            },
        ],
    },
    {
        "code": "CBC",
        "name": "Complete Blood Count",
        "description": "Comprehensive blood cell analysis",
        "fields": [
            _number_field("hb", "Hb (Haemoglobin)", 1, "gm/dl", 13.0, 17.0, "13-17"),
            _number_field("total_leukocyte_count", "Total Leukocyte Count", 2, "/Cumm.", 4000.0, 11000.0, "4000-11000"),
            _number_field("rbc", "RBC", 3, "mill/cumm", 4.5, 5.5, "4.5-5.5"),
            _number_field("pcv_haematocrit", "PCV/Haematocrit", 4, "%", 40.0, 50.0, "40-50"),
            _number_field("platelet_count", "Platelet Count", 5, "lakhs/cumm", 1.5, 4.5, "1.5-4.5"),
            _number_field("mcv", "MCV", 6, "fL", 83.0, 101.0, "83-101"),
            _number_field("mch", "MCH", 7, "pg", 27.0, 32.0, "27-32"),
            _number_field("mchc", "MCHC", 8, "g/dL", 31.5, 34.5, "31.5-34.5"),
            _number_field("rdw_cv", "RDW-CV", 9, "%", 11.6, 14.0, "11.6-14.0"),
            _number_field("neutrophil", "Neutrophil", 10, "%", 40.0, 80.0, "40-80"),
            _number_field("lymphocyte", "Lymphocyte", 11, "%", 20.0, 40.0, "20-40"),
            _number_field("monocyte", "Monocyte", 12, "%", 2.0, 10.0, "2-10"),
            _number_field("eosinophil", "Eosinophil", 13, "%", 1.0, 6.0, "1-6"),
            _number_field("basophil", "Basophil", 14, "%", 0.0, 1.0, "0-1"),
            {
                "field_name": "platelet_on_smear",
                "field_label": "Platelet on Smear",
                "field_type": FieldType.DROPDOWN,
                "field_order": 15,
                "is_required": False,
                "dropdown_options": ["Adequate", "Increased", "Decreased"],
                "default_value": "Adequate",
            },
            {
                "field_name": "malarial_parasite",
                "field_label": "Malarial Parasite",
                "field_type": FieldType.DROPDOWN,
                "field_order": 16,
                "is_required": False,
                "dropdown_options": [
                    "NO MALARIAL PARASITE SEEN IN SMEAR EXAMINED",
                    "Plasmodium Falciparum",
                    "Plasmodium Vivax",
                    "Plasmodium Ovale",
                    "Plasmodium Malariae",
                ],
                "default_value": "NO MALARIAL PARASITE SEEN IN SMEAR EXAMINED",
            },
        ],
    },
]


async def seed_report_types(db: AsyncSession) -> Dict[str, int]:
    """
    기본 보고서 유형과 필드를 upsert하고, 필드 정의 변경이 반영되도록 상태를 재계산합니다.
    보고서 유형 코드 -> 상태가 바뀐 인스턴스 수 맵을 반환합니다.
    """
    recalculated: Dict[str, int] = {}
    for type_def in BUILTIN_REPORT_TYPES:
        field_defs = type_def["fields"]
        type_data = {k: v for k, v in type_def.items() if k != "fields"}

        db_report_type = await rpt_crud.report_type.get_by_code(db, code=type_data["code"])
        if db_report_type:
            db_report_type.sqlmodel_update(type_data)
        else:
            db_report_type = rpt_models.ReportType(**type_data)
        db.add(db_report_type)
        await db.flush()

        for field_def in field_defs:
            db_field = await rpt_crud.report_field.get_by_name(
                db, report_type_id=db_report_type.id, field_name=field_def["field_name"]
            )
            if db_field:
                db_field.sqlmodel_update(field_def)
            else:
                db_field = rpt_models.ReportField(report_type_id=db_report_type.id, **field_def)
            db.add(db_field)
        await db.flush()

        recalculated[db_report_type.code] = await rpt_crud.report_instance.recalculate_statuses(
            db, report_type_id=db_report_type.id
        )
        logger.info(
            "보고서 유형 %s: 필드 %d개 반영, 상태 갱신 %d건",
            db_report_type.code, len(field_defs), recalculated[db_report_type.code],
        )

    await db.commit()
    return recalculated
