"""initial lims and report tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONVariant = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps(with_updated: bool = True):
    columns = [sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=True)]
    if with_updated:
        columns.append(sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=True))
    return columns


def upgrade() -> None:
    op.create_table(
        "lims_patients",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("mobile_number", sa.String(length=20), nullable=False),
        sa.Column("title", sa.String(length=10), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("sex", sa.String(length=10), nullable=False),
        sa.Column("age_years", sa.Integer(), nullable=False),
        sa.Column("age_months", sa.Integer(), nullable=False),
        sa.Column("age_days", sa.Integer(), nullable=False),
        sa.Column("referred_by", sa.String(length=255), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_lims_patients_mobile_number", "lims_patients", ["mobile_number"])

    op.create_table(
        "lims_test_assignments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("patient_id", sa.Uuid(), sa.ForeignKey("lims_patients.id"), nullable=False),
        sa.Column("test_type", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("assigned_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("assigned_by", sa.Uuid(), nullable=True),
        sa.Column("completed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("patient_id", "test_type", name="uq_test_assignment_patient_test_type"),
    )
    op.create_index("ix_lims_test_assignments_patient_id", "lims_test_assignments", ["patient_id"])
    op.create_index("ix_lims_test_assignments_assigned_at", "lims_test_assignments", ["assigned_at"])

    op.create_table(
        "rpt_report_types",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("code", sa.String(length=50), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_rpt_report_types_code", "rpt_report_types", ["code"])

    op.create_table(
        "rpt_report_fields",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("report_type_id", sa.Uuid(), sa.ForeignKey("rpt_report_types.id"), nullable=False),
        sa.Column("field_name", sa.String(length=100), nullable=False),
        sa.Column("field_label", sa.String(length=255), nullable=False),
        sa.Column("field_type", sa.String(length=50), nullable=False),
        sa.Column("field_order", sa.Integer(), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False),
        sa.Column("unit", sa.String(length=50), nullable=True),
        sa.Column("normal_range_min", sa.Float(), nullable=True),
        sa.Column("normal_range_max", sa.Float(), nullable=True),
        sa.Column("normal_range_text", sa.String(length=255), nullable=True),
        sa.Column("dropdown_options", JSONVariant, nullable=True),
        sa.Column("default_value", sa.String(), nullable=True),
        sa.Column("validation_rules", JSONVariant, nullable=True),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint("report_type_id", "field_name", name="uq_report_field_type_name"),
    )
    op.create_index("ix_rpt_report_fields_report_type_id", "rpt_report_fields", ["report_type_id"])

    op.create_table(
        "rpt_report_instances",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("test_assignment_id", sa.Uuid(), sa.ForeignKey("lims_test_assignments.id"), nullable=False, unique=True),
        sa.Column("report_type_id", sa.Uuid(), sa.ForeignKey("rpt_report_types.id"), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.Column("completed_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_index("ix_rpt_report_instances_test_assignment_id", "rpt_report_instances", ["test_assignment_id"])
    op.create_index("ix_rpt_report_instances_status", "rpt_report_instances", ["status"])

    op.create_table(
        "rpt_report_values",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "report_instance_id", sa.Uuid(),
            sa.ForeignKey("rpt_report_instances.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("report_field_id", sa.Uuid(), sa.ForeignKey("rpt_report_fields.id"), nullable=False),
        sa.Column("value_text", sa.String(), nullable=True),
        sa.Column("value_number", sa.Float(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("report_instance_id", "report_field_id", name="uq_report_value_instance_field"),
    )
    op.create_index("ix_rpt_report_values_report_instance_id", "rpt_report_values", ["report_instance_id"])


def downgrade() -> None:
    op.drop_table("rpt_report_values")
    op.drop_table("rpt_report_instances")
    op.drop_table("rpt_report_fields")
    op.drop_table("rpt_report_types")
    op.drop_table("lims_test_assignments")
    op.drop_table("lims_patients")
